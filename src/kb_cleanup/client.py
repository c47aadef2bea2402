"""KB storage API client.

HTTP-клиент к API хранилища документов backend.

Использование:
    with KBClient("http://localhost:3000") as client:
        docs = client.list_documents()
        text = client.fetch_content(docs[0].id)
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from kb_cleanup.analysis.models import KBDocument

logger = logging.getLogger(__name__)


class KBClientError(Exception):
    """Ошибка обращения к API хранилища.

    Attributes:
        status_code: HTTP-статус (None для сетевых ошибок)
        body: тело ответа, если было получено
    """

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class KBClient:
    """Клиент к `/kb/*` эндпоинтам backend."""

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._http = httpx.Client(base_url=self.base_url, timeout=timeout, transport=transport)

    def __enter__(self) -> KBClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise KBClientError(f"{method} {path}: {e}") from e

        if response.is_error:
            raise KBClientError(
                f"{method} {path}: HTTP {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )
        return response

    def _json(self, method: str, path: str, expected: type, **kwargs: Any) -> Any:
        """Тело ответа как JSON ожидаемого типа (list или dict)"""
        response = self._request(method, path, **kwargs)
        try:
            data = response.json()
        except ValueError as e:
            raise KBClientError(
                f"{method} {path}: ответ не JSON",
                status_code=response.status_code,
                body=response.text,
            ) from e
        if not isinstance(data, expected):
            raise KBClientError(
                f"{method} {path}: ожидался {expected.__name__}, получен {type(data).__name__}",
                status_code=response.status_code,
                body=response.text,
            )
        return data

    def list_documents(self) -> list[KBDocument]:
        """Список документов (без текста)"""
        items = self._json("GET", "/kb/documents", list)
        try:
            return [KBDocument.model_validate(item) for item in items]
        except ValueError as e:
            raise KBClientError(f"GET /kb/documents: неверные метаданные документа: {e}") from e

    def fetch_content(self, doc_id: str) -> str:
        """Полный текст документа"""
        return self._request("GET", f"/kb/documents/{doc_id}").text

    def update_document(self, doc_id: str, updates: dict[str, Any]) -> dict[str, Any]:
        """Обновить метаданные документа

        Args:
            doc_id: идентификатор документа
            updates: поля backend (companyCode, productCode, isObsolete, obsoleteReason)

        Returns:
            Ответ backend
        """
        return self._json("POST", f"/kb/documents/{doc_id}/update", dict, json=updates)

    def delete_document(self, doc_id: str) -> None:
        self._request("DELETE", f"/kb/documents/{doc_id}")

    def search(self, query: str, company_code: Optional[str] = None, limit: int = 3) -> list[dict[str, Any]]:
        payload: dict[str, Any] = {"query": query, "limit": limit}
        if company_code:
            payload["companyCode"] = company_code
        return self._json("POST", "/kb/search", list, json=payload)

    def stats(self) -> dict[str, Any]:
        return self._json("GET", "/kb/stats", dict)
