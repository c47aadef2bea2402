"""Shared fixtures: in-memory fake of the KB storage API."""

import json

import httpx
import pytest

from kb_cleanup.client import KBClient


class FakeKBBackend:
    """Минимальная имитация /kb/* эндпоинтов backend."""

    def __init__(self):
        self.documents = []
        self.contents = {}
        self.failing_ids = set()
        self.list_status = 200
        self.requests = []
        self.search_results = []
        self.stats = {"totalDocuments": 0, "totalChunks": 0, "companies": [], "products": []}

    def add(self, doc_id, content, **meta):
        doc = {
            "id": doc_id,
            "title": meta.get("title", f"Документ {doc_id}"),
            "companyCode": meta.get("companyCode", "SOGAZ"),
            "productCode": meta.get("productCode", "AUTO"),
            "isApproved": meta.get("isApproved", False),
            "isObsolete": meta.get("isObsolete", False),
        }
        self.documents.append(doc)
        self.contents[doc_id] = content
        return doc

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        parts = path.strip("/").split("/")

        if request.method == "GET" and path == "/kb/documents":
            if self.list_status != 200:
                return httpx.Response(self.list_status, text="unavailable")
            return httpx.Response(200, json=self.documents)

        if request.method == "POST" and path == "/kb/search":
            return httpx.Response(200, json=self.search_results)

        if request.method == "GET" and path == "/kb/stats":
            return httpx.Response(200, json=self.stats)

        if len(parts) >= 3 and parts[:2] == ["kb", "documents"]:
            doc_id = parts[2]
            if doc_id in self.failing_ids or doc_id not in self.contents:
                return httpx.Response(404, text=f"document {doc_id} not found")
            if request.method == "GET":
                return httpx.Response(200, text=self.contents[doc_id])
            if request.method == "DELETE":
                self.contents.pop(doc_id)
                return httpx.Response(200, json={"deleted": doc_id})
            if request.method == "POST" and parts[3:] == ["update"]:
                body = json.loads(request.content)
                return httpx.Response(200, json={"id": doc_id, **body})

        return httpx.Response(404, text="no route")

    def client(self):
        return KBClient("http://kb.test", transport=httpx.MockTransport(self.handler))


@pytest.fixture
def backend():
    return FakeKBBackend()


@pytest.fixture
def client(backend):
    with backend.client() as c:
        yield c
