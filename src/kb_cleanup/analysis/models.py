"""Analysis models.

Модели документа базы знаний и результата его анализа.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class Action(str, Enum):
    """Рекомендуемое действие над документом."""

    MARK_OBSOLETE = "mark_obsolete"
    DELETE = "delete"
    FIX_COMPANY = "fix_company"
    FIX_PRODUCT = "fix_product"


class KBDocument(BaseModel):
    """Метаданные документа, как их отдаёт `GET /kb/documents`.

    Attributes:
        id: идентификатор документа
        title: заголовок
        company_code: код страховой компании (может быть вне известного набора)
        product_code: код страхового продукта
        is_approved: документ участвует в поиске
        is_obsolete: документ помечен как неактуальный
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        frozen=True,
        coerce_numbers_to_str=True,
    )

    id: str
    title: str = ""
    company_code: str = Field(default="", alias="companyCode")
    product_code: str = Field(default="", alias="productCode")
    is_approved: bool = Field(default=False, alias="isApproved")
    is_obsolete: bool = Field(default=False, alias="isObsolete")


@dataclass
class AnalysisResult:
    """Результат анализа одного документа."""

    id: str
    title: str
    company_code: str
    product_code: str
    is_approved: bool
    is_obsolete: bool
    actions: list[Action] = field(default_factory=list)
    issues: list[str] = field(default_factory=list)
    suggested_company: Optional[str] = None
    suggested_product: Optional[str] = None

    @classmethod
    def for_document(cls, document: KBDocument) -> AnalysisResult:
        return cls(
            id=document.id,
            title=document.title,
            company_code=document.company_code,
            product_code=document.product_code,
            is_approved=document.is_approved,
            is_obsolete=document.is_obsolete,
        )

    def add(self, action: Action, issue: str) -> None:
        self.actions.append(action)
        self.issues.append(issue)

    def to_dict(self) -> dict[str, Any]:
        """Словарь в формате backend (camelCase)"""
        return {
            "id": self.id,
            "title": self.title,
            "companyCode": self.company_code,
            "productCode": self.product_code,
            "isApproved": self.is_approved,
            "isObsolete": self.is_obsolete,
            "actions": [a.value for a in self.actions],
            "issues": list(self.issues),
        }


__all__ = [
    "Action",
    "KBDocument",
    "AnalysisResult",
]
