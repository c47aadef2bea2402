# SPDX-License-Identifier: MIT
"""Keyword tables for KB document analysis.

Словари ключевых слов для анализа документов базы знаний:
признаки неактуальности, служебные документы, страховая тематика,
названия страховых компаний и страховых продуктов.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

OBSOLETE_KEYWORDS: tuple[str, ...] = (
    "устарело",
    "не действует",
    "заменено",
    "отменено",
    "неактуально",
    "выпущен новый",
    "новая версия",
    "обновлено",
    "изменено",
)

INTERNAL_KEYWORDS: tuple[str, ...] = (
    "техническая документация",
    "внутреннее использование",
    "служебная информация",
    "временный файл",
)

INSURANCE_KEYWORDS: tuple[str, ...] = (
    "страхование",
    "страховой",
    "полис",
    "страховка",
    "риск",
    "покрытие",
    "выплата",
    "премия",
    "тариф",
    "условия",
)

# Порядок объявления определяет приоритет при поиске несоответствия
COMPANY_KEYWORDS: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "SOGAZ": ("согаз", "согаз-мед", "согаз-жизнь"),
        "INGOSSTRAKH": ("ингосстрах", "ингосстрах-м"),
        "RESO": ("ресо", "ресо-гарантия"),
        "VSK": ("вск", "военно-страховая компания"),
        "ROSGOSSTRAKH": ("росгосстрах", "ргс"),
    }
)

PRODUCT_KEYWORDS: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "AUTO": ("авто", "автомобиль", "машина", "осаго", "каско", "автострахование"),
        "PROPERTY": ("имущество", "квартира", "дом", "недвижимость", "имущественное"),
        "HEALTH": ("здоровье", "медицина", "дмс", "медицинское"),
        "LIFE": ("жизнь", "жизненное", "накопительное", "инвестиционное"),
        "TRAVEL": ("путешествие", "туризм", "выезд", "заграница", "туристическое"),
        "ACCIDENT": ("несчастный случай", "нс", "травма", "ущерб здоровью"),
    }
)

# Документ короче этого порога без страховой лексики считается мусором
MIN_RELEVANT_LENGTH = 100


@dataclass(frozen=True)
class KeywordTables:
    """Набор словарей для классификатора

    Все таблицы неизменяемы; значения по умолчанию берутся из
    констант модуля.
    """

    obsolete: tuple[str, ...] = OBSOLETE_KEYWORDS
    internal: tuple[str, ...] = INTERNAL_KEYWORDS
    insurance: tuple[str, ...] = INSURANCE_KEYWORDS
    companies: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: COMPANY_KEYWORDS)
    products: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: PRODUCT_KEYWORDS)
    min_relevant_length: int = MIN_RELEVANT_LENGTH


DEFAULT_TABLES = KeywordTables()
