# Overview: Two-language string tables and the lookup used by every console component.

"""
Translation tables.

Each component owns a static table keyed by Language, selected at render
(or submit) time. Missing Swahili entries fall back to English, then to the
key itself, so an incomplete table never breaks a screen.
"""
from __future__ import annotations

from enum import Enum
from typing import Mapping, Optional


class Language(str, Enum):
    EN = "en"
    SW = "sw"


TranslationTable = Mapping[Language, Mapping[str, str]]


COMMON: TranslationTable = {
    Language.EN: {
        "error": "Error",
        "success": "Success",
        "network_error": "A network error occurred. Please try again.",
        "unexpected_error": "Something went wrong. Please try again.",
        "field_required": "This field is required",
        "invalid_email": "Please enter a valid email address",
        "invalid_phone": "Invalid phone number",
        "loading": "Loading...",
        "cancel": "Cancel",
        "delete": "Delete",
        "nothing_selected": "Nothing selected",
    },
    Language.SW: {
        "error": "Hitilafu",
        "success": "Imefanikiwa",
        "network_error": "Hitilafu ya mtandao imetokea. Tafadhali jaribu tena.",
        "unexpected_error": "Kuna tatizo. Tafadhali jaribu tena.",
        "field_required": "Sehemu hii inahitajika",
        "invalid_email": "Tafadhali ingiza barua pepe sahihi",
        "invalid_phone": "Nambari ya simu si sahihi",
        "loading": "Inapakia...",
        "cancel": "Ghairi",
        "delete": "Futa",
        "nothing_selected": "Hakuna kilichochaguliwa",
    },
}


def coerce_language(value, default: Language = Language.EN) -> Language:
    if isinstance(value, Language):
        return value
    try:
        return Language(str(value).strip().lower())
    except ValueError:
        return default


def translate(table: TranslationTable, language: Language, key: str) -> str:
    entries = table.get(language) or {}
    if key in entries:
        return entries[key]
    english = table.get(Language.EN) or {}
    if key in english:
        return english[key]
    common = COMMON.get(language, {})
    return common.get(key) or COMMON[Language.EN].get(key) or key


def resolve_language(
    saved: Optional[str],
    accept_language: Optional[str],
    default: Language = Language.EN,
) -> Language:
    """
    Pick the console language.

    A saved preference wins; otherwise a browser language starting with
    "sw" selects Swahili.
    """
    if saved in (Language.EN.value, Language.SW.value):
        return Language(saved)
    if accept_language and accept_language.strip().lower().startswith("sw"):
        return Language.SW
    return default


def localized_name(name: str, name_swahili: Optional[str], language: Language) -> str:
    if language == Language.SW and name_swahili:
        return name_swahili
    return name
