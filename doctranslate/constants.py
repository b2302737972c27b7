"""Languages offered for translation and accepted upload types."""

from __future__ import annotations

from typing import Dict, List, NamedTuple


class Language(NamedTuple):
    code: str
    name: str
    native_name: str


SUPPORTED_LANGUAGES: List[Language] = [
    Language("en", "English", "English"),
    Language("es", "Spanish", "Español"),
    Language("fr", "French", "Français"),
    Language("de", "German", "Deutsch"),
    Language("it", "Italian", "Italiano"),
    Language("pt", "Portuguese", "Português"),
    Language("ru", "Russian", "Русский"),
    Language("zh", "Chinese (Simplified)", "中文"),
    Language("ja", "Japanese", "日本語"),
    Language("ko", "Korean", "한국어"),
]

_BY_CODE: Dict[str, Language] = {language.code: language for language in SUPPORTED_LANGUAGES}

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def language_name(code: str) -> str:
    """English display name for ``code``; unknown codes are returned as-is."""
    language = _BY_CODE.get(code)
    return language.name if language else code
