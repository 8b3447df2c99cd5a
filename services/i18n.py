from __future__ import annotations

import inspect
import json
import os
import threading
from typing import Any

from loguru import logger
from nicegui import app

I18N_PATH = "config/i18n/translations.json"
DEFAULT_LANGUAGE = "en"
SUPPORTED_LANGUAGES: list[dict[str, str]] = [
    {"code": "en", "label": "English"},
    {"code": "hi", "label": "हिन्दी"},
]
SUPPORTED_LANGUAGE_CODES = [entry["code"] for entry in SUPPORTED_LANGUAGES]

_DEFAULT_TRANSLATIONS: dict[str, dict[str, str]] = {
    "app.title": {"en": "Pharmacy Desk", "hi": "फ़ार्मेसी डेस्क"},
    "nav.home": {"en": "Dashboard", "hi": "डैशबोर्ड"},
    "nav.inventory": {"en": "Get Inventory", "hi": "इन्वेंटरी देखें"},
    "nav.bills": {"en": "Get Bills", "hi": "बिल देखें"},
    "nav.distributors": {"en": "Distributors", "hi": "वितरक"},
    "nav.purchase_orders": {"en": "Purchase Orders", "hi": "खरीद आदेश"},
    "nav.receive_orders": {"en": "Receive Orders", "hi": "प्राप्ति आदेश"},
    "nav.issue_orders": {"en": "Issue Orders", "hi": "निर्गम आदेश"},
    "nav.customers": {"en": "Customers", "hi": "ग्राहक"},
    "common.search": {"en": "Search", "hi": "खोजें"},
    "common.get_all": {"en": "GET ALL", "hi": "सभी प्राप्त करें"},
    "common.reset": {"en": "Reset", "hi": "रीसेट"},
    "common.view_details": {"en": "VIEW DETAILS", "hi": "विवरण देखें"},
    "common.print": {"en": "Print", "hi": "प्रिंट"},
    "common.close": {"en": "Close", "hi": "बंद करें"},
    "common.previous": {"en": "Previous", "hi": "पिछला"},
    "common.next": {"en": "Next", "hi": "अगला"},
    "common.loading": {"en": "Loading ...", "hi": "लोड हो रहा है ..."},
    "list.prompt": {"en": "Use the filters above and press Search.", "hi": "ऊपर फ़िल्टर भरें और खोजें दबाएँ।"},
}

_i18n_lock = threading.RLock()


def _ensure_i18n_file() -> None:
    os.makedirs(os.path.dirname(I18N_PATH), exist_ok=True)
    if os.path.exists(I18N_PATH):
        return
    save_translations(_DEFAULT_TRANSLATIONS)


def _capture_missing_key(key: str, default_text: str, *, location: str) -> None:
    with _i18n_lock:
        data = load_translations()
        if key in data:
            return
        fallback = str(default_text or key)
        data[key] = {lang: fallback for lang in SUPPORTED_LANGUAGE_CODES}
        try:
            save_translations(data)
            logger.info(f"[_capture_missing_key] - added_missing_key - key={key} location={location}")
        except OSError:
            logger.exception(f"[_capture_missing_key] - failed_write_translations - key={key} location={location}")


def _get_callsite() -> str:
    frame = inspect.currentframe()
    if frame is None or frame.f_back is None or frame.f_back.f_back is None:
        return "unknown"
    caller = frame.f_back.f_back
    return f"{caller.f_globals.get('__name__', 'unknown')}.{caller.f_code.co_name}"


def load_translations() -> dict[str, dict[str, str]]:
    with _i18n_lock:
        _ensure_i18n_file()
        with open(I18N_PATH, "r", encoding="utf-8") as f:
            raw = json.load(f)
    parsed: dict[str, dict[str, str]] = {}
    for key, values in raw.items():
        if not isinstance(values, dict):
            continue
        parsed[key] = {str(lang): str(text) for lang, text in values.items()}
    for key, values in _DEFAULT_TRANSLATIONS.items():
        entry = parsed.setdefault(key, {})
        entry.update({k: v for k, v in values.items() if not entry.get(k)})
    return parsed


def save_translations(translations: dict[str, dict[str, str]]) -> None:
    with _i18n_lock:
        os.makedirs(os.path.dirname(I18N_PATH), exist_ok=True)
        with open(I18N_PATH, "w", encoding="utf-8") as f:
            json.dump(translations, f, indent=2, ensure_ascii=False, sort_keys=True)


def get_language() -> str:
    """Per-user language inside a NiceGUI page, DEFAULT_LANGUAGE elsewhere."""
    try:
        lang = app.storage.user.get("language", DEFAULT_LANGUAGE)
    except RuntimeError:
        # no user storage outside a page context
        lang = DEFAULT_LANGUAGE
    return lang if lang in SUPPORTED_LANGUAGE_CODES else DEFAULT_LANGUAGE


def set_language(language: str) -> str:
    language = language if language in SUPPORTED_LANGUAGE_CODES else DEFAULT_LANGUAGE
    app.storage.user["language"] = language
    logger.info(f"[set_language] - language_updated - language={language}")
    return language


def t(key: str, default: str | None = None, *, language: str | None = None, **kwargs: Any) -> str:
    translations = load_translations()
    lang = str(language or get_language())
    if lang not in SUPPORTED_LANGUAGE_CODES:
        lang = DEFAULT_LANGUAGE
    text = translations.get(key, {}).get(lang) or translations.get(key, {}).get(DEFAULT_LANGUAGE)
    if not text:
        fallback = default if default is not None else key
        _capture_missing_key(key, fallback, location=_get_callsite())
        text = fallback
    if kwargs:
        return text.format(**kwargs)
    return text
