"""
Lightweight i18n module for rockfetch labels.

Usage:
    import i18n
    i18n.init()                                  # detect locale, load strings
    i18n.t('field.uptime')                       # → "Uptime"
    i18n.t('field.wm', default='WM')             # → "WM", or the translation
"""

import json
import logging
import os
import sys
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

_strings: dict = {}
_locale_code: str = 'en'


def _detect_locale() -> str:
    """Detect language code from LC_ALL / LC_MESSAGES / LANG."""
    for var in ('LC_ALL', 'LC_MESSAGES', 'LANG'):
        lang = os.environ.get(var, '')
        if lang:
            # e.g. "es_ES.UTF-8" → "es_ES"
            code = lang.split('.')[0]
            if code and code not in ('C', 'POSIX'):
                return code
    return 'en'


def _resolve_locale(code: str, locales_dir: Path) -> str:
    """Resolve locale code to an available JSON file.

    Resolution order: exact match (en_GB) → language only (en) → fallback 'en'.
    """
    if (locales_dir / f'{code}.json').is_file():
        return code
    lang = code.split('_')[0]
    if lang != code and (locales_dir / f'{lang}.json').is_file():
        return lang
    return 'en'


def _find_locales_dir() -> Path:
    """Locate the locales/ directory: source checkout first, then the installed data dir."""
    local_dir = Path(__file__).resolve().parent / 'locales'
    if local_dir.is_dir():
        return local_dir
    return Path(sys.prefix) / 'share' / 'rockfetch' / 'locales'


def _load(path: Path) -> dict:
    try:
        with open(path, encoding='utf-8') as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        logger.debug("Could not load locale file %s: %s", path, e)
        return {}


def init(locale_override: Optional[str] = None, locales_dir: Optional[Path] = None):
    """Initialize i18n: detect locale, load base English + locale overlay."""
    global _strings, _locale_code

    locales_dir = locales_dir or _find_locales_dir()
    _strings = _load(locales_dir / 'en.json')

    raw_code = locale_override or _detect_locale()
    _locale_code = _resolve_locale(raw_code, locales_dir)

    # Overlay locale-specific strings on top of English base
    if _locale_code != 'en':
        _strings.update(_load(locales_dir / f'{_locale_code}.json'))


def t(key: str, default: Optional[str] = None) -> str:
    """Look up a translated string by key.

    Missing keys return ``default`` when given, else the key itself.
    """
    return _strings.get(key, default if default is not None else key)
