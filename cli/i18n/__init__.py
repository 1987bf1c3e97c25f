"""
cli/i18n/__init__.py - Internationalization (i18n) Module

Provides translation support for the CLI and the navigator screens.
Korean (ko) is the default language, with English (en) as an option.

Architecture:
    - Messages are organized by namespace (cli, tui)
    - Translation function t() supports format string interpolation
    - set_lang() sets both the process language and the current context,
      so Cmd worker threads started later render in the same language

Usage:
    from cli.i18n import t, set_lang, get_lang

    # Basic translation
    print(t("tui.services_title"))  # "서비스" or "Services"

    # With interpolation
    print(t("tui.deleted", name="i-0abc"))  # "Deleted: i-0abc"

    # Get localized text based on language
    set_lang("en")
    print(t("tui.loading"))  # "Loading..."
"""

from __future__ import annotations

import contextlib
from contextvars import ContextVar
from typing import Any

# Supported languages
SUPPORTED_LANGS = ("ko", "en")
DEFAULT_LANG = "ko"

# Per-context override (None falls back to the process language)
_current_lang: ContextVar[str | None] = ContextVar("lang", default=None)
_process_lang: str = DEFAULT_LANG


def get_lang() -> str:
    """Get current language (context override, then process language)."""
    return _current_lang.get() or _process_lang


def set_lang(lang: str) -> None:
    """Set current language for this context and the whole process.

    Args:
        lang: Language code ("ko" or "en")
    """
    global _process_lang
    if lang not in SUPPORTED_LANGS:
        lang = DEFAULT_LANG
    _process_lang = lang
    _current_lang.set(lang)


def t(key: str, lang: str | None = None, **kwargs: Any) -> str:
    """Translate a message key to the current language.

    Args:
        key: Message key in namespace.key format (e.g., "tui.loading")
        lang: Optional language override. If not provided, uses context variable.
        **kwargs: Format string arguments for interpolation

    Returns:
        Translated string, or key if translation not found

    Examples:
        >>> t("tui.loading")
        "불러오는 중..."  # when lang="ko"

        >>> t("tui.selector_hint", count=5)
        "space 선택 · ... (5개 선택)"  # when lang="ko"

        >>> t("tui.deleted", lang="en", name="i-0abc")
        "Deleted: i-0abc"
    """
    from cli.i18n.messages import MESSAGES

    if lang is None:
        lang = get_lang()

    if lang not in SUPPORTED_LANGS:
        lang = DEFAULT_LANG

    # Look up the message
    msg_dict = MESSAGES.get(key)
    if msg_dict is None:
        # Key not found, return key as-is
        return key

    # Get the translation for the specified language
    text = msg_dict.get(lang)
    if text is None:
        # Fallback to Korean if English not available
        text = msg_dict.get(DEFAULT_LANG, key)

    # Apply format string interpolation if kwargs provided
    if kwargs:
        with contextlib.suppress(KeyError, ValueError):
            text = text.format(**kwargs)

    return text


def get_text(ko: str, en: str, lang: str | None = None) -> str:
    """Get text based on language without using message registry.

    Useful for inline translations where registering a key is overkill.

    Args:
        ko: Korean text
        en: English text
        lang: Optional language override

    Returns:
        Text in the specified language

    Example:
        >>> get_text("저장됨", "Saved", lang="en")
        "Saved"
    """
    if lang is None:
        lang = get_lang()
    return en if lang == "en" else ko


__all__ = [
    "t",
    "get_text",
    "get_lang",
    "set_lang",
    "SUPPORTED_LANGS",
    "DEFAULT_LANG",
]
