"""Current locale lookup used for the default Accept-Language header."""

import locale
from typing import Callable

from fluent_http.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_LOCALE = "pt-BR"

LocaleProvider = Callable[[], str | None]


def to_language_tag(name: str | None) -> str | None:
    """Convert a POSIX locale name to a language tag.

    en_US.UTF-8 -> en-US, C or POSIX -> None
    """
    if not name:
        return None
    tag = name.split(".", 1)[0].split("@", 1)[0].strip()
    if not tag or tag.upper() in ("C", "POSIX"):
        return None
    return tag.replace("_", "-")


def system_locale() -> str | None:
    """Return the process locale as a language tag, if one is set."""
    name, _ = locale.getlocale()
    return to_language_tag(name)


def fixed_locale(tag: str) -> LocaleProvider:
    """Build a provider that always returns the given tag."""

    def provider() -> str | None:
        return tag

    return provider


def resolve_locale(
    provider: LocaleProvider | None = None,
    fallback: str = DEFAULT_LOCALE,
) -> str:
    """Resolve the locale tag to send, falling back when the provider fails."""
    provider = provider or system_locale
    try:
        tag = provider()
    except (ValueError, LookupError, OSError) as e:
        logger.warning("locale_lookup_failed", error=str(e), fallback=fallback)
        return fallback
    return tag or fallback
