"""Message catalog used to render envelope messages.

Locale is request-scoped via a ContextVar; callers (or middleware) switch it
with ``set_locale`` and restore it with ``reset_locale``.
"""

import logging
import string
from contextvars import ContextVar, Token
from typing import Any

logger = logging.getLogger(__name__)

_current_locale: ContextVar[str | None] = ContextVar("response_builder_locale", default=None)

DEFAULT_MESSAGES = {
    "en": {
        "response_builder.ok": "OK",
        "response_builder.no_error_message": "Error #{api_code}",
        "response_builder.http_not_found": "Unknown method",
        "response_builder.http_service_unavailable": "Service maintenance in progress",
        "response_builder.http_exception": "HTTP exception {http_code}",
        "response_builder.uncaught_exception": "Uncaught exception: {message}",
        "response_builder.authentication_exception": "Not authorized to access",
        "response_builder.validation_exception": "Invalid data",
    },
}


def set_locale(locale: str) -> Token:
    """Activate ``locale`` for the current context."""
    return _current_locale.set(locale)


def reset_locale(token: Token) -> None:
    _current_locale.reset(token)


class _KeepMissingFormatter(string.Formatter):
    """Leaves unresolvable placeholders in place instead of failing."""

    def get_field(self, field_name, args, kwargs):
        try:
            return super().get_field(field_name, args, kwargs)
        except (KeyError, AttributeError, IndexError, TypeError):
            return "{" + field_name + "}", field_name


_formatter = _KeepMissingFormatter()


class Translator:
    """Looks up message templates per locale and fills in placeholders."""

    def __init__(
        self,
        messages: dict[str, dict[str, str]] | None = None,
        default_locale: str = "en",
    ):
        self._default_locale = default_locale
        self._catalogs: dict[str, dict[str, str]] = {
            locale: dict(catalog) for locale, catalog in DEFAULT_MESSAGES.items()
        }
        for locale, catalog in (messages or {}).items():
            self._catalogs.setdefault(locale, {}).update(catalog)

    @property
    def default_locale(self) -> str:
        return self._default_locale

    @property
    def locale(self) -> str:
        """The locale active for the current request."""
        return _current_locale.get() or self._default_locale

    def has(self, key: str, locale: str | None = None) -> bool:
        return key in self._catalogs.get(locale or self.locale, {})

    def translate(
        self,
        key: str,
        args: dict[str, Any] | None = None,
        locale: str | None = None,
    ) -> str:
        """Render the template for ``key``; unknown keys come back as-is."""
        locale = locale or self.locale
        template = self._catalogs.get(locale, {}).get(key)
        if template is None:
            template = self._catalogs.get(self._default_locale, {}).get(key)
        if template is None:
            logger.debug("No translation for %s (locale=%s)", key, locale)
            return key

        try:
            return _formatter.vformat(template, (), args or {})
        except (ValueError, TypeError):
            # Malformed template or a format spec not matching the value.
            logger.warning("Cannot format message %s: %r", key, template)
            return template
