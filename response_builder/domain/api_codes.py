"""API code registry.

Maps built-in offsets onto the reserved code range, API codes onto
localization keys and response key roles onto the literal JSON keys used
in the envelope. Pure lookup logic with no Flask dependency.
"""

import logging
from collections.abc import Mapping
from enum import IntEnum

from response_builder.config.settings import (
    RESERVED_MAX_API_CODE,
    RESERVED_MIN_API_CODE,
    BuilderConfig,
)
from response_builder.domain.exceptions import ConfigurationError, UnknownCodeError

logger = logging.getLogger(__name__)

MESSAGE_KEY_PREFIX = "response_builder."

KEY_SUCCESS = "success"
KEY_CODE = "code"
KEY_LOCALE = "locale"
KEY_MESSAGE = "message"
KEY_DATA = "data"
KEY_DEBUG = "debug"
KEY_TRACE = "trace"

ENVELOPE_ROLES = (KEY_SUCCESS, KEY_CODE, KEY_LOCALE, KEY_MESSAGE, KEY_DATA)
DEBUG_ROLES = (KEY_DEBUG, KEY_TRACE)


class BuiltinOffset(IntEnum):
    """Offsets of the built-in codes within the reserved range."""

    OK = 0
    NO_ERROR_MESSAGE = 1
    EX_HTTP_NOT_FOUND = 10
    EX_HTTP_SERVICE_UNAVAILABLE = 11
    EX_HTTP_EXCEPTION = 12
    EX_UNCAUGHT_EXCEPTION = 13
    EX_AUTHENTICATION_EXCEPTION = 14
    EX_VALIDATION_EXCEPTION = 15


BUILTIN_MESSAGE_KEYS = {
    BuiltinOffset.OK: MESSAGE_KEY_PREFIX + "ok",
    BuiltinOffset.NO_ERROR_MESSAGE: MESSAGE_KEY_PREFIX + "no_error_message",
    BuiltinOffset.EX_HTTP_NOT_FOUND: MESSAGE_KEY_PREFIX + "http_not_found",
    BuiltinOffset.EX_HTTP_SERVICE_UNAVAILABLE: MESSAGE_KEY_PREFIX + "http_service_unavailable",
    BuiltinOffset.EX_HTTP_EXCEPTION: MESSAGE_KEY_PREFIX + "http_exception",
    BuiltinOffset.EX_UNCAUGHT_EXCEPTION: MESSAGE_KEY_PREFIX + "uncaught_exception",
    BuiltinOffset.EX_AUTHENTICATION_EXCEPTION: MESSAGE_KEY_PREFIX + "authentication_exception",
    BuiltinOffset.EX_VALIDATION_EXCEPTION: MESSAGE_KEY_PREFIX + "validation_exception",
}


def code_for_internal_offset(offset: int) -> int:
    """Return the API code emitted for a built-in offset.

    Raises:
        ConfigurationError: if the offset falls outside the reserved range.
    """
    span = RESERVED_MAX_API_CODE - RESERVED_MIN_API_CODE
    if not 0 <= offset <= span:
        msg = f"Built-in code offset {offset} exceeds the reserved range span (0-{span})."
        raise ConfigurationError(msg)
    return RESERVED_MIN_API_CODE + offset


class ApiCodeRegistry:
    """Resolves API codes and response keys against a ``BuilderConfig``.

    The response key overrides are re-validated on each lookup, so a broken
    override map is reported before any envelope using it is emitted.
    """

    def __init__(self, config: BuilderConfig):
        self._config = config

    # ------------------------------------------------------------------
    # Code ranges
    # ------------------------------------------------------------------

    @property
    def min_code(self) -> int:
        return self._config.min_code

    @property
    def max_code(self) -> int:
        return self._config.max_code

    def is_code_valid(self, code: int) -> bool:
        """Tell if ``code`` is a built-in code or lies in the application range."""
        reserved = RESERVED_MIN_API_CODE <= code <= RESERVED_MAX_API_CODE
        return reserved or self.min_code <= code <= self.max_code

    # ------------------------------------------------------------------
    # Built-in codes
    # ------------------------------------------------------------------

    @staticmethod
    def code_for_internal_offset(offset: int) -> int:
        return code_for_internal_offset(offset)

    @property
    def ok(self) -> int:
        return code_for_internal_offset(BuiltinOffset.OK)

    @property
    def no_error_message(self) -> int:
        return code_for_internal_offset(BuiltinOffset.NO_ERROR_MESSAGE)

    @property
    def ex_http_not_found(self) -> int:
        return code_for_internal_offset(BuiltinOffset.EX_HTTP_NOT_FOUND)

    @property
    def ex_http_service_unavailable(self) -> int:
        return code_for_internal_offset(BuiltinOffset.EX_HTTP_SERVICE_UNAVAILABLE)

    @property
    def ex_http_exception(self) -> int:
        return code_for_internal_offset(BuiltinOffset.EX_HTTP_EXCEPTION)

    @property
    def ex_uncaught_exception(self) -> int:
        return code_for_internal_offset(BuiltinOffset.EX_UNCAUGHT_EXCEPTION)

    @property
    def ex_authentication_exception(self) -> int:
        return code_for_internal_offset(BuiltinOffset.EX_AUTHENTICATION_EXCEPTION)

    @property
    def ex_validation_exception(self) -> int:
        return code_for_internal_offset(BuiltinOffset.EX_VALIDATION_EXCEPTION)

    # ------------------------------------------------------------------
    # Message keys
    # ------------------------------------------------------------------

    @staticmethod
    def base_map() -> dict[int, str]:
        """Return the built-in code to message key mapping."""
        return {
            code_for_internal_offset(offset): key
            for offset, key in BUILTIN_MESSAGE_KEYS.items()
        }

    def code_map(self) -> dict[int, str]:
        """Return built-in mappings with the application's mappings merged on top."""
        merged = self.base_map()
        merged.update(self._config.code_map)
        return merged

    def message_key_for(self, code: int, allow_fallback: bool = False) -> str | None:
        """Return the localization key mapped to ``code``.

        Args:
            code: API code to look up.
            allow_fallback: return ``None`` instead of raising when unmapped.

        Raises:
            UnknownCodeError: if ``code`` is unmapped and no fallback is allowed.
        """
        key = self.code_map().get(code)
        if key is None and not allow_fallback:
            raise UnknownCodeError(f"No message mapping for API code {code}.", code)
        return key

    # ------------------------------------------------------------------
    # Response keys
    # ------------------------------------------------------------------

    def _defaults(self) -> dict[str, object]:
        defaults: dict[str, object] = {role: role for role in ENVELOPE_ROLES}
        defaults[KEY_DEBUG] = self._config.debug_key
        defaults[KEY_TRACE] = self._config.trace_key
        return defaults

    def response_key_name(self, role: str) -> str:
        """Return the JSON key used for ``role``, honouring user overrides.

        Raises:
            UnknownCodeError: if ``role`` is not a known response key role.
            ConfigurationError: if the override map is not a mapping or the
                resolved key is not a non-empty string.
        """
        defaults = self._defaults()
        if role not in defaults:
            raise UnknownCodeError(f'Unknown response key reference "{role}".', role)

        result = defaults[role]

        user_map = self._config.response_key_map
        if user_map is not None:
            if not isinstance(user_map, Mapping):
                msg = (
                    f"Response key map must be a mapping "
                    f"({type(user_map).__name__} given)."
                )
                raise ConfigurationError(msg)
            if role in user_map:
                result = user_map[role]

        if not isinstance(result, str):
            msg = (
                f'Response key reference "{role}" must be mapped to a string '
                f"({type(result).__name__} given)."
            )
            raise ConfigurationError(msg)
        if not result:
            raise ConfigurationError(f'Response key reference "{role}" is mapped to an empty string.')

        return result

    def response_keys(self) -> dict[str, str]:
        """Resolve every role at once.

        Raises:
            ConfigurationError: if two roles resolve to the same JSON key.
        """
        keys = {role: self.response_key_name(role) for role in ENVELOPE_ROLES + DEBUG_ROLES}

        # debug and trace live on different levels, only the top level must be unique
        top_level = [keys[role] for role in ENVELOPE_ROLES + (KEY_DEBUG,)]
        duplicates = sorted({key for key in top_level if top_level.count(key) > 1})
        if duplicates:
            logger.warning("Colliding response keys: %s", duplicates)
            raise ConfigurationError(f"Response keys must be unique, duplicated: {duplicates}.")

        return keys
