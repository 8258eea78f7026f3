"""Envelope builder.

Assembles the ``{success, code, locale, message, data}`` structure for both
success and error responses and pairs it with the HTTP status code.
No Flask dependency: the extension hands the result to Flask.
"""

import logging
from collections.abc import Mapping
from typing import Any

from response_builder.config.settings import BuilderConfig
from response_builder.domain.api_codes import (
    KEY_CODE,
    KEY_DATA,
    KEY_DEBUG,
    KEY_LOCALE,
    KEY_MESSAGE,
    KEY_SUCCESS,
    KEY_TRACE,
    ApiCodeRegistry,
)
from response_builder.domain.exceptions import InvalidArgumentError
from response_builder.services.localization import Translator

logger = logging.getLogger(__name__)

DEFAULT_HTTP_CODE_OK = 200
DEFAULT_HTTP_CODE_ERROR = 400
MIN_HTTP_CODE = 100
MAX_HTTP_CODE = 599

Envelope = dict[str, Any]


def _assert_int(name: str, value: Any) -> None:
    # bool is an int subclass but never a valid code
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{name} must be an integer ({type(value).__name__} given).")


def convert_data(data: Any) -> Any:
    """Turn model objects exposing ``to_dict()`` into plain structures."""
    if hasattr(data, "to_dict") and callable(data.to_dict):
        return data.to_dict()
    if isinstance(data, (list, tuple)):
        return [convert_data(item) for item in data]
    return data


class EnvelopeBuilder:
    """Builds response envelopes from an API code registry and a translator."""

    def __init__(
        self,
        registry: ApiCodeRegistry,
        translator: Translator,
        config: BuilderConfig,
    ):
        self.registry = registry
        self.translator = translator
        self.config = config

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    def build_success(
        self,
        api_code: int | None = None,
        message: str | None = None,
        data: Any = None,
        http_code: int | None = None,
        locale_args: dict[str, Any] | None = None,
    ) -> tuple[Envelope, int]:
        """Build a success envelope.

        Args:
            api_code: API code to report, ``OK`` when omitted.
            message: Explicit message; resolved from the code mapping otherwise.
            data: Payload placed under the data key.
            http_code: HTTP status, 200 when omitted.
            locale_args: Placeholder values for the mapped message.

        Raises:
            InvalidArgumentError: on a malformed API code or HTTP code.
        """
        if api_code is None:
            api_code = self.registry.ok
        if http_code is None:
            http_code = DEFAULT_HTTP_CODE_OK

        self._validate_api_code(api_code)
        self._validate_http_code(http_code)

        envelope = self.assemble(
            success=True,
            api_code=api_code,
            message=self.resolve_message(api_code, message, locale_args),
            data=data,
        )
        return envelope, http_code

    def build_error(
        self,
        api_code: int,
        message: str | None = None,
        data: Any = None,
        http_code: int | None = None,
        locale_args: dict[str, Any] | None = None,
        debug_data: Any = None,
    ) -> tuple[Envelope, int]:
        """Build an error envelope.

        ``debug_data`` is only emitted when debug traces are enabled.

        Raises:
            InvalidArgumentError: on a malformed code, or when ``api_code`` is OK.
        """
        self._validate_api_code(api_code)
        if api_code == self.registry.ok:
            raise InvalidArgumentError("OK code not allowed for error responses.")

        if http_code is None:
            http_code = DEFAULT_HTTP_CODE_ERROR
        self._validate_http_code(http_code)
        if http_code < 400:
            logger.warning("Error response %s sent with non-error HTTP code %s", api_code, http_code)

        envelope = self.assemble(
            success=False,
            api_code=api_code,
            message=self.resolve_message(api_code, message, locale_args),
            data=data,
            debug_data=debug_data,
        )
        return envelope, http_code

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    def resolve_message(
        self,
        api_code: int,
        message: str | None = None,
        locale_args: dict[str, Any] | None = None,
    ) -> str:
        """Return ``message`` or the localized text mapped to ``api_code``."""
        if message is not None:
            return message

        key = self.registry.message_key_for(api_code, allow_fallback=True)
        if key is None:
            key = self.registry.message_key_for(self.registry.no_error_message)
            locale_args = {**(locale_args or {}), "api_code": api_code}

        return self.translator.translate(key, locale_args)

    def assemble(
        self,
        success: bool,
        api_code: int,
        message: str,
        data: Any = None,
        debug_data: Any = None,
    ) -> Envelope:
        """Lay out the envelope using the configured key names."""
        keys = self.registry.response_keys()

        envelope: Envelope = {
            keys[KEY_SUCCESS]: success,
            keys[KEY_CODE]: api_code,
            keys[KEY_LOCALE]: self.translator.locale,
            keys[KEY_MESSAGE]: message,
            keys[KEY_DATA]: convert_data(data),
        }

        if not success and self.config.debug_trace_enabled:
            trace_key = keys[KEY_TRACE]
            if isinstance(debug_data, Mapping) and trace_key in debug_data:
                debug = dict(debug_data)
            else:
                debug = {trace_key: debug_data if debug_data is not None else {}}
            envelope[keys[KEY_DEBUG]] = debug

        logger.debug("Built %s envelope with code %s", "success" if success else "error", api_code)
        return envelope

    def _validate_api_code(self, api_code: Any) -> None:
        _assert_int("API code", api_code)
        if api_code < 0:
            raise InvalidArgumentError(f"API code must not be negative ({api_code} given).")
        if not self.registry.is_code_valid(api_code):
            msg = (
                f"API code {api_code} is out of the allowed range "
                f"{self.registry.min_code}-{self.registry.max_code}."
            )
            raise InvalidArgumentError(msg)

    @staticmethod
    def _validate_http_code(http_code: Any) -> None:
        _assert_int("HTTP code", http_code)
        if not MIN_HTTP_CODE <= http_code <= MAX_HTTP_CODE:
            msg = (
                f"HTTP code {http_code} is out of the allowed range "
                f"{MIN_HTTP_CODE}-{MAX_HTTP_CODE}."
            )
            raise InvalidArgumentError(msg)

    # ------------------------------------------------------------------
    # Convenience entry points
    # ------------------------------------------------------------------

    def success(self, data=None, api_code=None, locale_args=None, http_code=None):
        return self.build_success(api_code, None, data, http_code, locale_args)

    def success_with_http_code(self, http_code=None):
        return self.build_success(http_code=http_code)

    def success_with_data(self, data):
        return self.build_success(data=data)

    def error(self, api_code, locale_args=None, data=None, http_code=None):
        return self.build_error(api_code, None, data, http_code, locale_args)

    def error_with_data(self, api_code, data, locale_args=None):
        return self.build_error(api_code, data=data, locale_args=locale_args)

    def error_with_data_and_http_code(self, api_code, data, http_code, locale_args=None):
        return self.build_error(api_code, data=data, http_code=http_code, locale_args=locale_args)

    def error_with_http_code(self, api_code, http_code, locale_args=None):
        return self.build_error(api_code, http_code=http_code, locale_args=locale_args)

    def error_with_message(self, api_code, message, http_code=None):
        return self.build_error(api_code, message, http_code=http_code)

    def error_with_message_and_data(self, api_code, message, data, http_code=None):
        return self.build_error(api_code, message, data, http_code)

    def error_with_message_and_data_and_debug(
        self, api_code, message, data, http_code=None, debug_data=None,
    ):
        return self.build_error(api_code, message, data, http_code, debug_data=debug_data)
