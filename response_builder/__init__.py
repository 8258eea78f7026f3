"""Flask extension for uniform JSON API responses.

Every endpoint answers with the same envelope::

    {"success": true, "code": 0, "locale": "en", "message": "OK", "data": null}

Usage::

    rb = ResponseBuilder(app)          # or rb.init_app(app) in a factory

    @app.get("/ping")
    def ping():
        return success(data={"pong": True})
"""

import logging

from flask import Flask, jsonify

from response_builder.api.error_handlers import disable_restx_error_keys, register_error_handlers
from response_builder.config.settings import BuilderConfig
from response_builder.domain.api_codes import ApiCodeRegistry, BuiltinOffset
from response_builder.domain.envelope import (
    DEFAULT_HTTP_CODE_ERROR,
    DEFAULT_HTTP_CODE_OK,
    EnvelopeBuilder,
)
from response_builder.domain.exceptions import (
    BuilderError,
    ConfigurationError,
    InvalidArgumentError,
    UnknownCodeError,
)
from response_builder.schemas.response import (
    error,
    error_with_data,
    error_with_data_and_http_code,
    error_with_http_code,
    error_with_message,
    error_with_message_and_data,
    error_with_message_and_data_and_debug,
    success,
    success_with_data,
    success_with_http_code,
)
from response_builder.services.localization import Translator

logger = logging.getLogger(__name__)

EXTENSION_NAME = "response_builder"


class ResponseBuilder:
    """Binds the registry, translator and envelope builder to a Flask app."""

    def __init__(self, app: Flask | None = None):
        self.config: BuilderConfig | None = None
        self.registry: ApiCodeRegistry | None = None
        self.translator: Translator | None = None
        self.builder: EnvelopeBuilder | None = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        """Snapshot ``app.config`` and register the extension.

        Raises:
            ConfigurationError: if the ``RESPONSE_BUILDER_*`` settings are invalid.
        """
        self.config = BuilderConfig.from_mapping(app.config)
        self.registry = ApiCodeRegistry(self.config)
        # Fail at startup rather than on the first response.
        self.registry.response_keys()
        self.translator = Translator(self.config.messages, self.config.default_locale)
        self.builder = EnvelopeBuilder(self.registry, self.translator, self.config)

        app.extensions[EXTENSION_NAME] = self

        # Envelope keys keep their documented order on the wire.
        app.json.sort_keys = False
        disable_restx_error_keys(app)

        if app.config.get("RESPONSE_BUILDER_REGISTER_ERROR_HANDLERS", True):
            register_error_handlers(app)

        logger.info(
            "Response builder ready (codes %s-%s, %d mapped, debug trace %s)",
            self.config.min_code,
            self.config.max_code,
            len(self.config.code_map),
            "on" if self.config.debug_trace_enabled else "off",
        )

    @staticmethod
    def make_response(envelope: dict, http_code: int):
        """Hand an envelope and its status code over to Flask."""
        return jsonify(envelope), http_code


__all__ = [
    "ResponseBuilder",
    "BuilderConfig",
    "ApiCodeRegistry",
    "BuiltinOffset",
    "EnvelopeBuilder",
    "Translator",
    "BuilderError",
    "ConfigurationError",
    "InvalidArgumentError",
    "UnknownCodeError",
    "DEFAULT_HTTP_CODE_OK",
    "DEFAULT_HTTP_CODE_ERROR",
    "success",
    "success_with_http_code",
    "success_with_data",
    "error",
    "error_with_data",
    "error_with_data_and_http_code",
    "error_with_http_code",
    "error_with_message",
    "error_with_message_and_data",
    "error_with_message_and_data_and_debug",
]
