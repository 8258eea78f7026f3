"""Exception-to-envelope adapter.

Maps framework exceptions onto the built-in reserved API codes. Works with a
plain Flask app and with a Flask-RESTX ``Api`` (which intercepts exceptions
raised inside its resources before Flask's own handlers see them).
"""

import logging
import traceback

from flask import Flask, current_app
from flask_restx import Api
from pydantic import ValidationError as PydanticValidationError
from werkzeug.exceptions import HTTPException, NotFound, ServiceUnavailable, Unauthorized

from response_builder.domain.api_codes import KEY_TRACE

logger = logging.getLogger(__name__)

HTTP_CODE_VALIDATION_ERROR = 422
HTTP_CODE_UNCAUGHT_ERROR = 500


def _builder():
    return current_app.extensions["response_builder"]


def _trace(error: BaseException) -> dict:
    frames = traceback.extract_tb(error.__traceback__)
    origin = frames[-1] if frames else None
    return {
        "class": type(error).__name__,
        "file": origin.filename if origin else None,
        "line": origin.lineno if origin else None,
    }


def _render(error: BaseException, api_code: int, http_code: int, message: str | None, data=None):
    """Build the error envelope; ``message`` overrides the mapped message."""
    ext = _builder()
    locale_args = {
        "api_code": api_code,
        "http_code": http_code,
        "message": str(error),
        "class": type(error).__name__,
    }
    debug_data = None
    if ext.config.debug_trace_enabled:
        debug_data = {ext.registry.response_key_name(KEY_TRACE): _trace(error)}

    return ext.builder.build_error(
        api_code,
        message=message,
        data=data,
        http_code=http_code,
        locale_args=locale_args,
        debug_data=debug_data,
    )


def _http_message(error: HTTPException) -> str | None:
    # werkzeug fills in a generic description; only an explicit one is worth showing
    if error.description and error.description != type(error).description:
        return error.description
    return None


def handle_http_exception(error: HTTPException):
    """Render a werkzeug ``HTTPException`` as an error envelope."""
    registry = _builder().registry
    if isinstance(error, NotFound):
        api_code = registry.ex_http_not_found
    elif isinstance(error, ServiceUnavailable):
        api_code = registry.ex_http_service_unavailable
    elif isinstance(error, Unauthorized):
        api_code = registry.ex_authentication_exception
    else:
        api_code = registry.ex_http_exception

    http_code = error.code or HTTP_CODE_UNCAUGHT_ERROR
    return _render(error, api_code, http_code, _http_message(error))


def handle_validation_error(error: PydanticValidationError):
    """Render a pydantic validation failure with the offending fields as data."""
    registry = _builder().registry
    data = {"messages": error.errors(include_url=False, include_context=False, include_input=False)}
    return _render(error, registry.ex_validation_exception, HTTP_CODE_VALIDATION_ERROR, None, data)


def handle_uncaught_exception(error: Exception):
    """Render anything else as an uncaught exception (HTTP 500)."""
    if isinstance(error, HTTPException):
        return handle_http_exception(error)
    logger.exception("Unhandled server error")
    registry = _builder().registry
    return _render(error, registry.ex_uncaught_exception, HTTP_CODE_UNCAUGHT_ERROR, None)


def _to_flask(result):
    envelope, http_code = result
    return _builder().make_response(envelope, http_code)


def disable_restx_error_keys(app: Flask) -> None:
    """Stop Flask-RESTX from adding its own ``message`` key or 404 hints to envelopes.

    Uses ``setdefault`` so an explicit host setting wins.
    """
    app.config.setdefault("ERROR_INCLUDE_MESSAGE", False)
    app.config.setdefault("ERROR_404_HELP", False)


def register_error_handlers(app: Flask) -> None:
    """Map exceptions raised in plain Flask views to JSON envelopes."""

    @app.errorhandler(HTTPException)
    def on_http_exception(error: HTTPException):
        return _to_flask(handle_http_exception(error))

    @app.errorhandler(PydanticValidationError)
    def on_validation_error(error: PydanticValidationError):
        return _to_flask(handle_validation_error(error))

    @app.errorhandler(Exception)
    def on_uncaught_exception(error: Exception):
        return _to_flask(handle_uncaught_exception(error))


def register_restx_error_handlers(api: Api) -> None:
    """Map exceptions raised inside Flask-RESTX resources to JSON envelopes.

    Flask-RESTX serialises the returned ``(dict, status)`` pair itself.
    """
    if isinstance(api.app, Flask):
        disable_restx_error_keys(api.app)
    api.errorhandler(HTTPException)(handle_http_exception)
    api.errorhandler(PydanticValidationError)(handle_validation_error)
    api.errorhandler(Exception)(handle_uncaught_exception)
