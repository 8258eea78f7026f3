"""Consistent API response helpers.

Return ``(dict, status)`` pairs rather than Flask Response objects: plain
Flask views and Flask-RESTX resources both serialise them automatically.
All helpers use the ``ResponseBuilder`` registered on ``current_app``.
"""

from typing import Any

from flask import current_app


def _builder():
    return current_app.extensions["response_builder"].builder


def success(
    data: Any = None,
    api_code: int | None = None,
    locale_args: dict | None = None,
    http_code: int | None = None,
    message: str | None = None,
):
    """Return a success envelope (HTTP 200 unless ``http_code`` says otherwise)."""
    return _builder().build_success(api_code, message, data, http_code, locale_args)


def success_with_http_code(http_code: int | None = None):
    return _builder().success_with_http_code(http_code)


def success_with_data(data: Any):
    return _builder().success_with_data(data)


def error(
    api_code: int,
    locale_args: dict | None = None,
    data: Any = None,
    http_code: int | None = None,
    message: str | None = None,
    debug_data: Any = None,
):
    """Return an error envelope (HTTP 400 unless ``http_code`` says otherwise)."""
    return _builder().build_error(api_code, message, data, http_code, locale_args, debug_data)


def error_with_data(api_code: int, data: Any, locale_args: dict | None = None):
    return _builder().error_with_data(api_code, data, locale_args)


def error_with_data_and_http_code(api_code: int, data: Any, http_code: int, locale_args: dict | None = None):
    return _builder().error_with_data_and_http_code(api_code, data, http_code, locale_args)


def error_with_http_code(api_code: int, http_code: int, locale_args: dict | None = None):
    return _builder().error_with_http_code(api_code, http_code, locale_args)


def error_with_message(api_code: int, message: str, http_code: int | None = None):
    return _builder().error_with_message(api_code, message, http_code)


def error_with_message_and_data(api_code: int, message: str, data: Any, http_code: int | None = None):
    return _builder().error_with_message_and_data(api_code, message, data, http_code)


def error_with_message_and_data_and_debug(
    api_code: int,
    message: str,
    data: Any,
    http_code: int | None = None,
    debug_data: Any = None,
):
    return _builder().error_with_message_and_data_and_debug(api_code, message, data, http_code, debug_data)
