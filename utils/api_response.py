"""
Standardized API response helpers.

Every JSON endpoint (public storefront and admin back office) answers with:

    Success:  {"success": true, "data": {...}, "message": "..."}
    Error:    {"success": false, "error": "Spanish error message", "code": "..."}
    Warning:  {"success": true, "data": {...}, "warning": "..."}

Usage:
    from utils.api_response import api_success, api_error

    return api_success(data=quotation, message=MESSAGES['quotation_submitted'], status=201)
    return api_error(MESSAGES['cart_empty'], status=400)
"""

from flask import jsonify
from typing import Any


def api_success(
    data: Any = None,
    message: str | None = None,
    warning: str | None = None,
    status: int = 200,
    **extra_fields: Any
) -> tuple:
    """
    Build a standardized success JSON response.

    Args:
        data: Optional payload (dict or list) under the 'data' key.
        message: Optional success message (Spanish).
        warning: Optional warning, e.g. when availability is degraded.
        status: HTTP status code (default 200).
        **extra_fields: Additional top-level fields.

    Returns:
        Tuple of (Response, status_code)
    """
    response = {'success': True}

    if data is not None:
        response['data'] = data

    if message:
        response['message'] = message

    if warning:
        response['warning'] = warning

    if extra_fields:
        response.update(extra_fields)

    return jsonify(response), status


def api_error(error: str, status: int = 400, code: Any = None, **extra_fields: Any) -> tuple:
    """
    Build a standardized error JSON response.

    Args:
        error: Error message (Spanish).
        status: HTTP status code (default 400).
        code: Optional ErrorCode (or its string value) for programmatic clients.
        **extra_fields: Additional top-level fields (e.g., errors, available).

    Returns:
        Tuple of (Response, status_code)
    """
    response = {'success': False, 'error': error}

    if code is not None:
        response['code'] = getattr(code, 'value', code)

    if extra_fields:
        response.update(extra_fields)

    return jsonify(response), status
