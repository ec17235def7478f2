# notekeeper/core/responses.py
"""
Response envelope shared by every endpoint.

Success and error responses have the same shape:
    {"statusCode": int, "data": Any, "message": str, "success": bool}
"""
from typing import Any, Optional

from fastapi.responses import JSONResponse


def envelope(status_code: int, data: Any = None, message: str = "Success") -> dict:
    """
    Build the response body.

    `success` is derived from the status code so a handler can never report
    success alongside an error status.
    """
    return {
        "statusCode": status_code,
        "data": data if data is not None else {},
        "message": message,
        "success": status_code < 400,
    }


def error_response(status_code: int, message: str, errors: Optional[list] = None) -> JSONResponse:
    body = envelope(status_code, None, message)
    body["data"] = None
    if errors:
        body["errors"] = errors
    return JSONResponse(status_code=status_code, content=body)
