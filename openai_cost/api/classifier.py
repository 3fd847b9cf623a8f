from __future__ import annotations

import logging

from ..models.errors import OpenAICostError
from .decode import DecodeError, decode_error_response

_LOGGER = logging.getLogger(__name__)

# Shown instead of the body when it is not valid UTF-8.
INVALID_BODY_PLACEHOLDER = "Invalid data"


def _raw_text(content: bytes) -> str:
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError:
        return INVALID_BODY_PLACEHOLDER


def classify_error(status_code: int, content: bytes) -> OpenAICostError:
    """Turn a non-2xx response into a single error value.

    Never raises: an undecodable body becomes the message of an
    ``OTHER_ERROR`` keyed by the status code.
    """
    try:
        detail = decode_error_response(content).error
    except DecodeError as ex:
        _LOGGER.debug("HTTP %s body is not an API error object: %s", status_code, ex)
        text = _raw_text(content)
        return OpenAICostError.other(str(status_code), text, status_code=status_code, raw_body=text)

    return OpenAICostError.from_api_error(
        detail.type,
        detail.message,
        status_code=status_code,
        code=detail.code,
        param=detail.param,
    )


__all__ = ["classify_error", "INVALID_BODY_PLACEHOLDER"]
