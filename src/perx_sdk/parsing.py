from __future__ import annotations

import logging
from typing import Any, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .errors import PerxAPIError, PerxResponseParseError, PerxUnauthorizedError


logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_MESSAGE_KEYS = ("message", "error_description", "error")


def raise_for_unauthorized(payload: Any, status: int) -> None:
    """Translate a 401 into :class:`PerxUnauthorizedError`, ahead of generic parsing."""
    if status == 401:
        raise PerxUnauthorizedError(
            _extract_message(payload) or "Unauthorized", body=payload
        )


def parse_and_eval(payload: Any, status: int, model: Type[ModelT]) -> ModelT:
    """
    Turn a raw Perx response into ``model``.

    - status >= 400  => PerxAPIError carrying status and body
    - body does not fit ``model`` => PerxResponseParseError
    """
    if status >= 400:
        message = _extract_message(payload)
        raise PerxAPIError(
            f"Perx returned HTTP {status}" + (f": {message}" if message else ""),
            status_code=status,
            body=payload,
        )

    try:
        return model.model_validate(payload)
    except ValidationError as e:
        logger.warning(
            f"Unexpected {model.__name__} payload (HTTP {status}): "
            f"{e.error_count()} validation error(s)"
        )
        raise PerxResponseParseError(
            f"Unexpected response shape for {model.__name__}",
            status_code=status,
            body=payload,
        ) from e


def _extract_message(payload: Any) -> Optional[str]:
    """
    Perx error bodies come in a few shapes:
    - {"code": 40, "message": "..."}
    - {"error": "invalid_client", "error_description": "..."}
    - plain text
    """
    if isinstance(payload, dict):
        for key in _MESSAGE_KEYS:
            val = payload.get(key)
            if isinstance(val, str) and val:
                return val
        return None
    if isinstance(payload, str) and payload.strip():
        return payload.strip()
    return None
