"""
Request body reading.
"""
import json
import math
import logging
from typing import Dict, Any

from fastapi import Request

logger = logging.getLogger(__name__)


class MalformedBodyError(ValueError):
    """Request body could not be parsed as a JSON object."""


def _reject_constant(name: str):
    # NaN, Infinity and -Infinity are not JSON
    raise MalformedBodyError(f"Invalid JSON constant: {name}")


def _parse_finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise MalformedBodyError(f"Number out of range: {text}")
    return value


async def read_json_body(request: Request) -> Dict[str, Any]:
    """
    Read the whole request body and parse it as a strict JSON object.

    An empty body yields an empty dict.

    Raises:
        MalformedBodyError: If the body is not valid JSON, holds a
            non-finite number, or is not an object
    """
    body = await request.body()
    if not body or not body.strip():
        return {}

    try:
        data = json.loads(
            body.decode("utf-8"),
            parse_constant=_reject_constant,
            parse_float=_parse_finite_float
        )
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning(f"Malformed JSON body on {request.method} {request.url.path}: {e}")
        raise MalformedBodyError(f"Invalid JSON body: {e}") from e
    except MalformedBodyError as e:
        logger.warning(f"Malformed JSON body on {request.method} {request.url.path}: {e}")
        raise

    if not isinstance(data, dict):
        logger.warning(f"Non-object JSON body on {request.method} {request.url.path}")
        raise MalformedBodyError("JSON body must be an object")

    return data
