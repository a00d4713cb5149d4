"""
Validation of model replies that should contain OHLCV candles.
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Sequence
from typing import Any

from pydantic import ValidationError

from .exceptions import OHLCVParseError
from .models import OHLCV, StructuredAnalysis

OHLCV_FIELDS = ("open", "high", "low", "close", "volume")
MAX_PREDICTION_COUNT = 50
ERROR_PREVIEW_CHARS = 200

_JSON_ARRAY = re.compile(r"\[[\s\S]*\]")


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, int | float)
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _validate_candle(item: Any, index: int) -> OHLCV:
    if not isinstance(item, dict):
        raise ValueError(f"Element {index} is not a valid object")
    for field_name in OHLCV_FIELDS:
        if not _is_number(item.get(field_name)):
            raise ValueError(f"Element {index} field {field_name} is not a valid number")
    try:
        return OHLCV.model_validate({name: item[name] for name in OHLCV_FIELDS})
    except ValidationError as e:
        reason = e.errors()[0].get("ctx", {}).get("error") or e.errors()[0]["msg"]
        raise ValueError(f"Element {index}: {reason}") from e


def _parse_candles(content: str) -> list[OHLCV]:
    parsed = json.loads(content)
    if not isinstance(parsed, list):
        raise ValueError("Response is not in array format")
    return [_validate_candle(item, index) for index, item in enumerate(parsed)]


def parse_ohlcv_response(content: str) -> list[OHLCV]:
    """
    Parse a reply that should be a bare JSON array of candles.

    Models sometimes wrap the array in prose or markdown fences, so when the
    whole reply does not validate, the outermost ``[...]`` span is tried once.

    Raises:
        OHLCVParseError: Neither the reply nor its bracketed span validated.
    """
    try:
        return _parse_candles(content)
    except ValueError as first_error:
        match = _JSON_ARRAY.search(content)
        if match and match.group(0) != content:
            try:
                return _parse_candles(match.group(0))
            except ValueError as e:
                first_error = e
        raise OHLCVParseError(
            f"Unable to parse AI returned OHLCV data: {first_error}\n"
            f"Original content: {content[:ERROR_PREVIEW_CHARS]}..."
        ) from first_error


def validate_count(count: int) -> int:
    """Prediction count must be an integer in 1..MAX_PREDICTION_COUNT."""
    if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
        raise ValueError(f"Invalid count parameter: {count}. Must be a positive integer.")
    if count > MAX_PREDICTION_COUNT:
        raise ValueError(
            f"Count parameter too large: {count}. Maximum allowed is "
            f"{MAX_PREDICTION_COUNT}. Please reduce the count or split your request."
        )
    return count


def candles_to_json(candles: Sequence[OHLCV | dict[str, Any]]) -> str:
    """Pretty-printed JSON array used inside prompts."""
    rows = [
        candle.model_dump() if isinstance(candle, OHLCV) else dict(candle)
        for candle in candles
    ]
    return json.dumps(rows, indent=2, ensure_ascii=False)


def coerce_candles(candles: Sequence[OHLCV | dict[str, Any]]) -> list[OHLCV]:
    """Validate caller-supplied history before it goes into a prompt."""
    result = []
    for index, candle in enumerate(candles):
        if isinstance(candle, OHLCV):
            result.append(candle)
            continue
        try:
            result.append(_validate_candle(candle, index))
        except ValueError as e:
            raise OHLCVParseError(f"Invalid input candle: {e}") from e
    return result


def parse_structured_analysis(content: str) -> StructuredAnalysis | None:
    """Return the structured reply, or None when it is not the expected JSON."""
    try:
        return StructuredAnalysis.model_validate_json(content)
    except ValidationError:
        return None
