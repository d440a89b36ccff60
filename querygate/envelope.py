from __future__ import annotations

import base64
import datetime
import json
from typing import Any

from .models import ExecutionResult, Failure, Success


def _json_default(value: Any) -> Any:
    """
    Render column values json cannot encode natively.

    Binary values (BLOB, BINARY, BIT) become base64 text; dates and times use
    ISO 8601; anything else (Decimal, UUID, ...) falls back to str().
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    return str(value)


def format_payload(payload: Any) -> str:
    """Serialize a payload as indented JSON."""
    return json.dumps(payload, indent=2, default=_json_default)


def text_content(text: str) -> list[dict[str, str]]:
    return [{"type": "text", "text": text}]


def to_envelope(result: ExecutionResult) -> dict[str, Any]:
    """
    Render an ExecutionResult as the outbound response envelope.

    Success:
        ``{"content": [{"type": "text", "text": <json payload>}]}``
    Database failure:
        ``{"content": [{"type": "text", "text": "<db> error: ..."}], "isError": True}``

    Raises:
        ProtocolError: For protocol failures, which travel on the error
            channel instead of the envelope
    """
    if isinstance(result, Success):
        return {"content": text_content(format_payload(result.payload))}

    if isinstance(result, Failure):
        if result.is_operational:
            return {"content": text_content(result.message), "isError": True}
        raise result.to_exception()

    raise TypeError(f"Unsupported result type: {type(result).__name__}")
