"""
Normalisation of externally supplied message fields.

Host events, HTTP bodies and recordings describe payloads in different
shapes (raw bytes, hex strings, lists of ints). The core only accepts
`bytes`, so adapters pass everything through here first.
"""

from __future__ import annotations

from typing import Any

from ..dto import Message, MessageTypeId
from ..pipeline.rules import parse_number


def coerce_type_id(value: Any) -> MessageTypeId:
    """
    Accept a non-negative int, or a string in hex ("0x028") or decimal ("40").
    Raises ValueError otherwise.
    """
    if isinstance(value, bool):
        raise ValueError(f"invalid message id: {value!r}")
    if isinstance(value, int):
        type_id = value
    elif isinstance(value, str):
        type_id = parse_number(value)
    else:
        raise ValueError(f"invalid message id: {value!r}")
    if type_id < 0:
        raise ValueError(f"message id must be non-negative: {type_id}")
    return type_id


def coerce_payload(value: Any) -> bytes:
    """
    Accept bytes-like objects, hex strings (spaces allowed) or lists of ints.
    Returns an immutable copy; raises ValueError on anything else.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        return bytes.fromhex(value)
    if isinstance(value, (list, tuple)):
        if any(isinstance(b, bool) or not isinstance(b, int) for b in value):
            raise ValueError("payload list must contain only integers")
        return bytes(value)  # ValueError if any value is outside 0..255
    raise ValueError(f"unsupported payload type: {type(value).__name__}")


def message_from_mapping(obj: Any) -> Message:
    """
    Build a Message from {"id": ..., "data": ..., "data_modified": ...}.

    "data_modified" wins over "data" when present and not null, matching
    the host's view of the payload after other handlers changed it.
    """
    if not isinstance(obj, dict):
        raise ValueError("message must be a JSON object")
    if "id" not in obj:
        raise ValueError("message is missing 'id'")

    raw = obj.get("data_modified")
    if raw is None:
        raw = obj.get("data", b"")
    return Message(type_id=coerce_type_id(obj["id"]), payload=coerce_payload(raw))
