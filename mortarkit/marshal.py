"""Convert message bodies of different kinds into JSON bytes."""

import json
from typing import Any

from google.protobuf import json_format
from google.protobuf.message import Message


def marshal_message_body(body: Any) -> bytes:
    """Return ``body`` as JSON bytes.

    Protobuf messages use the protobuf JSON mapping, raw bytes pass through
    unchanged and anything else goes through :func:`json.dumps`.
    """
    if isinstance(body, Message):
        return json.dumps(json_format.MessageToDict(body), separators=(",", ":")).encode("utf-8")
    if isinstance(body, (bytes, bytearray, memoryview)):
        return bytes(body)
    return json.dumps(body, separators=(",", ":")).encode("utf-8")