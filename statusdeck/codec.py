"""Protocol envelope decoding and reply encoding."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Union

PROTOCOL_VERSION = 1

_FIELD_MAX = 31


class Kind(str, Enum):
    """Message kinds on the wire."""

    # host -> device
    HELLO = "hello"
    STATUS = "status"
    NOTIFY = "notify"
    PING = "ping"
    SCREENSHOT = "screenshot"
    TAP = "tap"
    # device -> host
    HELLO_ACK = "hello.ack"
    NOTIFY_ACK = "notify.ack"
    DEVICE_EVENT = "device.event"
    PONG = "pong"
    SCREENSHOT_ACK = "screenshot.ack"
    TAP_ACK = "tap.ack"


class DecodeResult(Enum):
    OK = 0
    BAD_JSON = 1
    BAD_SHAPE = 2
    BAD_VERSION = 3


class DecodeError(ValueError):
    """An envelope could not be decoded; `result` says why."""

    def __init__(self, result: DecodeResult, message: str) -> None:
        super().__init__(message)
        self.result = result


class EncodeError(ValueError):
    """An encoded message does not fit the allowed size."""


@dataclass
class DecodedEnvelope:
    kind: str
    id: str
    t: int
    doc: Dict[str, Any] = field(default_factory=dict)

    @property
    def payload(self) -> Dict[str, Any]:
        return self.doc["p"]


def _is_uint(value: Any, bits: int) -> bool:
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and 0 <= value < (1 << bits)
    )


def decode(line: Union[str, bytes, bytearray]) -> DecodedEnvelope:
    """Parse and validate one envelope line; raise DecodeError if invalid."""
    try:
        doc = json.loads(line)
    except (ValueError, UnicodeDecodeError) as exc:
        raise DecodeError(DecodeResult.BAD_JSON, f"invalid JSON: {exc}") from exc
    if not isinstance(doc, dict):
        raise DecodeError(DecodeResult.BAD_SHAPE, "envelope is not an object")
    if not _is_uint(doc.get("v"), 8):
        raise DecodeError(DecodeResult.BAD_SHAPE, "missing or invalid version")
    if doc["v"] != PROTOCOL_VERSION:
        raise DecodeError(DecodeResult.BAD_VERSION, f"unsupported version {doc['v']}")
    if not isinstance(doc.get("k"), str):
        raise DecodeError(DecodeResult.BAD_SHAPE, "missing kind")
    if not _is_uint(doc.get("t"), 64):
        raise DecodeError(DecodeResult.BAD_SHAPE, "missing or invalid timestamp")
    if not isinstance(doc.get("p"), dict):
        raise DecodeError(DecodeResult.BAD_SHAPE, "missing payload")
    msg_id = doc.get("id")
    return DecodedEnvelope(
        kind=doc["k"][:_FIELD_MAX],
        id=msg_id[:_FIELD_MAX] if isinstance(msg_id, str) else "",
        t=doc["t"],
        doc=doc,
    )


def _serialize(doc: Dict[str, Any], max_len: Optional[int]) -> str:
    text = json.dumps(doc, separators=(",", ":"), ensure_ascii=False)
    if max_len is not None and len(text.encode("utf-8")) + 1 > max_len:
        raise EncodeError(f"message of {len(text)} bytes exceeds limit {max_len}")
    return text


def _envelope(msg_id: Optional[str], kind: Kind, t: int) -> Dict[str, Any]:
    doc: Dict[str, Any] = {"v": PROTOCOL_VERSION}
    if msg_id:
        doc["id"] = msg_id
    doc["k"] = kind.value
    doc["t"] = t
    return doc


def encode_pong(msg_id: Optional[str], t: int, max_len: Optional[int] = None) -> str:
    """Encode a pong reply; raise EncodeError if it would not fit `max_len`."""
    doc = _envelope(msg_id, Kind.PONG, t)
    doc["p"] = {}
    return _serialize(doc, max_len)


def encode_hello_ack(
    msg_id: Optional[str],
    t: int,
    board: Optional[str],
    fw: Optional[str],
    caps: Iterable[str],
    device_id: Optional[str],
    max_len: Optional[int] = None,
) -> str:
    """Encode a hello.ack carrying board, firmware, capabilities and device id."""
    doc = _envelope(msg_id, Kind.HELLO_ACK, t)
    doc["p"] = {"board": board, "fw": fw, "caps": list(caps), "device_id": device_id}
    return _serialize(doc, max_len)


def _ack(kind: Kind, msg_id: Optional[str], t: int, ok: bool, err: Optional[str]) -> str:
    def quote(s: str) -> str:
        return json.dumps(s, ensure_ascii=False)

    parts = ['{"v":1']
    if msg_id:
        parts.append(f',"id":{quote(msg_id)}')
    parts.append(f',"k":"{kind.value}","t":{t},"p":{{"ok":{"true" if ok else "false"}')
    if not ok and err:
        parts.append(f',"err":{quote(err)}')
    parts.append("}}")
    return "".join(parts)


def encode_screenshot_ack(
    msg_id: Optional[str], t: int, ok: bool, err: Optional[str] = None
) -> str:
    """Encode a short screenshot.ack: bare {ok} or {ok:false, err}."""
    return _ack(Kind.SCREENSHOT_ACK, msg_id, t, ok, err)


def encode_tap_ack(msg_id: Optional[str], t: int, ok: bool, err: Optional[str] = None) -> str:
    """Encode a tap.ack: bare {ok} or {ok:false, err}."""
    return _ack(Kind.TAP_ACK, msg_id, t, ok, err)


def encode_focus_event_session(t: int, session_id: Optional[str]) -> str:
    """Encode a device.event asking the host to focus a session."""
    sid = json.dumps(session_id or "", ensure_ascii=False)
    return (
        f'{{"v":1,"k":"{Kind.DEVICE_EVENT.value}","t":{t},'
        f'"p":{{"kind":"focus","target":"session","sessionId":{sid}}}}}'
    )