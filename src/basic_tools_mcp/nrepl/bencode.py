"""
Bencode codec for the nREPL wire protocol.

Supports byte strings, integers, lists and dicts. Strings are encoded as UTF-8
and decoded back to ``str``. BencodeDecoder accepts data in arbitrary chunks,
as it arrives from a socket.
"""

from typing import Any, List, Optional, Tuple


class BencodeError(ValueError):
    """Raised for malformed bencode data."""


def encode(value: Any) -> bytes:
    """Encode a Python value (str, bytes, int, list, tuple, dict) as bencode."""
    out: List[bytes] = []
    stack: List[Any] = [value]
    while stack:
        item = stack.pop()
        if isinstance(item, bytes):
            out.append(b"%d:%s" % (len(item), item))
        elif isinstance(item, str):
            data = item.encode("utf-8")
            out.append(b"%d:%s" % (len(data), data))
        elif isinstance(item, bool):
            raise BencodeError("Cannot bencode a bool")
        elif isinstance(item, int):
            out.append(b"i%de" % item)
        elif isinstance(item, (list, tuple)):
            out.append(b"l")
            stack.append(_END)
            stack.extend(reversed(item))
        elif isinstance(item, dict):
            out.append(b"d")
            stack.append(_END)
            pairs = sorted(
                ((k.encode("utf-8") if isinstance(k, str) else k), v) for k, v in item.items()
            )
            for key, val in reversed(pairs):
                stack.append(val)
                stack.append(key)
        elif item is _END:
            out.append(b"e")
        else:
            raise BencodeError(f"Cannot bencode {type(item).__name__}")
    return b"".join(out)


class _EndMarker:
    pass


_END = _EndMarker()


def _decode_at(data: bytes, pos: int) -> Tuple[Any, int]:
    """
    Decode one value starting at pos.

    Returns:
        (value, next_pos)

    Raises:
        IndexError: If data ends before the value is complete
        BencodeError: If data is malformed
    """
    # Containers under construction: [list] or [dict, pending_key]
    containers: List[list] = []
    while True:
        if pos >= len(data):
            raise IndexError("incomplete bencode value")
        marker = data[pos:pos + 1]
        value: Any
        if marker == b"i":
            end = data.find(b"e", pos)
            if end == -1:
                raise IndexError("incomplete bencode integer")
            try:
                value = int(data[pos + 1:end])
            except ValueError:
                raise BencodeError(f"Invalid integer at {pos}")
            pos = end + 1
        elif marker.isdigit():
            colon = data.find(b":", pos)
            if colon == -1:
                raise IndexError("incomplete bencode string length")
            try:
                length = int(data[pos:colon])
            except ValueError:
                raise BencodeError(f"Invalid string length at {pos}")
            start = colon + 1
            if start + length > len(data):
                raise IndexError("incomplete bencode string")
            raw = data[start:start + length]
            try:
                value = raw.decode("utf-8")
            except UnicodeDecodeError:
                value = raw
            pos = start + length
        elif marker == b"l":
            containers.append([[]])
            pos += 1
            continue
        elif marker == b"d":
            containers.append([{}, None])
            pos += 1
            continue
        elif marker == b"e":
            if not containers:
                raise BencodeError(f"Unexpected end marker at {pos}")
            frame = containers.pop()
            if len(frame) == 2 and frame[1] is not None:
                raise BencodeError(f"Dict key without value at {pos}")
            value = frame[0]
            pos += 1
        else:
            raise BencodeError(f"Invalid bencode marker {marker!r} at {pos}")

        if not containers:
            return value, pos
        frame = containers[-1]
        if len(frame) == 1:
            frame[0].append(value)
        elif frame[1] is None:
            if isinstance(value, bytes):
                value = value.decode("utf-8", "replace")
            if not isinstance(value, str):
                raise BencodeError(f"Dict key must be a string, got {type(value).__name__}")
            frame[1] = value
        else:
            frame[0][frame[1]] = value
            frame[1] = None


def decode(data: bytes) -> Any:
    """Decode exactly one bencoded value."""
    try:
        value, pos = _decode_at(data, 0)
    except IndexError:
        raise BencodeError("Truncated bencode data")
    if pos != len(data):
        raise BencodeError(f"Trailing data after position {pos}")
    return value


class BencodeDecoder:
    """Incremental decoder: feed() chunks, get complete messages back."""

    def __init__(self):
        self._buffer = b""

    def feed(self, chunk: bytes) -> List[Any]:
        self._buffer += chunk
        messages = []
        while self._buffer:
            try:
                value, pos = _decode_at(self._buffer, 0)
            except IndexError:
                break
            messages.append(value)
            self._buffer = self._buffer[pos:]
        return messages

    @property
    def pending(self) -> Optional[bytes]:
        return self._buffer or None
