from __future__ import annotations
import io
import chardet  # type: ignore
from pathlib import Path
from typing import Iterator, Optional, Tuple

BINARY_BYTES = bytes(range(0, 32)) + b"\x7f"
UTF8_BOM = "\ufeff"

def is_likely_binary(
    data: bytes, control_threshold: float = 0.30, high_bit_threshold: float = 0.60
) -> bool:
    if not data:
        return False
    total = len(data)
    if 0 in data:
        return True
    control = sum(1 for b in data if b in BINARY_BYTES and b not in (9, 10, 13))
    if (control / total) > control_threshold:
        return True
    high = sum(1 for b in data if b >= 0x80)
    if (high / total) > high_bit_threshold:
        return True
    return False

def read_text_safely(path: Path, max_bytes: int = 1_000_000) -> Optional[str]:
    """Decode a file as text, or return ``None`` for binary/undecodable data."""
    try:
        with path.open("rb") as f:
            head = f.read(min(4096, max_bytes))
            if is_likely_binary(head):
                return None
            rest = f.read(max_bytes - len(head))
            data = head + rest
    except OSError:
        return None
    if is_likely_binary(data):
        return None
    enc = chardet.detect(data).get("encoding")
    candidates = []
    if enc:
        candidates.append(enc)
    candidates.append("utf-8")
    for candidate in candidates:
        try:
            return data.decode(candidate, errors="strict")
        except (LookupError, UnicodeDecodeError):
            continue
    return None

def iter_lines(text: str) -> Iterator[Tuple[int, str]]:
    """Yield ``(line_num, line)`` with line endings and a leading BOM removed."""
    if text.startswith(UTF8_BOM):
        text = text[len(UTF8_BOM):]
    buf = io.StringIO(text, newline="")
    for i, line in enumerate(buf, start=1):
        yield i, line.rstrip("\r\n")
