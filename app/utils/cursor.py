import base64
import binascii
from typing import Optional


def encode_cursor(entry_id: int) -> str:
    return base64.b64encode(str(entry_id).encode("ascii")).decode("ascii")


def decode_cursor(cursor: Optional[str]) -> Optional[int]:
    """
    Decode an opaque log cursor back into the last-seen id.

    Anything that does not decode to a non-negative integer is treated as
    "no cursor" so a malformed value restarts from the beginning.
    """
    if not cursor:
        return None
    try:
        raw = base64.b64decode(cursor, validate=True).decode("ascii")
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return None
    if not raw.isdigit():
        return None
    return int(raw)
