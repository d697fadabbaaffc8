"""Text encoding for the cafe article API.

The API predates UTF-8 and reads form fields as CP949 (the Windows Korean
code page). Two wire forms are needed:

``encode_legacy``
    Used for ``application/x-www-form-urlencoded`` bodies. Non-ASCII text
    is first URL-escaped as UTF-8, the escaped string is read back through
    the CP949 table and re-encoded, and every resulting byte is written as
    ``%XX``. The API only accepts fields produced exactly this way, so the
    steps must stay in this order even though they look redundant. ASCII
    passes the first step untouched, except ``%`` which the API would
    otherwise read as the start of an escape.

``encode_legacy_bytes``
    Used for ``multipart/form-data`` parts: the raw CP949 bytes, sent with
    a ``charset=cp949`` part header.
"""

from urllib.parse import quote

from errors import EncodingError

LEGACY_CHARSET = "cp949"

# Every ASCII character except "%" survives the UTF-8 escape step as is.
ASCII_SAFE = "".join(chr(i) for i in range(128) if chr(i) != "%")


def percent_escape_bytes(data: bytes) -> str:
    """Return ``data`` as a run of ``%XX`` triplets with uppercase hex."""
    return "".join(f"%{b:02X}" for b in data)


def encode_legacy_bytes(text: str) -> bytes:
    """Encode ``text`` to CP949, raising ``EncodingError`` for unmapped text."""
    try:
        return text.encode(LEGACY_CHARSET)
    except UnicodeEncodeError as exc:
        raise EncodingError(_describe(exc)) from exc


def encode_legacy(text: str) -> str:
    """Return the form-field representation of ``text`` for the cafe API."""
    try:
        escaped = quote(text, safe=ASCII_SAFE, encoding="utf-8")
    except UnicodeEncodeError as exc:
        raise EncodingError(_describe(exc)) from exc

    # Reinterpret, not transcode: each escaped character becomes one byte.
    reinterpreted = escaped.encode("latin-1").decode(LEGACY_CHARSET)
    return percent_escape_bytes(encode_legacy_bytes(reinterpreted))


def _describe(exc: UnicodeEncodeError) -> str:
    bad = exc.object[exc.start:exc.end]
    return (
        f"Cannot encode {bad!r} at position {exc.start} "
        f"as {LEGACY_CHARSET}"
    )
