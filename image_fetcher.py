import logging
import posixpath
from dataclasses import dataclass
from urllib.parse import unquote, urlsplit

import requests

from config import DEFAULT_TIMEOUT
from errors import DownloadError, InvalidUrlError

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = ("http", "https")
DEFAULT_CONTENT_TYPE = "application/octet-stream"
DEFAULT_EXTENSION = "jpg"
DEFAULT_STEM = "image"


@dataclass(frozen=True)
class FetchedImage:
    content: bytes
    content_type: str
    filename: str


def _image_subtype(content_type: str, content: bytes) -> str | None:
    """Return ``png``, ``webp`` or ``jpg`` when the image type is known."""
    if content_type.startswith("image/"):
        subtype = content_type[len("image/"):]
        if subtype == "png":
            return "png"
        if subtype == "webp":
            return "webp"
        return DEFAULT_EXTENSION
    if content.startswith(b"\x89PNG\r\n\x1a\n"):
        return "png"
    if content[:4] == b"RIFF" and content[8:12] == b"WEBP":
        return "webp"
    if content.startswith(b"\xff\xd8\xff"):
        return "jpg"
    return None


def derive_filename(url: str, content_type: str = "", content: bytes = b"") -> str:
    """Build an upload filename from the URL's last path segment.

    The extension follows the detected image type. When nothing can be
    detected the URL's own extension is kept, falling back to ``jpg``.
    """
    try:
        segment = unquote(posixpath.basename(urlsplit(url).path))
    except ValueError:
        segment = ""
    stem, dot, ext = segment.rpartition(".")
    if not dot:
        stem, ext = segment, ""
    stem = stem or DEFAULT_STEM

    subtype = _image_subtype(content_type, content)
    if subtype:
        ext = subtype
    return f"{stem}.{ext or DEFAULT_EXTENSION}"


def validate_image_url(url: str) -> None:
    """Raise ``InvalidUrlError`` unless ``url`` is an http(s) URL with a host."""
    try:
        parts = urlsplit(url)
    except ValueError as exc:
        raise InvalidUrlError(f"Invalid image URL: {url}") from exc
    if parts.scheme.lower() not in ALLOWED_SCHEMES:
        raise InvalidUrlError(f"Unsupported image URL scheme: {parts.scheme or '(none)'}")
    if not parts.netloc:
        raise InvalidUrlError(f"Image URL has no host: {url}")


def fetch_image(
    url: str,
    session: requests.Session | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> FetchedImage:
    """Download ``url`` fully into memory and describe it for upload."""
    validate_image_url(url)
    get = session.get if session is not None else requests.get
    try:
        resp = get(url, timeout=timeout)
    except requests.RequestException as exc:
        raise DownloadError(f"Image download failed: {exc}") from exc

    if not 200 <= resp.status_code < 300:
        raise DownloadError(
            f"Image download failed with status {resp.status_code}: {url}"
        )

    content = resp.content
    header = resp.headers.get("Content-Type") or ""
    content_type = header.split(";", 1)[0].strip().lower() or DEFAULT_CONTENT_TYPE
    filename = derive_filename(url, content_type, content)
    logger.debug(
        "Fetched image %s (%d bytes, %s) as %s",
        url,
        len(content),
        content_type,
        filename,
    )
    return FetchedImage(content=content, content_type=content_type, filename=filename)
