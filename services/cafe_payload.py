import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from urllib3 import encode_multipart_formdata
from urllib3.fields import RequestField

from errors import TooManyImagesError
from image_fetcher import FetchedImage, fetch_image
from legacy_encoding import LEGACY_CHARSET, encode_legacy, encode_legacy_bytes

logger = logging.getLogger(__name__)

MAX_IMAGES = 10
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
TEXT_PART_CONTENT_TYPE = f"text/plain; charset={LEGACY_CHARSET}"


@dataclass(frozen=True)
class Payload:
    content_type: str
    body: bytes


def build_form_payload(subject: str, content: str) -> Payload:
    """Return a url-encoded body with both fields in the legacy encoding."""
    body = f"subject={encode_legacy(subject)}&content={encode_legacy(content)}"
    return Payload(content_type=FORM_CONTENT_TYPE, body=body.encode("ascii"))


def _text_field(name: str, data: bytes) -> RequestField:
    field = RequestField(name=name, data=data)
    field.make_multipart(content_type=TEXT_PART_CONTENT_TYPE)
    return field


def _image_field(image: FetchedImage) -> RequestField:
    field = RequestField(name="image", data=image.content, filename=image.filename)
    field.make_multipart(content_type=image.content_type)
    return field


def build_multipart_payload(
    subject: bytes, content: bytes, images: List[FetchedImage]
) -> Payload:
    """Return a multipart body: subject, content, then one part per image.

    ``subject`` and ``content`` are already CP949 encoded.
    """
    fields = [_text_field("subject", subject), _text_field("content", content)]
    fields.extend(_image_field(img) for img in images)
    body, content_type = encode_multipart_formdata(fields)
    return Payload(content_type=content_type, body=body)


def build_payload(
    subject: str,
    content: str,
    images: Optional[List[str]] = None,
    fetch: Callable[[str], FetchedImage] = fetch_image,
) -> Payload:
    """Choose the transport and build the request body for the cafe API.

    Without images the fields go out url-encoded. With images every URL is
    downloaded in order and sent as multipart; a failed download aborts the
    whole build.
    """
    images = images or []
    if len(images) > MAX_IMAGES:
        raise TooManyImagesError(f"Too many images (max {MAX_IMAGES})")

    if not images:
        logger.info("Building form payload")
        return build_form_payload(subject, content)

    # Encode text first so an unmappable character fails before any download.
    subject_bytes = encode_legacy_bytes(subject)
    content_bytes = encode_legacy_bytes(content)

    logger.info("Building multipart payload with %d image(s)", len(images))
    fetched = [fetch(url) for url in images]
    return build_multipart_payload(subject_bytes, content_bytes, fetched)
