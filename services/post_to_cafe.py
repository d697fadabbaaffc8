import logging
from functools import partial
from typing import List, Optional

from cafe_client import CafeClient, UpstreamResponse
from config import CONFIG
from image_fetcher import fetch_image
from services.cafe_payload import build_payload

logger = logging.getLogger(__name__)


def create_cafe_client(config: dict | None = None) -> CafeClient:
    """Initialize a CafeClient from the loaded configuration."""
    return CafeClient(CONFIG if config is None else config)


CAFE_CLIENT = create_cafe_client()


def post_to_cafe(
    authorization: str,
    club_id: str,
    menu_id: str,
    subject: str,
    content: str,
    images: Optional[List[str]] = None,
    client: CafeClient | None = None,
) -> UpstreamResponse:
    """Build the article body and forward it to the cafe API.

    Image downloads and the forward share one session that lives only for
    this call. Nothing is sent when the body cannot be built.
    """
    client = client or CAFE_CLIENT
    with client.new_session() as session:
        fetch = partial(fetch_image, session=session, timeout=client.timeout)
        payload = build_payload(subject, content, images, fetch=fetch)
        return client.post_article(
            club_id,
            menu_id,
            authorization,
            payload.content_type,
            payload.body,
            session=session,
        )
