import logging
from dataclasses import dataclass
from typing import Callable

import requests

from config import cafe_settings
from errors import UpstreamError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpstreamResponse:
    status_code: int
    body: bytes
    content_type: str | None = None

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class CafeClient:
    """Simple client for the cafe article API.

    The client holds no connection state. Each post gets a fresh session
    from ``session_factory`` so cookies never carry over between callers.
    """

    API_BASE = "https://{host}/v1/cafe/{club_id}/menu/{menu_id}/articles"

    def __init__(
        self,
        config: dict,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ):
        self.config = config or {}
        self.session_factory = session_factory
        settings = cafe_settings(self.config)
        self.api_host = settings["api_host"]
        self.timeout = settings["timeout"]

    def new_session(self) -> requests.Session:
        return self.session_factory()

    def article_url(self, club_id: str, menu_id: str) -> str:
        return self.API_BASE.format(host=self.api_host, club_id=club_id, menu_id=menu_id)

    def post_article(
        self,
        club_id: str,
        menu_id: str,
        authorization: str,
        content_type: str,
        body: bytes,
        session: requests.Session | None = None,
    ) -> UpstreamResponse:
        """Send one article and return the API's status and raw body.

        Error statuses from the API are returned, not raised; only a failure
        to talk to the API at all becomes ``UpstreamError``. Without a
        ``session`` a new one is opened and closed around the call.
        """
        url = self.article_url(club_id, menu_id)
        headers = {"Authorization": authorization, "Content-Type": content_type}
        http = session if session is not None else self.new_session()
        try:
            logger.info("POST %s (%s, %d bytes)", url, content_type, len(body))
            resp = http.post(url, headers=headers, data=body, timeout=self.timeout)
        except requests.RequestException as exc:
            raise UpstreamError(str(exc)) from exc
        finally:
            if session is None:
                http.close()

        logger.info("Upstream status: %s, body: %d bytes", resp.status_code, len(resp.content))
        return UpstreamResponse(
            status_code=resp.status_code,
            body=resp.content,
            content_type=resp.headers.get("Content-Type"),
        )
