import json
import logging
import os
from pathlib import Path
from typing import Dict

logger = logging.getLogger(__name__)

CONFIG_PATH = Path(__file__).resolve().parent / "config.json"

DEFAULT_API_HOST = "openapi.naver.com"
DEFAULT_TIMEOUT = 30.0
DEFAULT_PORT = 3000


def load_config(path: Path = CONFIG_PATH) -> Dict:
    """Load ``config.json`` if it exists, otherwise return an empty dict."""
    if not path.exists():
        return {}
    with path.open() as fh:
        return json.load(fh)


def cafe_settings(config: Dict) -> Dict:
    """Return the ``cafe`` section with defaults filled in."""
    cafe_cfg = config.get("cafe", {})
    host = cafe_cfg.get("api_host") or DEFAULT_API_HOST
    timeout = cafe_cfg.get("timeout") or DEFAULT_TIMEOUT
    return {
        "api_host": host.rstrip("/"),
        "timeout": float(timeout),
    }


CONFIG = load_config()
PORT = int(os.environ.get("PORT", DEFAULT_PORT))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
