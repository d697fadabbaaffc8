import logging
from typing import List, Optional, Union

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ValidationError as PydanticValidationError

from config import LOG_LEVEL, PORT
from errors import CafeProxyError, MissingAuthorizationError, ValidationError
from services.post_to_cafe import post_to_cafe

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="cafePoster")


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log incoming API requests with method and path."""
    logger.info("%s %s", request.method, request.url.path)
    response = await call_next(request)
    logger.info("%s %s -> %s", request.method, request.url.path, response.status_code)
    return response


class CafePostRequest(BaseModel):
    subject: Optional[str] = None
    content: Optional[str] = None
    clubid: Optional[Union[str, int]] = None
    menuid: Optional[Union[str, int]] = None
    image: Optional[Union[str, List[str]]] = None

    def image_urls(self) -> List[str]:
        if not self.image:
            return []
        urls = [self.image] if isinstance(self.image, str) else self.image
        return [u for u in urls if u]

    def missing_fields(self) -> List[str]:
        return [
            name
            for name in ("subject", "content", "clubid", "menuid")
            if getattr(self, name) in (None, "")
        ]


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


async def parse_post_request(request: Request) -> CafePostRequest:
    """Read and validate the JSON body, raising ``ValidationError``."""
    try:
        data = await request.json()
        post = CafePostRequest.model_validate(data)
    except (ValueError, PydanticValidationError) as exc:
        raise ValidationError("Missing required fields") from exc
    missing = post.missing_fields()
    if missing:
        logger.info("Rejecting post, missing fields: %s", ", ".join(missing))
        raise ValidationError("Missing required fields")
    return post


@app.get("/")
async def root():
    return {"status": "ok"}


@app.post("/cafe/post")
async def cafe_post(request: Request):
    authorization = request.headers.get("Authorization")
    try:
        if not authorization:
            raise MissingAuthorizationError("Missing Authorization header")
        post = await parse_post_request(request)
        upstream = await run_in_threadpool(
            post_to_cafe,
            authorization,
            str(post.clubid),
            str(post.menuid),
            post.subject,
            post.content,
            post.image_urls(),
        )
    except CafeProxyError as exc:
        if exc.status_code >= 500:
            logger.error("Cafe post failed: %s", exc)
        return error_response(str(exc), exc.status_code)
    except Exception as exc:
        logger.exception("Unexpected error while posting to cafe")
        return error_response(str(exc) or exc.__class__.__name__, 500)

    return Response(
        content=upstream.body,
        status_code=upstream.status_code,
        headers={"content-type": upstream.content_type or "text/plain"},
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=PORT)
