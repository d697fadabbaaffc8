import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from errors import DownloadError, EncodingError, TooManyImagesError
from image_fetcher import FetchedImage
from legacy_encoding import encode_legacy
from services.cafe_payload import (
    FORM_CONTENT_TYPE,
    build_payload,
)


def fake_fetch_factory(calls):
    def fake_fetch(url):
        calls.append(url)
        name = url.rsplit("/", 1)[-1]
        return FetchedImage(
            content=f"bytes-of-{name}".encode(),
            content_type="image/png",
            filename=f"{name}.png",
        )

    return fake_fetch


def no_fetch(url):
    raise AssertionError(f"Unexpected fetch of {url}")


@pytest.mark.parametrize("images", [None, []])
def test_form_payload_without_images(images):
    payload = build_payload("제목", "본문", images, fetch=no_fetch)
    assert payload.content_type == FORM_CONTENT_TYPE
    expected = f"subject={encode_legacy('제목')}&content={encode_legacy('본문')}"
    assert payload.body == expected.encode("ascii")
    assert payload.body.count(b"&") == 1


def test_multipart_payload_orders_images():
    calls = []
    urls = [f"http://img.example.com/{n}" for n in ("c", "a", "b")]
    payload = build_payload("제목", "본문", urls, fetch=fake_fetch_factory(calls))

    assert calls == urls
    assert payload.content_type.startswith("multipart/form-data; boundary=")
    body = payload.body
    assert body.count(b'name="image"') == 3
    positions = [body.index(f'filename="{n}.png"'.encode()) for n in ("c", "a", "b")]
    assert positions == sorted(positions)
    assert body.index(b'name="subject"') < body.index(b'name="content"') < positions[0]
    assert b"bytes-of-a" in body


def test_multipart_text_parts_are_raw_cp949():
    payload = build_payload(
        "한글", "내용", ["http://img.example.com/x"], fetch=fake_fetch_factory([])
    )
    body = payload.body
    assert body.count(b"Content-Type: text/plain; charset=cp949") == 2
    assert "한글".encode("cp949") in body
    assert "내용".encode("cp949") in body
    assert "한글".encode("utf-8") not in body
    assert b"Content-Type: image/png" in body


def test_boundary_in_content_type_matches_body():
    payload = build_payload("s", "c", ["http://h/i"], fetch=fake_fetch_factory([]))
    boundary = payload.content_type.split("boundary=", 1)[1]
    assert payload.body.startswith(f"--{boundary}\r\n".encode())
    assert payload.body.endswith(f"--{boundary}--\r\n".encode())


def test_ten_images_allowed():
    calls = []
    urls = [f"http://h/{i}" for i in range(10)]
    payload = build_payload("s", "c", urls, fetch=fake_fetch_factory(calls))
    assert len(calls) == 10
    assert payload.body.count(b'name="image"') == 10


def test_too_many_images_before_any_fetch():
    urls = [f"http://h/{i}" for i in range(11)]
    with pytest.raises(TooManyImagesError) as exc:
        build_payload("s", "c", urls, fetch=no_fetch)
    assert str(exc.value) == "Too many images (max 10)"


def test_fetch_failure_aborts_build():
    def failing_fetch(url):
        if url.endswith("2"):
            raise DownloadError("Image download failed with status 404: " + url)
        return FetchedImage(b"x", "image/jpeg", "x.jpg")

    with pytest.raises(DownloadError):
        build_payload("s", "c", ["http://h/1", "http://h/2"], fetch=failing_fetch)


def test_unmappable_text_fails_before_fetch():
    with pytest.raises(EncodingError):
        build_payload("s \U0001F600", "c", ["http://h/1"], fetch=no_fetch)
