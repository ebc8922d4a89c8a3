"""Shared fixtures: a local aiohttp app used as the mock endpoint."""

import asyncio
import io

import pytest
from aiohttp import web
from httpwrap import set_bearer_token
from httpwrap.security import default_trust_store
from PIL import Image


def make_png(width: int = 3, height: int = 2) -> bytes:
    """Encode a small solid-colour PNG."""
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color=(200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


async def echo(request: web.Request) -> web.Response:
    body = await request.read()
    return web.json_response(
        {
            "method": request.method,
            "headers": dict(request.headers),
            "body": body.decode("utf-8"),
        }
    )


async def created(request: web.Request) -> web.Response:
    return web.Response(status=201, body=b'{"id":1}', content_type="application/json")


async def missing(request: web.Request) -> web.Response:
    return web.Response(status=404, text="not found")


async def status(request: web.Request) -> web.Response:
    code = int(request.match_info["code"])
    return web.Response(status=code, text=f"status {code}")


async def slow(request: web.Request) -> web.Response:
    await asyncio.sleep(1.0)
    return web.Response(text="late")


async def image(request: web.Request) -> web.Response:
    return web.Response(body=make_png(4, 5), content_type="image/png")


@pytest.fixture
def app():
    """aiohttp application exposing the test endpoints."""
    application = web.Application()
    application.router.add_route("*", "/echo", echo)
    application.router.add_post("/created", created)
    application.router.add_route("*", "/missing", missing)
    application.router.add_get("/status/{code}", status)
    application.router.add_get("/slow", slow)
    application.router.add_get("/image.png", image)
    return application


@pytest.fixture
def png_bytes():
    """3x2 PNG image."""
    return make_png(3, 2)


@pytest.fixture(autouse=True)
def clean_global_state():
    """Reset the context bearer token and the process-wide trust store."""
    set_bearer_token("")
    default_trust_store.reset()
    yield
    set_bearer_token("")
    default_trust_store.reset()
