"""Shared fixtures: an aiohttp application playing the server under test."""

import asyncio

import pytest
from aiohttp import web

CATALOG_XML = (
    '<?xml version="1.0" encoding="UTF-8"?>'
    "<catalog>"
    '<book id="1"><title>Dune</title><author>Herbert</author></book>'
    '<book id="2"><title>Emma</title><author>Austen</author></book>'
    "</catalog>"
)

REDIRECT_TARGET = "http://other.example/landing?ref=home&q=a%20b"


async def ok(request: web.Request) -> web.Response:
    return web.Response(text="hello")


async def items(request: web.Request) -> web.Response:
    return web.json_response({"items": [{"id": 1, "name": "first"}, {"id": 2}], "total": 2})


async def catalog(request: web.Request) -> web.Response:
    return web.Response(text=CATALOG_XML, content_type="application/xml")


async def redirect(request: web.Request) -> web.Response:
    raise web.HTTPFound(REDIRECT_TARGET)


async def duplicate_headers(request: web.Request) -> web.Response:
    response = web.Response(text="dup")
    response.headers.add("X-Dup", "first")
    response.headers.add("X-Dup", "second")
    return response


async def echo_headers(request: web.Request) -> web.Response:
    return web.json_response(dict(request.headers))


async def echo_body(request: web.Request) -> web.Response:
    return web.Response(text=(await request.read()).decode("utf-8"))


async def slow(request: web.Request) -> web.Response:
    await asyncio.sleep(0.5)
    return web.Response(text="late")


def create_app() -> web.Application:
    app = web.Application()
    app.router.add_get("/ok", ok)
    app.router.add_get("/json", items)
    app.router.add_get("/xml", catalog)
    app.router.add_get("/redirect", redirect)
    app.router.add_get("/dup", duplicate_headers)
    app.router.add_get("/headers", echo_headers)
    app.router.add_post("/echo", echo_body)
    app.router.add_get("/slow", slow)
    return app


@pytest.fixture
def app() -> web.Application:
    return create_app()
