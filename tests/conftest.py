"""Shared fixtures: fake sites served through httpx.MockTransport."""

from __future__ import annotations

import struct
from typing import Callable, Dict, Optional, Union

import httpx
import pytest


Route = Union[httpx.Response, Exception]


def png_bytes(width: int, height: int, size: int = 0) -> bytes:
    """Minimal PNG header (signature + IHDR), padded to ``size`` bytes."""
    header = (
        b"\x89PNG\r\n\x1a\n"
        + struct.pack(">I", 13)
        + b"IHDR"
        + struct.pack(">II", width, height)
        + b"\x08\x06\x00\x00\x00"
    )
    return header + b"\x00" * max(0, size - len(header))


def jpeg_bytes(width: int, height: int, sof: int = 0xC0) -> bytes:
    """SOI, an APP0 segment, then a SOF frame header."""
    app0 = b"\xff\xe0" + struct.pack(">H", 16) + b"JFIF\x00" + b"\x01\x01\x00\x00\x01\x00\x01\x00\x00"
    frame = b"\xff" + bytes([sof]) + struct.pack(">HBHH", 17, 8, height, width) + b"\x03"
    return b"\xff\xd8" + app0 + frame + b"\x00" * 16


def og_html(**tags: str) -> str:
    """HTML page with one meta tag per keyword (``og_title`` -> ``og:title``)."""
    metas = []
    for key, value in tags.items():
        name = key.replace("_", ":", 1)
        attr = "name" if name.startswith("twitter:") else "property"
        metas.append(f'<meta {attr}="{name}" content="{value}">')
    return "<html><head>" + "".join(metas) + "</head><body></body></html>"


class FakeSite:
    """URL -> response table used as an httpx transport handler."""

    def __init__(self, routes: Optional[Dict[str, Route]] = None) -> None:
        self.routes: Dict[str, Route] = {}
        for url, route in (routes or {}).items():
            self.add(url, route)
        self.requests: list[httpx.Request] = []

    def add(self, url: str, route: Route) -> None:
        self.routes[str(httpx.URL(url))] = route

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(str(request.url))
        if route is None:
            return httpx.Response(404, text="not found")
        if isinstance(route, Exception):
            raise route
        # fresh copy so a route can be served more than once
        return httpx.Response(route.status_code, headers=route.headers, content=route.content)

    @property
    def requested(self) -> list[str]:
        return [str(r.url) for r in self.requests]

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self), follow_redirects=True)


@pytest.fixture
def site() -> FakeSite:
    return FakeSite()


@pytest.fixture
def client(site: FakeSite):
    with site.client() as c:
        yield c


@pytest.fixture
def optimal_page(site: FakeSite) -> Callable[[str], str]:
    """Register a page scoring 100 at the given URL."""

    def register(url: str) -> str:
        image_url = url.rstrip("/") + "/og-image.png"
        site.add(url, httpx.Response(200, html=og_html(
            og_title="T" * 55,
            og_description="D" * 130,
            og_image=image_url,
            og_url=url,
            twitter_card="summary_large_image",
        )))
        site.add(image_url, httpx.Response(
            200,
            content=png_bytes(1200, 630, size=200 * 1024),
            headers={"content-type": "image/png"},
        ))
        return url

    return register
