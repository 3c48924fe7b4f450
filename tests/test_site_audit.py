"""Tests for the whole-site audit."""

import json
import threading

import httpx
import pytest

from og_audit.config import Settings
from og_audit.inventory import InventoryStore
from og_audit.models import AuditResult
from og_audit.site_audit import (
    audit_site,
    parse_paths,
    resolve_page_url,
    site_origin,
    summarize,
)

from conftest import og_html


ORIGIN = "https://x.com"


def urlset(*locs: str) -> str:
    return "<urlset>" + "".join(f"<url><loc>{loc}</loc></url>" for loc in locs) + "</urlset>"


@pytest.fixture
def store(tmp_path):
    return InventoryStore(tmp_path / "inventory.json")


@pytest.mark.parametrize("value,expected", [
    ("x.com", "https://x.com"),
    ("x.com/blog/post", "https://x.com"),
    ("http://x.com:8080/a?b=1", "http://x.com:8080"),
    ("  https://x.com/  ", "https://x.com"),
])
def test_site_origin(value, expected):
    assert site_origin(value) == expected


@pytest.mark.parametrize("path,expected", [
    ("/", "https://x.com/"),
    ("/about", "https://x.com/about"),
    ("about", "https://x.com/about"),
    ("https://other.com/p", "https://other.com/p"),
])
def test_resolve_page_url(path, expected):
    assert resolve_page_url(ORIGIN, path) == expected


@pytest.mark.parametrize("answer,expected", [
    (None, ["/"]),
    ("", ["/"]),
    ("  , ,", ["/"]),
    ("/, /about ,docs", ["/", "/about", "docs"]),
])
def test_parse_paths(answer, expected):
    assert parse_paths(answer) == expected


def test_audit_from_sitemap(site, client, store, optimal_page):
    site.add(f"{ORIGIN}/sitemap.xml", httpx.Response(200, text=urlset(
        f"{ORIGIN}/", f"{ORIGIN}/bare", f"{ORIGIN}/down",
    )))
    optimal_page(f"{ORIGIN}/")
    site.add(f"{ORIGIN}/bare", httpx.Response(200, html="<html></html>"))
    site.add(f"{ORIGIN}/down", httpx.Response(500))

    inventory = audit_site("x.com", client=client, store=store)

    assert inventory.base_url == ORIGIN
    assert [(p.path, p.score) for p in inventory.pages] == [("/", 100), ("/bare", 8), ("/down", 0)]
    assert inventory.pages[0].issues == ()
    assert inventory.pages[1].issues == ("og:title", "og:description", "og:image", "og:url", "twitter:card")
    assert inventory.pages[2].issues == ("URL Accessible",)
    assert inventory.total_pages == 3
    assert inventory.average_score == 36

    saved = json.loads(store.path.read_text(encoding="utf-8"))
    assert saved["totalPages"] == 3
    assert saved["averageScore"] == 36
    assert saved["pages"][0]["imageDimensions"] == "1200x630"


def test_prompt_used_without_sitemap(site, client, store, optimal_page):
    optimal_page(f"{ORIGIN}/about")
    site.add(f"{ORIGIN}/docs", httpx.Response(200, html=og_html(og_title="Docs")))
    asked = []

    def prompt(origin):
        asked.append(origin)
        return "/about, docs"

    inventory = audit_site(ORIGIN, client=client, store=store, prompt_paths=prompt)

    assert asked == [ORIGIN]
    assert [p.url for p in inventory.pages] == [f"{ORIGIN}/about", f"{ORIGIN}/docs"]
    assert inventory.pages[0].score == 100


def test_defaults_to_homepage(client, store):
    inventory = audit_site(ORIGIN, client=client, store=store, prompt_paths=lambda origin: "")
    assert [p.url for p in inventory.pages] == [f"{ORIGIN}/"]


def test_validation_error_is_demoted(site, client, store, monkeypatch, optimal_page):
    site.add(f"{ORIGIN}/sitemap.xml", httpx.Response(200, text=urlset(f"{ORIGIN}/boom", f"{ORIGIN}/")))
    optimal_page(f"{ORIGIN}/")

    from og_audit import site_audit

    real_validate = site_audit.validate_og

    def flaky_validate(url, client, scanner=None):
        if url.endswith("/boom"):
            raise httpx.InvalidURL("bad url")
        return real_validate(url, client, scanner=scanner)

    monkeypatch.setattr(site_audit, "validate_og", flaky_validate)
    inventory = audit_site(ORIGIN, client=client, store=store)

    assert inventory.pages[0] == AuditResult(url=f"{ORIGIN}/boom", path="/boom", score=0, issues=("Failed to fetch",))
    assert inventory.pages[1].score == 100


def test_worker_pool_keeps_discovery_order(site, client, store, optimal_page):
    paths = [f"/p{i}" for i in range(8)]
    site.add(f"{ORIGIN}/sitemap.xml", httpx.Response(200, text=urlset(*(ORIGIN + p for p in paths))))
    for p in paths[::2]:
        optimal_page(ORIGIN + p)

    seen = []
    inventory = audit_site(
        ORIGIN,
        settings=Settings(workers=4),
        client=client,
        store=store,
        on_page=lambda page: seen.append(page.path),
    )

    assert [p.path for p in inventory.pages] == paths
    assert seen == paths
    assert [p.score for p in inventory.pages] == [100, 0] * 4


def test_cancel_stops_new_pages_and_saves(site, client, store, optimal_page):
    site.add(f"{ORIGIN}/sitemap.xml", httpx.Response(200, text=urlset(f"{ORIGIN}/a", f"{ORIGIN}/b", f"{ORIGIN}/c")))
    for p in ("/a", "/b", "/c"):
        optimal_page(ORIGIN + p)

    cancel = threading.Event()
    inventory = audit_site(
        ORIGIN,
        client=client,
        store=store,
        cancel=cancel,
        on_page=lambda page: cancel.set(),
    )

    assert [p.path for p in inventory.pages] == ["/a"]
    assert store.load().total_pages == 1


def test_cancel_before_any_page_keeps_existing_inventory(site, client, store):
    store.register_paths(["/a", "/b", "/c"], base_url=ORIGIN)
    before = store.path.read_text(encoding="utf-8")
    site.add(f"{ORIGIN}/sitemap.xml", httpx.Response(200, text=urlset(f"{ORIGIN}/new")))

    cancel = threading.Event()
    cancel.set()
    inventory = audit_site(ORIGIN, client=client, store=store, cancel=cancel)

    assert inventory is None
    assert store.path.read_text(encoding="utf-8") == before
    assert store.load().total_pages == 3


def test_summary_buckets():
    pages = [
        AuditResult(url="u1", path="/1", score=100),
        AuditResult(url="u2", path="/2", score=90),
        AuditResult(url="u3", path="/3", score=89),
        AuditResult(url="u4", path="/4", score=70),
        AuditResult(url="u5", path="/5", score=69, issues=("og:image",)),
    ]
    summary = summarize(pages)
    assert (summary.total, summary.perfect, summary.good) == (5, 2, 2)
    assert [p.path for p in summary.needs_work] == ["/5"]
    assert summary.average_score == 84


def test_summary_of_nothing():
    assert summarize([]).average_score == 0
