"""Audit every page of a site and build the inventory."""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional, Sequence
from urllib.parse import urlparse

import httpx

from .config import Settings
from .inventory import InventoryStore, utc_timestamp
from .models import AuditResult, OGInventory, round_half_up
from .scanners import TagScanner
from .sitemap import discover_sitemap
from .validator import build_client, normalize_url, validate_og


logger = logging.getLogger(__name__)

PERFECT_SCORE = 90
GOOD_SCORE = 70


def site_origin(base_url: str) -> str:
    """``example.com/blog`` -> ``https://example.com``"""
    parsed = urlparse(normalize_url(base_url.strip()))
    return f"{parsed.scheme}://{parsed.netloc}"


def resolve_page_url(origin: str, path: str) -> str:
    if path.startswith(("http://", "https://")):
        return path
    return f"{origin}{'' if path.startswith('/') else '/'}{path}"


def parse_paths(answer: Optional[str]) -> list[str]:
    """Split a comma-separated answer into paths; ``["/"]`` when blank."""
    paths = [p.strip() for p in (answer or "").split(",") if p.strip()]
    return paths or ["/"]


@dataclass
class AuditSummary:
    """Pages bucketed by score."""
    total: int
    average_score: int
    perfect: int
    good: int
    needs_work: list[AuditResult]


def summarize(pages: Sequence[AuditResult]) -> AuditSummary:
    average = round_half_up(sum(p.score for p in pages) / len(pages)) if pages else 0
    return AuditSummary(
        total=len(pages),
        average_score=average,
        perfect=sum(1 for p in pages if p.score >= PERFECT_SCORE),
        good=sum(1 for p in pages if GOOD_SCORE <= p.score < PERFECT_SCORE),
        needs_work=[p for p in pages if p.score < GOOD_SCORE],
    )


def audit_page(
    url: str,
    client: httpx.Client,
    scanner: Optional[TagScanner] = None,
) -> AuditResult:
    """Validate one page; any error becomes a zero-score record."""
    try:
        result = validate_og(url, client, scanner=scanner)
    except Exception:
        logger.warning("Failed to validate %s", url, exc_info=True)
        return AuditResult.failed(url)
    return AuditResult.from_validation(result)


def audit_site(
    base_url: str,
    *,
    settings: Optional[Settings] = None,
    client: Optional[httpx.Client] = None,
    store: Optional[InventoryStore] = None,
    prompt_paths: Optional[Callable[[str], str]] = None,
    scanner: Optional[TagScanner] = None,
    cancel: Optional[threading.Event] = None,
    on_page: Optional[Callable[[AuditResult], None]] = None,
) -> Optional[OGInventory]:
    """Audit all pages of a site and save the inventory.

    Pages come from the sitemap. Without one, ``prompt_paths`` is asked for
    comma-separated paths (``/`` when it returns nothing or is not given).

    Pages are validated with ``settings.workers`` threads; the inventory
    keeps discovery order either way. Once ``cancel`` is set no new page is
    started, and the pages done so far are saved. When it is set before any
    page finished, nothing is saved and None is returned, leaving an existing
    inventory file untouched.

    Args:
        base_url: Site URL or bare host
        settings: Timeout, user agent, worker count and inventory path
        client: HTTP client to reuse
        store: Inventory store (defaults to ``settings.inventory_path``)
        prompt_paths: Called with the origin when no sitemap is found
        scanner: Tag scanner for pages and sitemap
        cancel: Cancellation token
        on_page: Called with each page result, in inventory order

    Returns:
        The saved OGInventory, or None if cancelled before any page finished
    """
    settings = settings or Settings()
    store = store or InventoryStore(settings.inventory_path)

    if client is None:
        with build_client(settings) as own_client:
            return audit_site(
                base_url,
                settings=settings,
                client=own_client,
                store=store,
                prompt_paths=prompt_paths,
                scanner=scanner,
                cancel=cancel,
                on_page=on_page,
            )

    origin = site_origin(base_url)
    logger.info("Auditing %s", origin)

    urls = discover_sitemap(origin, client, scanner)
    if not urls:
        logger.info("No sitemap found for %s", origin)
        answer = prompt_paths(origin) if prompt_paths else None
        urls = [resolve_page_url(origin, p) for p in parse_paths(answer)]

    def run(url: str) -> Optional[AuditResult]:
        if cancel is not None and cancel.is_set():
            return None
        return audit_page(url, client, scanner)

    pages: list[AuditResult] = []
    workers = max(1, settings.workers)

    def collect(results) -> None:
        for page in results:
            if page is None:
                continue
            pages.append(page)
            if on_page is not None:
                on_page(page)

    if workers > 1 and len(urls) > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            collect(executor.map(run, urls))
    else:
        collect(run(url) for url in urls)

    if len(pages) < len(urls):
        if not pages:
            logger.warning("Audit cancelled before any page finished, inventory not saved")
            return None
        logger.warning("Audit cancelled after %d of %d pages", len(pages), len(urls))

    inventory = OGInventory(base_url=origin, audited_at=utc_timestamp(), pages=pages)
    store.save(inventory)
    return inventory
