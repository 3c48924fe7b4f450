"""Find and parse a site's sitemap."""

import logging
import re
from typing import Optional
from urllib.parse import urljoin, urlparse

import httpx

from .scanners import DEFAULT_SCANNER, TagScanner


logger = logging.getLogger(__name__)

SITEMAP_LOCATIONS = (
    "/sitemap.xml",
    "/sitemap_index.xml",
    "/sitemap-index.xml",
)

ROBOTS_SITEMAP_RE = re.compile(r"Sitemap:\s*(.+)", re.IGNORECASE)


def robots_sitemap_path(origin: str, client: httpx.Client) -> Optional[str]:
    """Path of the first ``Sitemap:`` directive in robots.txt, if any."""
    robots_url = urljoin(origin, "/robots.txt")
    try:
        resp = client.get(robots_url)
    except httpx.HTTPError as e:
        logger.debug("Could not fetch %s: %s", robots_url, e)
        return None

    if not resp.is_success:
        return None

    match = ROBOTS_SITEMAP_RE.search(resp.text)
    if not match:
        return None
    return urlparse(urljoin(origin, match.group(1).strip())).path or None


def sitemap_candidates(origin: str, client: httpx.Client) -> list[str]:
    """Sitemap paths to try, in order. robots.txt's directive comes first."""
    candidates = list(SITEMAP_LOCATIONS)
    declared = robots_sitemap_path(origin, client)
    if declared:
        if declared in candidates:
            candidates.remove(declared)
        candidates.insert(0, declared)
    return candidates


def parse_sitemap(xml: str, scanner: Optional[TagScanner] = None) -> list[str]:
    """Get the ``<loc>`` of every ``<url>`` entry.

    Child sitemaps of a sitemap index are not fetched; only URL entries
    present in the document itself are returned.
    """
    if "<sitemapindex" in xml:
        logger.warning("Sitemap index found - child sitemaps are not fetched, using root URLs only")
    return (scanner or DEFAULT_SCANNER).scan_loc_entries(xml)


def discover_sitemap(
    origin: str,
    client: httpx.Client,
    scanner: Optional[TagScanner] = None,
) -> list[str]:
    """Find the site's sitemap and return the page URLs it lists.

    Stops at the first candidate that answers with a 2xx status. Returns an
    empty list when no candidate does.
    """
    for path in sitemap_candidates(origin, client):
        sitemap_url = urljoin(origin, path)
        logger.debug("Trying sitemap %s", sitemap_url)
        try:
            resp = client.get(sitemap_url)
        except httpx.HTTPError as e:
            logger.debug("Could not fetch %s: %s", sitemap_url, e)
            continue

        if resp.is_success:
            urls = parse_sitemap(resp.text, scanner)
            logger.info("Found sitemap %s with %d URLs", sitemap_url, len(urls))
            return urls

    return []
