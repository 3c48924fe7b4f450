"""Tag scanners for meta tags and sitemap ``<loc>`` entries.

Two interchangeable implementations:

- RegexTagScanner: pattern matching over raw text. Tolerant of broken
  markup, but will also pick up tag-like text inside comments or scripts.
- SoupTagScanner: BeautifulSoup over lxml, for callers that prefer a real
  parser.
"""

import re
from abc import ABC, abstractmethod
from typing import Optional

from bs4 import BeautifulSoup

from .models import TAG_FIELDS, OGTagSet


class TagScanner(ABC):
    """Base class for tag scanners."""

    @abstractmethod
    def scan_meta_tags(self, html: str) -> OGTagSet:
        """Extract Open Graph / Twitter Card values from HTML."""
        pass

    @abstractmethod
    def scan_loc_entries(self, xml: str) -> list[str]:
        """Extract every ``<loc>`` inside a ``<url>`` element of a sitemap."""
        pass


_CONTENT = r"""content\s*=\s*(?:"([^"]*)"|'([^']*)')"""

URL_ENTRY_RE = re.compile(r"<url>((?:(?!</url>)[\s\S])*)</url>", re.IGNORECASE)
LOC_RE = re.compile(r"<loc>\s*([^<]+?)\s*</loc>", re.IGNORECASE)


def _meta_patterns(name: str) -> list[re.Pattern[str]]:
    """Four attribute-order-tolerant patterns for one meta tag name."""
    key = re.escape(name)
    patterns = []
    for attr in ("property", "name"):
        ident = rf"""{attr}\s*=\s*["']{key}["']"""
        patterns.append(re.compile(rf"<meta[^>]*{ident}[^>]*{_CONTENT}", re.IGNORECASE))
        patterns.append(re.compile(rf"<meta[^>]*{_CONTENT}[^>]*{ident}", re.IGNORECASE))
    return patterns


class RegexTagScanner(TagScanner):
    """Pattern-matching scanner; first match per tag wins."""

    def __init__(self) -> None:
        self._patterns = {name: _meta_patterns(name) for name in TAG_FIELDS}

    def get_meta_content(self, html: str, name: str) -> Optional[str]:
        for pattern in self._patterns[name]:
            match = pattern.search(html)
            if match:
                double, single = match.group(1), match.group(2)
                return double if double is not None else single
        return None

    def scan_meta_tags(self, html: str) -> OGTagSet:
        values = {
            field_name: self.get_meta_content(html, name)
            for name, field_name in TAG_FIELDS.items()
        }
        return OGTagSet(**values)

    def scan_loc_entries(self, xml: str) -> list[str]:
        locs = []
        # First <loc> of each <url>; entries without one are skipped
        for entry in URL_ENTRY_RE.finditer(xml):
            loc = LOC_RE.search(entry.group(1))
            if loc:
                locs.append(loc.group(1))
        return locs


class SoupTagScanner(TagScanner):
    """Structural scanner backed by BeautifulSoup and lxml."""

    def __init__(self, features: str = "lxml") -> None:
        self.features = features

    def scan_meta_tags(self, html: str) -> OGTagSet:
        soup = BeautifulSoup(html, self.features)
        values: dict[str, Optional[str]] = {}

        for meta in soup.find_all("meta"):
            content = meta.get("content")
            if content is None:
                continue
            for attr in ("property", "name"):
                key = (meta.get(attr) or "").strip().lower()
                field_name = TAG_FIELDS.get(key)
                if field_name and field_name not in values:
                    values[field_name] = content
                    break

        return OGTagSet(**values)

    def scan_loc_entries(self, xml: str) -> list[str]:
        soup = BeautifulSoup(xml, "xml")
        locs = []
        for url in soup.find_all("url"):
            loc = url.find("loc")
            if loc is not None and loc.get_text(strip=True):
                locs.append(loc.get_text(strip=True))
        return locs


DEFAULT_SCANNER: TagScanner = RegexTagScanner()


def extract_og_tags(html: str, scanner: Optional[TagScanner] = None) -> OGTagSet:
    """Extract OG tags from raw HTML with the given (or default) scanner."""
    return (scanner or DEFAULT_SCANNER).scan_meta_tags(html)
