"""Validate the Open Graph tags of a single page."""

import logging
from typing import Optional

import httpx

from .checks import (
    check_title,
    check_description,
    check_image,
    check_url,
    check_twitter_card,
)
from .config import Settings
from .models import Status, ValidationCheck, ValidationResult
from .scanners import TagScanner, extract_og_tags
from .scoring import calculate_score


logger = logging.getLogger(__name__)


def normalize_url(url: str) -> str:
    """Ensure URL has a scheme."""
    if not url.startswith(("http://", "https://")):
        url = "https://" + url
    return url


def build_client(settings: Settings) -> httpx.Client:
    """HTTP client with the identifying user agent and request timeout."""
    return httpx.Client(
        headers=settings.headers,
        timeout=settings.timeout,
        follow_redirects=True,
    )


def _unreachable(url: str, reason: str) -> ValidationResult:
    return ValidationResult(
        url=url,
        score=0,
        checks=[ValidationCheck(
            name="URL Accessible",
            status=Status.FAIL,
            message=f"Could not fetch URL: {reason}",
        )],
    )


def validate_og(
    url: str,
    client: Optional[httpx.Client] = None,
    settings: Optional[Settings] = None,
    scanner: Optional[TagScanner] = None,
) -> ValidationResult:
    """Validate the OG tags of a page and score them.

    Args:
        url: Page URL (absolute)
        client: HTTP client to reuse; one is created from ``settings`` if omitted
        settings: Timeout and user agent for a created client
        scanner: Tag scanner (regex scanner by default)

    Returns:
        ValidationResult. An unreachable page yields a single failing
        "URL Accessible" check and a score of 0.
    """
    if client is None:
        with build_client(settings or Settings()) as own_client:
            return validate_og(url, own_client, scanner=scanner)

    logger.debug("Fetching page %s", url)
    try:
        response = client.get(url)
        response.raise_for_status()
    except httpx.TimeoutException:
        return _unreachable(url, "request timed out")
    except httpx.HTTPStatusError as e:
        return _unreachable(url, f"HTTP {e.response.status_code}")
    except httpx.RequestError as e:
        return _unreachable(url, str(e) or type(e).__name__)

    tags = extract_og_tags(response.text, scanner)

    checks: list[ValidationCheck] = [
        check_title(tags.title),
        check_description(tags.description),
        *check_image(tags.image, url, client),
        check_url(tags.url),
        check_twitter_card(tags.twitter_card),
    ]

    result = ValidationResult(url=url, score=calculate_score(checks), checks=checks)
    logger.debug("Validated %s: %d/100", url, result.score)
    return result
