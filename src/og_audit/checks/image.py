"""Checks for the og:image preview image."""

import logging
from typing import Optional
from urllib.parse import urlparse

import httpx

from ..image_probe import probe_dimensions
from ..models import Status, ValidationCheck, round_half_up


logger = logging.getLogger(__name__)

IMAGE_WIDTH = 1200
IMAGE_HEIGHT = 630
MAX_SIZE_KB = 600
BORDERLINE_RATIO = 0.8
IMAGE_FORMATS = ("image/png", "image/jpeg", "image/webp")


def is_absolute(url: str) -> bool:
    return urlparse(url).scheme in ("http", "https")


def resolve_image_url(image_url: str, page_url: str) -> str:
    """Resolve an og:image value against the page's origin."""
    if is_absolute(image_url):
        return image_url

    page = urlparse(page_url)
    if image_url.startswith("//"):
        return f"{page.scheme}:{image_url}"
    if image_url.startswith("/"):
        return f"{page.scheme}://{page.netloc}{image_url}"
    return f"{page.scheme}://{page.netloc}/{image_url}"


def check_image(
    image_url: Optional[str],
    page_url: str,
    client: httpx.Client,
) -> list[ValidationCheck]:
    """Run the og:image checks.

    Stops after the accessibility check when the image can't be fetched.
    The dimensions check is left out when the image format isn't
    recognized.
    """
    checks: list[ValidationCheck] = []

    if not image_url:
        checks.append(ValidationCheck(
            name="og:image",
            status=Status.FAIL,
            message="Missing og:image tag",
            recommendation='Add <meta property="og:image" content="https://example.com/og.png"> to your page',
        ))
        return checks

    absolute_url = resolve_image_url(image_url, page_url)

    if is_absolute(image_url):
        checks.append(ValidationCheck(
            name="og:image URL",
            status=Status.PASS,
            message="Image URL is absolute",
            value=image_url,
        ))
    else:
        checks.append(ValidationCheck(
            name="og:image URL",
            status=Status.WARN,
            message="Image URL should be absolute",
            value=image_url,
            recommendation="Use full URL like https://example.com/og.png for best compatibility",
        ))

    try:
        logger.debug("Fetching image %s", absolute_url)
        response = client.get(absolute_url)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        checks.append(ValidationCheck(
            name="og:image accessible",
            status=Status.FAIL,
            message=f"Could not fetch image: {e}",
            recommendation="Ensure the image URL is publicly accessible",
        ))
        return checks

    if not response.is_success:
        checks.append(ValidationCheck(
            name="og:image accessible",
            status=Status.FAIL,
            message=f"Image not accessible (HTTP {response.status_code})",
            recommendation="Ensure the image URL is publicly accessible",
        ))
        return checks

    checks.append(ValidationCheck(
        name="og:image accessible",
        status=Status.PASS,
        message="Image is accessible",
    ))

    checks.append(check_format(response.headers.get("content-type", "")))

    data = response.content
    checks.append(check_size(len(data)))

    dimensions_check = check_dimensions(data)
    if dimensions_check is not None:
        checks.append(dimensions_check)

    return checks


def check_format(content_type: str) -> ValidationCheck:
    subtypes = [f.split("/")[1] for f in IMAGE_FORMATS]
    if any(subtype in content_type.lower() for subtype in subtypes):
        return ValidationCheck(
            name="og:image format",
            status=Status.PASS,
            message=f"Valid format ({content_type})",
        )
    return ValidationCheck(
        name="og:image format",
        status=Status.WARN,
        message=f"Unusual format ({content_type or 'no content-type'})",
        recommendation="Use PNG, JPEG, or WebP for best compatibility",
    )


def check_size(size_bytes: int) -> ValidationCheck:
    size_kb = round_half_up(size_bytes / 1024)
    borderline_kb = round_half_up(MAX_SIZE_KB * BORDERLINE_RATIO)

    if size_kb > MAX_SIZE_KB:
        return ValidationCheck(
            name="og:image size",
            status=Status.FAIL,
            message=f"Image too large ({size_kb}KB)",
            value=size_kb,
            recommendation=f"Keep under {MAX_SIZE_KB}KB for WhatsApp and other platforms",
        )
    if size_kb > borderline_kb:
        return ValidationCheck(
            name="og:image size",
            status=Status.WARN,
            message=f"Image size is borderline ({size_kb}KB)",
            value=size_kb,
            recommendation=f"Aim for under {borderline_kb}KB for safety margin",
        )
    return ValidationCheck(
        name="og:image size",
        status=Status.PASS,
        message=f"Image size is good ({size_kb}KB)",
        value=size_kb,
    )


def check_dimensions(data: bytes) -> Optional[ValidationCheck]:
    """Dimensions check, or None if the header isn't PNG/JPEG."""
    dimensions = probe_dimensions(data)
    if dimensions is None:
        return None

    width, height = dimensions
    if width == IMAGE_WIDTH and height == IMAGE_HEIGHT:
        return ValidationCheck(
            name="og:image dimensions",
            status=Status.PASS,
            message=f"Perfect dimensions ({dimensions})",
            value=str(dimensions),
        )
    if width >= IMAGE_WIDTH and height >= IMAGE_HEIGHT:
        return ValidationCheck(
            name="og:image dimensions",
            status=Status.WARN,
            message=f"Dimensions larger than needed ({dimensions})",
            value=str(dimensions),
            recommendation=f"Recommended: {IMAGE_WIDTH}x{IMAGE_HEIGHT}px",
        )
    return ValidationCheck(
        name="og:image dimensions",
        status=Status.WARN,
        message=f"Non-standard dimensions ({dimensions})",
        value=str(dimensions),
        recommendation=f"Recommended: {IMAGE_WIDTH}x{IMAGE_HEIGHT}px for best display",
    )
