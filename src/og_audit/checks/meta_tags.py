"""Checks for the textual OG tags: title, description, og:url, twitter:card."""

from typing import Optional

from ..models import Status, ValidationCheck


TITLE_LIMITS = {"min": 30, "optimal": (50, 60), "max": 90}
DESCRIPTION_LIMITS = {"min": 70, "optimal": (110, 160), "max": 200}

TWITTER_CARDS = ("summary", "summary_large_image", "app", "player")


def _check_length(
    name: str,
    label: str,
    value: Optional[str],
    limits: dict,
    example: str,
) -> ValidationCheck:
    if value is None:
        return ValidationCheck(
            name=name,
            status=Status.FAIL,
            message=f"Missing {name} tag",
            recommendation=f'Add <meta property="{name}" content="{example}"> to your page',
        )
    if not value:
        return ValidationCheck(
            name=name,
            status=Status.FAIL,
            message=f"{name} tag is empty",
            recommendation=f'Fill in the content of <meta property="{name}">',
        )

    length = len(value)
    low, high = limits["optimal"]

    if length < limits["min"]:
        return ValidationCheck(
            name=name,
            status=Status.WARN,
            message=f"{label} too short ({length} chars)",
            value=length,
            recommendation=f"Aim for {low}-{high} characters for best display",
        )
    if length > limits["max"]:
        return ValidationCheck(
            name=name,
            status=Status.WARN,
            message=f"{label} too long ({length} chars) - may be truncated",
            value=length,
            recommendation=f"Keep under {limits['max']} characters, ideally {low}-{high}",
        )
    if low <= length <= high:
        return ValidationCheck(
            name=name,
            status=Status.PASS,
            message=f"{label} length is optimal ({length} chars)",
            value=length,
        )
    return ValidationCheck(
        name=name,
        status=Status.PASS,
        message=f"{label} length is acceptable ({length} chars)",
        value=length,
        recommendation=f"Optimal length is {low}-{high} characters",
    )


def check_title(title: Optional[str]) -> ValidationCheck:
    """Check og:title presence and length."""
    return _check_length("og:title", "Title", title, TITLE_LIMITS, "Your Title")


def check_description(description: Optional[str]) -> ValidationCheck:
    """Check og:description presence and length."""
    return _check_length(
        "og:description", "Description", description, DESCRIPTION_LIMITS, "Your description"
    )


def check_url(og_url: Optional[str]) -> ValidationCheck:
    """Canonical og:url is recommended, not required."""
    if not og_url:
        return ValidationCheck(
            name="og:url",
            status=Status.WARN,
            message="Missing og:url tag",
            recommendation='Add <meta property="og:url" content="https://example.com/page"> for canonical URL',
        )
    return ValidationCheck(
        name="og:url",
        status=Status.PASS,
        message="og:url is present",
        value=og_url,
    )


def check_twitter_card(card: Optional[str]) -> ValidationCheck:
    if not card:
        return ValidationCheck(
            name="twitter:card",
            status=Status.WARN,
            message="Missing twitter:card tag",
            recommendation='Add <meta name="twitter:card" content="summary_large_image"> for Twitter/X',
        )

    if card not in TWITTER_CARDS:
        return ValidationCheck(
            name="twitter:card",
            status=Status.WARN,
            message=f"Unknown twitter:card type: {card}",
            value=card,
            recommendation='Use "summary_large_image" for best image display',
        )

    if card == "summary":
        return ValidationCheck(
            name="twitter:card",
            status=Status.PASS,
            message="twitter:card is set to summary",
            value=card,
            recommendation='Consider "summary_large_image" for larger image display',
        )

    return ValidationCheck(
        name="twitter:card",
        status=Status.PASS,
        message=f"twitter:card is set to {card}",
        value=card,
    )
