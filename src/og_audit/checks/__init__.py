"""Validation checks for Open Graph tags."""

from .meta_tags import check_title, check_description, check_url, check_twitter_card
from .image import check_image, resolve_image_url

__all__ = [
    "check_title",
    "check_description",
    "check_image",
    "check_url",
    "check_twitter_card",
    "resolve_image_url",
]
