"""Data models for OG validation and site audit results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union
from urllib.parse import urlparse


class Status(Enum):
    """Outcome of a single validation check."""
    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"


@dataclass
class OGTagSet:
    """Open Graph / Twitter Card values found on a page.

    ``None`` means the tag is absent, which is distinct from an empty
    ``content=""`` attribute.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    url: Optional[str] = None
    type: Optional[str] = None
    site_name: Optional[str] = None
    twitter_card: Optional[str] = None
    twitter_title: Optional[str] = None
    twitter_description: Optional[str] = None
    twitter_image: Optional[str] = None


# Meta tag name -> OGTagSet field
TAG_FIELDS = {
    "og:title": "title",
    "og:description": "description",
    "og:image": "image",
    "og:url": "url",
    "og:type": "type",
    "og:site_name": "site_name",
    "twitter:card": "twitter_card",
    "twitter:title": "twitter_title",
    "twitter:description": "twitter_description",
    "twitter:image": "twitter_image",
}


@dataclass
class ValidationCheck:
    """A single validation check."""
    name: str
    status: Status
    message: str
    value: Optional[Union[str, int]] = None
    recommendation: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "status": self.status.value,
            "message": self.message,
        }
        if self.value is not None:
            data["value"] = self.value
        if self.recommendation is not None:
            data["recommendation"] = self.recommendation
        return data


@dataclass
class ValidationResult:
    """Validation result for one URL."""
    url: str
    score: int  # 0-100
    checks: list[ValidationCheck] = field(default_factory=list)
    max_score: int = 100

    def find(self, name: str) -> Optional[ValidationCheck]:
        """Get the first check with the given name."""
        for check in self.checks:
            if check.name == name:
                return check
        return None

    @property
    def issues(self) -> list[str]:
        """Names of every check that did not pass."""
        return [c.name for c in self.checks if c.status != Status.PASS]

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "score": self.score,
            "maxScore": self.max_score,
            "checks": [c.to_dict() for c in self.checks],
        }


# AuditResult attribute -> inventory JSON key, for the optional diagnostics
_DIAGNOSTIC_KEYS = {
    "title_length": "titleLength",
    "description_length": "descriptionLength",
    "image": "image",
    "image_size": "imageSize",
    "image_dimensions": "imageDimensions",
}


@dataclass(frozen=True)
class AuditResult:
    """Per-page record stored in the inventory."""
    url: str
    path: str
    score: int
    issues: tuple[str, ...] = ()
    title_length: Optional[int] = None
    description_length: Optional[int] = None
    image: Optional[str] = None
    image_size: Optional[int] = None
    image_dimensions: Optional[str] = None

    @classmethod
    def from_validation(cls, result: ValidationResult) -> "AuditResult":
        """Project a ValidationResult onto an inventory record."""

        def value_of(name: str, kind: type) -> Any:
            check = result.find(name)
            if check is not None and isinstance(check.value, kind):
                return check.value
            return None

        return cls(
            url=result.url,
            path=url_path(result.url),
            score=result.score,
            issues=tuple(result.issues),
            title_length=value_of("og:title", int),
            description_length=value_of("og:description", int),
            image=value_of("og:image URL", str),
            image_size=value_of("og:image size", int),
            image_dimensions=value_of("og:image dimensions", str),
        )

    @classmethod
    def failed(cls, url: str, issue: str = "Failed to fetch") -> "AuditResult":
        """Zero-score record for a page that could not be validated."""
        return cls(url=url, path=url_path(url), score=0, issues=(issue,))

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "url": self.url,
            "path": self.path,
            "score": self.score,
        }
        for attr, key in _DIAGNOSTIC_KEYS.items():
            value = getattr(self, attr)
            if value is not None:
                data[key] = value
        data["issues"] = list(self.issues)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AuditResult":
        diagnostics = {
            attr: data[key] for attr, key in _DIAGNOSTIC_KEYS.items() if key in data
        }
        return cls(
            url=str(data["url"]),
            path=str(data["path"]),
            score=int(data["score"]),
            issues=tuple(str(i) for i in data.get("issues", [])),
            **diagnostics,
        )


@dataclass
class OGInventory:
    """Aggregated audit of a whole site, persisted as JSON."""
    base_url: str
    audited_at: str  # ISO-8601
    pages: list[AuditResult] = field(default_factory=list)

    @property
    def total_pages(self) -> int:
        return len(self.pages)

    @property
    def average_score(self) -> int:
        """Rounded mean page score; 0 for an empty inventory."""
        if not self.pages:
            return 0
        return round_half_up(sum(p.score for p in self.pages) / len(self.pages))

    def has_path(self, path: str) -> bool:
        return any(p.path == path for p in self.pages)

    def to_dict(self) -> dict[str, Any]:
        return {
            "baseUrl": self.base_url,
            "auditedAt": self.audited_at,
            "totalPages": self.total_pages,
            "averageScore": self.average_score,
            "pages": [p.to_dict() for p in self.pages],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OGInventory":
        return cls(
            base_url=str(data["baseUrl"]),
            audited_at=str(data["auditedAt"]),
            pages=[AuditResult.from_dict(p) for p in data["pages"]],
        )


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (62.5 -> 63)."""
    return int(value + 0.5)


def url_path(url: str) -> str:
    """Path component of a URL, ``/`` when empty."""
    return urlparse(url).path or "/"
