"""Runtime settings."""

import os
from dataclasses import dataclass, replace
from typing import Callable, Optional, TypeVar

from . import __version__


T = TypeVar("T")

DEFAULT_USER_AGENT = f"og-audit/{__version__}"
DEFAULT_INVENTORY_PATH = ".og-inventory.json"


@dataclass(frozen=True)
class Settings:
    """Settings shared by the validator, the site auditor and the CLI."""
    timeout: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT
    inventory_path: str = DEFAULT_INVENTORY_PATH
    workers: int = 1
    pass_threshold: int = 70

    @property
    def headers(self) -> dict[str, str]:
        return {
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        }

    @classmethod
    def from_env(cls, environ: Optional[dict[str, str]] = None) -> "Settings":
        """Build settings from OG_AUDIT_* environment variables."""
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            timeout=_read(env, "OG_AUDIT_TIMEOUT", float, defaults.timeout),
            user_agent=env.get("OG_AUDIT_USER_AGENT") or defaults.user_agent,
            inventory_path=env.get("OG_AUDIT_INVENTORY") or defaults.inventory_path,
            workers=_read(env, "OG_AUDIT_WORKERS", int, defaults.workers),
        )

    def override(self, **changes) -> "Settings":
        """Copy with the given non-None values replaced."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def _read(env, name: str, parse: Callable[[str], T], default: T) -> T:
    raw = env.get(name)
    if not raw:
        return default
    try:
        value = parse(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value
