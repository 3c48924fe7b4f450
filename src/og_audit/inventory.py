"""Persist the site inventory as a JSON document."""

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional, Union

from .config import DEFAULT_INVENTORY_PATH
from .models import AuditResult, OGInventory, url_path


logger = logging.getLogger(__name__)

NOT_AUDITED = "Not audited yet"


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with milliseconds, e.g. 2024-05-01T12:00:00.000Z."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def normalize_path(path: str) -> str:
    """``about`` -> ``/about``; full URLs are reduced to their path."""
    path = path.strip()
    if path.startswith(("http://", "https://")):
        path = url_path(path)
    return path if path.startswith("/") else "/" + path


class InventoryStore:
    """Reads and writes the inventory file.

    Each save replaces the whole document; there are no partial updates and
    no locking between concurrent writers.
    """

    def __init__(self, path: Union[str, Path] = DEFAULT_INVENTORY_PATH) -> None:
        self.path = Path(path)

    def save(self, inventory: OGInventory) -> None:
        content = json.dumps(inventory.to_dict(), indent=2)
        directory = self.path.parent
        directory.mkdir(parents=True, exist_ok=True)

        # Write to a temp file next to the target, then swap it in
        fd, tmp_name = tempfile.mkstemp(prefix=".og-inventory-", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_name, self.path)
        except BaseException:
            os.unlink(tmp_name)
            raise

        logger.info("Saved inventory with %d pages to %s", inventory.total_pages, self.path)

    def load(self) -> Optional[OGInventory]:
        """Load the inventory, or None if the file is missing or unreadable."""
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return OGInventory.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Ignoring malformed inventory %s: %s", self.path, e)
            return None

    def register_paths(
        self,
        paths: Iterable[str],
        base_url: Optional[str] = None,
    ) -> OGInventory:
        """Add paths to the inventory without auditing them.

        Loads the existing inventory (or starts a new one for ``base_url``),
        appends each path not already present with a score of 0, and saves.
        """
        inventory = self.load()
        if inventory is None:
            inventory = OGInventory(base_url=(base_url or "").rstrip("/"), audited_at=utc_timestamp())
        elif base_url and not inventory.base_url:
            inventory.base_url = base_url.rstrip("/")

        for raw in paths:
            if not raw.strip():
                continue
            path = normalize_path(raw)
            if inventory.has_path(path):
                continue
            inventory.pages.append(AuditResult(
                url=f"{inventory.base_url}{path}",
                path=path,
                score=0,
                issues=(NOT_AUDITED,),
            ))

        self.save(inventory)
        return inventory
