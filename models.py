"""Data models produced and consumed by the capture pipeline."""

from dataclasses import dataclass, field
from typing import List, Optional

from api_clients.asset_client import Deadline
from asset_cache import AssetCache


@dataclass(frozen=True)
class Asset:
    """One resource relocated into archive storage."""

    original: str
    stored: str
    type: str

    def to_dict(self):
        return {"original": self.original, "stored": self.stored, "type": self.type}


@dataclass
class CaptureResult:
    """Rewritten document plus every asset stored while producing it."""

    html: bytes
    assets: List[Asset] = field(default_factory=list)

    def manifest(self):
        return [asset.to_dict() for asset in self.assets]


@dataclass
class CaptureContext:
    """State owned by a single capture; discarded when it returns."""

    archive_id: str
    deadline: Optional[Deadline] = None
    cache: AssetCache = field(default_factory=AssetCache)
