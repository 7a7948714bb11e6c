"""Data models for the R2 command-line client."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class CliConfig:
    """Connection settings loaded once at startup."""

    endpoint_url: str
    aws_access_key_id: str
    aws_secret_access_key: str
    debug: bool = False
    profile: Optional[str] = None
    replace_underscores_with_dashes: bool = True


@dataclass
class ListPage:
    """A single page returned by a ListObjectsV2 call."""

    objects: list[dict[str, Any]] = field(default_factory=list)
    next_token: Optional[str] = None

    @property
    def count(self) -> int:
        return len(self.objects)
