"""Pydantic models for tracked links and their index status."""

from __future__ import annotations

from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .parser import build_query_url


class IndexStatus(str, Enum):
    """Where a link stands in the index check."""

    PENDING = "PENDING"
    CHECKING = "CHECKING"
    INDEXED = "INDEXED"
    NOT_INDEXED = "NOT_INDEXED"

    @property
    def is_terminal(self) -> bool:
        return self in (IndexStatus.INDEXED, IndexStatus.NOT_INDEXED)


def _new_id() -> str:
    return uuid4().hex


class LinkRecord(BaseModel):
    """A single tracked URL and its index-check status."""

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(
        default_factory=_new_id,
        frozen=True,
        description="Random 128-bit token, stable for the record's lifetime",
    )
    original_url: str = Field(
        frozen=True,
        description="Normalized absolute URL as parsed from the input",
    )
    status: IndexStatus = Field(default=IndexStatus.PENDING)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def query_url(self) -> str:
        """Search-engine ``site:`` query for ``original_url``."""
        return build_query_url(self.original_url)


class LinkStats(BaseModel):
    """Aggregate counts over the current collection."""

    total: int = Field(default=0)
    indexed: int = Field(default=0)
    not_indexed: int = Field(default=0)
