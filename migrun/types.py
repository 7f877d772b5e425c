"""Core types shared across migrun."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


# ── Migrations ───────────────────────────────────────────────────────────────


class Migration(BaseModel):
    """A single versioned, named unit of schema change."""

    version: int = Field(ge=0, le=2**63 - 1)
    name: str
    body: str

    model_config = {"frozen": True}

    @property
    def identifier(self) -> str:
        return f"{self.version}_{self.name}"


class AppliedRecord(BaseModel):
    """A row of the bookkeeping table."""

    version: int
    name: str
    applied_at: datetime | None = None

    model_config = {"frozen": True}


# ── Reports ──────────────────────────────────────────────────────────────────


class RunResult(BaseModel):
    """What a single run did."""

    applied: list[Migration] = Field(default_factory=list)
    skipped: list[int] = Field(default_factory=list)  # already recorded

    @property
    def applied_versions(self) -> list[int]:
        return [m.version for m in self.applied]


class MigrationStatus(BaseModel):
    """One line of the status report."""

    migration: Migration
    record: AppliedRecord | None = None

    @property
    def applied(self) -> bool:
        return self.record is not None

    @property
    def applied_at(self) -> datetime | None:
        return self.record.applied_at if self.record else None
