"""Audit record and page models."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AuditRecord(BaseModel):
    """Single audit event as returned by the query service.

    Only the payload and classification fields are interpreted. Any other
    field the service sends is kept as an extra attribute and survives
    ``model_dump``. A missing or null payload is accepted here and left to
    the decoding stage.
    """

    audit_data: str | None = Field(None, alias="AuditData")
    record_type: str | None = Field(None, alias="RecordType")
    identity: str | None = Field(None, alias="Identity")
    creation_date: datetime | None = Field(None, alias="CreationDate")
    result_index: int | None = Field(None, alias="ResultIndex")
    result_count: int | None = Field(None, alias="ResultCount")

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)


class PageResult(BaseModel):
    """One page returned within a session.

    ``interval_total`` is the service's declared count of all records that
    match the window and session. It is repeated on every page.
    """

    records: list[AuditRecord] = Field(default_factory=list)
    interval_total: int = Field(0, ge=0)

    model_config = ConfigDict(frozen=True)

    @property
    def is_empty(self) -> bool:
        return not self.records

    def __len__(self) -> int:
        return len(self.records)

    @classmethod
    def from_records(cls, records: Iterable[AuditRecord | Mapping[str, Any]]) -> PageResult:
        """Build a page from raw records.

        The service stamps the interval total on each record as
        ``ResultCount``; the first record's value is used. Records without
        it fall back to the page length.
        """
        parsed = [
            r if isinstance(r, AuditRecord) else AuditRecord.model_validate(r) for r in records
        ]
        if not parsed:
            return cls()
        total = parsed[0].result_count
        if total is None:
            total = len(parsed)
        return cls(records=parsed, interval_total=max(total, 0))
