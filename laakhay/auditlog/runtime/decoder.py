"""Payload decoding stage for audit records.

The service occasionally emits truncated or unterminated payload strings.
RecordDecoder parses each record's payload as JSON and drops the ones that
fail. It counts the drops instead of stopping the stream.
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterable, AsyncIterator
from typing import Any

from ..core.exceptions import PayloadDecodeError
from ..models import AuditEvent, AuditRecord
from .windowing import EventCallback
from .windowing.telemetry import emit, log_decode_failure


class RecordDecoder:
    """Decodes record payloads, skipping malformed ones.

    Attributes:
        decoded: Records decoded successfully
        skipped: Records skipped because their payload was malformed
    """

    def __init__(self, *, on_event: EventCallback | None = None) -> None:
        self._on_event = on_event
        self.decoded = 0
        self.skipped = 0

    def decode(self, record: AuditRecord) -> dict[str, Any]:
        """Parse the record payload.

        Args:
            record: Record whose ``audit_data`` holds a JSON object

        Returns:
            Parsed payload

        Raises:
            PayloadDecodeError: If the payload is not a well-formed JSON object
        """
        if record.audit_data is None:
            raise PayloadDecodeError(
                "Missing payload", record_id=record.identity, reason="missing payload"
            )
        try:
            payload = json.loads(record.audit_data)
        except json.JSONDecodeError as e:
            raise PayloadDecodeError(
                f"Malformed payload: {e}", record_id=record.identity, reason=str(e)
            ) from e
        if not isinstance(payload, dict):
            raise PayloadDecodeError(
                "Payload is not a JSON object",
                record_id=record.identity,
                reason=f"decoded to {type(payload).__name__}",
            )
        return payload

    async def decode_stream(
        self, records: AsyncIterable[AuditRecord]
    ) -> AsyncIterator[dict[str, Any]]:
        """Yield decoded payloads, skipping records that fail to decode."""
        async for record in records:
            try:
                payload = self.decode(record)
            except PayloadDecodeError as e:
                self.skipped += 1
                log_decode_failure(
                    record_id=e.record_id, skipped=self.skipped, reason=str(e.reason)
                )
                await emit(
                    self._on_event,
                    AuditEvent.decode_failed(e.record_id, self.skipped, str(e.reason)),
                )
                continue
            self.decoded += 1
            yield payload
