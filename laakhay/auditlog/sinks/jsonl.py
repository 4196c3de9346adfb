"""JSON Lines sink."""

from __future__ import annotations

import json
from pathlib import Path
from typing import IO, Any

from pydantic import BaseModel


class JSONLinesSink:
    """Writes one JSON document per line to a path or open text stream.

    Pydantic models (raw AuditRecord) are dumped by alias so the output keeps
    the service's field names.
    """

    def __init__(self, target: str | Path | IO[str]) -> None:
        if isinstance(target, (str, Path)):
            self._stream: IO[str] = open(target, "w", encoding="utf-8")
            self._owns_stream = True
        else:
            self._stream = target
            self._owns_stream = False
        self.written = 0

    async def publish(self, item: Any) -> None:
        if isinstance(item, BaseModel):
            line = item.model_dump_json(by_alias=True)
        else:
            line = json.dumps(item, default=str)
        self._stream.write(line + "\n")
        self.written += 1

    async def close(self) -> None:
        self._stream.flush()
        if self._owns_stream:
            self._stream.close()
