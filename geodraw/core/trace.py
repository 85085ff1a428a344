"""
Machine-parseable tracing of drawing sessions.

Trace files are JSON Lines: one object per domain event, e.g.

    {"event": "polygon.drawn", "count": 1, "payload": [...], "seq": 3, "ts": "..."}

They are meant for replay and diffing, not for humans.
"""

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional


def _to_jsonable(o: Any) -> Any:
    if isinstance(o, Enum):
        return o.value
    if is_dataclass(o) and not isinstance(o, type):
        return asdict(o)
    if isinstance(o, (tuple, set, frozenset)):
        return list(o)
    return str(o)


class TraceWriter:
    def __init__(self, path: str | Path):
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = self._path.open("w", encoding="utf-8")
        self._seq = 0

    @property
    def path(self) -> Path:
        return self._path

    @property
    def count(self) -> int:
        return self._seq

    def emit(self, event: Dict[str, Any]) -> None:
        event = dict(event)
        self._seq += 1
        event.setdefault("seq", self._seq)
        event.setdefault("ts", datetime.now(timezone.utc).isoformat())
        self._fh.write(json.dumps(event, ensure_ascii=False, default=_to_jsonable) + "\n")
        self._fh.flush()

    def close(self) -> None:
        try:
            self._fh.close()
        except OSError:
            pass

    def __enter__(self) -> "TraceWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class TraceReader:
    def __init__(self, path: str | Path):
        self._path = Path(path)

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        with self._path.open("r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line:
                    continue
                yield json.loads(line)

    def events(self, name: Optional[str] = None) -> List[Dict[str, Any]]:
        """All events, or only those whose `event` field equals `name`."""
        return [e for e in self if name is None or e.get("event") == name]
