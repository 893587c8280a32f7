# observe.py: JSON-lines sink for accepted trace records and metrics dumps
import json
from pathlib import Path
from typing import Optional, Dict, Any


class TraceSink:
    """Appends one JSON line per event to a file path, or collects events into a list."""
    def __init__(self, path: Optional[str] = None, collector: Optional[list] = None):
        self.path = path
        self.collector = collector
        self._fh = None

    def open(self):
        if self.path and self._fh is None:
            self._fh = open(self.path, "w", encoding="utf-8")

    def emit(self, event: Dict[str, Any]):
        if self.path:
            self.open()
            self._fh.write(json.dumps(event, separators=(",", ":")) + "\n")
        elif self.collector is not None:
            self.collector.append(event)

    def close(self):
        if self._fh is not None:
            self._fh.close()
            self._fh = None


def write_metrics(path: str, metrics: Dict[str, Any]):
    Path(path).write_text(json.dumps(metrics, indent=2), encoding="utf-8")
