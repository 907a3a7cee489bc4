from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from dice_core.interfaces import Reporter

from .metrics_log import log_records


@dataclass
class MessageLog(Reporter):
    """Reporter collecting solver messages and writing them to a Polars CSV.

    Usage:
        log = MessageLog(name="branch_messages", run_id="demo")
        test_branch(model, V0, ..., reporter=log)
        log.flush()
    """

    name: str = "messages"
    run_id: str = "default"
    echo: bool = True
    buffer: List[Dict[str, Any]] = field(default_factory=list)
    seq: int = 0

    def emit(self, message: str, importance: int) -> None:
        self.seq += 1
        self.buffer.append({
            "run_id": self.run_id,
            "seq": int(self.seq),
            "importance": int(importance),
            "message": str(message),
        })
        if self.echo:
            print(f"{message} ({importance})")

    @property
    def messages(self) -> List[str]:
        return [row["message"] for row in self.buffer]

    def flush(self) -> Optional[Path]:
        if not self.buffer:
            return None
        out = log_records(self.name, self.buffer)
        self.buffer.clear()
        return out
