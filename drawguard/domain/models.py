from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass(slots=True)
class CounterEntry:
    """
    Per-identifier counter for the current window.
    Mutated in place by the limiter; replaced once `reset_at` has passed.
    """
    count: int
    reset_at: int  # epoch ms


@dataclass(frozen=True, slots=True)
class Decision:
    allowed: bool
    limit: int
    remaining: int
    reset_time: int  # epoch ms, start of the next fresh window

    @property
    def reset_at(self) -> datetime:
        return datetime.fromtimestamp(self.reset_time / 1000, tz=timezone.utc)

    def reset_iso(self) -> str:
        return self.reset_at.isoformat(timespec="milliseconds").replace("+00:00", "Z")

    def retry_after(self, now_ms: int) -> int:
        """Whole seconds until the window resets, never negative."""
        return max(0, math.ceil((self.reset_time - now_ms) / 1000))
