"""Session-wide shot counters."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class GameStats:
    """Monotonic counters; only the ``record_*`` methods change them."""

    total_shots: int = 0
    hits: int = 0
    misses: int = 0
    ships_destroyed: int = 0

    def record_attack(self, shots: int, hits: int) -> None:
        if shots < 0 or hits < 0 or hits > shots:
            raise ValueError(f"Inconsistent attack tally: {hits} hits from {shots} shots.")
        self.total_shots += shots
        self.hits += hits
        self.misses += shots - hits

    def record_destroyed(self, count: int = 1) -> None:
        if count < 0:
            raise ValueError("Destroyed-ship count cannot decrease.")
        self.ships_destroyed += count

    @property
    def accuracy(self) -> float | None:
        """Fraction of shots that hit, or None before the first shot."""
        if self.total_shots == 0:
            return None
        return self.hits / self.total_shots

    def copy(self) -> GameStats:
        return GameStats(self.total_shots, self.hits, self.misses, self.ships_destroyed)
