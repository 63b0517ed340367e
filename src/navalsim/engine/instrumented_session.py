"""Naval session with session-level telemetry hooks."""

from __future__ import annotations

import time

from navalsim.engine.combat import AttackReport
from navalsim.engine.coordinates import Coordinate
from navalsim.engine.patterns import PatternKind
from navalsim.engine.placement import PlacementResult
from navalsim.engine.session import NavalSession
from navalsim.engine.ship import Orientation
from navalsim.engine.stats import GameStats
from navalsim.telemetry import get_logger, get_tracer, record_game_metric


class InstrumentedNavalSession(NavalSession):
    """Wraps NavalSession with tracing, metrics, and logging."""

    def __init__(self) -> None:
        super().__init__()
        self._logger = get_logger("navalsim.engine")
        self._tracer = get_tracer("navalsim.engine")
        self._session_span_cm = None
        self._session_span = None
        self._started_at: float | None = None
        self._placement_attempts = 0

    def place_next_ship(self, origin: Coordinate, orientation: Orientation) -> PlacementResult:
        if self._session_span_cm is None:
            self._open_session_span()
        slot = self.next_slot()
        with self._tracer.start_as_current_span("navalsim.engine.place_ship") as span:
            span.set_attribute("slot", slot.name if slot else "none")
            span.set_attribute("origin", origin.label)
            span.set_attribute("orientation", orientation.name)
            self._placement_attempts += 1
            result = super().place_next_ship(origin, orientation)
            span.set_attribute("result", result.value)
            record_game_metric(
                "navalsim_placement_attempts_total",
                1,
                {"result": result.value, "ship": slot.name if slot else "none"},
            )
            self._logger.info(
                "place_next_ship slot=%s origin=%s orientation=%s result=%s",
                slot.name if slot else "none",
                origin.label,
                orientation.name,
                result.value,
            )
            return result

    def attack(self, kind: PatternKind, center: Coordinate) -> AttackReport:
        with self._tracer.start_as_current_span("navalsim.engine.attack") as span:
            span.set_attribute("pattern", kind.value)
            span.set_attribute("center.row", center.row)
            span.set_attribute("center.col", center.col)
            try:
                report = super().attack(kind, center)
            except RuntimeError as exc:
                record_game_metric("navalsim_rejected_attacks_total", 1, {"pattern": kind.value})
                span.record_exception(exc)
                span.set_attribute("error", True)
                self._logger.error(
                    "Attack %s at (%d,%d) rejected: %s", kind.value, center.row, center.col, exc
                )
                raise

            span.set_attribute("shots", report.total)
            span.set_attribute("hits", report.hits)
            span.set_attribute("destroyed", len(report.destroyed))
            record_game_metric("navalsim_attacks_total", 1, {"pattern": kind.value})
            record_game_metric("navalsim_attack_shots_total", report.total, {"pattern": kind.value})
            record_game_metric("navalsim_attack_hits_total", report.hits, {"pattern": kind.value})
            self._logger.info(
                "attack pattern=%s center=%s shots=%d hits=%d",
                kind.value,
                center.label,
                report.total,
                report.hits,
            )
            return report

    def finish(self) -> GameStats:
        stats = super().finish()
        duration = (time.perf_counter() - self._started_at) if self._started_at else 0.0
        record_game_metric("navalsim_sessions_completed_total", 1)
        record_game_metric("navalsim_session_duration_seconds", duration)
        record_game_metric("navalsim_ships_destroyed_total", stats.ships_destroyed)

        with self._tracer.start_as_current_span("navalsim.engine.session_complete") as span:
            span.set_attribute("total_shots", stats.total_shots)
            span.set_attribute("hits", stats.hits)
            span.set_attribute("ships_destroyed", stats.ships_destroyed)
            span.set_attribute("placement_attempts", self._placement_attempts)
            span.set_attribute("duration_ms", duration * 1000)

        self._logger.info(
            "Session finished. shots=%d hits=%d destroyed=%d duration_s=%.3f",
            stats.total_shots,
            stats.hits,
            stats.ships_destroyed,
            duration,
        )
        self._close_session_span()
        return stats

    def abort(self, reason: str) -> None:
        """Close the session span when setup cannot complete."""
        record_game_metric("navalsim_sessions_aborted_total", 1, {"reason": reason})
        self._logger.warning("Session aborted: %s", reason)
        if self._session_span is not None:
            self._session_span.set_attribute("aborted", reason)
        self._close_session_span()

    def _open_session_span(self) -> None:
        self._started_at = time.perf_counter()
        self._session_span_cm = self._tracer.start_as_current_span("navalsim.engine.session")
        self._session_span = self._session_span_cm.__enter__()

    def _close_session_span(self) -> None:
        if self._session_span_cm is not None:
            self._session_span_cm.__exit__(None, None, None)
            self._session_span_cm = None
            self._session_span = None
