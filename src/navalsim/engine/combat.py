"""Resolve area attacks against the grid and detect sunk ships."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from navalsim.telemetry import get_meter, get_tracer

from .coordinates import Coordinate
from .grid import CellState, Grid
from .patterns import AttackPattern
from .ship import Ship
from .stats import GameStats

logger = logging.getLogger(__name__)
tracer = get_tracer("navalsim.engine.combat")
meter = get_meter("navalsim.engine.combat")

SHOT_COUNTER = meter.create_counter(
    "navalsim_shots",
    unit="1",
    description="Cell-level shots resolved on the grid",
)

DESTROYED_COUNTER = meter.create_counter(
    "navalsim_ships_destroyed",
    unit="1",
    description="Ships sunk during the session",
)


class ShotOutcome(Enum):
    """What happened to a single targeted cell."""

    HIT = "hit"
    MISS = "miss"
    ALREADY_HIT = "already_hit"
    ALREADY_HIT_WATER = "already_hit_water"

    @property
    def is_hit(self) -> bool:
        return self is ShotOutcome.HIT


# (outcome, state written back) keyed by the state found before the shot
_RESOLUTION: dict[CellState, tuple[ShotOutcome, CellState]] = {
    CellState.SHIP: (ShotOutcome.HIT, CellState.HIT),
    CellState.EMPTY: (ShotOutcome.MISS, CellState.HIT_WATER),
    CellState.HIT: (ShotOutcome.ALREADY_HIT, CellState.HIT),
    CellState.HIT_WATER: (ShotOutcome.ALREADY_HIT_WATER, CellState.HIT_WATER),
}


@dataclass(frozen=True)
class ShotRecord:
    coord: Coordinate
    outcome: ShotOutcome


@dataclass(frozen=True)
class AttackReport:
    """Everything a caller needs to display one attack."""

    pattern_name: str
    center: Coordinate
    shots: tuple[ShotRecord, ...]
    destroyed: tuple[Ship, ...]

    @property
    def total(self) -> int:
        return len(self.shots)

    @property
    def hits(self) -> int:
        return sum(1 for shot in self.shots if shot.outcome.is_hit)

    @property
    def misses(self) -> int:
        return self.total - self.hits

    @property
    def accuracy(self) -> float | None:
        if not self.shots:
            return None
        return self.hits / self.total


def resolve_shot(grid: Grid, coord: Coordinate) -> ShotOutcome:
    """Fire at one in-bounds cell and apply the resulting state change."""
    outcome, new_state = _RESOLUTION[grid.get_state(coord.row, coord.col)]
    if outcome in (ShotOutcome.HIT, ShotOutcome.MISS):
        grid.set_state(coord.row, coord.col, new_state)
    SHOT_COUNTER.add(1, attributes={"outcome": outcome.value})
    return outcome


def apply_attack(
    grid: Grid,
    pattern: AttackPattern,
    center_row: int,
    center_col: int,
    fleet: Sequence[Ship],
    stats: GameStats,
) -> AttackReport:
    """Fire ``pattern`` centred on ``(center_row, center_col)``.

    Affected cells that fall off the board are skipped and do not count as
    shots. Destruction detection runs only when the attack produced a new hit.
    The centre itself must lie on the board; otherwise ValueError is raised
    before any cell is touched.
    """
    if not grid.is_in_bounds(center_row, center_col):
        logger.error(
            "attack_center_out_of_bounds", extra={"row": center_row, "col": center_col}
        )
        raise ValueError(f"Attack centre ({center_row}, {center_col}) is outside the grid.")
    center = Coordinate(center_row, center_col)
    with tracer.start_as_current_span("combat.apply_attack") as span:
        span.set_attribute("attack.pattern", pattern.name)
        span.set_attribute("attack.center.row", center_row)
        span.set_attribute("attack.center.col", center_col)

        shots: list[ShotRecord] = []
        for d_row, d_col in pattern.affected_offsets():
            target = center.offset(d_row, d_col)
            if not grid.is_in_bounds(target.row, target.col):
                continue
            outcome = resolve_shot(grid, target)
            shots.append(ShotRecord(target, outcome))
            logger.debug(
                "shot_resolved",
                extra={"row": target.row, "col": target.col, "outcome": outcome.value},
            )

        new_hits = sum(1 for shot in shots if shot.outcome.is_hit)
        destroyed: list[Ship] = []
        if new_hits:
            destroyed = detect_destroyed_ships(grid, fleet, stats)
        stats.record_attack(shots=len(shots), hits=new_hits)

        report = AttackReport(pattern.name, center, tuple(shots), tuple(destroyed))
        span.set_attribute("attack.shots", report.total)
        span.set_attribute("attack.hits", report.hits)
        span.set_attribute("attack.destroyed", len(destroyed))
        logger.info(
            "attack_applied",
            extra={
                "pattern": pattern.name,
                "center": center.label,
                "shots": report.total,
                "hits": report.hits,
                "misses": report.misses,
                "destroyed": [ship.id for ship in destroyed],
            },
        )
        return report


def count_hit_cells(grid: Grid, ship: Ship) -> int:
    return sum(
        1
        for coord in ship.coordinates()
        if grid.is_in_bounds(coord.row, coord.col)
        and grid.get_state(coord.row, coord.col) is CellState.HIT
    )


def detect_destroyed_ships(grid: Grid, fleet: Sequence[Ship], stats: GameStats) -> list[Ship]:
    """Mark ships whose every cell is ``HIT`` as destroyed.

    Ships already destroyed are skipped, so running this repeatedly never
    counts a ship twice. Returns the ships destroyed by this call.
    """
    newly_destroyed: list[Ship] = []
    for ship in fleet:
        if ship.destroyed:
            continue
        if count_hit_cells(grid, ship) != ship.length:
            continue
        ship.destroyed = True
        stats.record_destroyed()
        DESTROYED_COUNTER.add(1, attributes={"ship_type": ship.ship_type.name})
        logger.info(
            "ship_destroyed",
            extra={"ship_id": ship.id, "ship_type": ship.ship_type.name},
        )
        newly_destroyed.append(ship)
    return newly_destroyed
