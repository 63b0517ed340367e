"""Single-player session controller: fleet placement followed by special attacks."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from navalsim.telemetry import get_tracer

from .combat import AttackReport, apply_attack
from .coordinates import Coordinate
from .grid import Grid
from .patterns import AttackPattern, PatternKind, get_pattern
from .placement import PlacementResult, place_ship
from .ship import FLEET_BLUEPRINT, Fleet, FleetSlot, Orientation, Ship
from .stats import GameStats

logger = logging.getLogger(__name__)
tracer = get_tracer("navalsim.engine.session")

ATTACK_SEQUENCE: tuple[PatternKind, ...] = (
    PatternKind.CONE,
    PatternKind.CROSS,
    PatternKind.OCTAHEDRON,
)


class SessionPhase(Enum):
    """Lifecycle of a simulation session."""

    PLACEMENT = "placement"
    COMBAT = "combat"
    FINISHED = "finished"


@dataclass(frozen=True)
class ShipView:
    ship_id: int
    name: str
    cells: tuple[Coordinate, ...]
    destroyed: bool


@dataclass(frozen=True)
class SessionState:
    """Immutable snapshot of the session."""

    phase: SessionPhase
    board: tuple[tuple[int, ...], ...]
    ships: tuple[ShipView, ...]
    stats: GameStats


class NavalSession:
    """Owns the grid, fleet and statistics for one run of the simulator."""

    def __init__(self) -> None:
        self.grid = Grid()
        self.fleet: Fleet = []
        self.stats = GameStats()
        self.phase = SessionPhase.PLACEMENT
        self.patterns: dict[PatternKind, AttackPattern] = {
            kind: get_pattern(kind) for kind in ATTACK_SEQUENCE
        }

    def next_slot(self) -> FleetSlot | None:
        """Blueprint slot for the next ship to place, or None when the fleet is complete."""
        if len(self.fleet) >= len(FLEET_BLUEPRINT):
            return None
        return FLEET_BLUEPRINT[len(self.fleet)]

    def slot_for(self, ship: Ship) -> FleetSlot:
        return FLEET_BLUEPRINT[ship.id - 1]

    def place_next_ship(self, origin: Coordinate, orientation: Orientation) -> PlacementResult:
        """Try to put the next fleet ship at ``origin``; the fleet only grows on success."""
        if self.phase is not SessionPhase.PLACEMENT:
            logger.error("placement_rejected_wrong_phase", extra={"phase": self.phase.value})
            raise RuntimeError("Ships can only be placed during the placement phase.")
        slot = self.next_slot()
        if slot is None:
            raise RuntimeError("The fleet is already complete.")

        with tracer.start_as_current_span("session.place_next_ship") as span:
            span.set_attribute("slot.name", slot.name)
            candidate = Ship.from_slot(slot, origin, orientation)
            result = place_ship(self.grid, candidate)
            if result.ok:
                self.fleet.append(candidate)
                if self.next_slot() is None:
                    self.phase = SessionPhase.COMBAT
                    logger.info("fleet_complete", extra={"ships": len(self.fleet)})
            span.set_attribute("placement.result", result.value)
            return result

    def attack(self, kind: PatternKind, center: Coordinate) -> AttackReport:
        """Fire the special attack ``kind`` centred on ``center``."""
        if self.phase is not SessionPhase.COMBAT:
            logger.error("attack_rejected_wrong_phase", extra={"phase": self.phase.value})
            raise RuntimeError("Attacks are only allowed once the fleet is placed.")
        return apply_attack(
            self.grid,
            self.patterns[kind],
            center.row,
            center.col,
            self.fleet,
            self.stats,
        )

    def finish(self) -> GameStats:
        self.phase = SessionPhase.FINISHED
        logger.info(
            "session_finished",
            extra={
                "total_shots": self.stats.total_shots,
                "hits": self.stats.hits,
                "misses": self.stats.misses,
                "ships_destroyed": self.stats.ships_destroyed,
            },
        )
        return self.stats

    def get_state(self) -> SessionState:
        return SessionState(
            phase=self.phase,
            board=tuple(tuple(row) for row in self.grid.to_matrix()),
            ships=tuple(
                ShipView(
                    ship_id=ship.id,
                    name=self.slot_for(ship).name,
                    cells=tuple(ship.coordinates()),
                    destroyed=ship.destroyed,
                )
                for ship in self.fleet
            ),
            stats=self.stats.copy(),
        )
