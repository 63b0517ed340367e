"""Ship and fleet domain model."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .coordinates import Coordinate, InputError


class Orientation(Enum):
    """Directions a ship can extend from its origin, keyed by input letter."""

    HORIZONTAL = "H"
    VERTICAL = "V"
    DIAGONAL = "D"

    @property
    def step(self) -> tuple[int, int]:
        """(row, col) delta between consecutive cells of a ship."""
        return _STEPS[self]

    @property
    def arrow(self) -> str:
        return _ARROWS[self]


_STEPS = {
    Orientation.HORIZONTAL: (0, 1),
    Orientation.VERTICAL: (1, 0),
    Orientation.DIAGONAL: (1, 1),
}

_ARROWS = {
    Orientation.HORIZONTAL: "→",
    Orientation.VERTICAL: "↓",
    Orientation.DIAGONAL: "↘",
}


class ShipType(Enum):
    """Ship classes in the fleet and their lengths."""

    BATTLESHIP = 4
    CRUISER = 3
    DESTROYER = 2

    @property
    def length(self) -> int:
        return self.value


@dataclass(frozen=True)
class FleetSlot:
    """One position in the fixed fleet: which ship goes there and its label."""

    ship_id: int
    ship_type: ShipType
    name: str


FLEET_BLUEPRINT: tuple[FleetSlot, ...] = (
    FleetSlot(1, ShipType.BATTLESHIP, "Battleship"),
    FleetSlot(2, ShipType.CRUISER, "Cruiser 1"),
    FleetSlot(3, ShipType.CRUISER, "Cruiser 2"),
    FleetSlot(4, ShipType.DESTROYER, "Destroyer"),
)
FLEET_SIZE = len(FLEET_BLUEPRINT)


def ship_path(origin: Coordinate, orientation: Orientation, length: int) -> list[Coordinate]:
    """Cells covered by stepping ``length`` times from ``origin``.

    No bounds checking: the path may leave the board.
    """
    d_row, d_col = orientation.step
    return [origin.offset(d_row * step, d_col * step) for step in range(length)]


@dataclass
class Ship:
    """A placed ship. ``destroyed`` only ever goes from False to True."""

    id: int
    ship_type: ShipType
    origin: Coordinate
    orientation: Orientation
    destroyed: bool = False

    @classmethod
    def from_slot(cls, slot: FleetSlot, origin: Coordinate, orientation: Orientation) -> Ship:
        return cls(slot.ship_id, slot.ship_type, origin, orientation)

    @property
    def length(self) -> int:
        return self.ship_type.length

    @property
    def class_name(self) -> str:
        return self.ship_type.name.title()

    def coordinates(self) -> list[Coordinate]:
        """Return the ordered cells this ship occupies."""
        return ship_path(self.origin, self.orientation, self.length)


Fleet = list[Ship]


def parse_orientation(text: str) -> Orientation | InputError:
    """Accept a single ``H``, ``V`` or ``D`` in either case."""
    token = text.strip().upper()
    if len(token) != 1:
        return InputError.INVALID_ORIENTATION
    try:
        return Orientation(token)
    except ValueError:
        return InputError.INVALID_ORIENTATION
