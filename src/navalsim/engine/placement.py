"""Validate-then-commit ship placement onto a :class:`Grid`."""

from __future__ import annotations

import logging
from enum import Enum

from navalsim.telemetry import get_meter, get_tracer

from .grid import CellState, Grid
from .ship import Ship

logger = logging.getLogger(__name__)
tracer = get_tracer("navalsim.engine.placement")
meter = get_meter("navalsim.engine.placement")

PLACEMENT_COUNTER = meter.create_counter(
    "navalsim_ship_placements",
    unit="1",
    description="Number of attempted ship placements",
)


class PlacementResult(Enum):
    """Outcome of a placement attempt."""

    SUCCESS = "success"
    OUT_OF_BOUNDS = "out_of_bounds"
    OCCUPIED = "occupied"

    @property
    def ok(self) -> bool:
        return self is PlacementResult.SUCCESS


def validate_placement(grid: Grid, ship: Ship) -> PlacementResult:
    """Check every cell of the ship's path without touching the grid.

    Cells are checked in path order and the first failing cell decides the
    result; bounds are checked before occupancy.
    """
    for coord in ship.coordinates():
        if not grid.is_in_bounds(coord.row, coord.col):
            return PlacementResult.OUT_OF_BOUNDS
        if not grid.is_available(coord.row, coord.col):
            return PlacementResult.OCCUPIED
    return PlacementResult.SUCCESS


def place_ship(grid: Grid, ship: Ship) -> PlacementResult:
    """Mark the ship's cells as ``SHIP`` if, and only if, all of them are free."""
    with tracer.start_as_current_span("placement.place_ship") as span:
        span.set_attribute("ship.id", ship.id)
        span.set_attribute("ship.type", ship.ship_type.name)
        span.set_attribute("ship.orientation", ship.orientation.name)
        span.set_attribute("ship.origin.row", ship.origin.row)
        span.set_attribute("ship.origin.col", ship.origin.col)

        result = validate_placement(grid, ship)
        span.set_attribute("placement.result", result.value)
        PLACEMENT_COUNTER.add(1, attributes={"result": result.value})
        fields = {
            "ship_id": ship.id,
            "ship_type": ship.ship_type.name,
            "orientation": ship.orientation.name,
            "row": ship.origin.row,
            "col": ship.origin.col,
        }
        if not result.ok:
            logger.warning("ship_placement_failed", extra={**fields, "reason": result.value})
            return result

        for coord in ship.coordinates():
            grid.set_state(coord.row, coord.col, CellState.SHIP)
        logger.info("ship_placed", extra=fields)
        return result
