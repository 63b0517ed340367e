"""High-level session tests."""

import pytest

from navalsim.engine.coordinates import Coordinate
from navalsim.engine.grid import CellState
from navalsim.engine.patterns import PatternKind
from navalsim.engine.placement import PlacementResult
from navalsim.engine.session import ATTACK_SEQUENCE, NavalSession, SessionPhase
from navalsim.engine.ship import Orientation

FLEET_LAYOUT = [
    (Coordinate(0, 0), Orientation.HORIZONTAL),  # Battleship A0-D0
    (Coordinate(2, 0), Orientation.VERTICAL),  # Cruiser A2-A4
    (Coordinate(5, 5), Orientation.DIAGONAL),  # Cruiser F5-H7
    (Coordinate(9, 0), Orientation.HORIZONTAL),  # Destroyer A9-B9
]


def _placed_session() -> NavalSession:
    session = NavalSession()
    for origin, orientation in FLEET_LAYOUT:
        assert session.place_next_ship(origin, orientation) is PlacementResult.SUCCESS
    return session


def test_fleet_placement_moves_to_combat() -> None:
    session = _placed_session()
    assert session.phase is SessionPhase.COMBAT
    assert session.next_slot() is None
    assert [ship.id for ship in session.fleet] == [1, 2, 3, 4]
    assert [ship.length for ship in session.fleet] == [4, 3, 3, 2]
    assert session.grid.count(CellState.SHIP) == 12


def test_failed_placement_does_not_consume_slot() -> None:
    session = NavalSession()
    result = session.place_next_ship(Coordinate(0, 8), Orientation.HORIZONTAL)
    assert result is PlacementResult.OUT_OF_BOUNDS
    assert session.fleet == []
    assert session.next_slot().name == "Battleship"

    session.place_next_ship(Coordinate(0, 0), Orientation.HORIZONTAL)
    result = session.place_next_ship(Coordinate(0, 3), Orientation.VERTICAL)
    assert result is PlacementResult.OCCUPIED
    assert session.next_slot().name == "Cruiser 1"


def test_attack_requires_combat_phase() -> None:
    session = NavalSession()
    with pytest.raises(RuntimeError):
        session.attack(PatternKind.CONE, Coordinate(5, 5))


def test_placement_rejected_after_fleet_complete() -> None:
    session = _placed_session()
    with pytest.raises(RuntimeError):
        session.place_next_ship(Coordinate(7, 0), Orientation.HORIZONTAL)


def test_attack_sequence_updates_stats() -> None:
    session = _placed_session()
    assert ATTACK_SEQUENCE == (PatternKind.CONE, PatternKind.CROSS, PatternKind.OCTAHEDRON)

    # destroyer at A9-B9: cone row 2 sweeps row 9 from column 0 to column 3
    cone = session.attack(PatternKind.CONE, Coordinate(9, 1))
    assert cone.hits == 2
    assert [ship.id for ship in cone.destroyed] == [4]

    cross = session.attack(PatternKind.CROSS, Coordinate(0, 1))
    # battleship A0-D0 lies along the cross arm
    assert cross.hits == 4
    assert [ship.id for ship in cross.destroyed] == [1]
    assert session.stats.ships_destroyed == 2

    octa = session.attack(PatternKind.OCTAHEDRON, Coordinate(9, 9))
    assert octa.hits == 0

    stats = session.finish()
    assert session.phase is SessionPhase.FINISHED
    assert stats.total_shots == cone.total + cross.total + octa.total
    assert stats.hits == 6
    assert stats.misses == stats.total_shots - 6


def test_get_state_is_a_snapshot() -> None:
    session = _placed_session()
    state = session.get_state()
    assert state.phase is SessionPhase.COMBAT
    assert state.board[0][:4] == (3, 3, 3, 3)
    assert state.ships[2].name == "Cruiser 2"
    assert state.ships[2].cells == (Coordinate(5, 5), Coordinate(6, 6), Coordinate(7, 7))

    session.attack(PatternKind.OCTAHEDRON, Coordinate(9, 0))
    assert state.stats.total_shots == 0
    assert state.board[9][0] == 3
    assert session.get_state().board[9][0] == 2


def test_attack_centre_off_the_board_leaves_session_untouched() -> None:
    session = _placed_session()
    with pytest.raises(ValueError):
        session.attack(PatternKind.CROSS, Coordinate(0, 10))
    assert session.stats.total_shots == 0
    assert session.grid.count(CellState.HIT_WATER) == 0
