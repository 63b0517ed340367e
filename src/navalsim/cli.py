"""Console driver: manual fleet placement followed by three special attacks."""

from __future__ import annotations

import argparse
from typing import Callable, Sequence

from navalsim.engine.coordinates import Coordinate, InputError, parse_coordinate
from navalsim.engine.grid import CellState
from navalsim.engine.instrumented_session import InstrumentedNavalSession
from navalsim.engine.placement import PlacementResult
from navalsim.engine.session import ATTACK_SEQUENCE, NavalSession
from navalsim.engine.ship import FLEET_SIZE, FleetSlot, Orientation, parse_orientation
from navalsim.render import (
    banner,
    format_attack_report,
    format_board,
    format_final_stats,
    format_pattern,
    format_ship_positions,
)
from navalsim.telemetry import TelemetryConfig, configure_console_logging, init_telemetry

MAX_PLACEMENT_ATTEMPTS = 5
EXIT_OK = 0
EXIT_PLACEMENT_FAILED = 1
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

Reader = Callable[[str], str]
Writer = Callable[[str], None]

INPUT_ERROR_MESSAGES = {
    InputError.INVALID_FORMAT: "Invalid format. Use LetterRow (e.g. A5).",
    InputError.INVALID_COLUMN: "Invalid column. Use letters A to J.",
    InputError.INVALID_ROW: "Invalid row. Use numbers 0 to 9.",
    InputError.INVALID_ORIENTATION: "Invalid orientation. Use H, V or D.",
}

PLACEMENT_ERROR_MESSAGES = {
    PlacementResult.OUT_OF_BOUNDS: (
        "Error: the ship leaves the board from this position!\n"
        "Hint: consider the direction and the ship's length ({length} cells)."
    ),
    PlacementResult.OCCUPIED: (
        "Error: another ship is blocking this position!\n"
        "Hint: choose a free area of the board."
    ),
}


def _read(read: Reader, prompt: str) -> str:
    try:
        return read(prompt)
    except EOFError:
        return ""


def _prompt_coordinate(read: Reader, write: Writer, message: str) -> Coordinate | None:
    result = parse_coordinate(_read(read, f"{message} (format LetterRow, e.g. A5, B3, J9): "))
    if isinstance(result, InputError):
        write(INPUT_ERROR_MESSAGES[result])
        return None
    write(f"Coordinate read: {result.label} (row {result.row}, column {result.col})")
    return result


def _prompt_orientation(read: Reader, write: Writer) -> Orientation | None:
    options = "\n".join(
        f"  {orientation.value} - {orientation.name.title()} ({orientation.arrow})"
        for orientation in Orientation
    )
    result = parse_orientation(_read(read, f"Ship orientation:\n{options}\nChoose (H/V/D): "))
    if isinstance(result, InputError):
        write(INPUT_ERROR_MESSAGES[result])
        return None
    write(f"Orientation selected: {result.value}")
    return result


def _place_one(session: NavalSession, slot: FleetSlot, read: Reader, write: Writer) -> bool:
    length = slot.ship_type.length
    write(f"\nPLACING SHIP {slot.ship_id}: {slot.name} (length {length})")
    for attempt in range(1, MAX_PLACEMENT_ATTEMPTS + 1):
        write(f"\nAttempt {attempt} of {MAX_PLACEMENT_ATTEMPTS}:")
        origin = _prompt_coordinate(read, write, "Enter the starting position")
        if origin is None:
            write("Try again.")
            continue
        orientation = _prompt_orientation(read, write)
        if orientation is None:
            write("Try again.")
            continue

        result = session.place_next_ship(origin, orientation)
        if result.ok:
            write(f"{slot.name} placed at {origin.label}!")
            write(format_board(session.grid.to_matrix()))
            return True
        write(PLACEMENT_ERROR_MESSAGES[result].format(length=length))

    write(f"Could not place the {slot.name} after {MAX_PLACEMENT_ATTEMPTS} attempts.")
    write("Restart the game and try again.")
    return False


def place_fleet(session: NavalSession, read: Reader, write: Writer) -> bool:
    """Prompt for every ship in turn; False as soon as one runs out of attempts."""
    write(banner("MANUAL SHIP PLACEMENT"))
    write(f"You need to place {FLEET_SIZE} ships on the board.")
    write(format_board(session.grid.to_matrix()))
    slot = session.next_slot()
    while slot is not None:
        if not _place_one(session, slot, read, write):
            return False
        slot = session.next_slot()
    write("\nAll ships placed successfully!")
    return True


def run_attacks(session: NavalSession, read: Reader, write: Writer) -> None:
    """One read per attack; an unreadable coordinate skips that attack."""
    write(banner("SPECIAL ABILITIES"))
    for kind in ATTACK_SEQUENCE:
        pattern = session.patterns[kind]
        write(format_pattern(pattern.name, pattern.to_matrix()))

    write(banner("COMBAT BEGINS"))
    for index, kind in enumerate(ATTACK_SEQUENCE, start=1):
        write(f"  {index}. {kind.title}")
    for kind in ATTACK_SEQUENCE:
        write(f"\nChoose where to apply the {kind.title} ability:")
        center = _prompt_coordinate(read, write, "Attack centre coordinate")
        if center is None:
            continue
        report = session.attack(kind, center)
        write(format_attack_report(report))


def run_session(
    session: NavalSession | None = None,
    read: Reader = input,
    write: Writer = print,
) -> int:
    """Drive a full session and return the process exit code."""
    session = session or InstrumentedNavalSession()
    write(banner("NAVAL BATTLE"))
    write("Coordinates use LetterRow (e.g. A5): columns A-J, rows 0-9.")
    write("Orientations: H (horizontal), V (vertical), D (diagonal).")

    if not place_fleet(session, read, write):
        if isinstance(session, InstrumentedNavalSession):
            session.abort("placement_failed")
        write("Ship placement failed. Ending the game.")
        return EXIT_PLACEMENT_FAILED

    write(format_board(session.grid.to_matrix()))
    write(format_ship_positions(session.grid.cells_in_state(CellState.SHIP)))

    run_attacks(session, read, write)

    write(banner("FINAL BOARD"))
    write(format_board(session.grid.to_matrix()))
    stats = session.finish()
    write(format_final_stats(stats, FLEET_SIZE))
    write(banner("END OF SIMULATION"))
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Place a fleet and fire special attacks.")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Log level for stderr output (default WARNING).",
    )
    parser.add_argument(
        "--telemetry",
        action="store_true",
        help="Initialise OpenTelemetry exporters from NAVALSIM_*/OTEL_* variables.",
    )
    args = parser.parse_args(argv)

    config = TelemetryConfig.from_env()
    configure_console_logging(args.log_level or config.log_level.upper())
    if args.telemetry:
        init_telemetry(config)
    return run_session()


if __name__ == "__main__":
    raise SystemExit(main())
