"""Plain-text rendering of boards, patterns and attack results."""

from __future__ import annotations

from typing import Sequence

from navalsim.engine.combat import AttackReport, ShotOutcome
from navalsim.engine.coordinates import COLUMN_LETTERS, Coordinate
from navalsim.engine.stats import GameStats

AFFECTED = "●"
UNAFFECTED = "·"

BOARD_LEGEND = (
    "Legend:\n"
    "   0 = water (empty)    3 = ship\n"
    "   1 = water hit        2 = ship hit\n"
    "   Columns: A-J  |  Rows: 0-9"
)

SHOT_FEEDBACK = {
    ShotOutcome.HIT: "HIT! Ship struck",
    ShotOutcome.MISS: "water - shot missed",
    ShotOutcome.ALREADY_HIT: "already hit before",
    ShotOutcome.ALREADY_HIT_WATER: "water already hit",
}


def banner(title: str, width: int = 40) -> str:
    bar = "═" * width
    return f"╔{bar}╗\n║{title.center(width)}║\n╚{bar}╝"


def format_board(matrix: Sequence[Sequence[int]]) -> str:
    """Render integer cell codes with column letters across and row digits down."""
    width = len(matrix[0]) if matrix else 0
    lines = ["    " + "".join(f" {COLUMN_LETTERS[col]} " for col in range(width))]
    lines.append("   ┌" + "───" * width + "┐")
    for row, cells in enumerate(matrix):
        lines.append(f" {row} │" + "".join(f" {code} " for code in cells) + "│")
    lines.append("   └" + "───" * width + "┘")
    lines.append(BOARD_LEGEND)
    return "\n".join(lines)


def format_pattern(name: str, matrix: Sequence[Sequence[bool]]) -> str:
    lines = [banner(f"ABILITY: {name}")]
    lines.append("    " + "".join(f"{col:2d} " for col in range(len(matrix[0]))))
    for row, flags in enumerate(matrix):
        symbols = "".join(f" {AFFECTED if flag else UNAFFECTED} " for flag in flags)
        lines.append(f" {row}: {symbols}")
    lines.append(f"Legend: {AFFECTED} = affected area, {UNAFFECTED} = unaffected area")
    return "\n".join(lines)


def format_ship_positions(cells: Sequence[Coordinate]) -> str:
    lines = [banner("SHIP COORDINATES")]
    lines.extend(f"Ship position: {coord.label}" for coord in cells)
    lines.append(f"Total cells occupied by ships: {len(cells)}")
    return "\n".join(lines)


def _percent(ratio: float | None) -> str:
    return "n/a" if ratio is None else f"{ratio * 100:.1f}%"


def format_attack_report(report: AttackReport) -> str:
    lines = [banner(f"APPLYING ABILITY: {report.pattern_name}")]
    lines.append(f"Attack centre: {report.center.label}")
    lines.append("Cells struck:")
    for shot in report.shots:
        lines.append(f"   [{shot.coord.label}] -> {SHOT_FEEDBACK[shot.outcome]}")
    for ship in report.destroyed:
        lines.append(f"SHIP DESTROYED! The {ship.class_name} has been sunk!")
    lines.append("Result of this attack:")
    lines.append(f"   Shots fired: {report.total}")
    lines.append(f"   Hits: {report.hits}")
    lines.append(f"   Misses: {report.misses}")
    if report.hits:
        lines.append(f"   Hit rate: {_percent(report.accuracy)}")
    return "\n".join(lines)


def format_final_stats(stats: GameStats, fleet_size: int) -> str:
    lines = [banner("FINAL STATISTICS")]
    lines.append(f"Total shots fired: {stats.total_shots}")
    lines.append(f"Total hits: {stats.hits}")
    lines.append(f"Total misses: {stats.misses}")
    if stats.total_shots:
        lines.append(f"Overall hit rate: {_percent(stats.accuracy)}")
    lines.append(f"Ships destroyed: {stats.ships_destroyed} of {fleet_size}")
    return "\n".join(lines)
