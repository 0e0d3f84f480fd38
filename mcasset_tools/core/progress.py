"""Progress readout for archive assembly."""

from __future__ import annotations

from rich.console import Console
from rich.text import Text


def percentage(unit_index: int, total_units: int) -> int:
    """Return the completed percentage, floored.

    An empty run (``total_units == 0``) counts as complete.

    Example:
        >>> percentage(4, 200)
        2
        >>> percentage(0, 0)
        100
    """
    if total_units <= 0:
        return 100
    return unit_index * 100 // total_units


def format_counter(unit_index: int, total_units: int) -> str:
    """Format the bracketed counter, e.g. ``[5/200 2%]``."""
    return f"[{unit_index + 1}/{total_units} {percentage(unit_index, total_units)}%]"


def format_status(unit_index: int, total_units: int, label: str) -> str:
    """Format a progress line for the unit about to be written.

    Example:
        >>> format_status(4, 200, "pack.png")
        '[5/200 2%] Writing pack.png'
    """
    return f"{format_counter(unit_index, total_units)} Writing {label}"


class ProgressReporter:
    """Prints one status line per archive entry.

    The counter starts at 0 and is advanced after every report.
    """

    def __init__(self, total_units: int = 0, console: Console | None = None):
        self.total_units = total_units
        self.console = console or Console(highlight=False)
        self.written = 0

    def report(self, label: str) -> None:
        """Report the next unit and advance the counter."""
        line = Text()
        line.append(format_counter(self.written, self.total_units) + " ", style="bold white")
        line.append(f"Writing {label}", style="grey70")
        self.console.print(line)
        self.written += 1
