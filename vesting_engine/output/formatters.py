"""Output formatters for vesting views.

Provides multiple output formats:
- JSON: Machine-readable, identities hex-encoded
- Table: Human-readable CLI output, times rendered as UTC dates
"""

import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from io import StringIO

from pydantic import BaseModel
from rich.console import Console
from rich.table import Table

from ..core.models import OperationResult, ScheduleSnapshot, TransferInstruction, VestingStatus

logger = logging.getLogger(__name__)


def format_timestamp(ts: int | None) -> str:
    """Render unix seconds as a UTC date, or N/A."""
    if ts is None:
        return "N/A"
    try:
        return datetime.fromtimestamp(ts, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
    except (OverflowError, OSError, ValueError):
        # Beyond what datetime can represent
        return str(ts)


def format_duration(seconds: int) -> str:
    """Render a duration as days/hours/minutes/seconds."""
    days, rest = divmod(seconds, 86_400)
    hours, rest = divmod(rest, 3_600)
    minutes, secs = divmod(rest, 60)
    parts = []
    if days:
        parts.append(f"{days}d")
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if secs or not parts:
        parts.append(f"{secs}s")
    return " ".join(parts)


class OutputFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def format(self, view: BaseModel) -> str:
        """Format a view model as a string."""
        pass

    def format_to_file(self, view: BaseModel, filepath: str) -> None:
        """Write formatted view to a file."""
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(self.format(view))


class JSONFormatter(OutputFormatter):
    """Formats views as JSON."""

    def __init__(self, indent: int = 2, include_tuple: bool = False):
        """
        Initialize JSON formatter.

        Args:
            indent: JSON indentation level
            include_tuple: Add the positional tuple under "tuple" for query views
        """
        self.indent = indent
        self.include_tuple = include_tuple

    def format(self, view: BaseModel) -> str:
        """Format a view as a JSON string."""
        data = view.model_dump(mode="json")

        if self.include_tuple and isinstance(view, (ScheduleSnapshot, VestingStatus)):
            data["tuple"] = [
                value.hex() if isinstance(value, bytes) else value for value in view.as_tuple()
            ]

        return json.dumps(data, indent=self.indent)


class TableFormatter(OutputFormatter):
    """Formats views as human-readable tables for CLI output."""

    def __init__(self, use_rich: bool = True, width: int = 100):
        """
        Initialize table formatter.

        Args:
            use_rich: Use rich for colored output
            width: Maximum table width
        """
        self.use_rich = use_rich
        self.width = width

    def _rows(self, view: BaseModel) -> tuple[str, list[tuple[str, str]]]:
        """Title and (label, value) rows for a view."""
        if isinstance(view, ScheduleSnapshot):
            rows = [
                ("Grantor", view.grantor_id.hex()),
                ("Beneficiary", view.beneficiary_id.hex()),
                ("Asset", str(view.asset_id)),
                ("Total", f"{view.total_tokens:,}"),
                ("Start", format_timestamp(view.start_time)),
                ("Cliff", format_timestamp(view.cliff_time)),
                ("Duration", format_duration(view.duration)),
                ("Claimed", f"{view.claimed_tokens:,}"),
                ("Vested", f"{view.vested:,}"),
                ("Claimable", f"{view.claimable:,}"),
                ("Revoked", format_timestamp(view.revoked_at) if view.revoked_at is not None else "no"),
                ("Revocation mode", view.revocation_mode.description),
                ("As of", format_timestamp(view.as_of)),
            ]
            return "Vesting Schedule", rows

        if isinstance(view, VestingStatus):
            rows = [
                ("Vested", f"{view.vested:,}"),
                ("Claimable", f"{view.claimable:,}"),
                ("Claimed", f"{view.claimed_tokens:,}"),
                ("You are beneficiary", "yes" if view.is_beneficiary else "no"),
                ("Cliff reached", "yes" if view.cliff_reached else "no"),
                ("Time remaining", format_duration(view.seconds_remaining)),
                ("As of", format_timestamp(view.as_of)),
            ]
            return "Vesting Status", rows

        if isinstance(view, OperationResult):
            view = view.instruction

        if isinstance(view, TransferInstruction):
            rows = [
                ("Reason", view.reason.value),
                ("Asset", str(view.asset)),
                ("Recipient", view.to.hex()),
                ("Amount", f"{view.amount:,}"),
            ]
            return "Transfer Instruction", rows

        raise TypeError(f"No table layout for {type(view).__name__}")

    def format(self, view: BaseModel) -> str:
        """Format a view as a readable table."""
        if self.use_rich:
            return self._format_rich(view)
        return self._format_plain(view)

    def _format_plain(self, view: BaseModel) -> str:
        """Plain text formatting without colors."""
        title, rows = self._rows(view)
        label_width = max(len(label) for label, _ in rows) + 1

        lines = [title.upper(), "-" * 40]
        for label, value in rows:
            lines.append(f"  {label + ':':<{label_width}} {value}")
        return "\n".join(lines)

    def _format_rich(self, view: BaseModel) -> str:
        """Rich library formatting with colors."""
        title, rows = self._rows(view)

        output = StringIO()
        console = Console(file=output, force_terminal=True, width=self.width)

        table = Table(title=title, show_header=False)
        table.add_column("Field", style="cyan")
        table.add_column("Value", style="green")
        for label, value in rows:
            table.add_row(label, value)
        console.print(table)

        return output.getvalue()

    def format_to_file(self, view: BaseModel, filepath: str) -> None:
        """Write formatted output to file."""
        # For file output, use plain format (no ANSI codes)
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(self._format_plain(view))
