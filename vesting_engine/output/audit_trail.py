"""Audit trail formatter.

Generates a chronological record of every attempted operation on a
schedule: who called, at what schedule time, what moved, and why a call
was rejected.
"""

from ..core.models import AuditEntry


class AuditTrailFormatter:
    """Formats audit trail entries for review."""

    def format_summary(self, entries: list[AuditEntry], schedule_id: str | None = None) -> str:
        """
        Format a summary of the audit trail.

        Args:
            entries: Audit entries, oldest first
            schedule_id: Schedule the entries belong to, for the header

        Returns:
            Formatted string summary
        """
        lines = []
        lines.append("=" * 70)
        lines.append(f"AUDIT TRAIL: {schedule_id}" if schedule_id else "AUDIT TRAIL")
        lines.append("=" * 70)
        lines.append("")

        if not entries:
            lines.append("  No operations recorded")
            lines.append("")
            return "\n".join(lines)

        ok = sum(1 for e in entries if e.success)
        lines.append(f"Operations: {len(entries)} ({ok} succeeded, {len(entries) - ok} rejected)")
        lines.append("")

        moved: dict[str, int] = {}
        for entry in entries:
            if entry.success and entry.amount is not None:
                moved[entry.operation.value] = moved.get(entry.operation.value, 0) + entry.amount
        if moved:
            lines.append("TOTALS")
            lines.append("-" * 40)
            for operation, amount in moved.items():
                lines.append(f"  {operation}: {amount:,}")
            lines.append("")

        lines.append("OPERATIONS")
        lines.append("-" * 40)
        for entry in entries:
            status = "OK" if entry.success else "REJECTED"
            caller = entry.caller.hex() if entry.caller is not None else "N/A"
            when = f"now={entry.now}" if entry.now is not None else "now=N/A"
            lines.append(f"  [{entry.recorded_at.strftime('%Y-%m-%d %H:%M:%S')}] {entry.operation.value} {status}")
            lines.append(f"    Caller: {caller}, {when}")
            if entry.amount is not None:
                lines.append(f"    Amount: {entry.amount:,}")
            if entry.error_message:
                lines.append(f"    Error: {entry.error_type}: {entry.error_message}")
        lines.append("")

        lines.append("=" * 70)
        lines.append("END OF AUDIT TRAIL")
        lines.append("=" * 70)

        return "\n".join(lines)

    def format_to_file(self, entries: list[AuditEntry], filepath: str, schedule_id: str | None = None) -> None:
        """Write audit trail to file."""
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(self.format_summary(entries, schedule_id))
