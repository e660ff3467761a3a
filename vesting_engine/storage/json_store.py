"""
JSON-based storage for vesting schedules.

Simple, file-based storage that persists each schedule as a JSON file.
Each schedule gets its own file in {data_dir}/{schedule_id}.json, and its
audit trail is appended to {data_dir}/{schedule_id}.audit.jsonl.

Records are never deleted: a schedule file is the permanent record of the
grant, and the audit file is append-only.
"""

import logging
import os
import re
from pathlib import Path
from typing import List, Optional

from ..core.exceptions import InvalidScheduleError, ScheduleAlreadyExistsError, ScheduleNotFoundError
from ..core.models import AuditEntry, VestingSchedule

logger = logging.getLogger(__name__)

SCHEDULE_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]{0,127}$")


class ScheduleStore:
    """
    JSON-based storage for vesting schedules.

    Usage:
        store = ScheduleStore(Path("data/schedules"))

        # Create (fails if the id is taken)
        store.create("alice-2024", schedule)

        # Update after a claim or revocation
        store.save("alice-2024", result.schedule)

        # Load
        schedule = store.get("alice-2024")
    """

    def __init__(self, data_dir: Optional[Path] = None):
        """Initialize store with data directory."""
        if data_dir is None:
            data_dir = Path("data") / "schedules"

        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _get_path(self, schedule_id: str) -> Path:
        """Get file path for a schedule id."""
        if not SCHEDULE_ID_PATTERN.match(schedule_id) or schedule_id.endswith(".audit"):
            raise InvalidScheduleError("schedule_id", schedule_id, "must be 1-128 characters of [A-Za-z0-9_.-]")
        return self.data_dir / f"{schedule_id}.json"

    def _get_audit_path(self, schedule_id: str) -> Path:
        return self._get_path(schedule_id).with_suffix(".audit.jsonl")

    def create(self, schedule_id: str, schedule: VestingSchedule) -> Path:
        """
        Persist a new schedule.

        The file is opened in exclusive mode, so two creators racing on the
        same id cannot both succeed.

        Raises:
            ScheduleAlreadyExistsError: the id already has a record
        """
        path = self._get_path(schedule_id)
        try:
            with open(path, "x", encoding="utf-8") as f:
                f.write(schedule.model_dump_json(indent=2))
        except FileExistsError:
            raise ScheduleAlreadyExistsError(schedule_id) from None

        logger.debug(f"Created schedule file {path}")
        return path

    def save(self, schedule_id: str, schedule: VestingSchedule) -> Path:
        """
        Overwrite an existing schedule.

        Writes to a temporary file and renames it into place so readers
        never observe a partially written record.

        Raises:
            ScheduleNotFoundError: the id has no record yet (use create)
        """
        path = self._get_path(schedule_id)
        if not path.exists():
            raise ScheduleNotFoundError(schedule_id)

        tmp_path = path.with_suffix(".json.tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(schedule.model_dump_json(indent=2))
        os.replace(tmp_path, path)

        logger.debug(f"Saved schedule file {path}")
        return path

    def load(self, schedule_id: str) -> Optional[VestingSchedule]:
        """
        Load a schedule from its JSON file.

        Returns None if file doesn't exist.
        """
        path = self._get_path(schedule_id)

        if not path.exists():
            return None

        with open(path, "r", encoding="utf-8") as f:
            return VestingSchedule.model_validate_json(f.read())

    def get(self, schedule_id: str) -> VestingSchedule:
        """Load a schedule, raising if it does not exist."""
        schedule = self.load(schedule_id)
        if schedule is None:
            raise ScheduleNotFoundError(schedule_id)
        return schedule

    def exists(self, schedule_id: str) -> bool:
        """Check if a schedule exists for the id."""
        return self._get_path(schedule_id).exists()

    def list_all(self) -> List[str]:
        """List all stored schedule ids."""
        return sorted(p.stem for p in self.data_dir.glob("*.json"))

    def append_audit(self, schedule_id: str, entries: List[AuditEntry]) -> None:
        """Append audit entries to the schedule's JSON-lines log."""
        if not entries:
            return
        with open(self._get_audit_path(schedule_id), "a", encoding="utf-8") as f:
            for entry in entries:
                f.write(entry.model_dump_json() + "\n")

    def load_audit(self, schedule_id: str) -> List[AuditEntry]:
        """Load the audit trail for a schedule, oldest first."""
        path = self._get_audit_path(schedule_id)
        if not path.exists():
            return []

        with open(path, "r", encoding="utf-8") as f:
            return [AuditEntry.model_validate_json(line) for line in f if line.strip()]
