from __future__ import annotations

import json
import logging
from dataclasses import dataclass

from ..common.validators import require_iso_date, require_non_empty
from ..core.constants import NOTES_KEY
from ..storage.repository import KeyValueStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotesStats:
    total: int
    this_month: int


class CalendarNotesService:
    """Personal notes keyed by ISO date, stored as one JSON object."""

    def __init__(self, store: KeyValueStore):
        self._store = store

    def load(self) -> dict[str, str]:
        raw = self._store.get(NOTES_KEY)
        if not raw:
            return {}
        try:
            notes = json.loads(raw)
        except ValueError:
            logger.warning("Stored calendar notes are not valid JSON; starting empty")
            return {}
        if not isinstance(notes, dict):
            return {}
        return {str(k): str(v) for k, v in notes.items()}

    def _save(self, notes: dict[str, str]) -> None:
        self._store.set(NOTES_KEY, json.dumps(notes, ensure_ascii=False))

    def get(self, day: str) -> str:
        return self.load().get(day, "")

    def save_note(self, day: str, text: str) -> dict[str, str]:
        key = require_iso_date(day, "Date").isoformat()
        text = require_non_empty(text, "Note")

        notes = self.load()
        notes[key] = text
        self._save(notes)
        return notes

    def delete_note(self, day: str) -> dict[str, str]:
        notes = self.load()
        if notes.pop(day, None) is not None:
            self._save(notes)
        return notes

    def list_notes(self) -> list[tuple[str, str]]:
        return sorted(self.load().items(), key=lambda kv: kv[0], reverse=True)

    def stats(self, month_prefix: str) -> NotesStats:
        """month_prefix is "YYYY-MM"."""
        notes = self.load()
        return NotesStats(
            total=len(notes),
            this_month=sum(1 for day in notes if month_prefix and day.startswith(month_prefix)),
        )
