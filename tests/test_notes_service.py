import pytest

from instantlog.core.exceptions import ValidationError
from instantlog.notes.service import CalendarNotesService


def test_save_get_delete(store):
    notes = CalendarNotesService(store)

    notes.save_note("2024-01-05", "  standup moved  ")
    notes.save_note("2024-02-01", "payday")

    assert notes.get("2024-01-05") == "standup moved"
    assert [d for d, _ in notes.list_notes()] == ["2024-02-01", "2024-01-05"]

    stats = notes.stats("2024-01")
    assert (stats.total, stats.this_month) == (2, 1)

    assert notes.delete_note("2024-01-05") == {"2024-02-01": "payday"}
    assert notes.delete_note("2030-01-01") == {"2024-02-01": "payday"}


def test_save_overwrites_same_day(store):
    notes = CalendarNotesService(store)
    notes.save_note("2024-01-05", "a")
    notes.save_note("2024-01-05", "b")

    assert notes.load() == {"2024-01-05": "b"}


@pytest.mark.parametrize("day, text", [("05/01/2024", "x"), ("", "x"), ("2024-01-05", "   ")])
def test_save_validates(store, day, text):
    with pytest.raises(ValidationError):
        CalendarNotesService(store).save_note(day, text)


def test_corrupt_notes_read_empty(store):
    store.set("calendar_notes", "[oops")
    assert CalendarNotesService(store).load() == {}

    store.set("calendar_notes", "[1, 2]")
    assert CalendarNotesService(store).load() == {}
