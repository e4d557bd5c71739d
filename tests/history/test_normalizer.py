from datetime import date

import pytest

from instantlog.history.deduplicator import dedupe
from instantlog.history.model import HistoryPayload
from instantlog.history.normalizer import merge_payload, normalize


def test_attendance_record_keeps_times():
    [rec] = normalize([{"date": "2024-01-05", "time_in": "09:00", "time_out": "17:00", "location": "HQ"}])

    assert rec.date == "2024-01-05"
    assert rec.is_leave is False
    assert rec.leave_reason == ""
    assert (rec.time_in, rec.time_out) == ("09:00", "17:00")
    assert rec.to_dict()["location"] == "HQ"


def test_span_leave_uses_start_date_only():
    records = normalize([{"from_date": "2024-02-01", "to_date": "2024-02-03", "reason": "Trip"}])

    assert len(records) == 1
    rec = records[0]
    assert rec.date == "2024-02-01"
    assert rec.is_leave is True
    assert rec.leave_type == "Full Day"
    assert rec.leave_reason == "Trip"


def test_every_leave_marker_is_recognised():
    raws = [
        {"date": "2024-03-01", "absent": True},
        {"date": "2024-03-02", "status": "absent"},
        {"date": "2024-03-03", "status": "leave"},
        {"date": "2024-03-04", "type": "leave"},
        {"date": "2024-03-05", "reason": "Dentist"},
        {"date": "2024-03-06", "is_leave": True},
        {"date": "2024-03-07", "leave": True},
    ]

    assert all(r.is_leave for r in normalize(raws))


def test_truthy_but_not_true_flags_do_not_mark_leave():
    [rec] = normalize([{"date": "2024-03-01", "absent": "yes", "time_in": "09:00"}])

    assert rec.is_leave is False


def test_reason_with_times_is_attendance():
    [rec] = normalize([{"date": "2024-03-01", "reason": "late bus", "time_in": "09:40", "time_out": "18:00"}])

    assert rec.is_leave is False
    assert rec.time_in == "09:40"


def test_leave_never_carries_times():
    [rec] = normalize([{"date": "2024-03-01", "absent": True, "time_in": "09:00", "time_out": "10:00"}])

    assert rec.time_in is None
    assert rec.time_out is None


def test_leave_reason_fallback_chain():
    records = normalize(
        [
            {"date": "2024-04-01", "absent": True, "leave_reason": "Flu"},
            {"date": "2024-04-02", "absent": True, "remarks": "Family"},
            {"date": "2024-04-03", "absent": True, "reason": ""},
        ]
    )

    assert [r.leave_reason for r in records] == ["Flu", "Family", "Leave"]


def test_leave_type_resolution():
    records = normalize(
        [
            {"date": "2024-05-01", "absent": True, "leave_type": "Sick", "half_day": True},
            {"date": "2024-05-02", "absent": True, "half_day": True},
            {"date": "2024-05-03", "absent": True, "short_leave": True},
            {"date": "2024-05-04", "absent": True},
        ]
    )

    assert [r.leave_type for r in records] == ["Sick", "Half Day", "Short Leave", "Full Day"]


def test_records_without_date_and_junk_are_dropped():
    records = normalize(
        [
            {"time_in": "09:00"},
            {"date": "", "absent": True},
            None,
            "2024-01-01",
            {"date": "2024-06-02", "time_in": "09:00", "time_out": "17:00"},
        ]
    )

    assert [r.date for r in records] == ["2024-06-02"]


def test_date_objects_are_rendered_iso():
    [rec] = normalize([{"date": date(2024, 7, 4), "time_in": "09:00"}])

    assert rec.date == "2024-07-04"


def test_normalize_tolerates_none():
    assert normalize(None) == []


def test_merge_payload_puts_attendance_before_leaves():
    payload = HistoryPayload(attendance=[{"date": "a"}], leaves=[{"date": "b"}])

    assert merge_payload(payload) == [{"date": "a"}, {"date": "b"}]
    assert merge_payload(None) == []


@pytest.mark.parametrize("status", [["weird"], {"code": 1}, 3])
def test_non_text_status_is_kept_as_attendance(status):
    [rec] = normalize([{"date": "2024-06-01", "status": status, "time_in": "09:00", "time_out": "17:00"}])

    assert rec.date == "2024-06-01"
    assert not rec.is_leave
    assert rec.time_in == "09:00"


def test_non_text_status_does_not_lose_to_same_day_leave():
    records = dedupe(
        normalize(
            [
                {"date": "2024-06-01", "status": {"code": 1}, "type": ["x"], "time_in": "09:00", "time_out": "17:00"},
                {"date": "2024-06-01", "absent": True, "reason": "Sick"},
            ]
        )
    )

    assert len(records) == 1
    assert not records[0].is_leave
