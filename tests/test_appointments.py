"""
Tests for appointment decoding and the appointment fetcher
"""

import pytest
from datetime import date, datetime, timedelta
from unittest.mock import Mock

from config.app_config import AppointmentsConfig
from services.appointment_service.fetcher import AppointmentFetcher
from services.appointment_service.models import (
    Appointment, AppointmentStatus, decode_appointment
)
from services.exceptions import DecodeError, FetchError


def make_row(index: int, **overrides):
    row = {
        "id": f"appt-{index}",
        "user_id": "u1",
        "date": (date(2026, 1, 1) + timedelta(days=index)).isoformat(),
        "time_slot": "10:00 - 11:00",
        "event_type": "Consultation",
        "name": "Alex",
        "location": "Studio A",
        "status": "pending",
        "details": None,
        "created_at": "2025-12-01T09:30:00+00:00",
    }
    row.update(overrides)
    return row


class TestAppointmentStatus:
    """Test the closed status enum"""

    @pytest.mark.parametrize("value,expected", [
        ("pending", AppointmentStatus.PENDING),
        ("confirmed", AppointmentStatus.CONFIRMED),
        ("cancelled", AppointmentStatus.CANCELLED),
        (" Confirmed ", AppointmentStatus.CONFIRMED),
        ("unknown-value", AppointmentStatus.UNKNOWN),
        ("", AppointmentStatus.UNKNOWN),
        (None, AppointmentStatus.UNKNOWN),
        (3, AppointmentStatus.UNKNOWN),
    ])
    def test_decode(self, value, expected):
        assert AppointmentStatus.decode(value) is expected

    def test_labels_and_badges(self):
        assert AppointmentStatus.PENDING.label == "Pending"
        assert AppointmentStatus.CONFIRMED.badge_style == "green"
        assert AppointmentStatus.CANCELLED.badge_style == "red"
        assert AppointmentStatus.UNKNOWN.badge_style == "gray"


class TestDecodeAppointment:
    """Test defensive decoding of remote rows"""

    def test_full_row(self):
        appointment = decode_appointment(make_row(0, details="Bring sheet music"))

        assert appointment.id == "appt-0"
        assert appointment.date == date(2026, 1, 1)
        assert appointment.status is AppointmentStatus.PENDING
        assert appointment.details == "Bring sheet music"
        assert appointment.created_at == datetime.fromisoformat("2025-12-01T09:30:00+00:00")
        assert appointment.name == "Alex"

    def test_unknown_status_is_coerced(self):
        appointment = decode_appointment(make_row(0, status="unknown-value"))

        assert appointment.status is AppointmentStatus.UNKNOWN

    def test_missing_optional_fields_are_coerced(self):
        appointment = decode_appointment({"id": 7, "date": "2026-03-04"})

        assert appointment.id == "7"
        assert appointment.time_slot == ""
        assert appointment.location == ""
        assert appointment.details is None
        assert appointment.created_at is None
        assert appointment.status is AppointmentStatus.UNKNOWN

    def test_timestamp_date_keeps_calendar_day(self):
        appointment = decode_appointment(make_row(0, date="2026-05-06T18:00:00Z"))

        assert appointment.date == date(2026, 5, 6)

    def test_bad_created_at_is_dropped(self):
        assert decode_appointment(make_row(0, created_at="yesterday")).created_at is None

    @pytest.mark.parametrize("overrides", [
        {"id": None},
        {"id": ""},
        {"date": "not a date"},
        {"date": None},
    ])
    def test_undecodable_rows_raise(self, overrides):
        with pytest.raises(DecodeError):
            decode_appointment(make_row(0, **overrides))

    def test_appointments_are_immutable(self):
        appointment = decode_appointment(make_row(0))

        with pytest.raises(AttributeError):
            appointment.status = AppointmentStatus.CANCELLED

    def test_display_fields(self):
        appointment = decode_appointment(make_row(0, status="confirmed", details="Front door"))

        assert appointment.display_fields() == {
            "date": "January 01, 2026",
            "time_slot": "10:00 - 11:00",
            "event_type": "Consultation",
            "location": "Studio A",
            "status": "Confirmed",
            "details": "Front door",
        }
        assert appointment.when_display == "January 01, 2026 at 10:00 - 11:00"


class TestAppointmentFetcher:
    """Test retrieval, ordering and bounding"""

    def setup_method(self):
        self.data_client = Mock()
        self.fetcher = AppointmentFetcher(self.data_client, AppointmentsConfig())

    def test_requests_date_ordered_page(self):
        self.data_client.list_appointments.return_value = []

        assert self.fetcher.fetch("u1") == []
        self.data_client.list_appointments.assert_called_once_with(
            "u1", order_by="date", ascending=True, limit=10
        )

    def test_twelve_records_bounded_to_ten_ascending(self):
        """Test a remote that ignores the limit still yields the earliest ten"""
        rows = [make_row(i) for i in reversed(range(12))]
        self.data_client.list_appointments.return_value = rows

        appointments = self.fetcher.fetch("u1")

        assert len(appointments) == 10
        dates = [appointment.date for appointment in appointments]
        assert dates == sorted(dates)
        assert appointments[0].id == "appt-0"
        assert appointments[-1].id == "appt-9"

    def test_equal_dates_keep_remote_order(self):
        rows = [make_row(0, id="b"), make_row(0, id="a"), make_row(0, id="c")]
        self.data_client.list_appointments.return_value = rows

        assert [a.id for a in self.fetcher.fetch("u1")] == ["b", "a", "c"]

    def test_unknown_status_does_not_fail_batch(self):
        rows = [make_row(0), make_row(1, status="unknown-value"), make_row(2, status="confirmed")]
        self.data_client.list_appointments.return_value = rows

        appointments = self.fetcher.fetch("u1")

        assert [a.status for a in appointments] == [
            AppointmentStatus.PENDING, AppointmentStatus.UNKNOWN, AppointmentStatus.CONFIRMED
        ]

    def test_undecodable_and_duplicate_records_are_skipped(self):
        rows = [make_row(0), make_row(1, date="garbage"), make_row(2, id="appt-0"), make_row(3)]
        self.data_client.list_appointments.return_value = rows

        appointments = self.fetcher.fetch("u1")

        assert [a.id for a in appointments] == ["appt-0", "appt-3"]

    def test_fetch_error_propagates(self):
        self.data_client.list_appointments.side_effect = FetchError("boom")

        with pytest.raises(FetchError):
            self.fetcher.fetch("u1")

    def test_empty_user_id_rejected(self):
        with pytest.raises(ValueError):
            self.fetcher.fetch("")
        self.data_client.list_appointments.assert_not_called()

    def test_each_call_replaces_result(self):
        self.data_client.list_appointments.side_effect = [[make_row(0)], [make_row(5)]]

        first = self.fetcher.fetch("u1")
        second = self.fetcher.fetch("u1")

        assert [a.id for a in first] == ["appt-0"]
        assert [a.id for a in second] == ["appt-5"]

    def test_custom_page_size(self):
        fetcher = AppointmentFetcher(self.data_client, AppointmentsConfig(page_size=3))
        self.data_client.list_appointments.return_value = [make_row(i) for i in range(5)]

        assert len(fetcher.fetch("u1")) == 3
        assert isinstance(fetcher.fetch("u1")[0], Appointment)
