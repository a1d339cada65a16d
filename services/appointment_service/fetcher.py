"""
Appointment fetcher - one bounded, date-ordered page of a user's appointments.
"""

from typing import List, Optional

from config.app_config import AppointmentsConfig, get_config
from services.appointment_service.models import Appointment, decode_appointment
from services.exceptions import DecodeError
from utils.logging_config import get_logger, log_execution_time


class AppointmentFetcher:
    """
    Retrieves up to ``page_size`` appointments for one identity, earliest first.

    Each call is independent and returns a fresh list; nothing is cached.
    ``data_client`` must provide ``list_appointments(user_id, order_by, ascending, limit)``.
    """

    def __init__(self, data_client, config: Optional[AppointmentsConfig] = None):
        self.data_client = data_client
        self.config = config or get_config().appointments
        self.logger = get_logger(__name__)

    @property
    def page_size(self) -> int:
        return self.config.page_size

    def fetch(self, user_id: str) -> List[Appointment]:
        """
        Fetch and decode the user's appointments

        Args:
            user_id: Identity of the live session

        Returns:
            0..page_size appointments ordered by ascending date

        Raises:
            ValueError: empty user_id
            FetchError: the remote call failed or returned a malformed payload
        """
        if not user_id:
            raise ValueError("user_id must be non-empty")

        with log_execution_time(self.logger, "appointment fetch", user_id=user_id):
            rows = self.data_client.list_appointments(
                user_id,
                order_by=self.config.order_column,
                ascending=True,
                limit=self.page_size,
            )

        appointments: List[Appointment] = []
        seen_ids = set()
        for record in rows:
            try:
                appointment = decode_appointment(record)
            except DecodeError as e:
                self.logger.warning(f"Skipping appointment record: {e}", extra={
                    "user_id": user_id,
                    "record_id": e.record_id,
                })
                continue

            if appointment.id in seen_ids:
                self.logger.warning("Skipping duplicate appointment record", extra={
                    "user_id": user_id,
                    "record_id": appointment.id,
                })
                continue

            seen_ids.add(appointment.id)
            appointments.append(appointment)

        # sorted() is stable, so equal dates keep the remote order
        appointments = sorted(appointments, key=lambda appointment: appointment.date)
        return appointments[:self.page_size]


def create_appointment_fetcher(token_provider=None) -> AppointmentFetcher:
    """Build a fetcher backed by the Supabase data client"""
    from infrastructure.external.supabase_data_client import SupabaseDataClient
    return AppointmentFetcher(SupabaseDataClient(token_provider=token_provider))
