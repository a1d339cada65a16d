"""
Appointment service - retrieval and decoding of a user's appointments.
"""

from .models import Appointment, AppointmentStatus, decode_appointment
from .fetcher import AppointmentFetcher, create_appointment_fetcher

__all__ = [
    'Appointment',
    'AppointmentStatus',
    'decode_appointment',
    'AppointmentFetcher',
    'create_appointment_fetcher'
]
