"""Data models for the check-in kiosk"""

from checkin_kiosk.models.attendee import Attendee, AttendeeStatus, AttendeeView

__all__ = [
    "Attendee",
    "AttendeeStatus",
    "AttendeeView",
]
