"""
API Services - Handlers behind the gated routes of the SendMe API.

Handlers only ever see requests that passed the access gate and their
route's rule-set.
"""

from .record_store import RecordStore
from .review_service import ReviewService
from .vehicle_service import VehicleService

__all__ = [
    "RecordStore",
    "ReviewService",
    "VehicleService",
]
