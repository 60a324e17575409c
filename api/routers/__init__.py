"""
API Routers - Route declarations for the SendMe API.

Each router registers one resource's routes on the shared route table:
- reviews: customer/driver reviews, votes, responses and moderation
- vehicles: the vehicle type catalogue
"""

from .reviews import register_review_routes
from .vehicles import register_vehicle_routes

__all__ = ["register_review_routes", "register_vehicle_routes"]
