"""SQLAlchemy models package"""
from .user import User
from .pickup import PickupRequest
from .store import PartnerStore
from .redemption import Redemption
from .transaction import Transaction

__all__ = [
    'User',
    'PickupRequest',
    'PartnerStore',
    'Redemption',
    'Transaction',
]
