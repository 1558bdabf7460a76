"""Middleware package"""
from .request_id import RequestIdFilter, RequestIdMiddleware, get_request_id

__all__ = [
    'RequestIdFilter',
    'RequestIdMiddleware',
    'get_request_id',
]
