"""Utilities package"""
from .validators import (
    validate_email,
    validate_coordinates,
    require_positive_number,
    require_positive_int,
    require_rating,
    require_coordinates,
    parse_timestamp,
)
from .helpers import generate_unique_id, generate_voucher_code, sanitize_string, sanitize_dict, get_json_body

__all__ = [
    'validate_email',
    'validate_coordinates',
    'require_positive_number',
    'require_positive_int',
    'require_rating',
    'require_coordinates',
    'parse_timestamp',
    'generate_unique_id',
    'generate_voucher_code',
    'sanitize_string',
    'sanitize_dict',
    'get_json_body',
]
