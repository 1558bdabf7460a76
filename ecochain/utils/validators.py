"""
Validation utilities

Each ``require_*`` helper returns the cleaned value or raises
:class:`ecochain.errors.ValidationError`.
"""
import math
import re
from datetime import datetime, timezone

from ecochain.errors import ValidationError


def validate_email(email):
    """
    Validate email format

    Args:
        email (str): Email address to validate

    Returns:
        bool: True if valid, False otherwise
    """
    if not email:
        return False

    pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    return bool(re.match(pattern, email))


def validate_coordinates(lat, lng):
    """Check that latitude/longitude are inside the valid WGS84 ranges"""
    return -90 <= lat <= 90 and -180 <= lng <= 180


def require_positive_number(value, field, maximum=None):
    """Return value as a finite float > 0, and no larger than maximum when given"""
    if isinstance(value, bool):
        raise ValidationError(f'{field} must be a number')
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f'{field} must be a number')
    if not math.isfinite(number) or number <= 0:
        raise ValidationError(f'{field} must be greater than zero')
    if maximum is not None and number > maximum:
        raise ValidationError(f'{field} must not exceed {maximum:g}')
    return number


def require_positive_int(value, field):
    """Return value as an int > 0; floats with a fractional part are rejected"""
    if isinstance(value, bool):
        raise ValidationError(f'{field} must be an integer')
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f'{field} must be an integer')
        value = int(value)
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{field} must be an integer')
    if number <= 0:
        raise ValidationError(f'{field} must be greater than zero')
    return number


def require_rating(value):
    """Return a star rating between 1 and 5"""
    if isinstance(value, bool) or value is None:
        raise ValidationError('rating must be an integer between 1 and 5')
    try:
        stars = int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError('rating must be an integer between 1 and 5')
    if stars != value or stars < 1 or stars > 5:
        raise ValidationError('rating must be an integer between 1 and 5')
    return stars


def require_coordinates(lat, lng):
    """Return (lat, lng) as floats inside the valid ranges"""
    try:
        lat, lng = float(lat), float(lng)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError('latitude and longitude must be numbers')
    if not validate_coordinates(lat, lng):
        raise ValidationError('latitude must be within [-90, 90] and longitude within [-180, 180]')
    return lat, lng


def parse_timestamp(value, field):
    """
    Parse an ISO-8601 string or epoch milliseconds into a naive UTC datetime

    Returns:
        datetime or None if value is None
    """
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            parsed = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            raise ValidationError(f'{field} is outside the supported date range')
        return parsed.replace(tzinfo=None)
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
        except ValueError:
            raise ValidationError(f'{field} must be an ISO-8601 datetime')
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        return parsed
    raise ValidationError(f'{field} must be an ISO-8601 datetime or epoch milliseconds')
