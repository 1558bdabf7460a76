"""
Helper utilities
"""
import html
import secrets
import uuid

from flask import request

from ecochain.errors import ValidationError


def generate_unique_id():
    """
    Generate a random unique reference, suitable for ledger entries

    Returns:
        str: 32 character hex string
    """
    return uuid.uuid4().hex


def generate_voucher_code():
    """Opaque, unguessable voucher token shown as a QR code"""
    return f'ECO-{secrets.token_urlsafe(16)}'


def sanitize_string(value):
    """Escape HTML entities in a string.

    Converts < > & " ' to their HTML entity equivalents so that
    user-supplied strings cannot inject markup or script tags.
    """
    if not isinstance(value, str):
        return value
    return html.escape(value.strip(), quote=True)


def sanitize_dict(data):
    """Recursively walk a dict/list structure and sanitize all string values."""
    if isinstance(data, dict):
        return {key: sanitize_dict(value) for key, value in data.items()}
    if isinstance(data, list):
        return [sanitize_dict(item) for item in data]
    return sanitize_string(data)


def get_json_body(*required_fields, sanitize=True):
    """
    Return the sanitized JSON body of the current request

    Raises:
        ValidationError: body is not a JSON object or a required field is missing
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')

    missing = [field for field in required_fields if data.get(field) in (None, '')]
    if missing:
        raise ValidationError(f'Missing required fields: {", ".join(missing)}')

    return sanitize_dict(data) if sanitize else data
