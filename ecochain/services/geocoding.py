"""
Reverse geocoding against a Nominatim-compatible endpoint.

Best effort: any failure falls back to the literal coordinates.
"""
import logging

import requests
from flask import current_app

logger = logging.getLogger(__name__)


def format_coordinates(lat, lng):
    return f'{lat:.6f}, {lng:.6f}'


def reverse_geocode(lat, lng):
    """Return a human readable address for the coordinates"""
    fallback = format_coordinates(lat, lng)
    if not current_app.config.get('GEOCODER_ENABLED', False):
        return fallback

    try:
        response = requests.get(
            current_app.config['GEOCODER_URL'],
            params={'format': 'json', 'lat': lat, 'lon': lng},
            headers={'User-Agent': current_app.config['GEOCODER_USER_AGENT']},
            timeout=current_app.config['GEOCODER_TIMEOUT'],
        )
        response.raise_for_status()
        address = response.json().get('display_name')
    except (requests.RequestException, ValueError):
        logger.warning('Reverse geocoding failed for %s, using coordinates', fallback, exc_info=True)
        return fallback

    return address or fallback
