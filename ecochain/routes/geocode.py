from flask import Blueprint, jsonify, request

from ecochain.services.geocoding import reverse_geocode
from ecochain.utils import require_coordinates
from ecochain.utils.auth import require_auth

geocode_bp = Blueprint('geocode', __name__)


@geocode_bp.route('/reverse', methods=['GET'])
@require_auth
def reverse():
    """GET /api/geocode/reverse?lat=12.97&lng=77.59"""
    lat, lng = require_coordinates(request.args.get('lat'), request.args.get('lng'))
    return jsonify({'address': reverse_geocode(lat, lng), 'latitude': lat, 'longitude': lng}), 200
