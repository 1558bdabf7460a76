from flask import Blueprint, jsonify, g

from ecochain.services import ledger
from ecochain.services import redemptions as redemption_service
from ecochain.utils import get_json_body
from ecochain.utils.auth import require_auth, require_role

wallet_bp = Blueprint('wallet', __name__)


@wallet_bp.route('/transactions', methods=['GET'])
@require_auth
def list_transactions():
    """GET /api/wallet/transactions - latest ledger entries, newest first"""
    user = g.current_user
    entries = ledger.get_transactions(user)
    return jsonify({
        'eco_points': user.eco_points,
        'transactions': [entry.to_dict() for entry in entries],
    }), 200


@wallet_bp.route('/redemptions', methods=['GET'])
@require_auth
def list_redemptions():
    """GET /api/wallet/redemptions"""
    redemptions = redemption_service.get_redemptions(g.current_user)
    return jsonify({'redemptions': [r.to_dict() for r in redemptions]}), 200


@wallet_bp.route('/redeem', methods=['POST'])
@require_auth
def redeem():
    """
    Redeem points for a store voucher
    POST /api/wallet/redeem
    Body: {"store_id": "uuid", "eco_points_used": 100}
    """
    data = get_json_body('store_id', 'eco_points_used')
    result = redemption_service.redeem_points(g.current_user, data['store_id'], data['eco_points_used'])
    return jsonify(result), 201


@wallet_bp.route('/stores', methods=['GET'])
def list_stores():
    """GET /api/wallet/stores - active partner stores"""
    stores = redemption_service.get_partner_stores()
    return jsonify({'stores': [store.to_dict() for store in stores]}), 200


@wallet_bp.route('/stores', methods=['POST'])
@require_auth
@require_role('admin')
def create_store():
    """
    POST /api/wallet/stores
    Body: {
        "name": "Green Grocer",
        "category": "grocery",
        "address": "1 Market Rd",
        "latitude": 12.9,
        "longitude": 77.6,
        "redemption_rate": 10
    }
    """
    data = get_json_body('name', 'category', 'address', 'latitude', 'longitude', 'redemption_rate')
    store = redemption_service.create_partner_store(
        g.current_user,
        name=data['name'],
        category=data['category'],
        address=data['address'],
        latitude=data['latitude'],
        longitude=data['longitude'],
        redemption_rate=data['redemption_rate'],
        logo=data.get('logo'),
        is_active=data.get('is_active', True),
    )
    return jsonify({'store': store.to_dict()}), 201


@wallet_bp.route('/vouchers/<qr_code>/use', methods=['POST'])
@require_auth
@require_role('admin')
def use_voucher(qr_code):
    """POST /api/wallet/vouchers/<qr_code>/use"""
    redemption = redemption_service.use_voucher(g.current_user, qr_code)
    return jsonify({'message': 'Voucher accepted', 'redemption': redemption.to_dict()}), 200
