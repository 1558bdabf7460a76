from flask import Blueprint, jsonify

from ecochain.services import leaderboard

leaderboard_bp = Blueprint('leaderboard', __name__)


@leaderboard_bp.route('/recyclers', methods=['GET'])
def top_recyclers():
    """GET /api/leaderboard/recyclers"""
    return jsonify({'leaderboard': leaderboard.get_top_recyclers()}), 200


@leaderboard_bp.route('/collectors', methods=['GET'])
def top_collectors():
    """GET /api/leaderboard/collectors"""
    return jsonify({'leaderboard': leaderboard.get_top_collectors()}), 200
