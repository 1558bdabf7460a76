"""Read-only rankings over the cached user aggregates"""
from flask import current_app

from ecochain.models import User
from ecochain.models.user import ROLE_CITIZEN, ROLE_COLLECTOR


def _limit(limit):
    return limit or current_app.config.get('LEADERBOARD_SIZE', 10)


def get_top_recyclers(limit=None):
    citizens = (
        User.query
        .filter(User.role == ROLE_CITIZEN)
        .order_by(User.eco_points.desc(), User.created_at.asc())
        .limit(_limit(limit))
        .all()
    )
    return [
        {
            'rank': rank,
            'name': user.display_name,
            'eco_points': user.eco_points,
            'image': user.image,
        }
        for rank, user in enumerate(citizens, start=1)
    ]


def get_top_collectors(limit=None):
    collectors = (
        User.query
        .filter(User.role == ROLE_COLLECTOR)
        .order_by(User.total_collections.desc(), User.created_at.asc())
        .limit(_limit(limit))
        .all()
    )
    return [
        {
            'rank': rank,
            'name': user.display_name,
            'total_collections': user.total_collections,
            'rating': user.rating,
            'image': user.image,
        }
        for rank, user in enumerate(collectors, start=1)
    ]
