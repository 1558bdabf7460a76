"""
Background scheduler tests for EcoChain Hub
"""
from datetime import timedelta

from ecochain import db
from ecochain.models import Redemption
from ecochain.models.base import utcnow
from ecochain.scheduler import _expire_vouchers, init_scheduler
from ecochain.services import redemptions as redemption_service


def test_scheduler_disabled_by_default(app):
    assert init_scheduler(app) is None


def test_expiry_job_marks_vouchers(app, user_factory, store):
    user = user_factory(role='citizen', eco_points=100)
    result = redemption_service.redeem_points(user, store.id, 40, now=utcnow() - timedelta(days=2))

    _expire_vouchers(app)

    assert db.session.get(Redemption, result['redemption_id']).status == 'expired'
