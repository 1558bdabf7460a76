"""
Ledger reconciliation

Points are minted only by :func:`reconcile_completion` and spent only by
:func:`record_redemption`. Cached aggregates on users are changed with
SQL-side expressions so concurrent writers never lose an update.
"""
import logging
from decimal import Decimal, ROUND_FLOOR

from flask import current_app
from sqlalchemy import func

from ecochain import db
from ecochain.errors import InvalidState
from ecochain.models import PickupRequest, Transaction, User
from ecochain.models.base import utcnow
from ecochain.models.pickup import STATUS_ACCEPTED, STATUS_COMPLETED
from ecochain.models.transaction import TYPE_EARN, TYPE_REDEEM
from ecochain.utils import generate_unique_id

logger = logging.getLogger(__name__)

POINTS_PER_KG = 10


def calculate_points(actual_weight, points_per_kg=POINTS_PER_KG):
    """
    EcoPoints earned for a verified weight: floor(weight * points_per_kg)

    The weight goes through its decimal representation so that 4.8 kg is
    worth exactly 48 points instead of whatever the binary float rounds to.
    """
    points = Decimal(repr(float(actual_weight))) * points_per_kg
    return int(points.to_integral_value(rounding=ROUND_FLOOR))


def new_ledger_ref():
    return generate_unique_id()


def _points_per_kg():
    return current_app.config.get('POINTS_PER_KG', POINTS_PER_KG)


def reconcile_completion(pickup, collector, actual_weight, now=None):
    """
    Apply the writes caused by completing a pickup.

    Must run inside the caller's unit of work: the pickup patch, citizen
    balance credit, collector counter and the earn entry commit together.

    Returns:
        tuple: (eco_points_earned, ledger_ref)

    Raises:
        InvalidState: the pickup left the accepted state concurrently
    """
    now = now or utcnow()
    points = calculate_points(actual_weight, _points_per_kg())
    ledger_ref = new_ledger_ref()

    updated = PickupRequest.query.filter(
        PickupRequest.id == pickup.id,
        PickupRequest.status == STATUS_ACCEPTED,
        PickupRequest.collector_id == collector.id,
    ).update({
        PickupRequest.actual_weight: actual_weight,
        PickupRequest.status: STATUS_COMPLETED,
        PickupRequest.completed_date: now,
        PickupRequest.eco_points_earned: points,
        PickupRequest.ledger_ref: ledger_ref,
    }, synchronize_session='fetch')
    if not updated:
        raise InvalidState('Pickup is no longer awaiting completion')

    User.query.filter(User.id == collector.id).update(
        {User.total_collections: User.total_collections + 1},
        synchronize_session=False,
    )

    if points > 0:
        User.query.filter(User.id == pickup.citizen_id).update(
            {User.eco_points: User.eco_points + points},
            synchronize_session=False,
        )
        db.session.add(Transaction(
            user_id=pickup.citizen_id,
            type=TYPE_EARN,
            amount=points,
            description=f'Recycled {actual_weight:g}kg of {pickup.material_type}',
            pickup_request_id=pickup.id,
            ledger_ref=ledger_ref,
        ))
    else:
        logger.info('Pickup %s completed below the minimum weight for points', pickup.id)

    db.session.flush()
    logger.info(
        'Reconciled pickup %s: %d points to citizen %s (ref %s)',
        pickup.id, points, pickup.citizen_id, ledger_ref,
    )
    return points, ledger_ref


def record_redemption(user_id, redemption, store_name):
    """Append the redeem entry matching a redemption; caller commits"""
    entry = Transaction(
        user_id=user_id,
        type=TYPE_REDEEM,
        amount=-redemption.eco_points_used,
        description=f'Redeemed at {store_name}',
        redemption_id=redemption.id,
        ledger_ref=new_ledger_ref(),
    )
    db.session.add(entry)
    return entry


def get_transactions(user, limit=None):
    """Latest ledger entries of a user, newest first"""
    if limit is None:
        limit = current_app.config.get('TRANSACTIONS_PAGE_SIZE', 20)
    return (
        Transaction.query
        .filter_by(user_id=user.id)
        .order_by(Transaction.created_at.desc())
        .limit(limit)
        .all()
    )


def balance_from_history(user_id):
    """Recompute a balance from the append-only ledger"""
    total = db.session.query(func.coalesce(func.sum(Transaction.amount), 0)).filter(
        Transaction.user_id == user_id
    ).scalar()
    return int(total)
