"""
Pickup lifecycle

    pending -> accepted -> completed
    pending -> cancelled

Every transition is applied with a conditional UPDATE on the expected
current state, so two callers racing for the same pickup cannot both win.
"""
import logging

from flask import current_app
from sqlalchemy import func, select

from ecochain import db
from ecochain.errors import AlreadyRated, InvalidState, NotFound, Unauthorized, ValidationError
from ecochain.models import PickupRequest, User
from ecochain.models.pickup import (
    MATERIAL_TYPES,
    STATUS_ACCEPTED,
    STATUS_CANCELLED,
    STATUS_COMPLETED,
    STATUS_PENDING,
)
from ecochain.services import ledger, require_user, unit_of_work
from ecochain.services.geocoding import reverse_geocode
from ecochain.utils import (
    parse_timestamp,
    require_coordinates,
    require_positive_number,
    require_rating,
)

logger = logging.getLogger(__name__)

MAX_WEIGHT_KG = 1000


def _require_weight(value, field):
    return require_positive_number(value, field, current_app.config.get('MAX_WEIGHT_KG', MAX_WEIGHT_KG))


def _get_pickup(pickup_id):
    pickup = db.session.get(PickupRequest, pickup_id) if pickup_id else None
    if pickup is None:
        raise NotFound('Pickup not found')
    return pickup


def _transition(pickup_id, expected_status, values, *criteria):
    """Compare-and-swap a pickup row out of expected_status; returns True on success"""
    updated = PickupRequest.query.filter(
        PickupRequest.id == pickup_id,
        PickupRequest.status == expected_status,
        *criteria
    ).update(values, synchronize_session='fetch')
    return updated == 1


def create_pickup(user, material_type, estimated_weight, address, latitude, longitude,
                  notes=None, scheduled_date=None):
    """Open a new pending pickup request for a citizen"""
    require_user(user)
    if not user.is_citizen():
        raise Unauthorized('Only citizens can request pickups')

    if material_type not in MATERIAL_TYPES:
        raise ValidationError(f'Invalid material type. Must be one of: {", ".join(MATERIAL_TYPES)}')
    weight = _require_weight(estimated_weight, 'estimated_weight')
    latitude, longitude = require_coordinates(latitude, longitude)
    scheduled = parse_timestamp(scheduled_date, 'scheduled_date')

    if address is not None and not isinstance(address, str):
        raise ValidationError('address must be a string')
    if not address or not address.strip():
        address = reverse_geocode(latitude, longitude)

    with unit_of_work():
        pickup = PickupRequest(
            citizen_id=user.id,
            material_type=material_type,
            estimated_weight=weight,
            status=STATUS_PENDING,
            address=address,
            latitude=latitude,
            longitude=longitude,
            notes=notes or None,
            scheduled_date=scheduled,
        )
        db.session.add(pickup)

    logger.info('Pickup %s created by citizen %s (%s, %.2fkg)', pickup.id, user.id, material_type, weight)
    return pickup


def cancel_pickup(user, pickup_id):
    """Cancel a pending pickup; only its owner may do so"""
    require_user(user)
    with unit_of_work():
        pickup = _get_pickup(pickup_id)
        if pickup.citizen_id != user.id:
            raise Unauthorized('Only the requesting citizen can cancel this pickup')
        if pickup.status != STATUS_PENDING:
            raise InvalidState('Can only cancel pending pickups')

        if not _transition(pickup.id, STATUS_PENDING, {PickupRequest.status: STATUS_CANCELLED},
                           PickupRequest.citizen_id == user.id):
            raise InvalidState('Can only cancel pending pickups')

    logger.info('Pickup %s cancelled by citizen %s', pickup_id, user.id)


def accept_pickup(user, pickup_id):
    """
    Assign a pending pickup to the calling collector.

    At most one collector ever wins: the losing side of a race finds the
    row no longer pending and gets InvalidState.
    """
    require_user(user)
    if not user.is_collector():
        raise Unauthorized('Only collectors can accept pickups')

    with unit_of_work():
        pickup = _get_pickup(pickup_id)
        if pickup.status != STATUS_PENDING:
            raise InvalidState('Pickup is not available')

        accepted = _transition(pickup.id, STATUS_PENDING, {
            PickupRequest.collector_id: user.id,
            PickupRequest.status: STATUS_ACCEPTED,
        }, PickupRequest.collector_id.is_(None))
        if not accepted:
            raise InvalidState('Pickup is not available')

    logger.info('Pickup %s accepted by collector %s', pickup_id, user.id)
    return pickup


def complete_pickup(user, pickup_id, actual_weight):
    """
    Record the verified weight of an accepted pickup and mint its points.

    Returns:
        dict: eco_points_earned and ledger_ref
    """
    require_user(user)
    weight = _require_weight(actual_weight, 'actual_weight')

    with unit_of_work():
        pickup = _get_pickup(pickup_id)
        if pickup.collector_id != user.id:
            raise Unauthorized('Only the assigned collector can complete this pickup')
        if pickup.status != STATUS_ACCEPTED:
            raise InvalidState('Can only complete accepted pickups')

        points, ledger_ref = ledger.reconcile_completion(pickup, user, weight)

    return {'eco_points_earned': points, 'ledger_ref': ledger_ref}


def rate_citizen(user, pickup_id, rating, feedback=None):
    """Collector's one-time rating of the citizen on a completed pickup"""
    require_user(user)
    stars = require_rating(rating)

    with unit_of_work():
        pickup = _get_pickup(pickup_id)
        if pickup.collector_id != user.id:
            raise Unauthorized('Only the assigned collector can rate this citizen')
        if pickup.status != STATUS_COMPLETED:
            raise InvalidState('Can only rate completed pickups')
        if pickup.citizen_rating is not None:
            raise AlreadyRated('Citizen has already been rated for this pickup')

        rated = _transition(pickup.id, STATUS_COMPLETED, {
            PickupRequest.citizen_rating: stars,
            PickupRequest.citizen_feedback: feedback or None,
        }, PickupRequest.collector_id == user.id, PickupRequest.citizen_rating.is_(None))
        if not rated:
            raise AlreadyRated('Citizen has already been rated for this pickup')

    logger.info('Pickup %s: collector %s rated citizen %d stars', pickup_id, user.id, stars)


def rate_collector(user, pickup_id, rating, feedback=None):
    """
    Citizen's one-time rating of the collector on a completed pickup.

    The collector's stored rating is recomputed in the same statement as the
    mean over every rated completed pickup of that collector.
    """
    require_user(user)
    stars = require_rating(rating)

    with unit_of_work():
        pickup = _get_pickup(pickup_id)
        if pickup.citizen_id != user.id:
            raise Unauthorized('Only the requesting citizen can rate this collector')
        if pickup.status != STATUS_COMPLETED:
            raise InvalidState('Can only rate completed pickups')
        if pickup.collector_rating is not None:
            raise AlreadyRated('Collector has already been rated for this pickup')

        rated = _transition(pickup.id, STATUS_COMPLETED, {
            PickupRequest.collector_rating: stars,
            PickupRequest.collector_feedback: feedback or None,
        }, PickupRequest.citizen_id == user.id, PickupRequest.collector_rating.is_(None))
        if not rated:
            raise AlreadyRated('Collector has already been rated for this pickup')

        collector_id = pickup.collector_id
        if collector_id:
            mean_rating = select(func.avg(PickupRequest.collector_rating)).where(
                PickupRequest.collector_id == collector_id,
                PickupRequest.status == STATUS_COMPLETED,
                PickupRequest.collector_rating.isnot(None),
            ).scalar_subquery()
            User.query.filter(User.id == collector_id).update(
                {User.rating: func.coalesce(mean_rating, 0)},
                synchronize_session=False,
            )

    logger.info('Pickup %s: citizen %s rated collector %s %d stars', pickup_id, user.id, collector_id, stars)


def get_pickup(user, pickup_id):
    """Single pickup, visible to its parties, admins, and collectors while pending"""
    require_user(user)
    pickup = _get_pickup(pickup_id)
    visible = (
        user.is_admin()
        or pickup.citizen_id == user.id
        or pickup.collector_id == user.id
        or (user.is_collector() and pickup.status == STATUS_PENDING)
    )
    if not visible:
        raise Unauthorized('Access denied')
    return pickup


def get_user_pickups(user):
    require_user(user)
    return (
        PickupRequest.query
        .filter_by(citizen_id=user.id)
        .order_by(PickupRequest.created_at.desc())
        .all()
    )


def get_pending_pickups():
    return (
        PickupRequest.query
        .filter_by(status=STATUS_PENDING)
        .order_by(PickupRequest.created_at.desc())
        .all()
    )


def get_collector_pickups(user):
    require_user(user)
    return (
        PickupRequest.query
        .filter_by(collector_id=user.id)
        .order_by(PickupRequest.created_at.desc())
        .all()
    )
