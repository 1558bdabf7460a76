"""
Point redemption at partner stores
"""
import logging
from datetime import timedelta

from flask import current_app

from ecochain import db
from ecochain.errors import InsufficientBalance, InvalidState, NotFound, Unauthorized, ValidationError
from ecochain.models import PartnerStore, Redemption, User
from ecochain.models.base import utcnow
from ecochain.models.redemption import STATUS_COMPLETED, STATUS_EXPIRED, STATUS_PENDING
from ecochain.services import ledger, require_user, unit_of_work
from ecochain.utils import generate_voucher_code, require_coordinates, require_positive_int, require_positive_number

logger = logging.getLogger(__name__)

REDEMPTION_TTL = timedelta(hours=24)


def _redemption_ttl():
    hours = current_app.config.get('REDEMPTION_TTL_HOURS')
    return timedelta(hours=hours) if hours else REDEMPTION_TTL


def redeem_points(user, store_id, eco_points_used, now=None):
    """
    Exchange EcoPoints for a store voucher.

    The balance is debited with a conditional UPDATE, so the balance can
    never go negative even when two redemptions race.

    Returns:
        dict: redemption_id, qr_code, value_redeemed
    """
    require_user(user)
    points = require_positive_int(eco_points_used, 'eco_points_used')
    now = now or utcnow()

    with unit_of_work():
        store = db.session.get(PartnerStore, store_id) if store_id else None
        if store is None or not store.is_active:
            raise NotFound('Store not found')
        if not store.redemption_rate or store.redemption_rate <= 0:
            raise InvalidState('Store has no valid redemption rate')
        if points > user.eco_points:
            raise InsufficientBalance('Insufficient EcoPoints')

        debited = User.query.filter(
            User.id == user.id,
            User.eco_points >= points,
        ).update({User.eco_points: User.eco_points - points}, synchronize_session=False)
        if not debited:
            raise InsufficientBalance('Insufficient EcoPoints')

        redemption = Redemption(
            user_id=user.id,
            store_id=store.id,
            eco_points_used=points,
            value_redeemed=points / store.redemption_rate,
            qr_code=generate_voucher_code(),
            status=STATUS_PENDING,
            expires_at=now + _redemption_ttl(),
        )
        db.session.add(redemption)
        db.session.flush()
        ledger.record_redemption(user.id, redemption, store.name)

        result = {
            'redemption_id': redemption.id,
            'qr_code': redemption.qr_code,
            'value_redeemed': redemption.value_redeemed,
        }

    logger.info('User %s redeemed %d points at store %s', user.id, points, store_id)
    return result


def use_voucher(user, qr_code, now=None):
    """Mark a pending, unexpired voucher as used at the till"""
    require_user(user)
    if not user.is_admin():
        raise Unauthorized('Only admins can validate vouchers')
    now = now or utcnow()

    with unit_of_work():
        redemption = Redemption.query.filter_by(qr_code=qr_code).first()
        if redemption is None:
            raise NotFound('Voucher not found')
        if redemption.status != STATUS_PENDING:
            raise InvalidState(f'Voucher is {redemption.status}')
        if redemption.is_expired(now):
            raise InvalidState('Voucher is expired')

        used = Redemption.query.filter(
            Redemption.id == redemption.id,
            Redemption.status == STATUS_PENDING,
        ).update({
            Redemption.status: STATUS_COMPLETED,
            Redemption.redeemed_at: now,
        }, synchronize_session='fetch')
        if not used:
            raise InvalidState('Voucher has already been used')

    logger.info('Voucher %s used', redemption.id)
    return redemption


def expire_redemptions(now=None):
    """
    Flag pending vouchers past their expiry as expired.

    Only the voucher status changes; spent points are not returned.

    Returns:
        int: number of vouchers expired
    """
    now = now or utcnow()
    with unit_of_work():
        count = Redemption.query.filter(
            Redemption.status == STATUS_PENDING,
            Redemption.expires_at <= now,
        ).update({Redemption.status: STATUS_EXPIRED}, synchronize_session=False)

    if count:
        logger.info('Expired %d redemption vouchers', count)
    return count


def get_redemptions(user):
    require_user(user)
    return (
        Redemption.query
        .filter_by(user_id=user.id)
        .order_by(Redemption.created_at.desc())
        .all()
    )


def get_partner_stores():
    return PartnerStore.query.filter_by(is_active=True).order_by(PartnerStore.name.asc()).all()


def create_partner_store(user, name, category, address, latitude, longitude,
                         redemption_rate, logo=None, is_active=True):
    """Register a partner store; admins only"""
    require_user(user)
    if not user.is_admin():
        raise Unauthorized('Only admins can add partner stores')
    if not name or not category or not address:
        raise ValidationError('name, category and address are required')
    rate = require_positive_number(redemption_rate, 'redemption_rate')
    latitude, longitude = require_coordinates(latitude, longitude)

    with unit_of_work():
        store = PartnerStore(
            name=name,
            category=category,
            address=address,
            latitude=latitude,
            longitude=longitude,
            redemption_rate=rate,
            logo=logo,
            is_active=bool(is_active),
        )
        db.session.add(store)

    logger.info('Partner store %s added', store.id)
    return store
