"""
Accounts, role selection and collector availability
"""
import logging

from ecochain import db
from ecochain.errors import InvalidState, Unauthenticated, Unauthorized, ValidationError
from ecochain.models import User
from ecochain.models.user import ROLE_CITIZEN, ROLE_COLLECTOR
from ecochain.services import require_user, unit_of_work
from ecochain.utils import validate_email

logger = logging.getLogger(__name__)

SELECTABLE_ROLES = (ROLE_CITIZEN, ROLE_COLLECTOR)

MIN_PASSWORD_LENGTH = 8


def register_user(email, password, name=None, phone=None):
    """Create an account without a role; the role is chosen afterwards"""
    email = (email or '').lower().strip()
    if not validate_email(email):
        raise ValidationError('Invalid email address')
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters')

    with unit_of_work():
        if User.query.filter_by(email=email).first():
            raise InvalidState('User with this email already exists')

        user = User(email=email, name=name, phone=phone)
        user.set_password(password)
        db.session.add(user)

    logger.info('User %s registered', user.id)
    return user


def authenticate(email, password):
    """Return the user for valid credentials"""
    user = User.query.filter_by(email=(email or '').lower().strip()).first()
    if user is None or not user.check_password(password or ''):
        raise Unauthenticated('Invalid credentials')
    return user


def set_role(user, role):
    """
    Choose citizen or collector once.

    Re-selecting the current role is a no-op; switching roles is refused.
    """
    require_user(user)
    if role not in SELECTABLE_ROLES:
        raise ValidationError(f'Invalid role. Must be one of: {", ".join(SELECTABLE_ROLES)}')
    if user.role == role:
        return user
    if user.role is not None:
        raise InvalidState('Role has already been chosen')

    with unit_of_work():
        updated = User.query.filter(User.id == user.id, User.role.is_(None)).update(
            {User.role: role}, synchronize_session='fetch'
        )
        if not updated:
            raise InvalidState('Role has already been chosen')

    logger.info('User %s chose role %s', user.id, role)
    return user


def set_availability(user, is_available):
    """Toggle whether a collector is taking pickups"""
    require_user(user)
    if not user.is_collector():
        raise Unauthorized('Only collectors can set availability')
    if not isinstance(is_available, bool):
        raise ValidationError('is_available must be a boolean')

    with unit_of_work():
        user.is_available = is_available

    return user
