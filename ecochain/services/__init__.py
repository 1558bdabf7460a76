"""
Domain services

Each mutating operation runs inside :func:`unit_of_work`, so all of its
writes commit together or not at all.
"""
import logging
from contextlib import contextmanager

from ecochain import db
from ecochain.errors import EcoChainError, Unauthenticated

logger = logging.getLogger(__name__)


@contextmanager
def unit_of_work():
    """Commit the session on success, roll it back on any failure"""
    try:
        yield db.session
        db.session.commit()
    except EcoChainError:
        db.session.rollback()
        raise
    except Exception:
        db.session.rollback()
        logger.exception('Database transaction rolled back')
        raise


def require_user(user):
    """Raise Unauthenticated when no caller identity was resolved"""
    if user is None:
        raise Unauthenticated()
    return user
