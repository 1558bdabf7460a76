"""
EcoChain background scheduler

Runs periodic tasks:
- Expire redemption vouchers past their 24h window (hourly)

Only starts when ENABLE_SCHEDULER=true to prevent running on multiple instances.
"""

import logging

from apscheduler.schedulers.background import BackgroundScheduler

logger = logging.getLogger(__name__)


def _expire_vouchers(app):
    """Mark pending redemptions past expires_at as expired."""
    with app.app_context():
        from ecochain.services.redemptions import expire_redemptions

        try:
            expire_redemptions()
        except Exception:
            logger.exception("Scheduler: voucher expiry sweep failed")


def init_scheduler(app):
    """Initialize and start the background scheduler.

    Only runs if the ENABLE_SCHEDULER setting is true.
    """
    if not app.config.get("ENABLE_SCHEDULER"):
        logger.info("Scheduler disabled (set ENABLE_SCHEDULER=true to enable)")
        return None

    scheduler = BackgroundScheduler(daemon=True)

    scheduler.add_job(
        _expire_vouchers,
        "interval",
        hours=1,
        args=[app],
        id="expire_redemptions",
        name="Expire redemption vouchers",
    )

    scheduler.start()
    logger.info("Background scheduler started with 1 job")
    return scheduler
