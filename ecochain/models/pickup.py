"""Pickup request model"""
from ecochain import db
from .base import BaseModel

STATUS_PENDING = 'pending'
STATUS_ACCEPTED = 'accepted'
STATUS_COMPLETED = 'completed'
STATUS_CANCELLED = 'cancelled'

PICKUP_STATUSES = (STATUS_PENDING, STATUS_ACCEPTED, STATUS_COMPLETED, STATUS_CANCELLED)

MATERIAL_TYPES = ('plastic', 'paper', 'glass', 'metal', 'electronics', 'organic')


class PickupRequest(BaseModel):
    """
    PickupRequest model - a citizen's request to have recyclables collected

    Lifecycle: pending -> accepted -> completed, or pending -> cancelled.
    Rows are never deleted.
    """
    __tablename__ = 'pickup_requests'

    citizen_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='RESTRICT'), nullable=False)
    collector_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='RESTRICT'))

    material_type = db.Column(db.String(20), nullable=False)
    estimated_weight = db.Column(db.Float, nullable=False)
    actual_weight = db.Column(db.Float)

    status = db.Column(db.String(20), nullable=False, default=STATUS_PENDING)

    # Pickup location
    address = db.Column(db.String(500), nullable=False)
    latitude = db.Column(db.Float, nullable=False)
    longitude = db.Column(db.Float, nullable=False)

    notes = db.Column(db.Text)
    scheduled_date = db.Column(db.DateTime)
    completed_date = db.Column(db.DateTime)

    eco_points_earned = db.Column(db.Integer)
    ledger_ref = db.Column(db.String(64), unique=True)

    # Collector rates the citizen
    citizen_rating = db.Column(db.Integer)
    citizen_feedback = db.Column(db.Text)

    # Citizen rates the collector
    collector_rating = db.Column(db.Integer)
    collector_feedback = db.Column(db.Text)

    __table_args__ = (
        db.CheckConstraint('estimated_weight > 0', name='ck_pickups_estimated_weight_positive'),
        db.CheckConstraint('actual_weight IS NULL OR actual_weight > 0', name='ck_pickups_actual_weight_positive'),
        db.Index('idx_pickups_citizen_id', 'citizen_id'),
        db.Index('idx_pickups_collector_id', 'collector_id'),
        db.Index('idx_pickups_status', 'status'),
    )

    citizen = db.relationship('User', foreign_keys=[citizen_id])
    collector = db.relationship('User', foreign_keys=[collector_id])

    def __repr__(self):
        return f'<PickupRequest {self.id} - {self.status}>'

    @property
    def is_pending(self):
        return self.status == STATUS_PENDING

    @property
    def is_completed(self):
        return self.status == STATUS_COMPLETED
