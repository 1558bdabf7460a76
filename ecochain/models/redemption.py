"""Redemption voucher model"""
from ecochain import db
from .base import BaseModel, utcnow

STATUS_PENDING = 'pending'
STATUS_COMPLETED = 'completed'
STATUS_EXPIRED = 'expired'


class Redemption(BaseModel):
    """
    Redemption model - points exchanged for a time-limited store voucher
    """
    __tablename__ = 'redemptions'

    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='RESTRICT'), nullable=False)
    # Weak reference: stores are never cascaded into redemptions
    store_id = db.Column(db.String(36), db.ForeignKey('partner_stores.id', ondelete='SET NULL'))

    eco_points_used = db.Column(db.Integer, nullable=False)
    value_redeemed = db.Column(db.Float, nullable=False)
    qr_code = db.Column(db.String(100), nullable=False, unique=True, index=True)
    status = db.Column(db.String(20), nullable=False, default=STATUS_PENDING)
    expires_at = db.Column(db.DateTime, nullable=False)
    redeemed_at = db.Column(db.DateTime)

    __table_args__ = (
        db.CheckConstraint('eco_points_used > 0', name='ck_redemptions_points_positive'),
        db.Index('idx_redemptions_user_id', 'user_id'),
        db.Index('idx_redemptions_status_expiry', 'status', 'expires_at'),
    )

    store = db.relationship('PartnerStore')

    def __repr__(self):
        return f'<Redemption {self.qr_code} - {self.status}>'

    def is_expired(self, now=None):
        return (now or utcnow()) >= self.expires_at

    def to_dict(self):
        data = super().to_dict()
        data['store_name'] = self.store.name if self.store else None
        return data
