"""Partner store model"""
from ecochain import db
from .base import BaseModel


class PartnerStore(BaseModel):
    """
    PartnerStore model - a shop accepting EcoPoints

    redemption_rate is EcoPoints per currency unit.
    """
    __tablename__ = 'partner_stores'

    name = db.Column(db.String(200), nullable=False)
    category = db.Column(db.String(100), nullable=False)
    address = db.Column(db.String(500), nullable=False)
    latitude = db.Column(db.Float, nullable=False)
    longitude = db.Column(db.Float, nullable=False)
    redemption_rate = db.Column(db.Float, nullable=False)
    logo = db.Column(db.String(500))
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    __table_args__ = (
        db.CheckConstraint('redemption_rate > 0', name='ck_stores_redemption_rate_positive'),
    )

    def __repr__(self):
        return f'<PartnerStore {self.name}>'
