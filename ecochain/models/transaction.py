"""Ledger transaction model"""
from ecochain import db
from .base import BaseModel

TYPE_EARN = 'earn'
TYPE_REDEEM = 'redeem'


class Transaction(BaseModel):
    """
    Transaction model - one append-only ledger entry per balance change

    amount is positive for earn entries and negative for redeem entries.
    """
    __tablename__ = 'transactions'

    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='RESTRICT'), nullable=False)
    type = db.Column(db.String(10), nullable=False)
    amount = db.Column(db.Integer, nullable=False)
    description = db.Column(db.String(500), nullable=False)

    pickup_request_id = db.Column(db.String(36), db.ForeignKey('pickup_requests.id', ondelete='RESTRICT'))
    redemption_id = db.Column(db.String(36), db.ForeignKey('redemptions.id', ondelete='RESTRICT'))
    ledger_ref = db.Column(db.String(64))

    __table_args__ = (
        db.CheckConstraint(
            "(type = 'earn' AND amount > 0) OR (type = 'redeem' AND amount < 0)",
            name='ck_transactions_signed_amount',
        ),
        db.Index('idx_transactions_user_id', 'user_id', 'created_at'),
        db.UniqueConstraint('pickup_request_id', name='unique_earn_per_pickup'),
    )

    def __repr__(self):
        return f'<Transaction {self.type} {self.amount}>'
