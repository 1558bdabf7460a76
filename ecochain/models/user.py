"""User model"""
import bcrypt
from flask import current_app

from ecochain import db
from .base import BaseModel

ROLE_CITIZEN = 'citizen'
ROLE_COLLECTOR = 'collector'
ROLE_ADMIN = 'admin'

ROLES = (ROLE_CITIZEN, ROLE_COLLECTOR, ROLE_ADMIN)


class User(BaseModel):
    """
    User model - citizens, collectors and admins

    The role stays unset until the user picks one after signing up.
    eco_points is meaningful for citizens; total_collections, rating and
    is_available for collectors. All three aggregates are caches of the
    pickup and transaction history and are only changed through SQL-side
    expressions in the service layer.
    """
    __tablename__ = 'users'

    email = db.Column(db.String(255), nullable=False, unique=True, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    name = db.Column(db.String(200))
    image = db.Column(db.String(500))
    phone = db.Column(db.String(50))

    role = db.Column(db.String(20), index=True)

    address = db.Column(db.String(500))
    latitude = db.Column(db.Float)
    longitude = db.Column(db.Float)

    # Citizen balance
    eco_points = db.Column(db.Integer, nullable=False, default=0)

    # Collector statistics
    vehicle_number = db.Column(db.String(50))
    total_collections = db.Column(db.Integer, nullable=False, default=0)
    rating = db.Column(db.Float, nullable=False, default=0.0)
    is_available = db.Column(db.Boolean, nullable=False, default=False)

    __table_args__ = (
        db.CheckConstraint('eco_points >= 0', name='ck_users_eco_points_non_negative'),
        db.CheckConstraint('total_collections >= 0', name='ck_users_total_collections_non_negative'),
        db.CheckConstraint('rating >= 0 AND rating <= 5', name='ck_users_rating_range'),
    )

    def __repr__(self):
        return f'<User {self.email} ({self.role})>'

    def set_password(self, password):
        """Hash and set password"""
        rounds = current_app.config.get('BCRYPT_LOG_ROUNDS', 12)
        self.password_hash = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt(rounds)).decode('utf-8')

    def check_password(self, password):
        """Verify password against hash"""
        return bcrypt.checkpw(password.encode('utf-8'), self.password_hash.encode('utf-8'))

    @property
    def display_name(self):
        return self.name or 'Anonymous'

    def is_admin(self):
        return self.role == ROLE_ADMIN

    def is_citizen(self):
        return self.role == ROLE_CITIZEN

    def is_collector(self):
        return self.role == ROLE_COLLECTOR

    def to_dict(self):
        """Convert to dictionary without credentials"""
        data = super().to_dict(exclude=['password_hash'])
        data['display_name'] = self.display_name
        return data
