"""
Base model with common fields and methods
"""
from ecochain import db
from datetime import datetime, timezone
import uuid


def generate_uuid():
    return str(uuid.uuid4())


def utcnow():
    """Naive UTC timestamp, as stored in the database"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class BaseModel(db.Model):
    """Abstract base model with common fields"""
    __abstract__ = True

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def to_dict(self, exclude=None):
        """
        Convert model to dictionary

        Args:
            exclude (list): List of fields to exclude

        Returns:
            dict: Model as dictionary
        """
        exclude = exclude or []
        data = {}

        for column in self.__table__.columns:
            if column.name not in exclude:
                value = getattr(self, column.name)

                # Handle datetime
                if isinstance(value, datetime):
                    value = value.isoformat()

                data[column.name] = value

        return data
