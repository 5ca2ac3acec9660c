"""
Profile Model
"""

from stockroom.database import db
from datetime import datetime
import uuid
from .enums import ProfileRole


class Profile(db.Model):
    """Signed-in user with credentials and optional unlock PIN"""
    __tablename__ = 'profiles'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    full_name = db.Column(db.String(255), nullable=True)
    avatar_url = db.Column(db.String(500), nullable=True)
    role = db.Column(db.Enum(ProfileRole, values_callable=lambda e: [m.value for m in e]),
                     default=ProfileRole.MEMBER, nullable=False)
    pin_hash = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f'<Profile {self.email}>'

    @property
    def has_pin(self):
        return self.pin_hash is not None

    def to_dict(self):
        """Public fields only, hashes never leave the model"""
        return {
            'id': self.id,
            'email': self.email,
            'full_name': self.full_name,
            'avatar_url': self.avatar_url,
            'role': self.role.value,
            'has_pin': self.has_pin,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }
