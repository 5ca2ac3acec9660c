"""
Tag Model
"""

from stockroom.database import db
from datetime import datetime
import uuid


class Tag(db.Model):
    """Free-form label attached to items"""
    __tablename__ = 'tags'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(100), unique=True, nullable=False)
    colour = db.Column(db.String(20), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f'<Tag {self.name}>'

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'colour': self.colour,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }
