"""
Folder Model
"""

from stockroom.database import db
from datetime import datetime
import uuid


class Folder(db.Model):
    """Hierarchical container for items"""
    __tablename__ = 'folders'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(255), nullable=False)
    parent_folder_id = db.Column(db.String(36), db.ForeignKey('folders.id', ondelete='CASCADE'), nullable=True, index=True)
    icon = db.Column(db.String(50), nullable=True)
    colour = db.Column(db.String(20), nullable=True)
    description = db.Column(db.Text, nullable=True)
    sku = db.Column(db.String(100), unique=True, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    parent = db.relationship('Folder', remote_side=[id], backref=db.backref('children', lazy=True))
    items = db.relationship('Item', back_populates='folder', lazy=True)

    def __repr__(self):
        return f'<Folder {self.name}>'

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'parent_folder_id': self.parent_folder_id,
            'icon': self.icon,
            'colour': self.colour,
            'description': self.description,
            'sku': self.sku,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }
