"""
Item Model
"""

from stockroom.database import db
from datetime import datetime
import uuid
from .enums import ItemStatus


item_tags = db.Table(
    'item_tags',
    db.Column('item_id', db.String(36), db.ForeignKey('items.id', ondelete='CASCADE'), primary_key=True),
    db.Column('tag_id', db.String(36), db.ForeignKey('tags.id', ondelete='CASCADE'), primary_key=True)
)


class Item(db.Model):
    """Stocked item"""
    __tablename__ = 'items'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(255), nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    sku = db.Column(db.String(100), unique=True, nullable=True, index=True)
    barcode = db.Column(db.String(100), nullable=True, index=True)
    quantity = db.Column(db.Integer, default=0, nullable=False)
    min_quantity = db.Column(db.Integer, default=0, nullable=False)
    cost_price = db.Column(db.Float, nullable=True)
    sell_price = db.Column(db.Float, nullable=True)
    weight = db.Column(db.Float, nullable=True)
    photos = db.Column(db.JSON, nullable=True)
    folder_id = db.Column(db.String(36), db.ForeignKey('folders.id', ondelete='SET NULL'), nullable=True, index=True)
    location = db.Column(db.String(255), nullable=True)
    notes = db.Column(db.Text, nullable=True)
    status = db.Column(db.Enum(ItemStatus, values_callable=lambda e: [m.value for m in e]),
                       default=ItemStatus.ACTIVE, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    created_by = db.Column(db.String(36), nullable=True)

    __table_args__ = (
        db.CheckConstraint('quantity >= 0', name='ck_items_quantity_non_negative'),
    )

    tags = db.relationship('Tag', secondary=item_tags, lazy='selectin', order_by='Tag.name')
    folder = db.relationship('Folder', back_populates='items')

    def __repr__(self):
        return f'<Item {self.name} qty={self.quantity}>'

    @property
    def is_low_stock(self):
        """At or below the reorder threshold"""
        return self.quantity <= self.min_quantity

    @property
    def is_out_of_stock(self):
        return self.quantity == 0

    @property
    def unit_value(self):
        """Sell price, falling back to cost price"""
        if self.sell_price is not None:
            return self.sell_price
        return self.cost_price or 0.0

    @property
    def stock_value(self):
        return self.unit_value * self.quantity

    def to_dict(self, include_tags=True):
        """Convert to dictionary"""
        data = {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'sku': self.sku,
            'barcode': self.barcode,
            'quantity': self.quantity,
            'min_quantity': self.min_quantity,
            'cost_price': self.cost_price,
            'sell_price': self.sell_price,
            'weight': self.weight,
            'photos': list(self.photos or []),
            'folder_id': self.folder_id,
            'location': self.location,
            'notes': self.notes,
            'status': self.status.value,
            'is_low_stock': self.is_low_stock,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
            'created_by': self.created_by
        }
        if include_tags:
            data['tags'] = [tag.to_dict() for tag in self.tags]
        return data
