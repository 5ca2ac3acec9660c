"""
Pick List Models
"""

from stockroom.database import db
from datetime import datetime
import uuid
from .enums import PickListStatus


class PickList(db.Model):
    """Work order listing items to retrieve from stock"""
    __tablename__ = 'pick_lists'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(255), nullable=False)
    status = db.Column(db.Enum(PickListStatus, values_callable=lambda e: [m.value for m in e]),
                       default=PickListStatus.DRAFT, nullable=False, index=True)
    assigned_to = db.Column(db.String(36), nullable=True)
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    created_by = db.Column(db.String(36), nullable=True)

    lines = db.relationship('PickListItem', back_populates='pick_list', lazy=True,
                            order_by='PickListItem.sort_order', cascade='all, delete-orphan')
    comments = db.relationship('PickListComment', back_populates='pick_list', lazy=True,
                               order_by='PickListComment.created_at', cascade='all, delete-orphan')

    def __repr__(self):
        return f'<PickList {self.name} {self.status.value}>'

    @property
    def is_complete(self):
        return self.status == PickListStatus.COMPLETE

    def to_dict(self):
        """Convert to dictionary"""
        return {
            'id': self.id,
            'name': self.name,
            'status': self.status.value,
            'status_label': self.status.label,
            'assigned_to': self.assigned_to,
            'notes': self.notes,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
            'created_by': self.created_by
        }


class PickListItem(db.Model):
    """One item and quantity within a pick list"""
    __tablename__ = 'pick_list_items'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    pick_list_id = db.Column(db.String(36), db.ForeignKey('pick_lists.id', ondelete='CASCADE'), nullable=False, index=True)
    item_id = db.Column(db.String(36), db.ForeignKey('items.id'), nullable=False, index=True)
    quantity_requested = db.Column(db.Integer, nullable=False, default=1)
    quantity_picked = db.Column(db.Integer, nullable=False, default=0)
    location_hint = db.Column(db.String(255), nullable=True)
    unit_price = db.Column(db.Float, nullable=True)
    picked_at = db.Column(db.DateTime, nullable=True)
    picked_by = db.Column(db.String(36), nullable=True)
    sort_order = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.CheckConstraint('quantity_picked >= 0', name='ck_pick_list_items_picked_non_negative'),
        db.CheckConstraint('quantity_picked <= quantity_requested', name='ck_pick_list_items_picked_within_requested'),
    )

    pick_list = db.relationship('PickList', back_populates='lines')
    item = db.relationship('Item', lazy='joined')

    def __repr__(self):
        return f'<PickListItem {self.item_id} {self.quantity_picked}/{self.quantity_requested}>'

    @property
    def is_picked(self):
        return self.quantity_picked >= self.quantity_requested

    def to_dict(self, include_item=False):
        data = {
            'id': self.id,
            'pick_list_id': self.pick_list_id,
            'item_id': self.item_id,
            'quantity_requested': self.quantity_requested,
            'quantity_picked': self.quantity_picked,
            'is_picked': self.is_picked,
            'location_hint': self.location_hint,
            'unit_price': self.unit_price,
            'picked_at': self.picked_at.isoformat() if self.picked_at else None,
            'picked_by': self.picked_by,
            'sort_order': self.sort_order,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }
        if include_item:
            data['item'] = self.item.to_dict(include_tags=False) if self.item else None
        return data


class PickListComment(db.Model):
    """Append-only comment on a pick list"""
    __tablename__ = 'pick_list_comments'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    pick_list_id = db.Column(db.String(36), db.ForeignKey('pick_lists.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id = db.Column(db.String(36), nullable=True)
    content = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    pick_list = db.relationship('PickList', back_populates='comments')

    def to_dict(self):
        return {
            'id': self.id,
            'pick_list_id': self.pick_list_id,
            'user_id': self.user_id,
            'content': self.content,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }
