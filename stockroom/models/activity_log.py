"""
Activity Log Model
"""

from stockroom.database import db
from datetime import datetime
import uuid
from .enums import action_label


class ActivityLog(db.Model):
    """Append-only audit entry"""
    __tablename__ = 'activity_log'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(36), nullable=True, index=True)
    action_type = db.Column(db.String(50), nullable=False, index=True)
    item_id = db.Column(db.String(36), nullable=True, index=True)  # No FK, history outlives the row
    pick_list_id = db.Column(db.String(36), nullable=True, index=True)
    details = db.Column(db.JSON, nullable=False, default=dict)
    timestamp = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)

    def __repr__(self):
        return f'<ActivityLog {self.action_type}>'

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'action_type': self.action_type,
            'label': action_label(self.action_type),
            'item_id': self.item_id,
            'pick_list_id': self.pick_list_id,
            'details': dict(self.details or {}),
            'timestamp': self.timestamp.isoformat() if self.timestamp else None
        }
