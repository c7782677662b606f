"""Club events. ``finished`` is derived from ``date`` and never set by clients."""
from .base import db
from ..utils import utc_now, isoformat


class Event(db.Model):
    __tablename__ = 'events'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(100), nullable=False)
    description = db.Column(db.String(255), nullable=False)
    date = db.Column(db.DateTime, nullable=False, index=True)
    finished = db.Column(db.Boolean, default=False, nullable=False)
    club_id = db.Column(db.Integer, db.ForeignKey('clubs.id', ondelete='CASCADE'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=utc_now)

    club = db.relationship('Club', back_populates='events')

    def __repr__(self):
        return f'<Event {self.id}: {self.title} on {self.date}>'

    def is_finished(self, now=None):
        return (now or utc_now()) > self.date

    def refresh_finished(self, now=None):
        """Recompute the stored ``finished`` flag from the current ``date``."""
        self.finished = self.is_finished(now)
        return self.finished

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'date': isoformat(self.date),
            'finished': self.is_finished(),
            'clubId': self.club_id,
            'createdAt': isoformat(self.created_at),
        }
