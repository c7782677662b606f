from .base import db
from ..utils import utc_now, isoformat


class Post(db.Model):
    __tablename__ = 'posts'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(30), nullable=False)
    content = db.Column(db.Text, nullable=False)
    author_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    club_id = db.Column(db.Integer, db.ForeignKey('clubs.id', ondelete='CASCADE'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=utc_now, index=True)
    last_updated = db.Column(db.DateTime, default=utc_now)

    author = db.relationship('User', back_populates='posts')
    club = db.relationship('Club', back_populates='posts')

    def __repr__(self):
        return f'<Post {self.id} in club {self.club_id} by {self.author_id}>'

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'content': self.content,
            'authorId': self.author_id,
            'clubId': self.club_id,
            'createdAt': isoformat(self.created_at),
            'lastUpdated': isoformat(self.last_updated),
            'author': {'name': self.author.name} if self.author else None,
            'club': {'name': self.club.name} if self.club else None,
        }
