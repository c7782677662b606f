"""Club model. A club has exactly one owner and any number of members/admins."""
from .base import db
from ..utils import utc_now, isoformat


class Club(db.Model):
    __tablename__ = 'clubs'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(30), nullable=False)
    description = db.Column(db.String(255), nullable=False)
    owner_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=utc_now)
    updated_at = db.Column(db.DateTime, default=utc_now, onupdate=utc_now)

    # Relationships
    owner = db.relationship('User', back_populates='owned_clubs', foreign_keys=[owner_id])
    memberships = db.relationship('UserClub', back_populates='club', cascade='all, delete-orphan')
    posts = db.relationship('Post', back_populates='club', cascade='all, delete-orphan',
                            order_by='Post.created_at.desc()')
    events = db.relationship('Event', back_populates='club', cascade='all, delete-orphan')

    def __repr__(self):
        return f'<Club {self.id}: {self.name}>'

    @property
    def admins(self):
        return [uc.user for uc in self.memberships if uc.is_admin]

    def member_count(self):
        from .user_club import UserClub
        return UserClub.query.filter(
            UserClub.club_id == self.id,
            UserClub.role_level.op('&')(UserClub.MEMBER) == UserClub.MEMBER
        ).count()

    def post_count(self):
        from .post import Post
        return Post.query.filter_by(club_id=self.id).count()

    def to_dict(self, include_counts=False):
        """Convert club to dictionary for JSON serialization."""
        data = {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'ownerId': self.owner_id,
            'owner': {'id': self.owner.id, 'name': self.owner.name} if self.owner else None,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }
        if include_counts:
            data['memberCount'] = self.member_count()
            data['postCount'] = self.post_count()
        return data
