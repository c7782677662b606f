"""UserClub junction table holding a user's member/admin rights in a club."""
from .base import db
from ..utils import utc_now, isoformat


class UserClub(db.Model):
    """
    Links users to clubs with a bitmask of club roles.

    Bit values:
        MEMBER (1) - may read and post in the club
        ADMIN (2)  - may manage events and memberships

    Ownership is not a bit: it lives on ``Club.owner_id`` so a club can never
    have more than one owner. A row whose mask drops to 0 should be deleted.
    """
    __tablename__ = 'user_clubs'

    MEMBER = 1
    ADMIN = 2

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    club_id = db.Column(db.Integer, db.ForeignKey('clubs.id', ondelete='CASCADE'), nullable=False)
    role_level = db.Column(db.Integer, default=0, nullable=False)  # Bitmask of MEMBER/ADMIN
    joined_date = db.Column(db.DateTime, default=utc_now)
    updated_at = db.Column(db.DateTime, default=utc_now, onupdate=utc_now)

    # Relationships
    user = db.relationship('User', backref=db.backref('club_memberships', cascade='all, delete-orphan'))
    club = db.relationship('Club', back_populates='memberships')

    # Constraints and indexes
    __table_args__ = (
        db.UniqueConstraint('user_id', 'club_id', name='uq_user_club'),
        db.Index('ix_user_clubs_user', 'user_id'),
        db.Index('ix_user_clubs_club', 'club_id'),
    )

    def __repr__(self):
        return f'<UserClub user_id={self.user_id} club_id={self.club_id} role_level={self.role_level}>'

    def has_level(self, level):
        return ((self.role_level or 0) & level) == level

    @property
    def is_member(self):
        return self.has_level(self.MEMBER)

    @property
    def is_admin(self):
        return self.has_level(self.ADMIN)

    def grant(self, level):
        self.role_level = (self.role_level or 0) | level

    def revoke(self, level):
        self.role_level = (self.role_level or 0) & ~level

    def to_dict(self):
        """Convert to dictionary for JSON serialization."""
        return {
            'userId': self.user_id,
            'clubId': self.club_id,
            'name': self.user.name if self.user else None,
            'email': self.user.email if self.user else None,
            'member': self.is_member,
            'admin': self.is_admin,
            'joinedDate': isoformat(self.joined_date),
        }
