"""User model for authentication and club roles."""
from .base import db
from .. import bcrypt
from ..utils import utc_now, isoformat


class User(db.Model):
    __tablename__ = 'users'
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    name = db.Column(db.String(25), nullable=False)
    # Profile-only accounts have no credentials and cannot log in
    password_hash = db.Column(db.String(255), nullable=True)
    description = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, default=utc_now)

    # Relationships
    owned_clubs = db.relationship('Club', back_populates='owner', foreign_keys='Club.owner_id')
    posts = db.relationship('Post', back_populates='author')

    def __repr__(self):
        return f'<User {self.id}: {self.email}>'

    def set_password(self, password):
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        if not self.password_hash:
            return False
        return bcrypt.check_password_hash(self.password_hash, password)

    @property
    def joined_clubs(self):
        return [uc.club for uc in self.club_memberships if uc.is_member]

    @property
    def admin_clubs(self):
        return [uc.club for uc in self.club_memberships if uc.is_admin]

    def to_dict(self):
        """Public profile. The password hash never leaves the model."""
        return {
            'id': self.id,
            'email': self.email,
            'name': self.name,
            'description': self.description,
            'createdAt': isoformat(self.created_at),
        }

    def to_token_profile(self):
        """Snapshot embedded in access tokens; frozen until the token expires."""
        return {
            'id': self.id,
            'email': self.email,
            'name': self.name,
            'description': self.description,
        }
