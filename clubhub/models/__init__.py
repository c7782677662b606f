"""
Models package for ClubHub.

Importing this package registers every table with SQLAlchemy.
"""
from .base import db

from .user import User
from .club import Club
from .user_club import UserClub
from .post import Post
from .event import Event

__all__ = [
    'db',
    'User',
    'Club',
    'UserClub',
    'Post',
    'Event',
]
