"""Club role resolution and the authorization gate, on top of Flask-Principal."""
from functools import wraps
import logging

from flask import g
from flask_login import current_user
from flask_principal import ItemNeed, Permission, UserNeed
from sqlalchemy import and_

from .. import db, login_manager
from ..errors import forbidden
from ..models import Club, UserClub

logger = logging.getLogger(__name__)


class ClubRoles:
    """Role tiers a user can hold in a club."""
    MEMBER = 'member'
    ADMIN = 'admin'
    OWNER = 'owner'


# Role sets declared by routes
ANY_MEMBER = (ClubRoles.MEMBER, ClubRoles.ADMIN, ClubRoles.OWNER)
MANAGERS = (ClubRoles.ADMIN, ClubRoles.OWNER)
OWNER_ONLY = (ClubRoles.OWNER,)


def club_need(role, club_id):
    """A need for holding ``role`` in the club ``club_id``."""
    return ItemNeed(role, club_id, 'club')


def resolve_club_roles(user_id, club_id):
    """
    Find which tiers ``user_id`` holds in ``club_id``.

    Reads the owner field and the membership bitmask in one query.

    Returns:
        set: subset of the ClubRoles tiers; empty when the club does not exist
    """
    row = (
        db.session.query(Club.owner_id, UserClub.role_level)
        .outerjoin(UserClub, and_(UserClub.club_id == Club.id, UserClub.user_id == user_id))
        .filter(Club.id == club_id)
        .first()
    )
    if row is None:
        return set()

    owner_id, role_level = row
    role_level = role_level or 0

    roles = set()
    if role_level & UserClub.MEMBER:
        roles.add(ClubRoles.MEMBER)
    if role_level & UserClub.ADMIN:
        roles.add(ClubRoles.ADMIN)
    if owner_id == user_id:
        roles.add(ClubRoles.OWNER)
    return roles


def authorize(required_roles, club_id, identity):
    """
    Decide whether ``identity`` holds ANY of ``required_roles`` in the club.

    The resolved tiers are published on the identity as club needs, so later
    permission checks in the same request (e.g. post ownership combined with
    admin rights) see them without another query.
    """
    if identity is None or identity.id is None:
        return False

    granted = resolve_club_roles(identity.id, club_id)
    identity.provides.update(club_need(role, club_id) for role in granted)

    permission = Permission(*[club_need(role, club_id) for role in required_roles])
    return permission.allows(identity)


def club_role_required(*roles):
    """
    Decorator to require one of the given club roles for a route.

    The club is taken from the ``club_id`` URL parameter.

    Usage:
        @club_role_required(ClubRoles.ADMIN, ClubRoles.OWNER)
        def create_event(club_id):
            ...
    """
    if not roles:
        raise ValueError('club_role_required needs at least one role')

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not current_user.is_authenticated:
                return login_manager.unauthorized()

            club_id = kwargs.get('club_id')
            if not authorize(roles, club_id, g.identity):
                logger.info("User %s lacks %s in club %s", current_user.id, '/'.join(roles), club_id)
                raise forbidden('Insufficient club role')
            return f(*args, **kwargs)
        return decorated_function
    return decorator


def self_permission(user_id):
    """Permission held only by the user ``user_id`` themself."""
    return Permission(UserNeed(user_id))


def author_permission(post, *roles):
    """
    Permission held by the post's author, or by anyone holding one of
    ``roles`` in the post's club.
    """
    return Permission(UserNeed(post.author_id), *[club_need(role, post.club_id) for role in roles])
