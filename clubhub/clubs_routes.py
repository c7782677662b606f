from flask import Blueprint, current_app, jsonify
from flask_login import current_user

from clubhub import db
from clubhub.auth.permissions import ANY_MEMBER, MANAGERS, OWNER_ONLY, club_role_required
from clubhub.auth.tokens import require_authentication
from clubhub.errors import not_found, translate_integrity_errors
from clubhub.models import Club, UserClub
from clubhub.schemas import ClubSchema, UpdateClubSchema, parse_body
from clubhub.services.membership_service import MembershipService

clubs_bp = Blueprint('clubs', __name__)

# Every club route, including the nested posts and events blueprints, needs a token
clubs_bp.before_request(require_authentication)


def get_club_or_404(club_id):
    club = db.session.get(Club, club_id)
    if club is None:
        raise not_found('Club not found')
    return club


@clubs_bp.route('', methods=['GET'])
def list_clubs():
    clubs = Club.query.order_by(Club.id).all()
    return jsonify({'clubs': [c.to_dict(include_counts=True) for c in clubs]})


@clubs_bp.route('/<id:club_id>', methods=['GET'])
def get_club(club_id):
    club = get_club_or_404(club_id)
    return jsonify(club.to_dict(include_counts=True))


@clubs_bp.route('', methods=['POST'])
def create_club():
    """Create a club owned by the caller, who also becomes admin and member."""
    data = parse_body(ClubSchema)

    club = MembershipService.create_club(current_user.id, data.name, data.description)
    with translate_integrity_errors(foreign_key='Invalid owner ID'):
        db.session.commit()

    current_app.logger.info("User %s created club %s", current_user.id, club.id)
    return jsonify(club.to_dict())


@clubs_bp.route('/<id:club_id>', methods=['PUT'])
@club_role_required(*OWNER_ONLY)
def update_club(club_id):
    data = parse_body(UpdateClubSchema)
    club = get_club_or_404(club_id)

    if data.name is not None:
        club.name = data.name
    if data.description is not None:
        club.description = data.description
    if data.owner_id is not None and data.owner_id != club.owner_id:
        MembershipService.transfer_ownership(club, data.owner_id)
        current_app.logger.info("Club %s transferred to user %s", club.id, data.owner_id)

    with translate_integrity_errors(foreign_key='Invalid owner ID'):
        db.session.commit()

    return jsonify(club.to_dict())


@clubs_bp.route('/<id:club_id>', methods=['DELETE'])
@club_role_required(*OWNER_ONLY)
def delete_club(club_id):
    club = get_club_or_404(club_id)
    body = club.to_dict()

    # Memberships, posts and events go with the club
    db.session.delete(club)
    db.session.commit()

    current_app.logger.info("User %s deleted club %s", current_user.id, club_id)
    return jsonify(body)


# =============================================================================
# Members and admins
# =============================================================================

def _list_memberships(club_id, level):
    get_club_or_404(club_id)
    memberships = (
        UserClub.query
        .filter(UserClub.club_id == club_id, UserClub.role_level.op('&')(level) == level)
        .order_by(UserClub.user_id)
        .all()
    )
    return [m.to_dict() for m in memberships]


@clubs_bp.route('/<id:club_id>/members', methods=['GET'])
@club_role_required(*ANY_MEMBER)
def list_members(club_id):
    return jsonify({'members': _list_memberships(club_id, UserClub.MEMBER)})


@clubs_bp.route('/<id:club_id>/admins', methods=['GET'])
@club_role_required(*ANY_MEMBER)
def list_admins(club_id):
    return jsonify({'admins': _list_memberships(club_id, UserClub.ADMIN)})


@clubs_bp.route('/<id:club_id>/members/<id:member_id>', methods=['POST'])
@club_role_required(*MANAGERS)
def add_member(club_id, member_id):
    club = get_club_or_404(club_id)
    membership = MembershipService.add_member(club, member_id)
    with translate_integrity_errors(unique='User is already linked to this club'):
        db.session.commit()
    return jsonify(membership.to_dict())


@clubs_bp.route('/<id:club_id>/members/<id:member_id>', methods=['DELETE'])
@club_role_required(*MANAGERS)
def remove_member(club_id, member_id):
    club = get_club_or_404(club_id)
    membership = MembershipService.remove_member(club, member_id)
    body = membership.to_dict()
    db.session.commit()
    return jsonify(body)


@clubs_bp.route('/<id:club_id>/admins/<id:admin_id>', methods=['POST'])
@club_role_required(*MANAGERS)
def add_admin(club_id, admin_id):
    club = get_club_or_404(club_id)
    membership = MembershipService.add_admin(club, admin_id)
    with translate_integrity_errors(unique='User is already linked to this club'):
        db.session.commit()
    return jsonify(membership.to_dict())


@clubs_bp.route('/<id:club_id>/admins/<id:admin_id>', methods=['DELETE'])
@club_role_required(*MANAGERS)
def remove_admin(club_id, admin_id):
    club = get_club_or_404(club_id)
    membership = MembershipService.remove_admin(club, admin_id)
    body = membership.to_dict()
    db.session.commit()
    return jsonify(body)


# Club-scoped resources inherit the authentication hook above
from clubhub.posts_routes import posts_bp
from clubhub.events_routes import events_bp

clubs_bp.register_blueprint(posts_bp, url_prefix='/<id:club_id>/posts')
clubs_bp.register_blueprint(events_bp, url_prefix='/<id:club_id>/events')
