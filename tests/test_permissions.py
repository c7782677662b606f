"""Role resolution and the club authorization gate."""
import pytest
from flask_principal import Identity, UserNeed

from clubhub.auth.permissions import (
    ANY_MEMBER,
    MANAGERS,
    OWNER_ONLY,
    ClubRoles,
    authorize,
    club_need,
    resolve_club_roles,
)
from clubhub.models import UserClub


def test_creator_holds_every_tier(app, owner, club):
    with app.app_context():
        assert resolve_club_roles(owner, club) == {ClubRoles.MEMBER, ClubRoles.ADMIN, ClubRoles.OWNER}


def test_plain_member_holds_member_tier_only(app, club, make_user, set_roles):
    member = make_user()
    set_roles(member, club, UserClub.MEMBER)
    with app.app_context():
        assert resolve_club_roles(member, club) == {ClubRoles.MEMBER}


def test_stranger_holds_nothing(app, club, make_user):
    stranger = make_user()
    with app.app_context():
        assert resolve_club_roles(stranger, club) == set()


def test_missing_club_resolves_to_nothing(app, owner):
    with app.app_context():
        assert resolve_club_roles(owner, 999) == set()


def test_admin_bit_without_member_bit(app, club, make_user, set_roles):
    admin = make_user()
    set_roles(admin, club, UserClub.ADMIN)
    with app.app_context():
        assert resolve_club_roles(admin, club) == {ClubRoles.ADMIN}


def test_gate_grants_when_any_required_tier_is_held(app, club, make_user, set_roles):
    """Admin-only holders pass an admin-or-owner check; OR, not AND."""
    admin = make_user()
    set_roles(admin, club, UserClub.ADMIN)
    with app.app_context():
        assert authorize(MANAGERS, club, Identity(admin)) is True
        assert authorize(ANY_MEMBER, club, Identity(admin)) is True
        assert authorize(OWNER_ONLY, club, Identity(admin)) is False


def test_gate_denies_member_for_manager_routes(app, club, make_user, set_roles):
    member = make_user()
    set_roles(member, club, UserClub.MEMBER)
    with app.app_context():
        assert authorize(MANAGERS, club, Identity(member)) is False
        assert authorize(ANY_MEMBER, club, Identity(member)) is True


def test_gate_denies_missing_club(app, owner):
    with app.app_context():
        assert authorize(ANY_MEMBER, 999, Identity(owner)) is False


def test_gate_denies_anonymous_identity(app, club):
    with app.app_context():
        assert authorize(ANY_MEMBER, club, None) is False
        assert authorize(ANY_MEMBER, club, Identity(None)) is False


def test_gate_publishes_resolved_needs(app, owner, club):
    identity = Identity(owner)
    identity.provides.add(UserNeed(owner))
    with app.app_context():
        authorize(OWNER_ONLY, club, identity)

    assert club_need(ClubRoles.OWNER, club) in identity.provides
    assert club_need(ClubRoles.ADMIN, club) in identity.provides
    assert club_need(ClubRoles.MEMBER, club) in identity.provides


def test_needs_are_scoped_to_one_club(app, owner, club, make_club):
    other_club = make_club(owner, name='Go Club')
    identity = Identity(owner)
    with app.app_context():
        authorize(OWNER_ONLY, club, identity)

    assert club_need(ClubRoles.OWNER, other_club) not in identity.provides


def test_decorator_requires_roles():
    from clubhub.auth.permissions import club_role_required
    with pytest.raises(ValueError):
        club_role_required()
