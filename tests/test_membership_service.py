import unittest

import pytest

from clubhub import db
from clubhub.errors import ApiError, ErrorKind
from clubhub.models import Club, User, UserClub
from clubhub.services.membership_service import MembershipService


class TestMembershipService(unittest.TestCase):
    """Service-level checks on the bitmask bookkeeping, outside of HTTP."""

    @pytest.fixture(autouse=True)
    def _app_context(self, app):
        with app.app_context():
            self.seed()
            yield
            db.session.remove()

    def seed(self):
        self.owner = User(email='owner@example.com', name='owner')
        self.other = User(email='other@example.com', name='other')
        db.session.add_all([self.owner, self.other])
        db.session.commit()

        self.club = MembershipService.create_club(self.owner.id, 'Chess Club', 'We play chess')
        db.session.commit()

    def test_create_club_grants_member_and_admin_to_owner(self):
        membership = MembershipService.get_membership(self.club.id, self.owner.id)
        self.assertEqual(membership.role_level, UserClub.MEMBER | UserClub.ADMIN)
        self.assertEqual(self.club.owner_id, self.owner.id)
        self.assertEqual(self.club.member_count(), 1)

    def test_grant_is_cumulative(self):
        MembershipService.add_member(self.club, self.other.id)
        MembershipService.add_admin(self.club, self.other.id)
        db.session.commit()

        membership = MembershipService.get_membership(self.club.id, self.other.id)
        self.assertTrue(membership.is_member)
        self.assertTrue(membership.is_admin)
        self.assertEqual([u.id for u in self.club.admins], [self.owner.id, self.other.id])

    def test_revoking_last_bit_deletes_row(self):
        MembershipService.add_member(self.club, self.other.id)
        db.session.commit()

        MembershipService.remove_member(self.club, self.other.id)
        db.session.commit()

        self.assertIsNone(MembershipService.get_membership(self.club.id, self.other.id))

    def test_owner_is_protected(self):
        with self.assertRaises(ApiError) as ctx:
            MembershipService.remove_admin(self.club, self.owner.id)
        self.assertIs(ctx.exception.kind, ErrorKind.CONFLICT)

    def test_transfer_ownership(self):
        MembershipService.transfer_ownership(self.club, self.other.id)
        db.session.commit()

        club = db.session.get(Club, self.club.id)
        self.assertEqual(club.owner_id, self.other.id)
        self.assertTrue(MembershipService.get_membership(club.id, self.other.id).is_admin)
        self.assertIn(club, self.other.owned_clubs)

    def test_transfer_to_unknown_user(self):
        with self.assertRaises(ApiError) as ctx:
            MembershipService.transfer_ownership(self.club, 999)
        self.assertEqual(ctx.exception.message, 'Invalid owner ID')
