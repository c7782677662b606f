from clubhub import db
from clubhub.errors import conflict, not_found
from clubhub.models import Club, User, UserClub


class MembershipService:
    """
    Club creation and member/admin/owner bookkeeping.

    Methods stage changes on the session; callers own the commit, so each
    operation lands in a single transaction.
    """

    @staticmethod
    def create_club(owner_id, name, description):
        """
        Stage a new club whose creator is owner, admin and member at once.

        Returns:
            Club: the pending club (persisted on the caller's commit)
        """
        club = Club(name=name, description=description, owner_id=owner_id)
        club.memberships.append(
            UserClub(user_id=owner_id, role_level=UserClub.MEMBER | UserClub.ADMIN)
        )
        db.session.add(club)
        return club

    @staticmethod
    def get_membership(club_id, user_id):
        return UserClub.query.filter_by(club_id=club_id, user_id=user_id).first()

    @staticmethod
    def _grant(club, user_id, level):
        if db.session.get(User, user_id) is None:
            raise not_found('User not found')

        membership = MembershipService.get_membership(club.id, user_id)
        if membership is None:
            membership = UserClub(user_id=user_id, role_level=0)
            club.memberships.append(membership)
        membership.grant(level)
        return membership

    @staticmethod
    def _revoke(club, user_id, level, label):
        # Product rule: the owner keeps member and admin rights while owning the club
        if user_id == club.owner_id:
            raise conflict(f'Club owner cannot be removed from {label}s')

        membership = MembershipService.get_membership(club.id, user_id)
        if membership is None or not membership.has_level(level):
            raise not_found(f'{label.capitalize()} not found')

        membership.revoke(level)
        if membership.role_level == 0:
            db.session.delete(membership)
        return membership

    @staticmethod
    def add_member(club, user_id):
        return MembershipService._grant(club, user_id, UserClub.MEMBER)

    @staticmethod
    def remove_member(club, user_id):
        """Clear the member bit only. Admin rights are kept (known gap)."""
        return MembershipService._revoke(club, user_id, UserClub.MEMBER, 'member')

    @staticmethod
    def add_admin(club, user_id):
        """Admins are always members too."""
        return MembershipService._grant(club, user_id, UserClub.MEMBER | UserClub.ADMIN)

    @staticmethod
    def remove_admin(club, user_id):
        return MembershipService._revoke(club, user_id, UserClub.ADMIN, 'admin')

    @staticmethod
    def transfer_ownership(club, new_owner_id):
        """
        Hand the club to another user, who becomes member and admin as well.
        The previous owner keeps their member and admin rights.
        """
        if db.session.get(User, new_owner_id) is None:
            raise conflict('Invalid owner ID')

        club.owner_id = new_owner_id
        MembershipService._grant(club, new_owner_id, UserClub.MEMBER | UserClub.ADMIN)
        return club
