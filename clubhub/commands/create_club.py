import click
from flask.cli import with_appcontext

from clubhub import db
from clubhub.models import User
from clubhub.services.membership_service import MembershipService


@click.command('create-club')
@click.option('--name', required=True, help='The club name')
@click.option('--description', required=True, help='A short description of the club')
@click.option('--owner-email', required=True, help='Email of the existing user who will own the club')
@with_appcontext
def create_club(name, description, owner_email):
    """
    Creates a new club owned by an existing user.
    The owner is also made admin and member of the club.
    """
    owner = User.query.filter_by(email=owner_email.strip().lower()).first()
    if owner is None:
        raise click.ClickException(f"No user with email '{owner_email}'")

    club = MembershipService.create_club(owner.id, name, description)
    db.session.commit()
    click.echo(f"Successfully created club: {club.name} (ID: {club.id}, owner: {owner.email})")
