import click
from flask.cli import with_appcontext

from clubhub import db


@click.command('init-db')
@with_appcontext
def init_db():
    """Creates all tables that do not exist yet. Use `flask db upgrade` for managed schemas."""
    db.create_all()
    click.echo("Database tables created.")
