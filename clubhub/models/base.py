"""Database handle shared by the models, plus per-connection engine setup."""
from sqlalchemy import event

from .. import db


def configure_engine(engine, statement_timeout_ms=0, sqlite_busy_timeout_ms=0):
    """
    Register connection hooks on the app's pooled engine.

    SQLite only enforces foreign keys when asked to on each connection;
    MySQL and PostgreSQL get a statement timeout so a slow query cannot pin a request.
    """
    dialect = engine.dialect.name

    @event.listens_for(engine, 'connect')
    def on_connect(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        try:
            if dialect == 'sqlite':
                cursor.execute('PRAGMA foreign_keys=ON')
                if sqlite_busy_timeout_ms:
                    cursor.execute(f'PRAGMA busy_timeout = {int(sqlite_busy_timeout_ms)}')
            elif dialect == 'postgresql' and statement_timeout_ms:
                cursor.execute(f'SET statement_timeout = {int(statement_timeout_ms)}')
            elif dialect == 'mysql' and statement_timeout_ms:
                cursor.execute(f'SET SESSION MAX_EXECUTION_TIME = {int(statement_timeout_ms)}')
        finally:
            cursor.close()
