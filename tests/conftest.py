"""
Pytest configuration and fixtures.
"""
import sys
import os
import pytest

# Add project root to Python path
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__) + '/..'))

STRONG_PASSWORD = 'Secret#123'


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    from clubhub import create_app
    from config import Config

    # A temporary SQLite file keeps every connection on the same database
    class TestConfig(Config):
        TESTING = True
        import tempfile
        db_fd, db_path = tempfile.mkstemp()
        SQLALCHEMY_DATABASE_URI = f'sqlite:///{db_path}'
        JWT_SECRET = 'test-jwt-secret'
        BCRYPT_LOG_ROUNDS = 4
        LOGIN_MASK_UNKNOWN_USER = False
        DB_STATEMENT_TIMEOUT_MS = 0

    app = create_app(TestConfig)

    # Initialize database
    with app.app_context():
        from clubhub import db
        db.session.configure(expire_on_commit=False)
        db.create_all()

    yield app

    os.close(TestConfig.db_fd)
    os.remove(TestConfig.db_path)


@pytest.fixture(scope='function', autouse=True)
def clean_db(app):
    """Clean database between tests."""
    with app.app_context():
        from clubhub import db
        # Drop all tables and recreate them to ensure a clean slate
        db.session.remove()
        db.drop_all()
        db.create_all()
    yield


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def db_session(app):
    with app.app_context():
        from clubhub import db
        yield db.session
        db.session.remove()


@pytest.fixture
def make_user(app):
    """Factory creating a user with a strong password. Returns the user id."""
    from clubhub.models import db, User

    counter = {'n': 0}

    def _make_user(name=None, email=None, password=STRONG_PASSWORD, description=None):
        counter['n'] += 1
        name = name or f'user{counter["n"]}'
        email = email or f'{name}@example.com'
        with app.app_context():
            user = User(email=email, name=name, description=description)
            if password is not None:
                user.set_password(password)
            db.session.add(user)
            db.session.commit()
            return user.id

    return _make_user


@pytest.fixture
def auth_header(app):
    """Factory returning an Authorization header for a stored user id."""
    from clubhub.auth.tokens import create_access_token
    from clubhub.models import db, User

    def _auth_header(user_id):
        with app.app_context():
            token = create_access_token(db.session.get(User, user_id))
        return {'Authorization': f'Bearer {token}'}

    return _auth_header


@pytest.fixture
def make_club(app):
    """Factory creating a club through the membership service. Returns the club id."""
    from clubhub.models import db
    from clubhub.services.membership_service import MembershipService

    def _make_club(owner_id, name='Chess Club', description='We play chess'):
        with app.app_context():
            club = MembershipService.create_club(owner_id, name, description)
            db.session.commit()
            return club.id

    return _make_club


@pytest.fixture
def set_roles(app):
    """Factory adding or replacing a user's role bitmask in a club."""
    from clubhub.models import db, UserClub

    def _set_roles(user_id, club_id, role_level):
        with app.app_context():
            membership = UserClub.query.filter_by(user_id=user_id, club_id=club_id).first()
            if membership is None:
                membership = UserClub(user_id=user_id, club_id=club_id)
                db.session.add(membership)
            membership.role_level = role_level
            db.session.commit()

    return _set_roles


@pytest.fixture
def owner(make_user):
    return make_user(name='owner')


@pytest.fixture
def club(owner, make_club):
    return make_club(owner)
