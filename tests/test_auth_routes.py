import pytest

from conftest import STRONG_PASSWORD


def signup_payload(**overrides):
    payload = {
        'email': 'alice@example.com',
        'name': 'Alice',
        'password': STRONG_PASSWORD,
        'confirmation': STRONG_PASSWORD,
        'description': 'Likes chess',
    }
    payload.update(overrides)
    return payload


def test_signup_creates_user_without_exposing_hash(app, client):
    response = client.post('/api/auth/signup', json=signup_payload())

    assert response.status_code == 200
    data = response.get_json()
    assert data['email'] == 'alice@example.com'
    assert data['name'] == 'Alice'
    assert 'password' not in data
    assert 'passwordHash' not in data

    from clubhub.models import User
    with app.app_context():
        user = User.query.filter_by(email='alice@example.com').one()
        assert user.password_hash != STRONG_PASSWORD
        assert user.check_password(STRONG_PASSWORD)


def test_signup_trims_strings(client):
    response = client.post('/api/auth/signup', json=signup_payload(name='  Alice  '))
    assert response.status_code == 200
    assert response.get_json()['name'] == 'Alice'


@pytest.mark.parametrize('password', ['short1!', 'alllowercase1!', 'ALLUPPER1!', 'NoDigits!!', 'NoSymbol12'])
def test_signup_rejects_weak_passwords(client, password):
    response = client.post('/api/auth/signup', json=signup_payload(password=password, confirmation=password))

    assert response.status_code == 400
    data = response.get_json()
    assert data['error'] == 'Invalid data provided'
    assert any(issue['path'] == ['password'] for issue in data['issues'])


def test_signup_rejects_mismatched_confirmation(client):
    response = client.post('/api/auth/signup', json=signup_payload(confirmation='Other#123'))

    assert response.status_code == 400
    issues = response.get_json()['issues']
    assert issues == [{
        'path': ['confirmation'],
        'message': 'Password and confirmation must match',
        'code': 'password_mismatch',
    }]


def test_signup_rejects_missing_fields(client):
    response = client.post('/api/auth/signup', json={})

    assert response.status_code == 400
    paths = {tuple(issue['path']) for issue in response.get_json()['issues']}
    assert {('email',), ('name',), ('password',), ('confirmation',)} <= paths


def test_signup_duplicate_email_is_conflict(client):
    assert client.post('/api/auth/signup', json=signup_payload()).status_code == 200

    response = client.post('/api/auth/signup', json=signup_payload(name='Other'))
    assert response.status_code == 400
    assert response.get_json() == {'error': 'Email is already being used'}


def test_login_returns_token_for_same_user(app, client, make_user):
    user_id = make_user(name='bob')

    response = client.post('/api/auth/login', json={'email': 'bob@example.com', 'password': STRONG_PASSWORD})

    assert response.status_code == 200
    token = response.get_json()['accessToken']

    from clubhub.auth.tokens import decode_access_token
    with app.app_context():
        principal = decode_access_token(token)
    assert principal.id == user_id
    assert principal.email == 'bob@example.com'


def test_login_email_is_case_insensitive(client, make_user):
    make_user(name='bob')
    response = client.post('/api/auth/login', json={'email': 'BOB@Example.com', 'password': STRONG_PASSWORD})
    assert response.status_code == 200


def test_login_unknown_email_is_not_found(client):
    response = client.post('/api/auth/login', json={'email': 'ghost@example.com', 'password': STRONG_PASSWORD})

    assert response.status_code == 404
    assert response.get_json() == {'error': 'User not found'}


def test_login_wrong_password_is_invalid_credentials(client, make_user):
    make_user(name='bob')
    response = client.post('/api/auth/login', json={'email': 'bob@example.com', 'password': 'Wrong#123'})

    assert response.status_code == 400
    assert response.get_json() == {'error': 'Incorrect email or password'}


def test_login_masking_hides_unknown_email(app, client, monkeypatch):
    monkeypatch.setitem(app.config, 'LOGIN_MASK_UNKNOWN_USER', True)

    response = client.post('/api/auth/login', json={'email': 'ghost@example.com', 'password': STRONG_PASSWORD})

    assert response.status_code == 400
    assert response.get_json() == {'error': 'Incorrect email or password'}


def test_profile_only_account_cannot_log_in(client):
    created = client.post('/api/users', json={'email': 'carol@example.com', 'name': 'Carol'})
    assert created.status_code == 200

    response = client.post('/api/auth/login', json={'email': 'carol@example.com', 'password': STRONG_PASSWORD})
    assert response.status_code == 400


def test_signup_stores_email_lower_cased(client):
    response = client.post('/api/auth/signup', json=signup_payload(email='Alice@Example.COM'))

    assert response.status_code == 200
    assert response.get_json()['email'] == 'alice@example.com'


def test_signup_rejects_case_variant_of_existing_email(client):
    assert client.post('/api/auth/signup', json=signup_payload(email='bob@example.com')).status_code == 200

    response = client.post('/api/auth/signup', json=signup_payload(
        email='Bob@example.com', password='Other#456', confirmation='Other#456',
    ))

    assert response.status_code == 400
    assert response.get_json() == {'error': 'Email is already being used'}


def test_login_with_mixed_case_email_finds_same_account(app, client):
    response = client.post('/api/auth/signup', json=signup_payload(email='Bob@example.com'))
    user_id = response.get_json()['id']

    response = client.post('/api/auth/login', json={'email': 'BOB@EXAMPLE.com', 'password': STRONG_PASSWORD})

    assert response.status_code == 200
    from clubhub.auth.tokens import decode_access_token
    with app.app_context():
        assert decode_access_token(response.get_json()['accessToken']).id == user_id
