from flask import current_app, jsonify

from . import auth_bp  # Import the blueprint
from .. import db       # Import db from the parent package
from ..errors import invalid_credentials, not_found, translate_integrity_errors
from ..models import User
from ..schemas import LoginSchema, SignupSchema, parse_body
from .tokens import create_access_token


@auth_bp.route('/signup', methods=['POST'])
def signup():
    """Register an account with credentials."""
    data = parse_body(SignupSchema)

    user = User(email=data.email, name=data.name, description=data.description)
    user.set_password(data.password)
    db.session.add(user)

    with translate_integrity_errors(unique='Email is already being used'):
        db.session.commit()

    current_app.logger.info("Registered user %s", user.id)
    return jsonify(user.to_dict())


@auth_bp.route('/login', methods=['POST'])
def login():
    """Exchange email and password for an access token."""
    data = parse_body(LoginSchema)

    user = User.query.filter_by(email=data.email).first()

    # Unknown email and wrong password are told apart unless masking is on
    if user is None:
        if current_app.config.get('LOGIN_MASK_UNKNOWN_USER'):
            raise invalid_credentials()
        raise not_found('User not found')

    if not user.check_password(data.password):
        current_app.logger.info("Failed login for user %s", user.id)
        raise invalid_credentials()

    return jsonify({'accessToken': create_access_token(user)})
