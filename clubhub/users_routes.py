from flask import Blueprint, jsonify
from flask_login import login_required

from clubhub import db
from clubhub.auth.permissions import self_permission
from clubhub.errors import forbidden, not_found, translate_integrity_errors
from clubhub.models import User
from clubhub.schemas import NewUserSchema, UpdateUserSchema, parse_body

users_bp = Blueprint('users', __name__)


@users_bp.route('', methods=['GET'])
def list_users():
    """Public user directory."""
    users = User.query.order_by(User.id).all()
    return jsonify({'users': [u.to_dict() for u in users]})


@users_bp.route('/<id:user_id>', methods=['GET'])
def get_user(user_id):
    user = db.session.get(User, user_id)
    if user is None:
        raise not_found('User not found')
    return jsonify(user.to_dict())


@users_bp.route('', methods=['POST'])
def create_user():
    """Create a profile-only account. It has no password, so it cannot log in."""
    data = parse_body(NewUserSchema)

    user = User(email=data.email, name=data.name, description=data.description)
    db.session.add(user)
    with translate_integrity_errors(unique='Email is already being used'):
        db.session.commit()

    return jsonify(user.to_dict())


@users_bp.route('/<id:user_id>', methods=['PUT'])
@login_required
def update_user(user_id):
    """Update name/description of the caller's own account after re-checking the password."""
    # Only same user can update account details
    if not self_permission(user_id).can():
        raise forbidden('Only same user can make this request')

    user = db.session.get(User, user_id)
    if user is None:
        raise not_found('User not found')

    data = parse_body(UpdateUserSchema)
    if not user.check_password(data.password):
        raise forbidden('Incorrect password')

    changes = data.model_dump(exclude_unset=True, exclude_none=True, exclude={'password'})
    for field, value in changes.items():
        setattr(user, field, value)
    db.session.commit()

    return jsonify({'user': user.to_dict()})
