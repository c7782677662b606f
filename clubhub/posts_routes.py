from flask import Blueprint, current_app, jsonify
from flask_login import current_user

from clubhub import db
from clubhub.auth.permissions import ANY_MEMBER, ClubRoles, author_permission, club_role_required
from clubhub.errors import forbidden, not_found
from clubhub.models import Post
from clubhub.schemas import PostSchema, UpdatePostSchema, parse_body
from clubhub.utils import utc_now

# Mounted under /api/clubs/<club_id>/posts by the clubs blueprint
posts_bp = Blueprint('posts', __name__)


def get_post_or_404(club_id, post_id):
    post = Post.query.filter_by(id=post_id, club_id=club_id).first()
    if post is None:
        raise not_found('Post not found')
    return post


@posts_bp.route('', methods=['GET'])
@club_role_required(*ANY_MEMBER)
def list_posts(club_id):
    posts = (
        Post.query
        .filter_by(club_id=club_id)
        .order_by(Post.created_at.desc(), Post.id.desc())
        .all()
    )
    return jsonify({'posts': [p.to_dict() for p in posts]})


@posts_bp.route('/<id:post_id>', methods=['GET'])
@club_role_required(*ANY_MEMBER)
def get_post(club_id, post_id):
    return jsonify(get_post_or_404(club_id, post_id).to_dict())


@posts_bp.route('', methods=['POST'])
@club_role_required(*ANY_MEMBER)
def create_post(club_id):
    data = parse_body(PostSchema)

    post = Post(title=data.title, content=data.content, author_id=current_user.id, club_id=club_id)
    db.session.add(post)
    db.session.commit()

    return jsonify(post.to_dict()), 201


@posts_bp.route('/<id:post_id>', methods=['PUT'])
@club_role_required(*ANY_MEMBER)
def update_post(club_id, post_id):
    """Edit a post. Only its author may do this, admins included."""
    post = get_post_or_404(club_id, post_id)
    if not author_permission(post).can():
        raise forbidden('Only author can make this request')

    data = parse_body(UpdatePostSchema)
    if data.title is not None:
        post.title = data.title
    if data.content is not None:
        post.content = data.content
    post.last_updated = utc_now()
    db.session.commit()

    return jsonify(post.to_dict())


@posts_bp.route('/<id:post_id>', methods=['DELETE'])
@club_role_required(*ANY_MEMBER)
def delete_post(club_id, post_id):
    post = get_post_or_404(club_id, post_id)
    if not author_permission(post, ClubRoles.ADMIN, ClubRoles.OWNER).can():
        raise forbidden('Only author, admin or owner can delete this post')

    body = post.to_dict()
    db.session.delete(post)
    db.session.commit()

    current_app.logger.info("User %s deleted post %s in club %s", current_user.id, post_id, club_id)
    return jsonify(body)
