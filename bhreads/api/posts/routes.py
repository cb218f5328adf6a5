# bhreads/api/posts/routes.py
import math

from flask import Blueprint, request, jsonify, current_app, g

from bhreads.api.posts.schemas import PostCreateSchema, PostUpdateSchema, PostResponseSchema
from bhreads.core.security import jwt_required

posts_bp = Blueprint('posts_bp', __name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 50


@posts_bp.route('', methods=['GET'])
@jwt_required(optional=True)
def get_posts():
    """
    게시물 목록을 최신순으로 조회합니다.
    로그인하지 않은 사용자는 isLiked / isReposted 가 항상 false 입니다.
    """
    post_service = current_app.services['posts']
    page = max(request.args.get('page', 1, type=int), 1)
    limit = min(max(request.args.get('limit', DEFAULT_PAGE_SIZE, type=int), 1), MAX_PAGE_SIZE)
    category = request.args.get('category') or None
    tag = request.args.get('tag') or None

    posts, total = post_service.get_posts(g.user_id, page, limit, category, tag)
    return jsonify({
        "success": True,
        "posts": PostResponseSchema(many=True).dump(posts),
        "totalPages": math.ceil(total / limit),
        "currentPage": page,
        "total": total
    }), 200


@posts_bp.route('', methods=['POST'])
@jwt_required()
def create_post():
    post_service = current_app.services['posts']
    data = PostCreateSchema().load(request.get_json(silent=True) or {})
    new_post = post_service.create_post(g.user_id, data)
    return jsonify({"success": True, "post": PostResponseSchema().dump(new_post)}), 201


@posts_bp.route('/<string:post_id>', methods=['GET'])
@jwt_required()
def get_post(post_id: str):
    post_service = current_app.services['posts']
    post = post_service.get_post_by_id(post_id, g.user_id)
    return jsonify({"success": True, "post": PostResponseSchema().dump(post)}), 200


@posts_bp.route('/<string:post_id>', methods=['PUT'])
@jwt_required()
def update_post(post_id: str):
    post_service = current_app.services['posts']
    changes = PostUpdateSchema().load(request.get_json(silent=True) or {}, partial=True)
    updated_post = post_service.update_post(post_id, g.user_id, changes)
    return jsonify({"success": True, "post": PostResponseSchema().dump(updated_post)}), 200


@posts_bp.route('/<string:post_id>', methods=['DELETE'])
@jwt_required()
def delete_post(post_id: str):
    post_service = current_app.services['posts']
    post_service.delete_post(post_id, g.user_id)
    return jsonify({"success": True, "message": "게시물이 삭제되었습니다."}), 200


@posts_bp.route('/<string:post_id>/like', methods=['POST'])
@jwt_required()
def toggle_like(post_id: str):
    post_service = current_app.services['posts']
    is_liked, like_count = post_service.toggle_post_like(g.user_id, post_id)
    return jsonify({"success": True, "likeCount": like_count, "isLiked": is_liked}), 200


@posts_bp.route('/<string:post_id>/repost', methods=['POST'])
@jwt_required()
def repost(post_id: str):
    post_service = current_app.services['posts']
    new_repost = post_service.repost(g.user_id, post_id)
    return jsonify({"success": True, "repost": PostResponseSchema().dump(new_repost)}), 200
