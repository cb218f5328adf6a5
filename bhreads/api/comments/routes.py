# bhreads/api/comments/routes.py
from flask import Blueprint, request, jsonify, current_app, g

from bhreads.api.comments.schemas import CommentCreateSchema
from bhreads.api.posts.schemas import CommentResponseSchema
from bhreads.core.security import jwt_required

comments_bp = Blueprint('comments_bp', __name__)


@comments_bp.route('/<string:post_id>/comments', methods=['POST'])
@jwt_required()
def create_comment(post_id: str):
    """특정 게시물에 댓글을 작성하고 전체 댓글 목록을 반환합니다."""
    comment_service = current_app.services['comments']
    data = CommentCreateSchema().load(request.get_json(silent=True) or {})
    comments = comment_service.create_comment(post_id, g.user_id, data['content'])
    return jsonify({"success": True, "comments": CommentResponseSchema(many=True).dump(comments)}), 200


@comments_bp.route('/<string:post_id>/comments/<string:comment_id>/like', methods=['POST'])
@jwt_required()
def toggle_comment_like(post_id: str, comment_id: str):
    comment_service = current_app.services['comments']
    is_liked, like_count = comment_service.toggle_comment_like(g.user_id, post_id, comment_id)
    return jsonify({"success": True, "likeCount": like_count, "isLiked": is_liked}), 200


@comments_bp.route('/<string:post_id>/comments/<string:comment_id>', methods=['DELETE'])
@jwt_required()
def delete_comment(post_id: str, comment_id: str):
    comment_service = current_app.services['comments']
    comments = comment_service.delete_comment(g.user_id, post_id, comment_id)
    return jsonify({"success": True, "comments": CommentResponseSchema(many=True).dump(comments)}), 200
