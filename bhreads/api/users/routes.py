# bhreads/api/users/routes.py
from flask import Blueprint, request, jsonify, current_app, g

from bhreads.api.users.schemas import (
    ProfileUpdateSchema, UserPublicResponseSchema, UserProfileResponseSchema
)
from bhreads.core.security import jwt_required

users_bp = Blueprint('users_bp', __name__)


@users_bp.route('/profile', methods=['PUT'])
@jwt_required()
def update_profile():
    """현재 로그인된 사용자의 아바타/소개/최애 빵을 수정합니다."""
    user_service = current_app.services['users']
    changes = ProfileUpdateSchema().load(request.get_json(silent=True) or {})
    user = user_service.update_profile(g.user_id, changes)
    return jsonify({"success": True, "user": UserProfileResponseSchema().dump(user)}), 200


@users_bp.route('/<string:user_id>', methods=['GET'])
def get_user_profile(user_id: str):
    """특정 사용자의 공개 프로필 정보(게시물 수 포함)를 조회합니다."""
    user_service = current_app.services['users']
    user_profile = user_service.get_user_profile(user_id)
    return jsonify({"success": True, "user": UserPublicResponseSchema().dump(user_profile)}), 200
