# bhreads/api/auth/routes.py
from flask import Blueprint, request, jsonify, current_app, g

from bhreads.api.auth.schemas import (
    RegisterSchema, LoginSchema, UserPrivateResponseSchema, RoleResponseSchema
)
from bhreads.core.security import jwt_required

auth_bp = Blueprint('auth_bp', __name__)


@auth_bp.route('/register', methods=['POST'])
def register():
    """회원가입 후 바로 토큰을 발급합니다."""
    auth_service = current_app.services['auth']
    data = RegisterSchema().load(request.get_json(silent=True) or {})
    user, token = auth_service.register(data['username'], data['email'], data['password'])
    return jsonify({
        "success": True,
        "token": token,
        "user": UserPrivateResponseSchema().dump(user)
    }), 200


@auth_bp.route('/login', methods=['POST'])
def login():
    auth_service = current_app.services['auth']
    data = LoginSchema().load(request.get_json(silent=True) or {})
    user, token = auth_service.authenticate(data['email'], data['password'])
    return jsonify({
        "success": True,
        "token": token,
        "user": UserPrivateResponseSchema().dump(user)
    }), 200


@auth_bp.route('/me', methods=['GET'])
@jwt_required()
def me():
    auth_service = current_app.services['auth']
    user = auth_service.get_user(g.user_id)
    return jsonify({"success": True, "user": UserPrivateResponseSchema().dump(user)}), 200


@auth_bp.route('/role', methods=['GET'])
@jwt_required()
def role():
    auth_service = current_app.services['auth']
    role_info = auth_service.get_role_info(g.user_id)
    return jsonify({"success": True, **RoleResponseSchema().dump(role_info)}), 200


@auth_bp.route('/logout', methods=['POST'])
def logout():
    """토큰은 무상태이므로 서버에서 할 일은 없습니다. 클라이언트가 토큰을 삭제합니다."""
    return jsonify({"success": True, "message": "로그아웃 되었습니다."}), 200
