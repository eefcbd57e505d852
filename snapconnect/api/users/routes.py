# snapconnect/api/users/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from snapconnect.api.users.schemas import UserSettingsSchema, UserProfileResponseSchema

users_bp = Blueprint('users_bp', __name__)

@users_bp.route('/me', methods=['GET'])
@jwt_required()
def get_my_profile():
    user_service = current_app.services['users']
    profile = user_service.get_profile(get_jwt_identity())
    if not profile:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": "사용자를 찾을 수 없습니다."}), 404
    return jsonify(UserProfileResponseSchema().dump(profile)), 200

@users_bp.route('/me', methods=['PATCH'])
@jwt_required()
def update_my_settings():
    """표시 이름과 즐겨찾기 태그(최대 5개)를 저장합니다."""
    user_service = current_app.services['users']
    user_id = get_jwt_identity()
    try:
        settings = UserSettingsSchema().load(request.get_json() or {})
        profile = user_service.update_settings(user_id, settings)
        return jsonify(UserProfileResponseSchema().dump(profile)), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"설정 저장 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "UPDATE_FAILED", "message": "설정 저장 중 서버 오류가 발생했습니다."}), 500

@users_bp.route('/migrate-interests', methods=['POST'])
@jwt_required()
def migrate_interests():
    """
    관심사/태그 데이터를 소문자 단일 필드로 정리하는 1회성 마이그레이션.
    ADMIN_UIDS에 등록된 사용자만 호출할 수 있습니다.
    """
    user_id = get_jwt_identity()
    if user_id not in current_app.config.get('ADMIN_UIDS', []):
        return jsonify({"error_code": "FORBIDDEN", "message": "마이그레이션 권한이 없습니다."}), 403

    user_service = current_app.services['users']
    try:
        return jsonify(user_service.migrate_interests()), 200
    except Exception as e:
        logging.error(f"마이그레이션 실패: {e}", exc_info=True)
        return jsonify({"error_code": "MIGRATION_FAILED", "message": f"Migration failed: {e}"}), 500
