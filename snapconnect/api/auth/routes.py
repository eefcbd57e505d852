# snapconnect/api/auth/routes.py

import logging
import jwt
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import (
    create_access_token,
    create_refresh_token,
    jwt_required,
    get_jwt_identity
)
from marshmallow import ValidationError

from snapconnect.api.auth.schemas import SessionRequestSchema, LogoutRequestSchema

auth_bp = Blueprint('auth_bp', __name__)

@auth_bp.route('/session', methods=['POST'])
def create_session():
    """
    Firebase ID 토큰을 검증하고 API용 Access/Refresh 토큰을 발급합니다.
    최초 로그인이면 users 문서를 만들고 가입 관심사를 즐겨찾기 태그로 저장합니다.
    """
    auth_service = current_app.services['auth']
    user_service = current_app.services['users']
    try:
        data = SessionRequestSchema().load(request.get_json() or {})
        identity = auth_service.verify_id_token(data['id_token'])
        profile, is_new_user = user_service.get_or_create_profile(
            identity['uid'], identity['email'], data.get('interests')
        )

        return jsonify({
            "access_token": create_access_token(identity=profile.uid),
            "refresh_token": create_refresh_token(identity=profile.uid),
            "user_id": profile.uid,
            "is_new_user": is_new_user,
            "user_info": {
                "user_id": profile.uid,
                "email": profile.email,
                "display_name": profile.display_name,
                "favorite_tags": profile.favorite_tags
            }
        }), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except ValueError as e:
        return jsonify({"error_code": "INVALID_ID_TOKEN", "message": str(e)}), 401
    except Exception as e:
        logging.error(f"로그인 처리 중 예외 발생: {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "서버 내부 오류가 발생했습니다."}), 500


# --- 토큰 재발급 엔드포인트 ---
@auth_bp.route('/token/refresh', methods=['POST'])
@jwt_required(refresh=True) # Refresh Token만 허용
def refresh_token():
    """유효한 Refresh Token으로 새로운 Access Token을 발급합니다."""
    current_user_id = get_jwt_identity()
    new_access_token = create_access_token(identity=current_user_id)
    return jsonify(access_token=new_access_token), 200


# --- 로그아웃 엔드포인트 ---
@auth_bp.route('/logout', methods=['POST'])
def logout():
    """로그아웃. 전달받은 Access/Refresh 토큰을 무효화 목록에 추가합니다."""
    auth_service = current_app.services['auth']
    try:
        data = LogoutRequestSchema().load(request.get_json() or {})

        secret_key = current_app.config['JWT_SECRET_KEY']
        algorithm = current_app.config.get('JWT_ALGORITHM', 'HS256')

        # 이미 만료된 토큰도 무효화 목록에 넣을 수 있도록 만료 검사는 생략합니다.
        decoded_access = jwt.decode(data['access_token'], secret_key, algorithms=[algorithm], options={"verify_exp": False})
        decoded_refresh = jwt.decode(data['refresh_token'], secret_key, algorithms=[algorithm], options={"verify_exp": False})

        auth_service.logout_user(
            decoded_access['jti'], decoded_access['exp'],
            decoded_refresh['jti'], decoded_refresh['exp']
        )
        return jsonify({"message": "로그아웃 되었습니다."}), 200

    except ValidationError as e:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": e.messages}), 400
    except jwt.PyJWTError as e:
        logging.error(f"JWT 해독 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "INVALID_TOKEN", "message": "유효하지 않은 토큰입니다."}), 422
    except Exception as e:
        logging.error(f"로그아웃 처리 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "LOGOUT_FAILED", "message": "로그아웃 처리 중 오류가 발생했습니다."}), 500
