# snapconnect/api/replies/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from snapconnect.api.replies.schemas import (
    ReplyCreateSchema, ReplyResponseSchema, NotificationResponseSchema
)

replies_bp = Blueprint('replies_bp', __name__)

@replies_bp.route('/snaps/<string:snap_id>', methods=['POST'])
@jwt_required()
def send_reply(snap_id):
    """스냅에 답장을 보내고 작성자에게 알림을 생성합니다."""
    reply_service = current_app.services['replies']
    user_id = get_jwt_identity()
    try:
        data = ReplyCreateSchema().load(request.get_json() or {})
        reply = reply_service.send_reply(snap_id, user_id, data['message'])
        return jsonify(ReplyResponseSchema().dump(reply)), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except ValueError as e:
        return jsonify({"error_code": "SNAP_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"답장 전송 중 오류 발생 (snap_id: {snap_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "답장 전송 중 오류가 발생했습니다."}), 500

@replies_bp.route('/notifications', methods=['GET'])
@jwt_required()
def get_notifications():
    notification_service = current_app.services['notifications']
    user_id = get_jwt_identity()
    try:
        notifications = notification_service.get_unseen_notifications(user_id)
        return jsonify({"items": NotificationResponseSchema(many=True).dump(notifications)}), 200
    except Exception as e:
        logging.error(f"알림 조회 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "알림 조회 중 오류가 발생했습니다."}), 500

@replies_bp.route('/notifications/<string:notification_id>/seen', methods=['POST'])
@jwt_required()
def mark_notification_seen(notification_id):
    """
    알림을 확인 처리합니다. 수신자만 호출할 수 있습니다.
    - 이미 확인된 알림이면 아무것도 바꾸지 않고 already_seen: true를 돌려줍니다.
    """
    notification_service = current_app.services['notifications']
    user_id = get_jwt_identity()
    try:
        changed = notification_service.mark_seen(notification_id, user_id)
        return jsonify({"notification_id": notification_id, "seen": True, "already_seen": not changed}), 200
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"error_code": "NOTIFICATION_NOT_FOUND", "message": str(e)}), 404
