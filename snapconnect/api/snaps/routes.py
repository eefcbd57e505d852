# snapconnect/api/snaps/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app, Response
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from snapconnect.api.snaps.schemas import (
    SnapCreateSchema, SnapCaptionSchema, SnapTagsSchema,
    SnapResponseSchema, FeedItemSchema, SnapCountsSchema
)

snaps_bp = Blueprint('snaps_bp', __name__)

@snaps_bp.route('', methods=['POST'])
@jwt_required()
def create_snap():
    """
    새 스냅을 게시합니다. 게시 후 24시간 동안만 피드에 보입니다.
    - 이미지 공개 전환에 실패해도 스냅은 생성되며, 응답의 upload_method가 'local'이 됩니다.
    """
    snap_service = current_app.services['snaps']
    user_id = get_jwt_identity()
    try:
        snap_data = SnapCreateSchema().load(request.get_json() or {})
        new_snap = snap_service.create_snap(user_id, snap_data)
        return jsonify(SnapResponseSchema().dump(new_snap)), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"스냅 생성 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "스냅 생성 중 오류가 발생했습니다."}), 500

@snaps_bp.route('/feed', methods=['GET'])
@jwt_required()
def get_feed():
    """만료되지 않은 스냅을 최신순으로 반환합니다. 스냅이 없으면 빈 목록입니다."""
    snap_service = current_app.services['snaps']
    try:
        items = snap_service.get_feed()
        return jsonify({"items": FeedItemSchema(many=True).dump(items)}), 200
    except Exception as e:
        logging.error(f"피드 조회 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "피드 조회 중 오류가 발생했습니다."}), 500

@snaps_bp.route('/me/counts', methods=['GET'])
@jwt_required()
def get_my_counts():
    snap_service = current_app.services['snaps']
    counts = snap_service.count_snaps(get_jwt_identity())
    return jsonify(SnapCountsSchema().dump(counts)), 200

@snaps_bp.route('/<string:snap_id>', methods=['GET'])
@jwt_required()
def get_snap(snap_id):
    snap_service = current_app.services['snaps']
    snap = snap_service.get_snap(snap_id)
    if not snap:
        return jsonify({"error_code": "SNAP_NOT_FOUND", "message": "스냅을 찾을 수 없거나 이미 만료되었습니다."}), 404
    return jsonify(SnapResponseSchema().dump(snap)), 200

@snaps_bp.route('/<string:snap_id>/caption', methods=['PATCH'])
@jwt_required()
def update_caption(snap_id):
    snap_service = current_app.services['snaps']
    user_id = get_jwt_identity()
    try:
        data = SnapCaptionSchema().load(request.get_json() or {})
        updated = snap_service.update_caption(snap_id, user_id, data['caption'])
        return jsonify(SnapResponseSchema().dump(updated)), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"error_code": "SNAP_NOT_FOUND", "message": str(e)}), 404

@snaps_bp.route('/<string:snap_id>/tags', methods=['PUT'])
@jwt_required()
def update_tags(snap_id):
    """스냅 태그를 수정합니다. 태그는 정규화되며 비어 있으면 'misc'가 됩니다."""
    snap_service = current_app.services['snaps']
    user_id = get_jwt_identity()
    try:
        data = SnapTagsSchema().load(request.get_json() or {})
        updated = snap_service.update_tags(snap_id, user_id, data['tags'])
        return jsonify(SnapResponseSchema().dump(updated)), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"error_code": "SNAP_NOT_FOUND", "message": str(e)}), 404

@snaps_bp.route('/<string:snap_id>', methods=['DELETE'])
@jwt_required()
def delete_snap(snap_id):
    snap_service = current_app.services['snaps']
    user_id = get_jwt_identity()
    try:
        snap_service.delete_snap(snap_id, user_id)
        return Response(status=204)
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"error_code": "SNAP_NOT_FOUND", "message": str(e)}), 404
