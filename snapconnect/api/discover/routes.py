# snapconnect/api/discover/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from snapconnect.api.discover.schemas import (
    DiscoverQuerySchema, SearchQuerySchema,
    TagChipsResponseSchema, DiscoverResponseSchema, SearchResponseSchema
)

discover_bp = Blueprint('discover_bp', __name__)

@discover_bp.route('/tags', methods=['GET'])
@jwt_required()
def get_tag_chips():
    """즐겨찾기 태그가 먼저 오는 태그 칩 목록을 반환합니다."""
    discover_service = current_app.services['discover']
    try:
        chips = discover_service.get_tag_chips(get_jwt_identity())
        return jsonify(TagChipsResponseSchema().dump(chips)), 200
    except Exception as e:
        logging.error(f"태그 목록 조회 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "태그 목록 조회 중 오류가 발생했습니다."}), 500

@discover_bp.route('/snaps', methods=['GET'])
@jwt_required()
def discover_snaps():
    """
    선택한 태그(부분 일치)의 살아있는 스냅을 최신순으로 반환합니다.
    - tag를 생략하면 첫 번째 태그 칩이 선택됩니다.
    """
    discover_service = current_app.services['discover']
    try:
        args = DiscoverQuerySchema().load(request.args)
        selected, items = discover_service.discover(get_jwt_identity(), args.get('tag'))
        return jsonify(DiscoverResponseSchema().dump({"selected_tag": selected, "items": items})), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"Discover 조회 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "스냅 조회 중 오류가 발생했습니다."}), 500

@discover_bp.route('/search', methods=['GET'])
@jwt_required()
def search_snaps():
    discover_service = current_app.services['discover']
    try:
        args = SearchQuerySchema().load(request.args)
        resolved, items = discover_service.search(args['q'])
        return jsonify(SearchResponseSchema().dump({"resolved_tag": resolved, "items": items})), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"검색 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "검색 중 오류가 발생했습니다."}), 500
