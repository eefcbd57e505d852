# snapconnect/api/ai/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError

from snapconnect.api.ai.schemas import (
    ImageSuggestionSchema, QuickReplySchema,
    CaptionSuggestionsResponseSchema, TagSuggestionsResponseSchema
)
from snapconnect.services.openai_service import AIServiceBusyError, AIConfigurationError

ai_bp = Blueprint('ai_bp', __name__)

def _ai_error_response(e: Exception):
    if isinstance(e, AIServiceBusyError):
        return jsonify({"error_code": "AI_BUSY", "message": str(e)}), 429
    logging.error(f"AI 서비스 설정 오류: {e}", exc_info=True)
    return jsonify({"error_code": "AI_CONFIGURATION_ERROR", "message": str(e)}), 500

@ai_bp.route('/captions', methods=['POST'])
@jwt_required()
def suggest_captions():
    """
    사진을 보고 캡션 3개를 제안합니다.
    - AI 응답을 쓸 수 없으면 필터별 대체 캡션을 confidence 0.2로 반환합니다.
    """
    openai_service = current_app.services['openai']
    try:
        data = ImageSuggestionSchema().load(request.get_json() or {})
        result = openai_service.generate_caption_suggestions(
            data['image_base64'], data['filter'], data.get('interests')
        )
        return jsonify(CaptionSuggestionsResponseSchema().dump(result)), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except (AIServiceBusyError, AIConfigurationError) as e:
        return _ai_error_response(e)

@ai_bp.route('/tags', methods=['POST'])
@jwt_required()
def suggest_tags():
    openai_service = current_app.services['openai']
    try:
        data = ImageSuggestionSchema().load(request.get_json() or {})
        result = openai_service.generate_tag_suggestions(
            data['image_base64'], data['filter'], data.get('interests')
        )
        return jsonify(TagSuggestionsResponseSchema().dump(result)), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except (AIServiceBusyError, AIConfigurationError) as e:
        return _ai_error_response(e)

@ai_bp.route('/quick-reply', methods=['POST'])
@jwt_required()
def quick_reply():
    openai_service = current_app.services['openai']
    try:
        data = QuickReplySchema().load(request.get_json() or {})
        return jsonify({"reply": openai_service.quick_reply(data['caption'])}), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except (AIServiceBusyError, AIConfigurationError) as e:
        return _ai_error_response(e)
