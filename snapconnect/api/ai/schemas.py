# snapconnect/api/ai/schemas.py
from marshmallow import Schema, fields, validate

from snapconnect.services.openai_service import FALLBACK_CAPTIONS

class ImageSuggestionSchema(Schema):
    """POST /api/ai/captions, /api/ai/tags 요청 본문"""
    image_base64 = fields.Str(required=True, validate=validate.Length(min=1))
    filter = fields.Str(load_default="none", validate=validate.OneOf(list(FALLBACK_CAPTIONS)))
    interests = fields.List(fields.Str(), load_default=list)

class QuickReplySchema(Schema):
    """POST /api/ai/quick-reply 요청 본문"""
    caption = fields.Str(required=True)

class CaptionSuggestionSchema(Schema):
    text = fields.Str()
    mood = fields.Str()
    length = fields.Str()

class TagSuggestionSchema(Schema):
    tag = fields.Str()
    relevance = fields.Str()
    category = fields.Str()

class CaptionSuggestionsResponseSchema(Schema):
    suggestions = fields.List(fields.Nested(CaptionSuggestionSchema))
    confidence = fields.Float()
    processing_time = fields.Int()

class TagSuggestionsResponseSchema(Schema):
    suggestions = fields.List(fields.Nested(TagSuggestionSchema))
    confidence = fields.Float()
    processing_time = fields.Int()
