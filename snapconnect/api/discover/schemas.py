# snapconnect/api/discover/schemas.py
from marshmallow import Schema, fields, validate

from snapconnect.api.snaps.schemas import FeedItemSchema

class DiscoverQuerySchema(Schema):
    """GET /api/discover/snaps 쿼리 파라미터"""
    tag = fields.Str(load_default=None)

class SearchQuerySchema(Schema):
    """GET /api/discover/search 쿼리 파라미터"""
    q = fields.Str(required=True, validate=validate.Length(min=1, max=50))

class TagChipsResponseSchema(Schema):
    favorites = fields.List(fields.Str())
    tags = fields.List(fields.Str())

class DiscoverResponseSchema(Schema):
    selected_tag = fields.Str(allow_none=True)
    items = fields.List(fields.Nested(FeedItemSchema))

class SearchResponseSchema(Schema):
    resolved_tag = fields.Str()
    items = fields.List(fields.Nested(FeedItemSchema))
