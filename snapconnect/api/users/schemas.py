# snapconnect/api/users/schemas.py
from marshmallow import Schema, fields, validate

from snapconnect.feed.tags import MAX_TAGS

class UserSettingsSchema(Schema):
    """
    PATCH /api/users/me
    설정 화면에서 저장하는 표시 이름과 즐겨찾기 태그.
    """
    display_name = fields.Str(allow_none=True, validate=validate.Length(max=50))
    favorite_tags = fields.List(
        fields.Str(),
        validate=validate.Length(max=MAX_TAGS, error=f"즐겨찾기 태그는 최대 {MAX_TAGS}개까지 선택할 수 있습니다.")
    )

class UserProfileResponseSchema(Schema):
    """본인 프로필 응답 스키마."""
    uid = fields.Str(dump_only=True)
    email = fields.Str(allow_none=True)
    display_name = fields.Str(allow_none=True)
    favorite_tags = fields.List(fields.Str())
    created_at = fields.DateTime()
