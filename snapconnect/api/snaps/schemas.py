# snapconnect/api/snaps/schemas.py
from marshmallow import Schema, fields, validate, validates_schema, ValidationError

CAPTION_MAX_LENGTH = 150

# --- API 요청 스키마 ---

class SnapCreateSchema(Schema):
    """POST /api/snaps 요청 본문의 유효성을 검사합니다."""
    # Pre-signed URL로 업로드한 파일 경로
    file_path = fields.Str(load_default=None)
    # Storage 업로드가 실패했을 때 사용할 기기 로컬 경로 (데모 모드)
    local_uri = fields.Str(load_default=None)
    caption = fields.Str(load_default="", validate=validate.Length(max=CAPTION_MAX_LENGTH))
    tags = fields.List(fields.Str(), load_default=list)

    @validates_schema
    def validate_media(self, data, **kwargs):
        if not data.get('file_path') and not data.get('local_uri'):
            raise ValidationError("file_path 또는 local_uri 중 하나는 필요합니다.", field_name="file_path")

class SnapCaptionSchema(Schema):
    """PATCH /api/snaps/{snap_id}/caption 요청 본문의 유효성을 검사합니다."""
    caption = fields.Str(required=True, validate=validate.Length(max=CAPTION_MAX_LENGTH))

class SnapTagsSchema(Schema):
    """PUT /api/snaps/{snap_id}/tags 요청 본문의 유효성을 검사합니다."""
    tags = fields.List(fields.Str(), required=True)

# --- API 응답 스키마 ---

class SnapResponseSchema(Schema):
    """스냅 정보 응답을 위한 JSON 형식을 정의합니다."""
    snap_id = fields.Str(dump_only=True)
    owner_id = fields.Str()
    owner_label = fields.Str(dump_only=True)
    caption = fields.Str()
    tags = fields.List(fields.Str())
    media_url = fields.Str()
    upload_method = fields.Str()
    created_at = fields.DateTime()
    expires_at = fields.DateTime()

class FeedItemSchema(Schema):
    """피드 한 줄: 스냅과 표시용 남은 시간/지난 시간."""
    snap = fields.Nested(SnapResponseSchema)
    time_left = fields.Str()
    time_ago = fields.Str()

class SnapCountsSchema(Schema):
    """GET /api/snaps/me/counts 응답"""
    lifetime = fields.Int()
    active = fields.Int()
