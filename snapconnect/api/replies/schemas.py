# snapconnect/api/replies/schemas.py
import re

from marshmallow import Schema, fields, validate

class ReplyCreateSchema(Schema):
    """POST /api/replies/snaps/{snap_id} 요청 본문"""
    message = fields.Str(required=True, validate=[
        validate.Length(min=1, max=200),
        validate.Regexp(r'.*\S', flags=re.DOTALL, error="메시지를 입력해주세요."),
    ])

class ReplyResponseSchema(Schema):
    reply_id = fields.Str(dump_only=True)
    snap_id = fields.Str()
    sender_id = fields.Str()
    recipient_id = fields.Str()
    message = fields.Str()
    created_at = fields.DateTime()

class NotificationResponseSchema(Schema):
    """알림 목록의 한 항목"""
    notification_id = fields.Str(dump_only=True)
    sender_id = fields.Str()
    sender_label = fields.Str()
    snap_id = fields.Str()
    reply_id = fields.Str(allow_none=True)
    message = fields.Str()
    seen = fields.Bool()
    created_at = fields.DateTime()
