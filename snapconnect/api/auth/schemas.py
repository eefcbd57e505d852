# snapconnect/api/auth/schemas.py
from marshmallow import Schema, fields

class SessionRequestSchema(Schema):
    """Firebase ID 토큰을 API 토큰으로 교환하는 요청"""
    id_token = fields.Str(
        required=True,
        metadata={"description": "Firebase Auth 로그인 후 받은 ID 토큰"}
    )
    # 가입 화면에서 고른 관심사 (최초 로그인 때만 사용)
    interests = fields.List(fields.Str(), load_default=list)

class LogoutRequestSchema(Schema):
    """로그아웃 요청의 유효성을 검사하는 스키마"""
    access_token = fields.Str(required=True)
    refresh_token = fields.Str(required=True)
