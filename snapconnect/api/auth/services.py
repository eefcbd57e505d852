# snapconnect/api/auth/services.py
import logging
from datetime import datetime, timezone
from typing import Dict, Any, Optional

from firebase_admin import firestore, auth as firebase_auth
from flask import Flask

from snapconnect.utils.datetime_utils import DateTimeUtils

class AuthService:
    """
    Firebase ID 토큰 검증과 API 토큰 무효화 목록(Blocklist)을 담당하는 서비스 클래스.
    """
    def __init__(self):
        self.db = None
        self.revoked_tokens_ref = None
        self.app: Optional[Flask] = None

    def init_app(self, app: Flask):
        """앱 초기화 과정에서 호출되어 DB 연결 및 앱 컨텍스트를 설정합니다."""
        self.db = firestore.client()
        self.revoked_tokens_ref = self.db.collection('revoked_tokens')
        self.app = app

    def verify_id_token(self, id_token: str) -> Dict[str, Any]:
        """
        클라이언트가 Firebase Auth로 로그인해서 받은 ID 토큰을 검증합니다.

        :return: {"uid": ..., "email": ...}
        :raises ValueError: 토큰이 유효하지 않은 경우
        """
        try:
            decoded = firebase_auth.verify_id_token(id_token)
        except (firebase_auth.InvalidIdTokenError, firebase_auth.ExpiredIdTokenError,
                firebase_auth.RevokedIdTokenError) as e:
            raise ValueError(f"유효하지 않은 Firebase ID 토큰입니다: {e}")
        return {"uid": decoded['uid'], "email": decoded.get('email')}

    # --- Blocklist 관련 로직 ---
    def add_token_to_blocklist(self, jti: str, expires: datetime):
        """전달받은 토큰의 jti를 만료 시간과 함께 Firestore에 저장합니다."""
        token_data = DateTimeUtils.for_firestore({
            'revoked_at': DateTimeUtils.now(),
            'expires_at': expires,
        })
        self.revoked_tokens_ref.document(jti).set(token_data)

    def is_token_revoked(self, jwt_payload: dict) -> bool:
        """jti를 이용해 해당 토큰이 무효화 목록에 있는지 확인합니다."""
        jti = jwt_payload['jti']
        doc = self.revoked_tokens_ref.document(jti).get()
        return doc.exists

    def logout_user(self, access_jti: str, access_exp: int, refresh_jti: str, refresh_exp: int):
        """Access 토큰과 Refresh 토큰을 모두 Blocklist에 추가합니다."""
        self.add_token_to_blocklist(access_jti, datetime.fromtimestamp(access_exp, tz=timezone.utc))
        self.add_token_to_blocklist(refresh_jti, datetime.fromtimestamp(refresh_exp, tz=timezone.utc))
        logging.info(f"사용자 로그아웃 처리 완료. JTI: {access_jti[:8]}..., {refresh_jti[:8]}...")
