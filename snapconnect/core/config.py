# snapconnect/core/config.py

import os # 환경 변수를 읽기 위해 사용합니다.
from datetime import timedelta

class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # API 토큰(JWT) 서명에 사용하는 키입니다.
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=1)
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(days=14)

    FIREBASE_STORAGE_BUCKET = os.getenv('FIREBASE_STORAGE_BUCKET')

    # 캡션/태그/빠른 답장 제안에 사용하는 OpenAI 설정
    OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')
    OPENAI_VISION_MODEL = os.getenv('OPENAI_VISION_MODEL', 'gpt-4o-mini')
    OPENAI_REPLY_MODEL = os.getenv('OPENAI_REPLY_MODEL', 'gpt-3.5-turbo')

    # 'snaps' 컬렉션 실시간 구독(on_snapshot) 사용 여부
    SNAP_STREAM_ENABLED = os.getenv('SNAP_STREAM_ENABLED', 'true').lower() == 'true'

    # 데이터 마이그레이션 API를 호출할 수 있는 사용자 uid 목록 (쉼표 구분)
    ADMIN_UIDS = [uid.strip() for uid in os.getenv('ADMIN_UIDS', '').split(',') if uid.strip()]

class DevelopmentConfig(Config):
    """개발 환경을 위한 설정 클래스입니다."""
    DEBUG = True
    FIREBASE_CREDENTIALS_PATH = os.getenv('DEV_FIREBASE_CREDENTIALS_PATH')

class TestingConfig(Config):
    """테스트 환경을 위한 설정 클래스입니다."""
    TESTING = True
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('TEST_FIREBASE_CREDENTIALS_PATH')
    SNAP_STREAM_ENABLED = False

class ProductionConfig(Config):
    """운영 환경을 위한 설정 클래스입니다."""
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')

# FLASK_ENV 값에 따라 create_app에서 설정 클래스를 선택합니다.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
