# snapconnect/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (가장 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import logging
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
from flask_jwt_extended import JWTManager
import firebase_admin
from firebase_admin import credentials

# - 설정
from snapconnect.core.config import config_by_name

# - API 블루프린트
from snapconnect.api.auth.routes import auth_bp
from snapconnect.api.uploads.routes import uploads_bp
from snapconnect.api.snaps.routes import snaps_bp
from snapconnect.api.discover.routes import discover_bp
from snapconnect.api.users.routes import users_bp
from snapconnect.api.replies.routes import replies_bp
from snapconnect.api.ai.routes import ai_bp

# - 서비스
from snapconnect.services.storage_service import StorageService
from snapconnect.services.openai_service import OpenAIService
from snapconnect.services.notification_service import NotificationService
from snapconnect.services.snap_stream import SnapStream
from snapconnect.api.auth.services import AuthService
from snapconnect.api.snaps.services import SnapService
from snapconnect.api.users.services import UserService
from snapconnect.api.replies.services import ReplyService
from snapconnect.api.discover.services import DiscoverService

def create_app():
    """
    Flask 애플리케이션 팩토리 함수.
    """
    # =====================================================================================
    # 3. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    # =====================================================================================
    # 4. 확장 기능 및 외부 서비스 초기화
    # =====================================================================================
    jwt_manager = JWTManager(app)

    if not firebase_admin._apps:
        cred_path = app.config['FIREBASE_CREDENTIALS_PATH']
        if not cred_path or not os.path.exists(cred_path):
            raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
        cred = credentials.Certificate(cred_path)
        firebase_admin.initialize_app(cred, {
            'storageBucket': app.config['FIREBASE_STORAGE_BUCKET']
        })

    # =====================================================================================
    # 5. 서비스 인스턴스 생성 및 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    app.services = {}

    # 5-1. 다른 서비스의 기반이 되는 공용 서비스 먼저 생성
    try:
        storage_instance = StorageService()
        storage_instance.init_app(app)
        app.services['storage'] = storage_instance
        logging.info("Storage service initialized successfully")
    except Exception as e:
        logging.error(f"Failed to initialize storage service: {e}")
        raise

    try:
        openai_instance = OpenAIService()
        openai_instance.init_app(app)
        app.services['openai'] = openai_instance
        logging.info("OpenAI service initialized successfully")
    except Exception as e:
        logging.error(f"Failed to initialize OpenAI service: {e}")
        raise

    app.services['notifications'] = NotificationService()

    # 실시간 구독은 선택 사항입니다. 실패하면 컬렉션을 직접 읽습니다.
    app.services['snap_stream'] = None
    if app.config.get('SNAP_STREAM_ENABLED'):
        try:
            snap_stream = SnapStream()
            snap_stream.start()
            app.services['snap_stream'] = snap_stream
        except Exception as e:
            logging.warning(f"Failed to start snap stream: {e}")

    # 5-2. 다른 서비스를 주입받아야 하는 도메인 서비스 생성
    app.services['snaps'] = SnapService(
        storage_service=app.services['storage'],
        snap_stream=app.services['snap_stream']
    )
    app.services['users'] = UserService()
    app.services['replies'] = ReplyService(
        snap_service=app.services['snaps'],
        notification_service=app.services['notifications']
    )
    app.services['discover'] = DiscoverService(
        snap_service=app.services['snaps'],
        user_service=app.services['users']
    )

    # - 인증 서비스 (앱 컨텍스트 필요)
    auth_instance = AuthService()
    auth_instance.init_app(app)
    app.services['auth'] = auth_instance

    @jwt_manager.token_in_blocklist_loader
    def check_if_token_revoked(jwt_header, jwt_payload):
        return app.services['auth'].is_token_revoked(jwt_payload)

    # =====================================================================================
    # 6. 블루프린트 등록
    # =====================================================================================
    register_blueprints(app)

    # =====================================================================================
    # 7. 전역 에러 핸들러 설정
    # =====================================================================================
    register_error_handlers(app)

    # =====================================================================================
    # 8. 로깅 및 앱 반환
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app

def register_blueprints(app: Flask):
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(uploads_bp, url_prefix='/api/uploads')
    app.register_blueprint(snaps_bp, url_prefix='/api/snaps')
    app.register_blueprint(discover_bp, url_prefix='/api/discover')
    app.register_blueprint(users_bp, url_prefix='/api/users')
    app.register_blueprint(replies_bp, url_prefix='/api/replies')
    app.register_blueprint(ai_bp, url_prefix='/api/ai')

def register_error_handlers(app: Flask):
    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"error_code": "VALIDATION_ERROR", "details": err.messages}
        return jsonify(response), 400

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # 404, 405 같은 HTTP 예외는 그대로 돌려줍니다.
        if isinstance(err, HTTPException):
            return err
        # 다른 핸들러에서 처리되지 않은 모든 예외를 여기서 처리
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"error_code": "INTERNAL_SERVER_ERROR", "message": "서버 내부에서 예상치 못한 오류가 발생했습니다."}
        return jsonify(response), 500
