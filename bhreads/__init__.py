# bhreads/__init__.py

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
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException

# - 설정
from bhreads.core.config import config_by_name, Settings
from bhreads.core.exceptions import BhreadsError
from bhreads.core.security import TokenService

# - API 블루프린트
from bhreads.api.auth.routes import auth_bp
from bhreads.api.users.routes import users_bp
from bhreads.api.posts.routes import posts_bp
from bhreads.api.comments.routes import comments_bp

# - 서비스 모듈
from bhreads.api.auth.services import AuthService
from bhreads.api.users.services import UserService
from bhreads.api.posts.services import PostService
from bhreads.api.comments.services import CommentService
from bhreads.commands import register_commands


def init_firestore(app: Flask):
    """Firebase Admin SDK를 초기화하고 Firestore 클라이언트를 반환합니다."""
    import firebase_admin
    from firebase_admin import credentials, firestore

    if not firebase_admin._apps:
        cred_path = app.config.get('FIREBASE_CREDENTIALS_PATH')
        options = {}
        if app.config.get('FIREBASE_PROJECT_ID'):
            options['projectId'] = app.config['FIREBASE_PROJECT_ID']
        if cred_path:
            if not os.path.exists(cred_path):
                raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
            firebase_admin.initialize_app(credentials.Certificate(cred_path), options)
        else:
            # GOOGLE_APPLICATION_CREDENTIALS 또는 에뮬레이터 환경을 사용합니다.
            firebase_admin.initialize_app(options=options or None)
    return firestore.client()


def create_app(config_name: str | None = None, db=None):
    """
    Flask 애플리케이션 팩토리 함수.
    :param config_name: 'development' / 'testing' / 'production'. 없으면 FLASK_ENV 를 사용합니다.
    :param db: Firestore 호환 클라이언트. 없으면 Firebase Admin SDK로 생성합니다.
    """
    # =====================================================================================
    # 3. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    # 서명 키 등은 여기서 한 번 만들어진 불변 Settings 객체로만 전달됩니다.
    settings = Settings.from_mapping(app.config)

    # =====================================================================================
    # 4. 서비스 인스턴스 생성 및 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    if db is None:
        try:
            db = init_firestore(app)
            logging.info("Firestore client initialized successfully")
        except Exception as e:
            logging.error(f"Failed to initialize Firestore: {e}")
            raise

    app.services = {'db': db, 'settings': settings}
    app.services['tokens'] = TokenService(settings)
    app.services['auth'] = AuthService(db, settings, app.services['tokens'])
    app.services['posts'] = PostService(db)
    app.services['comments'] = CommentService(post_service=app.services['posts'])
    app.services['users'] = UserService(db, post_service=app.services['posts'])

    # =====================================================================================
    # 5. 블루프린트 및 CLI 명령 등록
    # =====================================================================================
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(users_bp, url_prefix='/api/users')
    app.register_blueprint(posts_bp, url_prefix='/api/posts')
    app.register_blueprint(comments_bp, url_prefix='/api/posts')
    register_commands(app)

    @app.route('/health')
    def health():
        return jsonify({"success": True, "status": "ok"}), 200

    # =====================================================================================
    # 6. 전역 에러 핸들러 설정
    #    모든 실패는 {"success": false, "message": ...} 형태로 응답합니다.
    # =====================================================================================
    @app.errorhandler(BhreadsError)
    def handle_domain_error(err):
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {
            "success": False,
            "error_code": "VALIDATION_ERROR",
            "message": "입력값 유효성 검사에 실패했습니다.",
            "details": err.messages
        }
        return jsonify(response), 400

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        response = {"success": False, "error_code": err.name.upper().replace(" ", "_"), "message": err.description}
        return jsonify(response), err.code

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # 상세 내용은 서버 로그에만 남기고 클라이언트에는 일반 메시지만 반환합니다.
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"success": False, "error_code": "INTERNAL_SERVER_ERROR", "message": "서버 내부에서 예상치 못한 오류가 발생했습니다."}
        return jsonify(response), 500

    # =====================================================================================
    # 7. 로깅 및 앱 반환
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
