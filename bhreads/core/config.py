# bhreads/core/config.py

import os
from dataclasses import dataclass
from datetime import timedelta


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # JWT 서명 키. 프로세스 시작 시 한 번 읽고 실행 중에는 교체하지 않습니다.
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')
    TOKEN_LIFETIME_DAYS = int(os.getenv('TOKEN_LIFETIME_DAYS', 30))
    BCRYPT_ROUNDS = int(os.getenv('BCRYPT_ROUNDS', 12))

    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')
    FIREBASE_PROJECT_ID = os.getenv('FIREBASE_PROJECT_ID')

    # 최초 관리자 계정 (flask create-admin)
    ADMIN_USERNAME = os.getenv('ADMIN_USERNAME', 'admin')
    ADMIN_EMAIL = os.getenv('ADMIN_EMAIL')
    ADMIN_PASSWORD = os.getenv('ADMIN_PASSWORD')

    RUN_MIGRATIONS_ON_STARTUP = _env_bool('RUN_MIGRATIONS_ON_STARTUP')

class DevelopmentConfig(Config):
    """개발 환경 설정."""
    DEBUG = True

class TestingConfig(Config):
    """테스트 환경 설정. 빠른 테스트를 위해 해시 비용을 낮춥니다."""
    TESTING = True
    DEBUG = False
    JWT_SECRET_KEY = 'testing-secret-key-with-enough-length-for-hs256'
    BCRYPT_ROUNDS = 4

class ProductionConfig(Config):
    DEBUG = False

config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)


@dataclass(frozen=True)
class Settings:
    """
    앱 생성 시 한 번 만들어져 모든 서비스에 전달되는 불변 설정 객체.
    모듈 전역 싱글턴 대신 이 객체를 명시적으로 주입합니다.
    """
    jwt_secret_key: str
    token_lifetime: timedelta = timedelta(days=30)
    bcrypt_rounds: int = 12
    admin_username: str = 'admin'
    admin_email: str | None = None
    admin_password: str | None = None

    @classmethod
    def from_mapping(cls, config) -> 'Settings':
        secret = config.get('JWT_SECRET_KEY')
        if not secret:
            raise ValueError("필수 환경 변수가 설정되지 않았습니다: JWT_SECRET_KEY")
        return cls(
            jwt_secret_key=secret,
            token_lifetime=timedelta(days=int(config.get('TOKEN_LIFETIME_DAYS', 30))),
            bcrypt_rounds=int(config.get('BCRYPT_ROUNDS', 12)),
            admin_username=config.get('ADMIN_USERNAME') or 'admin',
            admin_email=config.get('ADMIN_EMAIL'),
            admin_password=config.get('ADMIN_PASSWORD'),
        )
