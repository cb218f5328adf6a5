# bhreads/core/security.py
import bcrypt
import jwt
from datetime import datetime, timezone
from functools import wraps
from flask import request, jsonify, g, current_app

from bhreads.core.config import Settings
from bhreads.core.exceptions import (
    UnauthorizedError, MissingTokenError, InvalidTokenError, ExpiredTokenError
)

ALGORITHM = "HS256"


class TokenService:
    """
    사용자 ID를 담은 서명 토큰을 발급하고 검증합니다.
    - 서명 키는 앱 시작 시 주입된 Settings에서만 읽습니다.
    - 검증은 무상태(stateless)이며 폐기 목록이 없습니다. 로그아웃은 클라이언트가 토큰을 버리는 것으로 처리합니다.
    """
    def __init__(self, settings: Settings):
        self.settings = settings

    def issue(self, user_id: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "iat": now,
            "exp": now + self.settings.token_lifetime,
        }
        return jwt.encode(payload, self.settings.jwt_secret_key, algorithm=ALGORITHM)

    def verify(self, token: str | None) -> str:
        """토큰을 검증하고 내부의 사용자 ID를 반환합니다."""
        if not token:
            raise MissingTokenError()
        try:
            payload = jwt.decode(token, self.settings.jwt_secret_key, algorithms=[ALGORITHM])
        except jwt.ExpiredSignatureError:
            raise ExpiredTokenError()
        except jwt.InvalidTokenError:
            raise InvalidTokenError()

        user_id = payload.get("sub")
        if not user_id or not isinstance(user_id, str):
            raise InvalidTokenError()
        return user_id


def extract_bearer_token(auth_header: str | None) -> str | None:
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    token = auth_header.split(" ", 1)[1].strip()
    return token or None


def jwt_required(optional: bool = False):
    """
    보호된 뷰를 감싸는 인가 게이트.
    - 성공 시 g.user_id에 사용자 ID를 저장합니다.
    - 실패 시 뷰를 실행하기 전에 401을 반환합니다.
    - optional=True인 경우 토큰이 없거나 잘못되어도 g.user_id = None 으로 통과시킵니다.
    역할(role) 검사는 하지 않습니다.
    """
    def wrapper(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            token_service = current_app.services['tokens']
            token = extract_bearer_token(request.headers.get("Authorization"))
            try:
                g.user_id = token_service.verify(token)
            except UnauthorizedError as err:
                if not optional:
                    return jsonify(err.to_dict()), err.status_code
                g.user_id = None
            return f(*args, **kwargs)
        return decorated_function
    return wrapper


class PasswordHasher:
    """bcrypt 기반 비밀번호 해시. 비용(work factor)은 설정값으로 고정됩니다."""
    # bcrypt 는 72바이트를 넘는 입력을 거부합니다. 요청 스키마가 같은 상한을 검사합니다.
    MAX_PASSWORD_BYTES = 72

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, password: str, password_hash: str | None) -> bool:
        if not password or not password_hash:
            return False
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            return False
