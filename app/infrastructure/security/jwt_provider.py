# app/infrastructure/security/jwt_provider.py

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import jwt

from app.config.settings import settings
from app.core.exceptions import UnauthorizedError
from app.core.roles import UserRole


class JwtProvider:
    """
    Tokens são emitidos pelo provedor de identidade da plataforma; aqui só
    validamos. `issue_access_token` existe para scripts internos e testes.
    """

    def __init__(self) -> None:
        self._secret = settings.jwt_secret
        self._issuer = settings.jwt_issuer
        self._audience = settings.jwt_audience
        self._algorithm = "HS256"

    def issue_access_token(self, *, subject: int | str, role: UserRole | str, minutes: int = 0) -> str:
        ttl = minutes if minutes and minutes > 0 else settings.jwt_access_minutes
        now = datetime.now(tz=timezone.utc)

        claims = {
            "iss": self._issuer,
            "aud": self._audience,
            "sub": str(subject),
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(minutes=ttl)).timestamp()),
            "jti": uuid4().hex,
            "typ": "access",
            "role": role.value if isinstance(role, UserRole) else str(role),
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def decode(self, token: str) -> dict:
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                audience=self._audience,
                issuer=self._issuer,
                options={"require": ["exp", "iat", "sub", "jti", "typ"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise UnauthorizedError("Token expirado.") from e
        except jwt.InvalidTokenError as e:
            raise UnauthorizedError("Token inválido.") from e

        if claims.get("typ") != "access":
            raise UnauthorizedError("Token inválido.")
        return claims
