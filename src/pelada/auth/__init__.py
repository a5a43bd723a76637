"""Admin session credential: a signed, time-limited token kept in an HttpOnly cookie."""

from __future__ import annotations

import hmac
import logging
from typing import Any

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from pelada.errors import AuthFailure


logger = logging.getLogger("uvicorn.error")

_SALT = "pelada-admin-session"


class TokenSigner:
    def __init__(self, secret_key: str, *, max_age: int):
        self.max_age = max_age
        self._serializer = URLSafeTimedSerializer(secret_key, salt=_SALT)

    def issue(self, subject: str = "admin") -> str:
        return self._serializer.dumps({"sub": subject})

    def verify(self, token: str | None) -> dict[str, Any]:
        if not token:
            raise AuthFailure("Não autenticado.")
        try:
            payload = self._serializer.loads(token, max_age=self.max_age)
        except SignatureExpired as exc:
            raise AuthFailure("Sessão expirada.") from exc
        except BadSignature as exc:
            logger.warning("Rejected tampered session token")
            raise AuthFailure("Sessão inválida.") from exc
        if not isinstance(payload, dict) or payload.get("sub") != "admin":
            raise AuthFailure("Sessão inválida.")
        return payload


def check_password(submitted: str | None, expected: str) -> bool:
    return hmac.compare_digest((submitted or "").encode("utf-8"), expected.encode("utf-8"))


__all__ = ["TokenSigner", "check_password"]
