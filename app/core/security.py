"""
Password hashing (bcrypt) and JWT issuance / verification.

Both services take their configuration through the constructor and never
change it afterwards; the app factory builds one of each from ``Settings``.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt
from jose.exceptions import JWTClaimsError
from passlib.context import CryptContext
from passlib.exc import PasswordSizeError

from app.core.exceptions import InvalidInputError

REQUIRED_CLAIMS = ("id", "email", "role")
REQUIRED_TIME_CLAIMS = ("iat", "exp")

# bcrypt only reads the first 72 bytes of a password
BCRYPT_MAX_PASSWORD_BYTES = 72


# ── Passwords ───────────────────────────────────────────────────────
class PasswordHasher:
    """bcrypt hasher with a fixed cost factor.

    Every call to :meth:`hash` draws a fresh salt, so hashing the same
    password twice yields two different strings that both verify.
    """

    def __init__(self, rounds: int = 12) -> None:
        if rounds < 4 or rounds > 31:
            raise ValueError("bcrypt rounds must be between 4 and 31")
        self.rounds = rounds
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
            bcrypt__truncate_error=True,
        )

    def hash(self, plain: str) -> str:
        if not isinstance(plain, str) or not plain:
            raise InvalidInputError("Password must be a non-empty string")
        if len(plain.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
            raise InvalidInputError(
                f"Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes"
            )
        try:
            return self._context.hash(plain)
        except PasswordSizeError as exc:
            raise InvalidInputError("Password is too long") from exc

    def verify(self, plain: str, hashed: str | None) -> bool:
        """Return ``True`` on match; ``False`` for a mismatch or an unusable hash."""
        if not isinstance(plain, str) or not isinstance(hashed, str) or not hashed:
            return False
        # Longer inputs would be compared on their first 72 bytes only
        if len(plain.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
            return False
        try:
            return self._context.verify(plain, hashed)
        except (ValueError, TypeError):
            return False

    def dummy_verify(self) -> None:
        """Spend the time of one verification without a stored hash."""
        self._context.dummy_verify()


# ── JWT tokens ──────────────────────────────────────────────────────
class TokenVerificationError(Exception):
    """Base for every reason a bearer token is rejected."""

    reason = "invalid"


class MissingTokenError(TokenVerificationError):
    reason = "missing"


class MalformedTokenError(TokenVerificationError):
    reason = "malformed"


class InvalidSignatureError(TokenVerificationError):
    reason = "bad_signature"


class TokenExpiredError(TokenVerificationError):
    reason = "expired"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """Signs ``{id, email, role}`` claims into expiring JWTs and verifies them."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expire_minutes: int = 60,
        *,
        expires_delta: timedelta | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret:
            raise ValueError("token secret must be non-empty")
        self._secret = secret
        self.algorithm = algorithm
        self.expires_delta = expires_delta or timedelta(minutes=expire_minutes)
        self._clock = clock

    def issue(self, claims: Mapping[str, Any]) -> str:
        missing = [name for name in REQUIRED_CLAIMS if name not in claims]
        if missing:
            raise ValueError(f"claims missing required fields: {', '.join(missing)}")
        now = self._clock()
        payload = {name: claims[name] for name in REQUIRED_CLAIMS}
        payload.update({"iat": now, "exp": now + self.expires_delta})
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str | None) -> dict[str, Any]:
        """
        Return the decoded payload (``id``, ``email``, ``role``, ``iat``, ``exp``).

        Raises a :class:`TokenVerificationError` subclass naming the reason.
        """
        if not token:
            raise MissingTokenError("no token supplied")

        try:
            unverified = jwt.get_unverified_claims(token)
        except JWTError as exc:
            raise MalformedTokenError(str(exc)) from exc
        if any(name not in unverified for name in REQUIRED_TIME_CLAIMS):
            raise MalformedTokenError("token lacks iat/exp claims")

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require_exp": True, "require_iat": True},
            )
        except ExpiredSignatureError as exc:
            raise TokenExpiredError(str(exc)) from exc
        except JWTClaimsError as exc:
            raise MalformedTokenError(str(exc)) from exc
        except JWTError as exc:
            raise InvalidSignatureError(str(exc)) from exc

        if any(name not in payload for name in REQUIRED_CLAIMS):
            raise MalformedTokenError("token payload lacks identity claims")
        return payload
