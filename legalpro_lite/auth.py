"""
Authentication Module with JWT Sessions
=======================================

Credential store and session issuer for LegalPro Lite.

Roles:
- lawyer: default role for new accounts
- assistant: support staff
- admin: practice administrator

Authentication Flow:
1. register() stores a bcrypt hash of the password (never the plaintext)
2. authenticate() verifies email + password and returns the user
3. issue_session() signs a JWT {sub, email, role, exp} delivered as cookie + body
4. Each protected request decodes the token into an AuthContext

Password reset:
- request_password_reset() stores the sha256 of a random 32-byte token for one hour
- reset_password() swaps the hash and clears the token (single use)
"""

import hashlib
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Dict, Any

import jwt
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .config import get_settings
from .db.models import User, UserRole
from .errors import DuplicateEmail, InvalidCredentials, InvalidOrExpiredToken, NotFound

logger = logging.getLogger(__name__)


# =============================================================================
# PASSWORD HASHING
# =============================================================================

# bcrypt truncates passwords at 72 bytes; enforce to avoid 500s.
MAX_PASSWORD_BYTES = 72
MIN_PASSWORD_LENGTH = 8

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def is_password_too_long(password: str) -> bool:
    """Return True if password exceeds bcrypt 72-byte limit."""
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash"""
    if is_password_too_long(plain_password):
        logger.warning("Auth failed: password exceeds bcrypt 72-byte limit")
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError as e:
        logger.warning(f"Auth failed: invalid password hash format ({e})")
        return False


def get_password_hash(password: str) -> str:
    """Hash a password"""
    if is_password_too_long(password):
        raise ValueError("Password exceeds bcrypt 72-byte limit")
    return pwd_context.hash(password)


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


# =============================================================================
# JWT TOKEN HANDLING
# =============================================================================

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed session token"""
    settings = get_settings()
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(days=settings.session_expire_days))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and validate a session token. Returns None when invalid or expired."""
    settings = get_settings()
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except jwt.PyJWTError as e:
        logger.warning(f"Invalid session token: {e}")
        return None


def _hash_reset_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


# =============================================================================
# AUTH CONTEXT
# =============================================================================

@dataclass
class AuthContext:
    """Identity decoded from the session token"""
    user_id: str
    email: str
    role: UserRole

    @classmethod
    def from_token_payload(cls, payload: Dict[str, Any]) -> Optional["AuthContext"]:
        user_id = payload.get("sub")
        if not user_id:
            return None
        try:
            role = UserRole(payload.get("role") or UserRole.LAWYER.value)
        except ValueError:
            return None
        return cls(user_id=user_id, email=payload.get("email", ""), role=role)


# =============================================================================
# AUTH SERVICE (SQLAlchemy-based)
# =============================================================================

class AuthService:
    """Credential and session operations backed by SQLAlchemy"""

    def __init__(self, db: Session):
        self.db = db

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == normalize_email(email)).first()

    def get_user(self, user_id: str) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFound("User not found")
        return user

    def register(
        self,
        name: str,
        email: str,
        password: str,
        role: Optional[UserRole] = None,
        bar_number: Optional[str] = None,
        firm: Optional[str] = None,
    ) -> User:
        """
        Create a new account.

        Raises:
            DuplicateEmail: if an account already uses this email (case-insensitive)
        """
        email = normalize_email(email)
        if self.get_user_by_email(email):
            raise DuplicateEmail()

        user = User(
            name=name,
            email=email,
            password_hash=get_password_hash(password),
            role=role or UserRole.LAWYER,
            bar_number=bar_number,
            firm=firm,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # Concurrent registration won the unique email index
            self.db.rollback()
            raise DuplicateEmail()
        self.db.refresh(user)
        logger.info(f"Registered user {user.id}")
        return user

    def authenticate(self, email: str, password: str) -> User:
        """
        Verify email + password.

        Raises:
            InvalidCredentials: for unknown email, missing hash or wrong password alike
        """
        user = self.get_user_by_email(email)
        if not user:
            logger.warning(f"Auth failed: email {normalize_email(email)} not found")
            raise InvalidCredentials()

        if not user.password_hash:
            logger.warning(f"Auth failed: user {user.id} has no password set")
            raise InvalidCredentials()

        if not verify_password(password, user.password_hash):
            logger.warning(f"Auth failed: invalid password for user {user.id}")
            raise InvalidCredentials()

        return user

    def issue_session(self, user: User) -> str:
        role = user.role.value if user.role else UserRole.LAWYER.value
        return create_access_token({"sub": user.id, "email": user.email, "role": role})

    def request_password_reset(self, email: str) -> Optional[str]:
        """
        Start a password reset.

        Returns the raw token when the account exists, None otherwise. Callers
        must respond identically in both cases. Email delivery is best-effort.
        """
        user = self.get_user_by_email(email)
        if not user:
            logger.info("Password reset requested for unknown email")
            return None

        settings = get_settings()
        token = secrets.token_hex(32)
        user.reset_token_hash = _hash_reset_token(token)
        user.reset_token_expires_at = datetime.utcnow() + timedelta(minutes=settings.reset_token_ttl_minutes)
        self.db.commit()
        logger.info(f"Password reset token issued for user {user.id}")

        from .email_utils import send_password_reset_email

        try:
            sent = send_password_reset_email(to_email=user.email, reset_token=token, user_name=user.name)
            if not sent:
                logger.warning(f"Password reset email for user {user.id} was not delivered")
        except Exception as e:
            logger.error(f"Password reset email failed for user {user.id}: {e}")

        return token

    def reset_password(self, token: str, new_password: str) -> User:
        """
        Complete a password reset.

        Raises:
            InvalidOrExpiredToken: no unexpired account matches the token
        """
        user = self.db.query(User).filter(
            User.reset_token_hash == _hash_reset_token(token),
            User.reset_token_expires_at > datetime.utcnow(),
        ).first()
        if not user:
            raise InvalidOrExpiredToken()

        user.password_hash = get_password_hash(new_password)
        user.reset_token_hash = None
        user.reset_token_expires_at = None
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"Password reset completed for user {user.id}")
        return user


def get_auth_service(db: Session) -> AuthService:
    """Get auth service instance"""
    return AuthService(db)
