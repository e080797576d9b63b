"""User management utilities.

This module provides account persistence, password hashing and the
verification/reset token workflows.
"""

import logging
import secrets
from datetime import timedelta
from typing import Iterable, List, Optional, Set, Tuple

import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import (
    EMAIL_VERIFICATION_TOKEN_HOURS,
    ENABLE_EMAIL_VERIFICATION,
    PASSWORD_RESET_TOKEN_HOURS,
)
from core.exceptions import DuplicateError, InvalidTokenError, NotFoundError
from models.base import utcnow
from models.profiles import StudentProfileModel
from models.user import UserModel
from utils.student_profile_manager import apply_student_fields

logger = logging.getLogger(__name__)

# Bcrypt rounds for password hashing (higher = more secure but slower)
BCRYPT_ROUNDS = 12

# bcrypt only looks at the first 72 bytes
_BCRYPT_MAX_BYTES = 72


def normalize_email(email: str) -> str:
    return email.strip().lower()


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Args:
        password: Plain text password.

    Returns:
        Hashed password (bcrypt hash string).
    """
    password_bytes = password.encode("utf-8")
    if len(password_bytes) > _BCRYPT_MAX_BYTES:
        logger.warning(
            "Password exceeds %d bytes (%d bytes), truncating",
            _BCRYPT_MAX_BYTES,
            len(password_bytes),
        )
        password_bytes = password_bytes[:_BCRYPT_MAX_BYTES]
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a password against a bcrypt hash.

    Returns:
        True if password matches, False otherwise (including malformed hashes).
    """
    if not hashed_password:
        return False
    password_bytes = plain_password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
    except ValueError as e:
        logger.error("Password verification error: %s", e)
        return False


class UserManager:
    """Manages user data persistence and operations using SQLAlchemy."""

    def __init__(self, db: Session):
        """Initialize UserManager.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db

    def get_user_by_id(self, user_id: str) -> Optional[UserModel]:
        return self.db.query(UserModel).filter(UserModel.id == user_id).first()

    def get_user_by_email(self, email: str) -> Optional[UserModel]:
        return (
            self.db.query(UserModel)
            .filter(UserModel.email == normalize_email(email))
            .first()
        )

    def email_exists(self, email: str, exclude_user_id: Optional[str] = None) -> bool:
        query = self.db.query(UserModel.id).filter(UserModel.email == normalize_email(email))
        if exclude_user_id:
            query = query.filter(UserModel.id != exclude_user_id)
        return query.first() is not None

    def existing_emails(self, emails: Iterable[str]) -> Set[str]:
        """Return the subset of ``emails`` that already belong to an account."""
        emails = list(emails)
        found: Set[str] = set()
        # Stay below SQLite's bound-parameter limit
        for start in range(0, len(emails), 500):
            chunk = emails[start:start + 500]
            rows = self.db.query(UserModel.email).filter(UserModel.email.in_(chunk)).all()
            found.update(row[0] for row in rows)
        return found

    def create_user(
        self,
        email: str,
        password: str,
        name: Optional[str] = None,
        school: Optional[str] = None,
        role: Optional[str] = None,
        verified: bool = True,
    ) -> UserModel:
        """Create a new user.

        Args:
            email: Login e-mail, stored lower-cased.
            password: Plain text password.
            name: Display name.
            school: School name.
            role: User role.
            verified: Whether to mark the e-mail as verified right away.

        Returns:
            Created UserModel.

        Raises:
            DuplicateError: If the e-mail is already registered.
        """
        email = normalize_email(email)
        if self.email_exists(email):
            raise DuplicateError(f"User '{email}' already exists")

        model = UserModel(
            email=email,
            password_hash=hash_password(password),
            name=name,
            school=school,
            role=role,
            email_verified=utcnow() if verified else None,
        )
        # The unique constraint still catches two requests racing past the check
        try:
            self.db.add(model)
            self.db.commit()
            self.db.refresh(model)
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateError(f"User '{email}' already exists") from e

        logger.info("Created user: %s (%s)", email, role)
        return model

    def register(
        self, email: str, password: str, name: str, school: str, role: str
    ) -> Tuple[UserModel, Optional[str]]:
        """Self-service sign up.

        Returns:
            The new user and, when e-mail verification is enabled, the
            verification token that must be redeemed before login.

        Raises:
            DuplicateError: If the e-mail is already registered.
        """
        user = self.create_user(
            email=email,
            password=password,
            name=name,
            school=school,
            role=role,
            verified=not ENABLE_EMAIL_VERIFICATION,
        )
        if not ENABLE_EMAIL_VERIFICATION:
            return user, None

        token = secrets.token_hex(32)
        user.verification_token = token
        user.verification_token_expiry = utcnow() + timedelta(
            hours=EMAIL_VERIFICATION_TOKEN_HOURS
        )
        self.db.commit()
        return user, token

    def authenticate(self, email: str, password: str) -> Optional[UserModel]:
        """Return the user for valid credentials, None otherwise."""
        user = self.get_user_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            return None
        return user

    def create_password_reset_token(self, email: str) -> Optional[str]:
        """Store a one-hour reset token for ``email``.

        Returns:
            The token, or None when no account uses the address.
        """
        user = self.get_user_by_email(email)
        if user is None:
            return None
        token = secrets.token_hex(32)
        user.reset_token = token
        user.reset_token_expiry = utcnow() + timedelta(hours=PASSWORD_RESET_TOKEN_HOURS)
        self.db.commit()
        return token

    def reset_password(self, token: str, new_password: str) -> UserModel:
        """Redeem a reset token.

        Raises:
            InvalidTokenError: If the token is unknown or expired.
        """
        user = (
            self.db.query(UserModel)
            .filter(UserModel.reset_token == token, UserModel.reset_token_expiry > utcnow())
            .first()
        )
        if user is None:
            raise InvalidTokenError("Invalid or expired reset token")
        user.password_hash = hash_password(new_password)
        user.reset_token = None
        user.reset_token_expiry = None
        self.db.commit()
        logger.info("Password reset for user %s", user.id)
        return user

    def verify_email(self, token: str) -> UserModel:
        """Redeem an e-mail verification token.

        Raises:
            InvalidTokenError: If the token is unknown or expired.
        """
        user = (
            self.db.query(UserModel)
            .filter(
                UserModel.verification_token == token,
                UserModel.verification_token_expiry > utcnow(),
            )
            .first()
        )
        if user is None:
            raise InvalidTokenError("Invalid or expired verification token")
        user.email_verified = utcnow()
        user.verification_token = None
        user.verification_token_expiry = None
        self.db.commit()
        logger.info("E-mail verified for user %s", user.id)
        return user

    def update_user(
        self,
        user_id: str,
        email: Optional[str] = None,
        name: Optional[str] = None,
        school: Optional[str] = None,
        role: Optional[str] = None,
        student_fields: Optional[dict] = None,
    ) -> UserModel:
        """Admin edit of an account and its student profile.

        The profile is updated when it exists and created only when the
        resulting role is student.

        Raises:
            NotFoundError: If the user does not exist.
            DuplicateError: If the new e-mail belongs to another account.
        """
        user = self.get_user_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)

        if email is not None and normalize_email(email) != user.email:
            if self.email_exists(email, exclude_user_id=user_id):
                raise DuplicateError("Email already in use")
            user.email = normalize_email(email)
        if name is not None:
            user.name = name
        if school is not None:
            user.school = school
        if role is not None:
            user.role = role

        if student_fields:
            if user.student_profile is not None or user.role == "student":
                apply_student_fields(user, student_fields)

        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateError("Email already in use") from e
        self.db.refresh(user)
        return user

    def list_users_with_profiles(
        self, school: Optional[str] = None
    ) -> List[Tuple[UserModel, Optional[StudentProfileModel]]]:
        """Users ordered by e-mail, optionally restricted to one school."""
        query = self.db.query(UserModel)
        if school is not None:
            query = query.filter(UserModel.school == school)
        users = query.order_by(UserModel.email).all()
        return [(user, user.student_profile) for user in users]

    def count_by_role(self, role: str, school: Optional[str] = None) -> int:
        query = self.db.query(UserModel).filter(UserModel.role == role)
        if school is not None:
            query = query.filter(UserModel.school == school)
        return query.count()

    def provision_account(
        self,
        email: str,
        password: str,
        role: str,
        name: Optional[str] = None,
        school: Optional[str] = None,
        force: bool = False,
        reset_password: bool = False,
    ) -> Tuple[UserModel, str]:
        """Create or refresh an operator account from the command line.

        Args:
            email: Account e-mail.
            password: New plain text password.
            role: Role to grant, e.g. "admin" or "superadmin".
            name: Display name.
            school: School name, only used for admins.
            force: Overwrite password, name and role of an existing account.
            reset_password: Only replace the password of an existing account.

        Returns:
            The account and the action taken: "created", "updated" or
            "password_reset".

        Raises:
            NotFoundError: If ``reset_password`` is set and the account is missing.
            DuplicateError: If the account exists and neither flag is set.
        """
        user = self.get_user_by_email(email)
        if user is None:
            if reset_password:
                raise NotFoundError("User", email)
            user = self.create_user(email, password, name=name, school=school, role=role)
            return user, "created"

        if reset_password:
            user.password_hash = hash_password(password)
            action = "password_reset"
        elif force:
            user.password_hash = hash_password(password)
            user.name = name
            user.role = role
            if school is not None:
                user.school = school
            user.email_verified = utcnow()
            action = "updated"
        else:
            raise DuplicateError(f"User '{user.email}' already exists")

        self.db.commit()
        self.db.refresh(user)
        logger.info("Account %s: %s", user.email, action)
        return user, action
