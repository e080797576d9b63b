"""School and admin account management.

An admin account is three records that live and die together: the user with
role admin, the school it administers and its admin profile.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.exceptions import DuplicateError, NotFoundError
from models.base import utcnow
from models.profiles import AdminProfileModel
from models.school import SchoolModel
from models.user import UserModel
from schemas.school import CreateAdminRequest, GradeInfo, UpdateAdminRequest
from utils.converters import dump_json
from utils.user_manager import hash_password, normalize_email

logger = logging.getLogger(__name__)


def grade_totals(grade_info: List[GradeInfo]) -> Tuple[int, int]:
    """Sum class and student counts over all grades."""
    total_classes = sum(g.class_count for g in grade_info)
    total_students = sum(g.student_count for g in grade_info)
    return total_classes, total_students


def _encode_grade_info(grade_info: List[GradeInfo]) -> str:
    return dump_json([g.model_dump(by_alias=True) for g in grade_info])


class SchoolManager:
    """Manages admin accounts and their schools."""

    def __init__(self, db: Session):
        self.db = db

    def _check_unique(
        self,
        email: str,
        admin_name: str,
        school_name: str,
        exclude_user_id: Optional[str] = None,
        exclude_school_id: Optional[str] = None,
    ) -> None:
        email_query = self.db.query(UserModel.id).filter(UserModel.email == email)
        name_query = self.db.query(UserModel.id).filter(
            UserModel.name == admin_name, UserModel.role == "admin"
        )
        school_query = self.db.query(SchoolModel.id).filter(SchoolModel.name == school_name)
        if exclude_user_id:
            email_query = email_query.filter(UserModel.id != exclude_user_id)
            name_query = name_query.filter(UserModel.id != exclude_user_id)
        if exclude_school_id:
            school_query = school_query.filter(SchoolModel.id != exclude_school_id)

        if email_query.first():
            raise DuplicateError("Email already exists")
        if name_query.first():
            raise DuplicateError("Account name already exists")
        if school_query.first():
            raise DuplicateError("School name already exists")

    def create_admin(
        self, req: CreateAdminRequest, created_by: str
    ) -> Tuple[UserModel, SchoolModel]:
        """Create the admin user, its school and admin profile atomically.

        Args:
            req: Validated create request.
            created_by: ID of the superadmin performing the action.

        Returns:
            The admin user and school.

        Raises:
            DuplicateError: If e-mail, admin account name or school name is taken.
        """
        email = normalize_email(req.admin_email)
        self._check_unique(email, req.admin_name, req.school_name)

        total_classes, total_students = grade_totals(req.grade_info)
        try:
            user = UserModel(
                email=email,
                password_hash=hash_password(req.admin_password),
                name=req.admin_name,
                school=req.school_name,
                role="admin",
                email_verified=utcnow(),
            )
            self.db.add(user)
            self.db.flush()

            school = SchoolModel(
                name=req.school_name,
                school_type=req.school_type,
                admin_user_id=user.id,
                created_by=created_by,
                contact_name=req.contact_name,
                contact_phone=req.contact_phone,
                grade_info=_encode_grade_info(req.grade_info),
                total_classes=total_classes,
                total_students=total_students,
                status="active",
                notes=req.notes,
            )
            self.db.add(school)
            self.db.flush()

            self.db.add(
                AdminProfileModel(
                    user_id=user.id,
                    school_id=school.id,
                    phone_number=req.contact_phone,
                    notes=req.notes,
                )
            )
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateError("Email or school name already exists") from e
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(user)
        self.db.refresh(school)
        logger.info("Created admin %s for school %s", email, school.name)
        return user, school

    def get_admin(self, admin_id: str) -> UserModel:
        user = (
            self.db.query(UserModel)
            .filter(UserModel.id == admin_id, UserModel.role == "admin")
            .first()
        )
        if user is None:
            raise NotFoundError("Admin", admin_id)
        return user

    def update_admin(self, req: UpdateAdminRequest) -> Tuple[UserModel, SchoolModel]:
        """Update an admin account, creating missing school/profile rows.

        Raises:
            NotFoundError: If ``admin_id`` is not an admin account.
            DuplicateError: If a changed unique value is already taken.
        """
        user = self.get_admin(req.admin_id)
        school = user.administered_school
        email = normalize_email(req.admin_email)
        self._check_unique(
            email,
            req.admin_name,
            req.school_name,
            exclude_user_id=user.id,
            exclude_school_id=school.id if school else None,
        )

        total_classes, total_students = grade_totals(req.grade_info)
        try:
            user.email = email
            user.name = req.admin_name
            user.school = req.school_name
            if req.admin_password and req.admin_password.strip():
                user.password_hash = hash_password(req.admin_password)

            if school is None:
                school = SchoolModel(admin_user_id=user.id, created_by=user.id)
                user.administered_school = school
            school.name = req.school_name
            school.school_type = req.school_type
            school.contact_name = req.contact_name
            school.contact_phone = req.contact_phone
            school.grade_info = _encode_grade_info(req.grade_info)
            school.total_classes = total_classes
            school.total_students = total_students
            school.status = req.status
            school.notes = req.notes
            self.db.flush()

            profile = user.admin_profile
            if profile is None:
                profile = AdminProfileModel(user_id=user.id)
                user.admin_profile = profile
            profile.school_id = school.id
            profile.phone_number = req.contact_phone
            profile.notes = req.notes
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateError("Email or school name already exists") from e
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(user)
        self.db.refresh(school)
        logger.info("Updated admin %s", user.id)
        return user, school

    def delete_admin(self, admin_id: str) -> None:
        """Delete an admin account together with its school and profile.

        Raises:
            NotFoundError: If ``admin_id`` is not an admin account.
        """
        user = self.get_admin(admin_id)
        self.db.delete(user)
        self.db.commit()
        logger.info("Deleted admin %s", admin_id)

    def list_admins(self) -> List[UserModel]:
        return (
            self.db.query(UserModel)
            .filter(UserModel.role == "admin")
            .order_by(UserModel.created_at.desc())
            .all()
        )

    def list_schools(self) -> List[SchoolModel]:
        return self.db.query(SchoolModel).order_by(SchoolModel.created_at.desc()).all()

    def count_active_schools(self) -> int:
        return self.db.query(SchoolModel).filter(SchoolModel.status == "active").count()
