"""Student profile utilities."""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from core.exceptions import NotFoundError
from models.profiles import StudentProfileModel
from models.user import UserModel
from schemas.student_profile import StudentProfileUpdateRequest

logger = logging.getLogger(__name__)

# Columns on StudentProfileModel that callers may set directly
STUDENT_PROFILE_FIELDS = (
    "student_id",
    "school",
    "grade",
    "class_label",
    "section",
    "seat_number",
    "major",
    "sex",
    "class_officer",
    "special_education",
    "phone_number",
    "siblings",
    "academic_status",
    "remarks",
    "club",
    "club_teacher",
    "club_location",
    "date_of_birth",
    "address",
    "resident_registration_number",
    "mother_name",
    "mother_phone",
    "mother_remarks",
    "father_name",
    "father_phone",
    "father_remarks",
    "elective_subjects",
)

_USER_FIELDS = ("name", "school", "region")


def apply_student_fields(user: UserModel, fields: dict) -> StudentProfileModel:
    """Create or update ``user``'s student profile in the current session.

    Unknown keys are ignored. Nothing is committed here.
    """
    profile = user.student_profile
    if profile is None:
        profile = StudentProfileModel(user_id=user.id, elective_subjects=[])
        user.student_profile = profile
    for key, value in fields.items():
        if key in STUDENT_PROFILE_FIELDS:
            setattr(profile, key, value)
    return profile


class StudentProfileManager:
    """Reads and writes the signed-in student's own profile."""

    def __init__(self, db: Session):
        self.db = db

    def get_profile(self, user_id: str) -> Optional[StudentProfileModel]:
        return (
            self.db.query(StudentProfileModel)
            .filter(StudentProfileModel.user_id == user_id)
            .first()
        )

    def update_profile(self, user_id: str, req: StudentProfileUpdateRequest) -> UserModel:
        """Update user fields and upsert the profile in one transaction.

        Only fields present in the request body are written.

        Raises:
            NotFoundError: If the user row vanished.
        """
        user = self.db.query(UserModel).filter(UserModel.id == user_id).first()
        if user is None:
            raise NotFoundError("User", user_id)

        data = req.model_dump(exclude_unset=True)
        try:
            for key in _USER_FIELDS:
                if key in data:
                    setattr(user, key, data[key])

            profile_data = {k: v for k, v in data.items() if k in STUDENT_PROFILE_FIELDS}
            if profile_data.get("elective_subjects") is None:
                profile_data.pop("elective_subjects", None)
            apply_student_fields(user, profile_data)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(user)
        logger.info("Updated student profile for %s", user_id)
        return user
