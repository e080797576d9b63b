"""CSV bulk workflows for user accounts and roster profiles.

Rows are validated independently. Problems are collected as human readable
messages carrying the CSV line number (the header is line 1), and a bad row
never stops the rest of the file.
"""

import csv
import io
import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from config import CSV_IMPORT_BATCH_SIZE, DEFAULT_IMPORT_PASSWORD
from core.exceptions import ValidationError
from models.base import utcnow
from models.profiles import TeacherProfileModel
from models.user import UserModel
from utils.student_profile_manager import apply_student_fields
from utils.user_manager import UserManager, hash_password

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
IMPORTABLE_ROLES = ("student", "teacher", "admin")
TEMPLATE_HEADER = ["email", "name", "school", "role", "studentId", "grade", "className"]
ELECTIVE_COLUMNS = [f"Elective Subject ({letter})" for letter in "ABCDEF"]
MIN_PASSWORD_LENGTH = 8

_WHITESPACE = re.compile(r"\s+")


class NoValidRowsError(ValidationError):
    """Raised when every row of an import was rejected."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__("No valid user rows found.")


def parse_csv(content: bytes) -> List[Dict[str, str]]:
    """Parse an uploaded CSV with a header row.

    Cells are trimmed and blank lines skipped. A UTF-8 BOM is accepted.

    Raises:
        ValidationError: If the file cannot be decoded or parsed, or has no rows.
    """
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ValidationError("Failed to parse CSV file. Check the file format.") from e

    try:
        reader = csv.DictReader(io.StringIO(text), skipinitialspace=True, strict=True)
        rows = []
        for raw in reader:
            if None in raw:
                raise ValidationError("Failed to parse CSV file. Check the file format.")
            rows.append(
                {
                    (key or "").strip(): (value or "").strip()
                    for key, value in raw.items()
                }
            )
    except csv.Error as e:
        raise ValidationError("Failed to parse CSV file. Check the file format.") from e

    if not rows:
        raise ValidationError("CSV file contains no data.")
    return rows


def clean(value: Optional[str]) -> Optional[str]:
    """Collapse inner whitespace; empty becomes None."""
    if not value:
        return None
    collapsed = _WHITESPACE.sub(" ", value).strip()
    return collapsed or None


def normalize_student_role(label: Optional[str]) -> Optional[str]:
    label = clean(label)
    if not label:
        return None
    if "학생" in label:
        return "student"
    if "교사" in label:
        return "teacher"
    return label


def normalize_staff_role(label: Optional[str]) -> Optional[str]:
    label = clean(label)
    if not label:
        return None
    if "교장" in label or "교감" in label or "교사" in label:
        return "teacher"
    if "행정" in label:
        return "staff"
    return label


def is_teacher_row(label: Optional[str]) -> bool:
    label = clean(label) or ""
    return any(keyword in label for keyword in ("교사", "교장", "교감"))


@dataclass
class ImportResult:
    created: int = 0
    skipped: int = 0
    errors: List[str] = field(default_factory=list)


@dataclass
class BulkUpdateOutcome:
    updated: int = 0
    not_found: int = 0
    errors: List[str] = field(default_factory=list)


@dataclass
class ProfileImportStats:
    processed: int = 0
    matched_rows: int = 0
    missing_email: int = 0
    missing_user: int = 0
    created: int = 0
    updated: int = 0


class CsvWorkflowManager:
    """Runs the CSV import, bulk update, export and roster workflows."""

    def __init__(self, db: Session):
        self.db = db
        self.users = UserManager(db)

    def _insert_batch(self, batch: List[dict], result: ImportResult) -> None:
        try:
            self.db.add_all([UserModel(**data) for data in batch])
            self.db.commit()
            result.created += len(batch)
            return
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.warning(
                "Batch insert of %d users failed, retrying row by row: %s", len(batch), e
            )

        for data in batch:
            try:
                self.db.add(UserModel(**data))
                self.db.commit()
                result.created += 1
            except IntegrityError:
                # Someone registered the address meanwhile
                self.db.rollback()
            except Exception as e:
                self.db.rollback()
                result.errors.append(f"Failed to create user ({data['email']}): {e}")

    def import_users(
        self,
        rows: List[Dict[str, str]],
        default_password: str = DEFAULT_IMPORT_PASSWORD,
        batch_size: int = CSV_IMPORT_BATCH_SIZE,
    ) -> ImportResult:
        """Create accounts from ``email,name,school,role,password`` rows.

        Addresses that already exist, or repeat earlier in the file, are
        counted as skipped.

        Raises:
            NoValidRowsError: If no row is valid.
        """
        result = ImportResult()
        valid: List[dict] = []
        for index, row in enumerate(rows):
            line = index + 2
            email = (row.get("email") or "").strip().lower()
            if not email:
                result.errors.append(f"Line {line}: email is required.")
                continue
            if not EMAIL_PATTERN.match(email):
                result.errors.append(f"Line {line}: invalid email format ({email}).")
                continue
            role = (row.get("role") or "").strip() or None
            if role and role not in IMPORTABLE_ROLES:
                result.errors.append(f"Line {line}: invalid role ({role}).")
                continue
            password = (row.get("password") or "").strip() or default_password
            if len(password) < MIN_PASSWORD_LENGTH:
                result.errors.append(
                    f"Line {line}: password must be at least {MIN_PASSWORD_LENGTH} characters."
                )
                continue
            valid.append(
                {
                    "email": email,
                    "password": password,
                    "name": (row.get("name") or "").strip() or None,
                    "school": (row.get("school") or "").strip() or None,
                    "role": role,
                }
            )

        if not valid:
            raise NoValidRowsError(result.errors)

        existing = self.users.existing_emails(u["email"] for u in valid)
        to_insert: List[dict] = []
        seen = set(existing)
        now = utcnow()
        for data in valid:
            if data["email"] in seen:
                continue
            seen.add(data["email"])
            to_insert.append(
                {
                    "email": data["email"],
                    "password_hash": hash_password(data["password"]),
                    "name": data["name"],
                    "school": data["school"],
                    "role": data["role"],
                    "email_verified": now,
                }
            )
        result.skipped = len(valid) - len(to_insert)

        for start in range(0, len(to_insert), batch_size):
            self._insert_batch(to_insert[start:start + batch_size], result)

        logger.info(
            "CSV import: %d created, %d skipped, %d errors",
            result.created,
            result.skipped,
            len(result.errors),
        )
        return result

    def bulk_update_users(self, rows: List[Dict[str, str]]) -> BulkUpdateOutcome:
        """Update existing accounts from the export template columns.

        Blank cells leave the stored value unchanged.
        """
        outcome = BulkUpdateOutcome()
        for index, row in enumerate(rows):
            line = index + 2
            email = (row.get("email") or "").strip().lower()
            if not email:
                outcome.errors.append(f"Line {line}: email is required.")
                continue
            if not EMAIL_PATTERN.match(email):
                outcome.errors.append(f"Line {line}: invalid email format ({email}).")
                continue

            user = self.users.get_user_by_email(email)
            if user is None:
                outcome.errors.append(f"Line {line}: no user with email ({email}).")
                outcome.not_found += 1
                continue

            role = (row.get("role") or "").strip() or None
            if role and role not in IMPORTABLE_ROLES:
                outcome.errors.append(f"Line {line}: invalid role ({role}).")
                continue

            previous_role = user.role
            try:
                if row.get("name"):
                    user.name = row["name"]
                if row.get("school"):
                    user.school = row["school"]
                if role:
                    user.role = role

                profile_fields = {}
                if row.get("studentId"):
                    profile_fields["student_id"] = row["studentId"]
                if row.get("grade"):
                    profile_fields["grade"] = row["grade"]
                if row.get("className"):
                    profile_fields["class_label"] = row["className"]
                if profile_fields and (
                    "student" in (user.role, previous_role) or user.student_profile
                ):
                    apply_student_fields(user, profile_fields)

                self.db.commit()
                outcome.updated += 1
            except Exception as e:
                self.db.rollback()
                logger.exception("Bulk update failed for %s", email)
                outcome.errors.append(f"Line {line}: update failed ({email}): {e}")

        logger.info(
            "CSV bulk update: %d updated, %d not found, %d errors",
            outcome.updated,
            outcome.not_found,
            len(outcome.errors),
        )
        return outcome

    def export_template(self, school: Optional[str] = None) -> str:
        """Render the update template, optionally limited to one school.

        Student-only columns are filled for students only.
        """
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(TEMPLATE_HEADER)
        for user, profile in self.users.list_users_with_profiles(school):
            is_student = user.role == "student" and profile is not None
            values = [
                user.email,
                user.name,
                user.school,
                user.role,
                profile.student_id if is_student else None,
                profile.grade if is_student else None,
                profile.class_label if is_student else None,
            ]
            writer.writerow(values)
        return buffer.getvalue()

    def _sync_user_fields(self, user: UserModel, row: Dict[str, str], role: Optional[str]) -> None:
        name = clean(row.get("name"))
        school = clean(row.get("school"))
        if name and name != user.name:
            user.name = name
        if school and school != user.school:
            user.school = school
        if role and role != user.role:
            user.role = role

    def import_student_profiles(self, rows: List[Dict[str, str]]) -> ProfileImportStats:
        """Upsert student profiles from a school roster export."""
        stats = ProfileImportStats()
        for row in rows:
            stats.processed += 1
            if "학생" not in (clean(row.get("role")) or ""):
                continue
            stats.matched_rows += 1

            email = (clean(row.get("email")) or "").lower()
            if not email:
                stats.missing_email += 1
                continue
            user = self.users.get_user_by_email(email)
            if user is None:
                stats.missing_user += 1
                logger.warning("[SKIP] user not found: %s", email)
                continue

            self._sync_user_fields(user, row, normalize_student_role(row.get("role")))
            created = user.student_profile is None
            apply_student_fields(
                user,
                {
                    "student_id": clean(row.get("strudent_id") or row.get("student_id")),
                    "school": clean(row.get("school")),
                    "grade": clean(row.get("grade")),
                    "class_label": clean(row.get("class")),
                    "section": clean(row.get("section")),
                    "seat_number": clean(row.get("seat_number")),
                    "major": clean(row.get("major")),
                    "sex": clean(row.get("sex")),
                    "class_officer": clean(row.get("class_officer")),
                    "special_education": clean(row.get("special_edu_student")),
                    "phone_number": clean(row.get("ph_number_me")),
                    "siblings": clean(row.get("siblings")),
                    "academic_status": clean(row.get("academic_status")),
                    "remarks": clean(row.get("remarks")),
                    "club": clean(row.get("club")),
                    "club_teacher": clean(row.get("club_teacher")),
                    "club_location": clean(row.get("club_location")),
                    "date_of_birth": clean(row.get("date_of_birth")),
                    "address": clean(row.get("address")),
                    "resident_registration_number": clean(
                        row.get("resident_registration_numbder")
                        or row.get("resident_registration_number")
                    ),
                    "mother_name": clean(row.get("name_mother")),
                    "mother_phone": clean(row.get("ph_number_mother")),
                    "mother_remarks": clean(row.get("remarks_mother")),
                    "father_name": clean(row.get("name_farther") or row.get("name_father")),
                    "father_phone": clean(
                        row.get("ph_number_farther") or row.get("ph_number_father")
                    ),
                    "father_remarks": clean(
                        row.get("remarks_farther") or row.get("remarks_father")
                    ),
                    "elective_subjects": [
                        subject
                        for subject in (clean(row.get(col)) for col in ELECTIVE_COLUMNS)
                        if subject
                    ],
                },
            )
            self.db.commit()
            if created:
                stats.created += 1
            else:
                stats.updated += 1

        logger.info("Student profile import: %s", stats)
        return stats

    def import_teacher_profiles(self, rows: List[Dict[str, str]]) -> ProfileImportStats:
        """Upsert teacher profiles from a staff roster export."""
        stats = ProfileImportStats()
        for row in rows:
            stats.processed += 1
            if not is_teacher_row(row.get("role")):
                continue
            stats.matched_rows += 1

            email = (clean(row.get("email")) or "").lower()
            if not email:
                stats.missing_email += 1
                continue
            user = self.users.get_user_by_email(email)
            if user is None:
                stats.missing_user += 1
                logger.warning("[SKIP] user not found: %s", email)
                continue

            self._sync_user_fields(user, row, normalize_staff_role(row.get("role")))
            profile = user.teacher_profile
            created = profile is None
            if created:
                profile = TeacherProfileModel(user_id=user.id)
                user.teacher_profile = profile
            profile.school = clean(row.get("school"))
            profile.role_label = clean(row.get("role"))
            profile.major = clean(row.get("major"))
            profile.class_label = clean(row.get("class"))
            profile.grade = clean(row.get("grade"))
            profile.section = clean(row.get("section"))
            profile.phone_number = clean(row.get("ph_number_me"))
            profile.remarks = clean(row.get("remarks"))
            profile.club = clean(row.get("club"))
            profile.club_location = clean(row.get("club_location"))
            profile.date_of_birth = clean(row.get("date_of_birth"))
            profile.address = clean(row.get("address"))
            self.db.commit()
            if created:
                stats.created += 1
            else:
                stats.updated += 1

        logger.info("Teacher profile import: %s", stats)
        return stats
