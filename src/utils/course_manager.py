"""Course management utilities."""

import logging
import secrets
from typing import List

from sqlalchemy.orm import Session

from core.exceptions import DuplicateError, NotFoundError, SchoolHubError
from models.course import CourseEnrollmentModel, CourseModel
from models.user import UserModel
from schemas.course import CourseRequest
from utils.file_storage import remove_stored_file

logger = logging.getLogger(__name__)

JOIN_CODE_ATTEMPTS = 5


class JoinCodeGenerationError(SchoolHubError):
    """Raised when no unused join code was found."""

    pass


class CourseManager:
    """Manages courses owned by teachers and student enrollment."""

    def __init__(self, db: Session):
        self.db = db

    def _generate_join_code(self) -> str:
        for _ in range(JOIN_CODE_ATTEMPTS):
            code = secrets.token_hex(3).upper()
            exists = (
                self.db.query(CourseModel.id)
                .filter(CourseModel.join_code == code)
                .first()
            )
            if not exists:
                return code
        raise JoinCodeGenerationError("Could not generate a unique join code")

    def create_course(self, req: CourseRequest, teacher: UserModel) -> CourseModel:
        """Create a course owned by ``teacher``.

        The instructor defaults to the teacher's name, then e-mail.
        """
        instructor = req.instructor or teacher.name or teacher.email
        course = CourseModel(
            teacher_id=teacher.id,
            academic_year=req.academic_year,
            semester=req.semester,
            subject_group=req.subject_group,
            subject_area=req.subject_area,
            career_track=req.career_track,
            subject=req.subject,
            grade=req.grade,
            instructor=instructor,
            classroom=req.classroom,
            description=req.description,
            join_code=self._generate_join_code(),
        )
        self.db.add(course)
        self.db.commit()
        self.db.refresh(course)
        logger.info("Created course %s (%s) for %s", course.id, course.subject, teacher.id)
        return course

    def get_course(self, course_id: str) -> CourseModel:
        course = self.db.query(CourseModel).filter(CourseModel.id == course_id).first()
        if course is None:
            raise NotFoundError("Course", course_id)
        return course

    def get_owned_course(self, course_id: str, teacher_id: str) -> CourseModel:
        """Fetch a course scoped to its owner.

        Raises:
            NotFoundError: If the course is missing or owned by someone else.
        """
        course = (
            self.db.query(CourseModel)
            .filter(CourseModel.id == course_id, CourseModel.teacher_id == teacher_id)
            .first()
        )
        if course is None:
            raise NotFoundError("Course", course_id)
        return course

    def list_courses_for_teacher(self, teacher_id: str) -> List[CourseModel]:
        return (
            self.db.query(CourseModel)
            .filter(CourseModel.teacher_id == teacher_id)
            .order_by(CourseModel.created_at.desc())
            .all()
        )

    def list_courses_for_student(self, student_id: str) -> List[CourseModel]:
        return (
            self.db.query(CourseModel)
            .join(CourseEnrollmentModel, CourseEnrollmentModel.course_id == CourseModel.id)
            .filter(CourseEnrollmentModel.student_id == student_id)
            .order_by(CourseEnrollmentModel.joined_at.desc())
            .all()
        )

    def update_course(
        self, course_id: str, teacher_id: str, req: CourseRequest
    ) -> CourseModel:
        course = self.get_owned_course(course_id, teacher_id)
        for key, value in req.model_dump(exclude={"instructor"}).items():
            setattr(course, key, value)
        if req.instructor:
            course.instructor = req.instructor
        self.db.commit()
        self.db.refresh(course)
        return course

    def delete_course(self, course_id: str, teacher_id: str) -> None:
        """Delete a course with its class groups, attendance, assignments
        and evaluation questions.

        Attachment files are removed after the rows are gone.
        """
        course = self.get_owned_course(course_id, teacher_id)
        stored_files = [
            attachment.file_path
            for assignment in course.assignments
            for attachment in assignment.attachments
        ]
        self.db.delete(course)
        self.db.commit()
        for path in stored_files:
            remove_stored_file(path)
        logger.info("Deleted course: %s", course_id)

    def join_by_code(self, join_code: str, student_id: str) -> CourseModel:
        """Enroll a student with a course join code.

        Raises:
            NotFoundError: If no course uses the code.
            DuplicateError: If the student is already enrolled.
        """
        course = (
            self.db.query(CourseModel)
            .filter(CourseModel.join_code == join_code.strip().upper())
            .first()
        )
        if course is None:
            raise NotFoundError("Course", join_code)

        existing = (
            self.db.query(CourseEnrollmentModel)
            .filter(
                CourseEnrollmentModel.course_id == course.id,
                CourseEnrollmentModel.student_id == student_id,
            )
            .first()
        )
        if existing:
            raise DuplicateError("Already enrolled in this course")

        self.db.add(CourseEnrollmentModel(course_id=course.id, student_id=student_id))
        self.db.commit()
        logger.info("Student %s joined course %s", student_id, course.id)
        return course
