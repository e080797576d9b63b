"""Class group and attendance utilities."""

import logging
from datetime import datetime
from typing import Dict, List

from sqlalchemy.orm import Session

from core.exceptions import NotFoundError
from models.attendance import AttendanceModel
from models.class_group import ClassGroupModel
from schemas.course import AttendanceEntry, ClassGroupRequest
from utils.converters import dump_json, to_naive_utc

logger = logging.getLogger(__name__)


class ClassGroupManager:
    """Manages class groups of a course and their attendance records."""

    def __init__(self, db: Session):
        self.db = db

    def list_class_groups(self, course_id: str) -> List[ClassGroupModel]:
        return (
            self.db.query(ClassGroupModel)
            .filter(ClassGroupModel.course_id == course_id)
            .order_by(ClassGroupModel.created_at.asc())
            .all()
        )

    def get_owned_class_group(
        self, class_group_id: str, course_id: str, teacher_id: str
    ) -> ClassGroupModel:
        """Fetch a class group scoped to its course and owning teacher.

        Raises:
            NotFoundError: If no such class group belongs to the teacher.
        """
        model = (
            self.db.query(ClassGroupModel)
            .filter(
                ClassGroupModel.id == class_group_id,
                ClassGroupModel.course_id == course_id,
                ClassGroupModel.teacher_id == teacher_id,
            )
            .first()
        )
        if model is None:
            raise NotFoundError("Class group", class_group_id)
        return model

    def create_class_group(
        self, course_id: str, teacher_id: str, req: ClassGroupRequest
    ) -> ClassGroupModel:
        model = ClassGroupModel(
            course_id=course_id,
            teacher_id=teacher_id,
            name=req.name,
            period=req.period,
            schedules=dump_json([s.model_dump(by_alias=True) for s in req.schedules]),
            student_ids=list(dict.fromkeys(req.student_ids)),
        )
        self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        logger.info("Created class group %s in course %s", model.id, course_id)
        return model

    def update_class_group(
        self, class_group_id: str, course_id: str, teacher_id: str, req: ClassGroupRequest
    ) -> ClassGroupModel:
        model = self.get_owned_class_group(class_group_id, course_id, teacher_id)
        model.name = req.name
        model.period = req.period
        model.schedules = dump_json([s.model_dump(by_alias=True) for s in req.schedules])
        model.student_ids = list(dict.fromkeys(req.student_ids))
        self.db.commit()
        self.db.refresh(model)
        return model

    def delete_class_group(self, class_group_id: str, course_id: str, teacher_id: str) -> None:
        model = self.get_owned_class_group(class_group_id, course_id, teacher_id)
        self.db.delete(model)
        self.db.commit()
        logger.info("Deleted class group: %s", class_group_id)

    def save_attendance(
        self,
        class_group: ClassGroupModel,
        date: datetime,
        entries: List[AttendanceEntry],
        teacher_id: str,
    ) -> int:
        """Upsert one attendance row per student for ``date``.

        A student listed twice keeps the last status given.

        Returns:
            Number of attendance rows written.
        """
        date = to_naive_utc(date)
        latest: Dict[str, str] = {}
        for entry in entries:
            latest[entry.student_id] = entry.status

        existing = {
            row.student_id: row
            for row in self.db.query(AttendanceModel).filter(
                AttendanceModel.class_group_id == class_group.id,
                AttendanceModel.date == date,
                AttendanceModel.student_id.in_(list(latest)),
            )
        }
        try:
            for student_id, status in latest.items():
                row = existing.get(student_id)
                if row is None:
                    self.db.add(
                        AttendanceModel(
                            class_group_id=class_group.id,
                            student_id=student_id,
                            date=date,
                            status=status,
                            teacher_id=teacher_id,
                        )
                    )
                else:
                    row.status = status
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return len(latest)

    def list_attendance(self, class_group_id: str, date: datetime) -> List[AttendanceModel]:
        return (
            self.db.query(AttendanceModel)
            .filter(
                AttendanceModel.class_group_id == class_group_id,
                AttendanceModel.date == to_naive_utc(date),
            )
            .order_by(AttendanceModel.student_id)
            .all()
        )
