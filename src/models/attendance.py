from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship

from .base import Base, new_id, utcnow


class AttendanceModel(Base):
    __tablename__ = "attendances"
    __table_args__ = (
        UniqueConstraint(
            "class_group_id", "student_id", "date", name="uq_attendance_group_student_date"
        ),
    )

    id = Column(String, primary_key=True, index=True, default=new_id)
    class_group_id = Column(
        String, ForeignKey("class_groups.id", ondelete="CASCADE"), index=True
    )
    student_id = Column(String, index=True, nullable=False)
    date = Column(DateTime, index=True, nullable=False)
    # 'present', 'late', 'sick_leave', 'approved_absence' or 'excused'
    status = Column(String, nullable=False)
    teacher_id = Column(String, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    class_group = relationship("ClassGroupModel", back_populates="attendances")
