"""Dependency injection module for FastAPI.

This module provides dependency injection functions for FastAPI routes. Each
manager receives the request-scoped database session.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from core.database import get_db
from utils import announcement_manager
from utils import assignment_manager
from utils import calendar_manager
from utils import class_group_manager
from utils import course_manager
from utils import csv_workflow
from utils import evaluation_manager
from utils import school_manager
from utils import student_profile_manager
from utils import subject_manager
from utils import user_manager


def get_user_manager(db: Session = Depends(get_db)) -> user_manager.UserManager:
    """Get UserManager instance with request-scoped DB session.

    Args:
        db: Database session.

    Returns:
        UserManager instance.
    """
    return user_manager.UserManager(db)


def get_school_manager(db: Session = Depends(get_db)) -> school_manager.SchoolManager:
    """Get SchoolManager instance with request-scoped DB session.

    Args:
        db: Database session.

    Returns:
        SchoolManager instance.
    """
    return school_manager.SchoolManager(db)


def get_course_manager(db: Session = Depends(get_db)) -> course_manager.CourseManager:
    """Get CourseManager instance with request-scoped DB session."""
    return course_manager.CourseManager(db)


def get_class_group_manager(
    db: Session = Depends(get_db),
) -> class_group_manager.ClassGroupManager:
    """Get ClassGroupManager instance with request-scoped DB session."""
    return class_group_manager.ClassGroupManager(db)


def get_calendar_manager(db: Session = Depends(get_db)) -> calendar_manager.CalendarManager:
    """Get CalendarManager instance with request-scoped DB session."""
    return calendar_manager.CalendarManager(db)


def get_announcement_manager(
    db: Session = Depends(get_db),
) -> announcement_manager.AnnouncementManager:
    """Get AnnouncementManager instance with request-scoped DB session."""
    return announcement_manager.AnnouncementManager(db)


def get_assignment_manager(
    db: Session = Depends(get_db),
) -> assignment_manager.AssignmentManager:
    """Get AssignmentManager instance with request-scoped DB session."""
    return assignment_manager.AssignmentManager(db)


def get_evaluation_manager(
    db: Session = Depends(get_db),
) -> evaluation_manager.EvaluationManager:
    """Get EvaluationManager instance with request-scoped DB session."""
    return evaluation_manager.EvaluationManager(db)


def get_student_profile_manager(
    db: Session = Depends(get_db),
) -> student_profile_manager.StudentProfileManager:
    """Get StudentProfileManager instance with request-scoped DB session."""
    return student_profile_manager.StudentProfileManager(db)


def get_subject_manager(db: Session = Depends(get_db)) -> subject_manager.SubjectManager:
    """Get SubjectManager instance with request-scoped DB session."""
    return subject_manager.SubjectManager(db)


def get_csv_workflow_manager(
    db: Session = Depends(get_db),
) -> csv_workflow.CsvWorkflowManager:
    """Get CsvWorkflowManager instance with request-scoped DB session."""
    return csv_workflow.CsvWorkflowManager(db)


# Type aliases for dependency injection
UserManagerDep = Annotated[
    user_manager.UserManager, Depends(get_user_manager)
]
SchoolManagerDep = Annotated[
    school_manager.SchoolManager, Depends(get_school_manager)
]
CourseManagerDep = Annotated[
    course_manager.CourseManager, Depends(get_course_manager)
]
ClassGroupManagerDep = Annotated[
    class_group_manager.ClassGroupManager, Depends(get_class_group_manager)
]
CalendarManagerDep = Annotated[
    calendar_manager.CalendarManager, Depends(get_calendar_manager)
]
AnnouncementManagerDep = Annotated[
    announcement_manager.AnnouncementManager, Depends(get_announcement_manager)
]
AssignmentManagerDep = Annotated[
    assignment_manager.AssignmentManager, Depends(get_assignment_manager)
]
EvaluationManagerDep = Annotated[
    evaluation_manager.EvaluationManager, Depends(get_evaluation_manager)
]
StudentProfileManagerDep = Annotated[
    student_profile_manager.StudentProfileManager,
    Depends(get_student_profile_manager),
]
SubjectManagerDep = Annotated[
    subject_manager.SubjectManager, Depends(get_subject_manager)
]
CsvWorkflowManagerDep = Annotated[
    csv_workflow.CsvWorkflowManager, Depends(get_csv_workflow_manager)
]
