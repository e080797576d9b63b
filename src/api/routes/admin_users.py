"""School admin routes for managing user accounts, including CSV workflows."""

import logging
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status
from fastapi.responses import JSONResponse

from api.routes.auth import require_roles
from core.dependencies import CsvWorkflowManagerDep, UserManagerDep
from core.exceptions import DuplicateError, NotFoundError, ValidationError
from models.user import UserModel
from schemas.csv_workflow import BulkUpdateResult, ImportUsersResult, ProfileImportResult
from schemas.user import AdminUserUpdateRequest, User, UserListItem
from utils.converters import model_to_user
from utils.csv_workflow import NoValidRowsError, parse_csv

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/users", tags=["Admin Users"])

EXPORT_FILENAME = "users_update_template.csv"


def _read_rows(file: UploadFile) -> List[dict]:
    try:
        return parse_csv(file.file.read())
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


def _scope_school(current_user: UserModel):
    """Admins see their own school, superadmins everything."""
    return None if current_user.role == "superadmin" else current_user.school


@router.get("", response_model=List[UserListItem], summary="List users")
def list_users(
    user_manager: UserManagerDep,
    current_user: UserModel = Depends(require_roles("admin", "superadmin")),
) -> List[UserListItem]:
    results = []
    for user, profile in user_manager.list_users_with_profiles(_scope_school(current_user)):
        item = UserListItem(**model_to_user(user).model_dump())
        if profile is not None:
            item.student_id = profile.student_id
            item.grade = profile.grade
            item.class_label = profile.class_label
        results.append(item)
    return results


@router.patch("/{user_id}", response_model=User, summary="Update a user")
def update_user(
    user_id: str,
    req: AdminUserUpdateRequest,
    user_manager: UserManagerDep,
    current_user: UserModel = Depends(require_roles("admin")),
) -> User:
    """Edit account fields and the student profile columns.

    Raises:
        HTTPException: 404 unknown user, 400 if the e-mail is taken.
    """
    data = req.model_dump(exclude_unset=True)
    student_fields = {}
    if "student_id" in data:
        student_fields["student_id"] = data["student_id"]
    if "grade" in data:
        student_fields["grade"] = data["grade"]
    if "class_name" in data:
        student_fields["class_label"] = data["class_name"]

    try:
        user = user_manager.update_user(
            user_id,
            email=data.get("email"),
            name=data.get("name"),
            school=data.get("school"),
            role=data.get("role"),
            student_fields=student_fields,
        )
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    except DuplicateError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return model_to_user(user)


@router.post("/import", response_model=ImportUsersResult, summary="Import users from CSV")
def import_users(
    csv_workflow: CsvWorkflowManagerDep,
    file: UploadFile = File(...),
    current_user: UserModel = Depends(require_roles("admin")),
):
    rows = _read_rows(file)
    try:
        result = csv_workflow.import_users(rows)
    except NoValidRowsError as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": str(e), "errors": e.errors},
        )
    logger.info("User %s imported %d users", current_user.id, result.created)
    return ImportUsersResult(
        message="User import complete.",
        created=result.created,
        skipped=result.skipped,
        errors=result.errors or None,
    )


@router.post(
    "/bulk-update",
    response_model=BulkUpdateResult,
    summary="Update users from the CSV template",
)
def bulk_update_users(
    csv_workflow: CsvWorkflowManagerDep,
    file: UploadFile = File(...),
    current_user: UserModel = Depends(require_roles("admin")),
) -> BulkUpdateResult:
    rows = _read_rows(file)
    outcome = csv_workflow.bulk_update_users(rows)
    return BulkUpdateResult(
        message="User update complete.",
        updated=outcome.updated,
        not_found=outcome.not_found,
        errors=outcome.errors or None,
    )


@router.get("/export-template", summary="Download the user update template")
def export_template(
    csv_workflow: CsvWorkflowManagerDep,
    current_user: UserModel = Depends(require_roles("admin", "superadmin")),
) -> Response:
    content = "\ufeff" + csv_workflow.export_template(_scope_school(current_user))
    return Response(
        content=content.encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


def _profile_result(stats, label: str) -> ProfileImportResult:
    return ProfileImportResult(
        message=f"{label} profile import complete.",
        processed=stats.processed,
        matched_rows=stats.matched_rows,
        missing_email=stats.missing_email,
        missing_user=stats.missing_user,
        created=stats.created,
        updated=stats.updated,
    )


@router.post(
    "/import-student-profiles",
    response_model=ProfileImportResult,
    summary="Import student profiles from a roster CSV",
)
def import_student_profiles(
    csv_workflow: CsvWorkflowManagerDep,
    file: UploadFile = File(...),
    current_user: UserModel = Depends(require_roles("admin")),
) -> ProfileImportResult:
    stats = csv_workflow.import_student_profiles(_read_rows(file))
    return _profile_result(stats, "Student")


@router.post(
    "/import-teacher-profiles",
    response_model=ProfileImportResult,
    summary="Import teacher profiles from a roster CSV",
)
def import_teacher_profiles(
    csv_workflow: CsvWorkflowManagerDep,
    file: UploadFile = File(...),
    current_user: UserModel = Depends(require_roles("admin")),
) -> ProfileImportResult:
    stats = csv_workflow.import_teacher_profiles(_read_rows(file))
    return _profile_result(stats, "Teacher")
