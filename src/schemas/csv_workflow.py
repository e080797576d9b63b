"""Result bodies of the CSV bulk workflows."""

from typing import List, Optional

from .base import CamelModel


class ImportUsersResult(CamelModel):
    message: str
    created: int
    skipped: int
    errors: Optional[List[str]] = None


class BulkUpdateResult(CamelModel):
    message: str
    updated: int
    not_found: int
    errors: Optional[List[str]] = None


class ProfileImportResult(CamelModel):
    message: str
    processed: int
    matched_rows: int
    missing_email: int
    missing_user: int
    created: int
    updated: int
