"""Configuration module for the SchoolHub API.

This module provides centralized configuration management, including directory
paths, API server settings, authentication and account workflow defaults.
All configuration values can be overridden via environment variables.
"""

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Directory Configuration ---

# Root directory of the project
ROOT_DIR = Path(__file__).parent.parent.resolve()

# Data directory (SQLite database lives here by default)
DATA_DIR_NAME = "data"
DATA_DIR = Path(os.getenv("DATA_DIR", str(ROOT_DIR / DATA_DIR_NAME)))

# Uploaded assignment files are stored under UPLOADS_DIR/assignments
UPLOADS_DIR = Path(os.getenv("UPLOADS_DIR", str(ROOT_DIR / "uploads")))
ASSIGNMENT_UPLOAD_DIR = UPLOADS_DIR / "assignments"

# --- Database Configuration ---

DATABASE_URL: str = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR}/schoolhub.db")

# --- API Server Configuration ---

API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "8000"))

# Public base URL used when building verification and reset links
APP_BASE_URL: str = os.getenv("APP_BASE_URL", "http://localhost:3000")

# CORS allowed origins (comma-separated list)
_CORS_ALLOWED_ORIGINS_STR: str = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:3000,http://127.0.0.1:3000",
)
CORS_ALLOWED_ORIGINS: List[str] = [
    origin.strip()
    for origin in _CORS_ALLOWED_ORIGINS_STR.split(",")
    if origin.strip()
]

# --- Logging Configuration ---

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# --- Authentication Configuration ---

JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "your-secret-key-change-in-production")
JWT_ALGORITHM = "HS256"

# Session lifetime (30 days)
SESSION_MAX_AGE_SECONDS: int = int(
    os.getenv("SESSION_MAX_AGE_SECONDS", str(30 * 24 * 60 * 60))
)
SESSION_COOKIE_NAME: str = os.getenv("SESSION_COOKIE_NAME", "session_token")

# Require e-mail verification before login
ENABLE_EMAIL_VERIFICATION: bool = (
    os.getenv("ENABLE_EMAIL_VERIFICATION", "false").lower() == "true"
)

EMAIL_VERIFICATION_TOKEN_HOURS: int = 24
PASSWORD_RESET_TOKEN_HOURS: int = 1

# --- Rate Limit Configuration ---

RATE_LIMIT_WINDOW_SECONDS: int = 15 * 60
REGISTER_RATE_LIMIT: int = int(os.getenv("REGISTER_RATE_LIMIT", "5"))
PASSWORD_RESET_RATE_LIMIT: int = int(os.getenv("PASSWORD_RESET_RATE_LIMIT", "3"))

# --- CSV Import Configuration ---

# Password assigned to imported accounts whose row has no password
DEFAULT_IMPORT_PASSWORD: str = os.getenv("DEFAULT_IMPORT_PASSWORD", "Abcd1234!@")
CSV_IMPORT_BATCH_SIZE: int = 100

# --- Assignment Upload Configuration ---

MAX_UPLOAD_SIZE_BYTES: int = 50 * 1024 * 1024
ALLOWED_UPLOAD_EXTENSIONS: List[str] = [
    ".ppt", ".pptx", ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".zip",
    ".hwp", ".hwpx", ".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp", ".svg",
]

# --- Calendar Configuration ---

# Category assigned to events created without one
DEFAULT_EVENT_TYPE: str = "기타"

# --- Chat Configuration ---

CHAT_URL: str = os.getenv("GOOGLE_CHAT_URL", "https://chat.google.com")
