"""Declarative base and shared column helpers."""

import secrets
from datetime import datetime

import pytz
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def new_id() -> str:
    return secrets.token_hex(12)


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, the form stored in the database."""
    return datetime.now(pytz.utc).replace(tzinfo=None)
