"""SQLAlchemy enum definitions for the database schema."""

import enum

from sqlalchemy import Enum as SQLEnum


# =====================================================
# Python Enum Classes
# =====================================================


class UserRole(str, enum.Enum):
    admin = "admin"
    member = "member"


class ChallengeStatus(str, enum.Enum):
    draft = "draft"
    scheduled = "scheduled"
    active = "active"
    archived = "archived"


# =====================================================
# SQLAlchemy Enum Types
# These reference existing PostgreSQL types (create_type=False)
# =====================================================

challenge_status_enum = SQLEnum(
    ChallengeStatus, name="challenge_status", create_type=False, native_enum=True
)
