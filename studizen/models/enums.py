"""
Database Enums

Python Enums that map to PostgreSQL ENUM types.
"""

import enum


class UserRole(str, enum.Enum):
    """User role enumeration."""
    STUDENT = "STUDENT"
    ADMIN = "ADMIN"


class OTPPurpose(str, enum.Enum):
    """What an issued code authorizes."""
    EMAIL_VERIFICATION = "EMAIL_VERIFICATION"
    PASSWORD_RESET = "PASSWORD_RESET"


class Language(str, enum.Enum):
    """Supported display languages."""
    EN = "en"
    ID = "id"
    ZH = "zh"


class Theme(str, enum.Enum):
    """UI theme preference."""
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


class Weekday(str, enum.Enum):
    """Day of the week for class schedules, in calendar order."""
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"

    @property
    def order(self) -> int:
        return list(Weekday).index(self)


class TaskStatus(str, enum.Enum):
    """Task progress status."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TaskPriority(str, enum.Enum):
    """Task priority."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class PlanType(str, enum.Enum):
    """Premium subscription plan."""
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


def enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    """Persist enum values (not member names) for lower-case database enums."""
    return [member.value for member in enum_cls]
