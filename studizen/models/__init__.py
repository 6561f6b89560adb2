"""
Studizen Backend - Models Module

This module exports all SQLAlchemy models for the application.
Import Base for Alembic migrations.
"""

from studizen.core.database import Base

# Enums
from studizen.models.enums import (
    UserRole,
    OTPPurpose,
    Language,
    Theme,
    Weekday,
    TaskStatus,
    TaskPriority,
    PlanType,
)

# Models
from studizen.models.profile import Profile
from studizen.models.otp_verification import OTPVerification
from studizen.models.schedule import ClassSchedule
from studizen.models.task import Task, Subtask
from studizen.models.premium_subscription import PremiumSubscription

__all__ = [
    # Base
    "Base",
    # Enums
    "UserRole",
    "OTPPurpose",
    "Language",
    "Theme",
    "Weekday",
    "TaskStatus",
    "TaskPriority",
    "PlanType",
    # Models
    "Profile",
    "OTPVerification",
    "ClassSchedule",
    "Task",
    "Subtask",
    "PremiumSubscription",
]
