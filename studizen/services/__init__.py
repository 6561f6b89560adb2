"""
Studizen Backend - Services Module

Business logic layer.
"""

from studizen.services import account_service
from studizen.services import email_service
from studizen.services import otp_service
from studizen.services import premium_service
from studizen.services import schedule_service
from studizen.services import task_service
from studizen.services import admin_service
from studizen.services import verification_service

__all__ = [
    "account_service",
    "email_service",
    "otp_service",
    "premium_service",
    "schedule_service",
    "task_service",
    "admin_service",
    "verification_service",
]
