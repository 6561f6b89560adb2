"""otp purpose

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-18 00:00:01
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "0002"
down_revision: Union[str, None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


otp_purpose = sa.Enum("EMAIL_VERIFICATION", "PASSWORD_RESET", name="otp_purpose")


def upgrade() -> None:
    otp_purpose.create(op.get_bind(), checkfirst=True)
    op.add_column(
        "otp_verifications",
        sa.Column("purpose", otp_purpose, nullable=False, server_default="EMAIL_VERIFICATION"),
    )
    op.drop_index("ix_otp_verifications_lookup", table_name="otp_verifications")
    op.create_index(
        "ix_otp_verifications_lookup",
        "otp_verifications",
        ["email", "purpose", "otp_code", "is_used"],
    )


def downgrade() -> None:
    op.drop_index("ix_otp_verifications_lookup", table_name="otp_verifications")
    op.create_index(
        "ix_otp_verifications_lookup",
        "otp_verifications",
        ["email", "otp_code", "is_used"],
    )
    op.drop_column("otp_verifications", "purpose")
    otp_purpose.drop(op.get_bind(), checkfirst=True)
