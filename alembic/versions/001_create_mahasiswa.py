"""
Create the Mahasiswa table.

Revision ID: 001
Revises: None
"""

from alembic import op
import sqlalchemy as sa

revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "Mahasiswa",
        sa.Column("Nim", sa.String(32), primary_key=True),
        sa.Column("Name", sa.String(255), nullable=False),
        sa.Column("Gender", sa.String(1), nullable=False, server_default="L"),
        sa.Column("BirthDate", sa.Date, nullable=False),
        sa.Column("Address", sa.Text, nullable=False, server_default=""),
        sa.Column("Contact", sa.String(64), nullable=False, server_default=""),
        sa.Column("Status", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.CheckConstraint("\"Gender\" IN ('L', 'P')", name="ck_mahasiswa_gender"),
    )
    op.create_index("ix_Mahasiswa_Nim", "Mahasiswa", ["Nim"])
    op.create_index("ix_Mahasiswa_Name", "Mahasiswa", ["Name"])


def downgrade() -> None:
    op.drop_index("ix_Mahasiswa_Name", table_name="Mahasiswa")
    op.drop_index("ix_Mahasiswa_Nim", table_name="Mahasiswa")
    op.drop_table("Mahasiswa")
