"""patients, invoices and invoice transactions

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    transaction_status = sa.Enum("pending", "paid", name="transaction_status")
    payment_method = sa.Enum(
        "none", "cash", "card", "bank_transfer", "other", name="payment_method"
    )

    op.create_table(
        "patients",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("fullname", sa.String(length=200), nullable=False),
        sa.Column("mobile", sa.String(length=50), nullable=False),
        sa.Column("treatment", sa.Text(), nullable=False, server_default=""),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
    )
    op.create_index("ix_patients_fullname", "patients", ["fullname"])
    op.create_index("ix_patients_mobile", "patients", ["mobile"])

    op.create_table(
        "invoices",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("patient_id", sa.Integer(), nullable=False),
        sa.Column("invoice_number", sa.String(length=32), nullable=False, server_default=""),
        sa.Column("description", sa.String(length=255), nullable=False),
        sa.Column("total", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.ForeignKeyConstraint(["patient_id"], ["patients.id"]),
    )
    op.create_index("ix_invoices_patient_id", "invoices", ["patient_id"], unique=True)
    op.create_index("ix_invoices_invoice_number", "invoices", ["invoice_number"])

    op.create_table(
        "invoice_transactions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("invoice_id", sa.Integer(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", transaction_status, nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=False),
        sa.Column("payment_method", payment_method, nullable=False),
        sa.ForeignKeyConstraint(["invoice_id"], ["invoices.id"]),
    )
    op.create_index(
        "ix_invoice_transactions_invoice_id", "invoice_transactions", ["invoice_id"]
    )


def downgrade() -> None:
    op.drop_index("ix_invoice_transactions_invoice_id", table_name="invoice_transactions")
    op.drop_table("invoice_transactions")
    op.drop_index("ix_invoices_invoice_number", table_name="invoices")
    op.drop_index("ix_invoices_patient_id", table_name="invoices")
    op.drop_table("invoices")
    op.drop_index("ix_patients_mobile", table_name="patients")
    op.drop_index("ix_patients_fullname", table_name="patients")
    op.drop_table("patients")
    sa.Enum(name="payment_method").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="transaction_status").drop(op.get_bind(), checkfirst=True)
