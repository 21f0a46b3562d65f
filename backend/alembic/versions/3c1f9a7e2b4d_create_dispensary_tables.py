"""create dispensary tables

Revision ID: 3c1f9a7e2b4d
Revises:
Create Date: 2026-10-19 09:12:41.518330

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3c1f9a7e2b4d'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create medications, diagnosis, prescription_item, medication_audit and medication_compliance."""
    op.create_table(
        'medications',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('stock_quantity', sa.Integer(), nullable=False),
        sa.Column('unit_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_by', sa.String(), nullable=True),
        sa.Column('updated_by', sa.String(), nullable=True),
        sa.CheckConstraint('stock_quantity >= 0', name='ck_medications_stock_non_negative'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )
    op.create_index(op.f('ix_medications_id'), 'medications', ['id'], unique=False)

    op.create_table(
        'diagnosis',
        sa.Column('id', sa.String(length=50), nullable=False),
        sa.Column('doctor_id', sa.String(length=50), nullable=False),
        sa.Column('patient_id', sa.String(length=50), nullable=False),
        sa.Column('diagnosis', sa.Text(), nullable=True),
        sa.Column('date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('next_checkup', sa.Date(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_diagnosis_id'), 'diagnosis', ['id'], unique=False)
    op.create_index(op.f('ix_diagnosis_doctor_id'), 'diagnosis', ['doctor_id'], unique=False)
    op.create_index(op.f('ix_diagnosis_patient_id'), 'diagnosis', ['patient_id'], unique=False)

    op.create_table(
        'prescription_item',
        sa.Column('id', sa.String(length=50), nullable=False),
        sa.Column('diagnosis_id', sa.String(length=50), nullable=False),
        sa.Column('medication_id', sa.Integer(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('guide', sa.Text(), nullable=True),
        sa.Column('duration', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('quantity > 0', name='ck_prescription_item_quantity_positive'),
        sa.ForeignKeyConstraint(['diagnosis_id'], ['diagnosis.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['medication_id'], ['medications.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_prescription_item_id'), 'prescription_item', ['id'], unique=False)
    op.create_index(op.f('ix_prescription_item_diagnosis_id'), 'prescription_item', ['diagnosis_id'], unique=False)
    op.create_index(op.f('ix_prescription_item_medication_id'), 'prescription_item', ['medication_id'], unique=False)

    op.create_table(
        'medication_audit',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('medication_id', sa.Integer(), nullable=False),
        sa.Column('old_quantity', sa.Integer(), nullable=False),
        sa.Column('new_quantity', sa.Integer(), nullable=False),
        sa.Column('change_type', sa.String(), nullable=False),
        sa.Column('changed_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('staff_id', sa.String(), nullable=False),
        sa.ForeignKeyConstraint(['medication_id'], ['medications.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_medication_audit_id'), 'medication_audit', ['id'], unique=False)
    op.create_index(op.f('ix_medication_audit_medication_id'), 'medication_audit', ['medication_id'], unique=False)

    op.create_table(
        'medication_compliance',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('prescription_item_id', sa.String(length=50), nullable=False),
        sa.Column('taken_date', sa.Date(), nullable=False),
        sa.Column('taken_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['prescription_item_id'], ['prescription_item.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_medication_compliance_id'), 'medication_compliance', ['id'], unique=False)
    op.create_index(
        op.f('ix_medication_compliance_prescription_item_id'),
        'medication_compliance', ['prescription_item_id'], unique=False,
    )


def downgrade() -> None:
    """Drop the dispensary tables in reverse dependency order."""
    op.drop_table('medication_compliance')
    op.drop_table('medication_audit')
    op.drop_table('prescription_item')
    op.drop_table('diagnosis')
    op.drop_table('medications')
