"""create intern table

Revision ID: 0001
Revises:
Create Date: 2025-07-16 10:00:00

"""
from alembic import op
import sqlalchemy as sa
import sqlmodel

# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'intern',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('college', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('field', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('certificate_key', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_intern_email'), 'intern', ['email'], unique=True)
    op.create_index(op.f('ix_intern_field'), 'intern', ['field'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_intern_field'), table_name='intern')
    op.drop_index(op.f('ix_intern_email'), table_name='intern')
    op.drop_table('intern')
