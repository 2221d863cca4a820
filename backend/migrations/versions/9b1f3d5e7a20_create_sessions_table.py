"""create sessions table

Revision ID: 9b1f3d5e7a20
Revises: 4c2a9e71d0b3
Create Date: 2025-10-02 09:05:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '9b1f3d5e7a20'
down_revision = '4c2a9e71d0b3'
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)

    # Flask-Session may already have created it when the app started
    if 'sessions' not in set(insp.get_table_names()):
        op.create_table(
            'sessions',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('session_id', sa.String(length=255), nullable=True),
            sa.Column('data', sa.LargeBinary(), nullable=True),
            sa.Column('expiry', sa.DateTime(), nullable=True),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('session_id'),
        )


def downgrade():
    op.drop_table('sessions')
