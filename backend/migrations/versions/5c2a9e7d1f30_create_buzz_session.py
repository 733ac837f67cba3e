"""create buzz_session table

Revision ID: 5c2a9e7d1f30
Revises:
Create Date: 2026-10-19 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2a9e7d1f30'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    if 'buzz_session' in insp.get_table_names():
        return
    op.create_table(
        'buzz_session',
        sa.Column('session_id', sa.String(length=32), nullable=False),
        sa.Column('payload', sa.Text(), nullable=False),
        sa.Column('expires_at', sa.Float(), nullable=False),
        sa.Column('updated_at', sa.Float(), nullable=False),
        sa.PrimaryKeyConstraint('session_id'),
    )
    with op.batch_alter_table('buzz_session') as batch_op:
        batch_op.create_index(batch_op.f('ix_buzz_session_expires_at'), ['expires_at'], unique=False)


def downgrade():
    with op.batch_alter_table('buzz_session') as batch_op:
        batch_op.drop_index(batch_op.f('ix_buzz_session_expires_at'))
    op.drop_table('buzz_session')
