# migrations/versions/0001_initial.py — schéma initial (user, folder, video)
from alembic import op
import sqlalchemy as sa

revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'user',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(length=80), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=10), nullable=False),
        sa.Column('session_version', sa.Integer(), nullable=False, server_default='1'),
    )
    op.create_table(
        'folder',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=160), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_table(
        'video',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('filename', sa.String(length=600), nullable=False),
        sa.Column('folder_id', sa.Integer(), sa.ForeignKey('folder.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_video_folder_id', 'video', ['folder_id'])


def downgrade():
    op.drop_index('ix_video_folder_id', table_name='video')
    op.drop_table('video')
    op.drop_table('folder')
    op.drop_table('user')
