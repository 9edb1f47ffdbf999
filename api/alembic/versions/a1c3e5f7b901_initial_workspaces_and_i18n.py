"""initial workspaces and i18n tables

Revision ID: a1c3e5f7b901
Revises:
Create Date: 2026-10-19 09:12:40.118204

"""
from alembic import op  # noqa: F401
import sqlalchemy as sa  # noqa: F401
import sqlmodel # noqa: F401


# revision identifiers, used by Alembic.
revision = 'a1c3e5f7b901'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        *_timestamps(),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('api_token', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=False)
    op.create_index(op.f('ix_users_api_token'), 'users', ['api_token'], unique=True)

    op.create_table(
        'workspaces',
        *_timestamps(),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_workspaces_owner_id'), 'workspaces', ['owner_id'], unique=False)

    op.create_table(
        'workspace_members',
        *_timestamps(),
        sa.Column('workspace_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('role', sa.String(), nullable=False),
        sa.ForeignKeyConstraint(['workspace_id'], ['workspaces.id']),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('workspace_id', 'user_id'),
    )

    op.create_table(
        'i18n_languages',
        *_timestamps(),
        sa.Column('workspace_id', sa.Uuid(), nullable=False),
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('code', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('is_rtl', sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(['workspace_id'], ['workspaces.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('workspace_id', 'code', name='uq_i18n_language_code'),
    )
    op.create_index(op.f('ix_i18n_languages_workspace_id'), 'i18n_languages', ['workspace_id'], unique=False)
    op.create_index(op.f('ix_i18n_languages_code'), 'i18n_languages', ['code'], unique=False)

    op.create_table(
        'i18n_keys',
        *_timestamps(),
        sa.Column('workspace_id', sa.Uuid(), nullable=False),
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('key', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('module', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('type', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('screen', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('context', sa.TEXT(), nullable=True),
        sa.Column('screenshot_ref', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('max_chars', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['workspace_id'], ['workspaces.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('workspace_id', 'key', name='uq_i18n_key_key'),
    )
    op.create_index(op.f('ix_i18n_keys_workspace_id'), 'i18n_keys', ['workspace_id'], unique=False)
    op.create_index(op.f('ix_i18n_keys_key'), 'i18n_keys', ['key'], unique=False)
    op.create_index(op.f('ix_i18n_keys_module'), 'i18n_keys', ['module'], unique=False)

    op.create_table(
        'i18n_translations',
        *_timestamps(),
        sa.Column('workspace_id', sa.Uuid(), nullable=False),
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('key_id', sa.Integer(), nullable=False),
        sa.Column('language_id', sa.Integer(), nullable=False),
        sa.Column('value', sa.TEXT(), nullable=True),
        sa.Column('status', sa.String(), nullable=False),
        sa.ForeignKeyConstraint(['workspace_id'], ['workspaces.id']),
        sa.ForeignKeyConstraint(['key_id'], ['i18n_keys.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['language_id'], ['i18n_languages.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('key_id', 'language_id', name='uq_i18n_translation_key_lang'),
        sa.CheckConstraint("status IN ('draft', 'review', 'approved')", name='ck_i18n_translation_status'),
    )
    op.create_index(op.f('ix_i18n_translations_workspace_id'), 'i18n_translations', ['workspace_id'], unique=False)
    op.create_index(op.f('ix_i18n_translations_key_id'), 'i18n_translations', ['key_id'], unique=False)
    op.create_index(op.f('ix_i18n_translations_language_id'), 'i18n_translations', ['language_id'], unique=False)


def downgrade() -> None:
    op.drop_table('i18n_translations')
    op.drop_table('i18n_keys')
    op.drop_table('i18n_languages')
    op.drop_table('workspace_members')
    op.drop_table('workspaces')
    op.drop_index(op.f('ix_users_api_token'), table_name='users')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
