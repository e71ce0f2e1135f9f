"""Initial schema: principals, demandas, attachments, audit log

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '0001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# principalrole se usa en dos tablas: los tipos se crean una sola vez en upgrade().
principal_role = postgresql.ENUM(
    'ADMIN', 'CLIENT', 'CORRESPONDENT', name='principalrole', create_type=False
)
correspondent_category = postgresql.ENUM(
    'ATTORNEY', 'PROXY', name='correspondentcategory', create_type=False
)
demanda_status = postgresql.ENUM(
    'PENDING', 'IN_PROGRESS', 'FULFILLED', 'CANCELLED',
    name='demandastatus', create_type=False,
)
audit_action = postgresql.ENUM(
    'CREATION', 'UPDATE', 'STATUS_CHANGE', 'ASSIGNMENT', 'ATTACHMENT_UPLOAD',
    name='auditaction', create_type=False,
)


def _principal_columns() -> list:
    return [
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
    ]


def upgrade() -> None:
    bind = op.get_bind()
    for enum_type in (principal_role, correspondent_category, demanda_status, audit_action):
        enum_type.create(bind, checkfirst=True)

    op.create_table(
        'admins',
        *_principal_columns(),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_admins_email', 'admins', ['email'], unique=True)

    op.create_table(
        'clients',
        *_principal_columns(),
        sa.Column('full_name', sa.String(length=200), nullable=False),
        sa.Column('office', sa.String(length=200), nullable=True, comment='Escritorio / firma del cliente'),
        sa.Column('phone', sa.String(length=30), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_clients_email', 'clients', ['email'], unique=True)

    op.create_table(
        'correspondents',
        *_principal_columns(),
        sa.Column('full_name', sa.String(length=200), nullable=False),
        sa.Column('category', correspondent_category, nullable=False),
        sa.Column('oab_number', sa.String(length=30), nullable=True, comment='Registro OAB, obligatorio para abogados'),
        sa.Column('rg', sa.String(length=30), nullable=True),
        sa.Column('cpf', sa.String(length=20), nullable=False),
        sa.Column('phone', sa.String(length=30), nullable=False),
        sa.Column('served_jurisdictions', postgresql.JSONB(astext_type=sa.Text()), nullable=False, comment='Comarcas atendidas'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_correspondents_email', 'correspondents', ['email'], unique=True)
    op.create_index('ix_correspondents_cpf', 'correspondents', ['cpf'], unique=False)

    op.create_table(
        'demandas',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('client_id', sa.Integer(), nullable=False),
        sa.Column('correspondent_id', sa.Integer(), nullable=True),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('process_number', sa.String(length=50), nullable=True, comment='Número del proceso judicial'),
        sa.Column('category', sa.String(length=100), nullable=True, comment='Tipo de diligencia: audiencia, protocolo, cópia, etc.'),
        sa.Column('deadline', sa.Date(), nullable=True, comment='Prazo fatal'),
        sa.Column('proposed_value', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('status', demanda_status, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['client_id'], ['clients.id']),
        sa.ForeignKeyConstraint(['correspondent_id'], ['correspondents.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_demanda_client', 'demandas', ['client_id', 'created_at'])
    op.create_index('idx_demanda_correspondent', 'demandas', ['correspondent_id', 'created_at'])
    op.create_index('idx_demanda_status', 'demandas', ['status'])

    op.create_table(
        'attachments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('demanda_id', sa.Integer(), nullable=False),
        sa.Column('uploader_id', sa.Integer(), nullable=False),
        sa.Column('uploader_role', principal_role, nullable=False),
        sa.Column('original_name', sa.String(length=255), nullable=False),
        sa.Column('storage_path', sa.String(length=500), nullable=False),
        sa.Column('mime_type', sa.String(length=150), nullable=False),
        sa.Column('size_bytes', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['demanda_id'], ['demandas.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_attachments_demanda_id', 'attachments', ['demanda_id'])

    op.create_table(
        'audit_log',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('demanda_id', sa.Integer(), nullable=False),
        sa.Column('actor_id', sa.Integer(), nullable=False),
        sa.Column('actor_role', principal_role, nullable=False),
        sa.Column('action', audit_action, nullable=False),
        sa.Column('details', postgresql.JSONB(astext_type=sa.Text()), nullable=True, comment='Detalle estructurado de la acción'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['demanda_id'], ['demandas.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_audit_log_demanda_id', 'audit_log', ['demanda_id'])
    op.create_index('ix_audit_log_action', 'audit_log', ['action'])

    # INSERT-only: el rol de la aplicación no puede modificar ni borrar historial.
    op.execute("REVOKE UPDATE, DELETE ON audit_log FROM PUBLIC")


def downgrade() -> None:
    op.drop_index('ix_audit_log_action', table_name='audit_log')
    op.drop_index('ix_audit_log_demanda_id', table_name='audit_log')
    op.drop_table('audit_log')
    op.drop_index('ix_attachments_demanda_id', table_name='attachments')
    op.drop_table('attachments')
    op.drop_index('idx_demanda_status', table_name='demandas')
    op.drop_index('idx_demanda_correspondent', table_name='demandas')
    op.drop_index('idx_demanda_client', table_name='demandas')
    op.drop_table('demandas')
    op.drop_index('ix_correspondents_cpf', table_name='correspondents')
    op.drop_index('ix_correspondents_email', table_name='correspondents')
    op.drop_table('correspondents')
    op.drop_index('ix_clients_email', table_name='clients')
    op.drop_table('clients')
    op.drop_index('ix_admins_email', table_name='admins')
    op.drop_table('admins')

    for enum_type in (audit_action, demanda_status, correspondent_category, principal_role):
        enum_type.drop(op.get_bind(), checkfirst=True)
