"""
============================================================
TARJETA CRC (Class / Responsibilities / Collaborators)
============================================================
Class: 001_foundation (Alembic Migration)

Responsibilities:
  - Crear el esquema del back-office desde cero.
  - Cuentas de staff + sesiones (conteo en el listado).
  - Hilos de soporte + labels + mensajes + adjuntos.

Collaborators:
  - PostgreSQL 16+
  - infrastructure/repositories/postgres/{account,thread}.py (contrato)

Policy:
  - Migración BASELINE. Downgrade borra todo el esquema.
  - Convención de nombres:
      pk_<tabla> / uq_<tabla>_<col> / ix_<tabla>_<col> /
      fk_<tabla>_<col>__<ref_tabla> / ck_<tabla>_<col>
============================================================
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001_foundation"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    # =========================================================
    # 1) ACCOUNTS (staff)
    # =========================================================
    op.create_table(
        "accounts",
        sa.Column("id", sa.Text, nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("password_hash", sa.Text, nullable=False),
        sa.Column(
            "role", sa.String(20), nullable=False, server_default=sa.text("'ADMIN'")
        ),
        sa.Column(
            "is_active", sa.Boolean, nullable=False, server_default=sa.text("true")
        ),
        sa.Column(
            "permissions",
            postgresql.ARRAY(sa.Text),
            nullable=False,
            server_default=sa.text("ARRAY[]::text[]"),
        ),
        sa.Column(
            "allowed_pages",
            postgresql.ARRAY(sa.Text),
            nullable=False,
            server_default=sa.text("ARRAY['/profile']::text[]"),
        ),
        sa.Column(
            "can_manage_users",
            sa.Boolean,
            nullable=False,
            server_default=sa.text("false"),
        ),
        sa.Column("created_by", sa.Text, nullable=True),
        *_timestamps(),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_accounts"),
        sa.CheckConstraint(
            "role IN ('USER','CUSTOMER','SUPPORT','ADMIN','SUPER_ADMIN')",
            name="ck_accounts_role",
        ),
    )
    # Unicidad case-insensitive (lookup por lower(email)).
    op.execute("CREATE UNIQUE INDEX uq_accounts_lower_email ON accounts (lower(email))")
    op.create_index("ix_accounts_created_at", "accounts", ["created_at"])

    op.create_table(
        "account_sessions",
        sa.Column("id", sa.Text, nullable=False),
        sa.Column("account_id", sa.Text, nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_account_sessions"),
        sa.ForeignKeyConstraint(
            ["account_id"],
            ["accounts.id"],
            name="fk_account_sessions_account_id__accounts",
            ondelete="CASCADE",
        ),
    )
    op.create_index(
        "ix_account_sessions_account_id", "account_sessions", ["account_id"]
    )

    # =========================================================
    # 2) MESSAGE THREADS
    # =========================================================
    op.create_table(
        "message_threads",
        sa.Column("id", sa.Integer, sa.Identity(always=False), nullable=False),
        sa.Column("subject", sa.String(500), nullable=False),
        sa.Column("sender_name", sa.String(200), nullable=False),
        sa.Column("sender_email", sa.String(320), nullable=False),
        sa.Column(
            "status", sa.String(20), nullable=False, server_default=sa.text("'OPEN'")
        ),
        sa.Column(
            "priority",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'MEDIUM'"),
        ),
        sa.Column(
            "folder", sa.String(20), nullable=False, server_default=sa.text("'INBOX'")
        ),
        sa.Column(
            "is_read", sa.Boolean, nullable=False, server_default=sa.text("false")
        ),
        sa.Column("private_note", sa.Text, nullable=True),
        sa.Column("assigned_admin", sa.Text, nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_message_threads"),
        sa.CheckConstraint(
            "status IN ('OPEN','IN_PROGRESS','RESOLVED','CLOSED')",
            name="ck_message_threads_status",
        ),
        sa.CheckConstraint(
            "priority IN ('LOW','MEDIUM','HIGH','URGENT')",
            name="ck_message_threads_priority",
        ),
        sa.CheckConstraint(
            "folder IN ('INBOX','SENT','TRASH','ARCHIVE','SPAM')",
            name="ck_message_threads_folder",
        ),
    )
    # Bandeja: filtros por folder/status + orden por updated_at.
    op.create_index(
        "ix_message_threads_folder_updated_at",
        "message_threads",
        ["folder", "updated_at"],
    )
    op.create_index("ix_message_threads_status", "message_threads", ["status"])
    op.create_index("ix_message_threads_priority", "message_threads", ["priority"])

    op.create_table(
        "labels",
        sa.Column("id", sa.Integer, sa.Identity(always=False), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("color", sa.String(20), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_labels"),
        sa.UniqueConstraint("name", name="uq_labels_name"),
    )

    op.create_table(
        "thread_labels",
        sa.Column("thread_id", sa.Integer, nullable=False),
        sa.Column("label_id", sa.Integer, nullable=False),
        sa.PrimaryKeyConstraint("thread_id", "label_id", name="pk_thread_labels"),
        sa.ForeignKeyConstraint(
            ["thread_id"],
            ["message_threads.id"],
            name="fk_thread_labels_thread_id__message_threads",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["label_id"],
            ["labels.id"],
            name="fk_thread_labels_label_id__labels",
            ondelete="CASCADE",
        ),
    )

    op.create_table(
        "thread_messages",
        sa.Column("id", sa.Integer, sa.Identity(always=False), nullable=False),
        sa.Column("thread_id", sa.Integer, nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("author_role", sa.String(20), nullable=False),
        sa.Column("author_name", sa.String(200), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_thread_messages"),
        sa.ForeignKeyConstraint(
            ["thread_id"],
            ["message_threads.id"],
            name="fk_thread_messages_thread_id__message_threads",
            ondelete="CASCADE",
        ),
    )
    op.create_index(
        "ix_thread_messages_thread_id_created_at",
        "thread_messages",
        ["thread_id", "created_at"],
    )

    op.create_table(
        "message_attachments",
        sa.Column("id", sa.Integer, sa.Identity(always=False), nullable=False),
        sa.Column("message_id", sa.Integer, nullable=False),
        sa.Column("file_name", sa.String(500), nullable=False),
        sa.Column("url", sa.Text, nullable=False),
        sa.Column("mime_type", sa.String(100), nullable=True),
        sa.Column("size_bytes", sa.BigInteger, nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_message_attachments"),
        sa.ForeignKeyConstraint(
            ["message_id"],
            ["thread_messages.id"],
            name="fk_message_attachments_message_id__thread_messages",
            ondelete="CASCADE",
        ),
    )
    op.create_index(
        "ix_message_attachments_message_id", "message_attachments", ["message_id"]
    )


def downgrade() -> None:
    for table in (
        "message_attachments",
        "thread_messages",
        "thread_labels",
        "labels",
        "message_threads",
        "account_sessions",
        "accounts",
    ):
        op.drop_table(table)
