"""
============================================================
TARJETA CRC — infrastructure/repositories/postgres/thread.py
============================================================
Class: PostgresThreadRepository

Responsibilities:
- Leer hilos de soporte con su vista "joined":
    labels + conversación (más viejo primero) + adjuntos por mensaje.
- Listar hilos filtrados (folder/status/priority) con preview del último mensaje.
- Aplicar un patch validado en UN solo UPDATE (todos los campos + updated_at).

Collaborators:
- domain.entities.MessageThread, Label, Message, Attachment, ThreadChanges
- crosscutting.exceptions.DatabaseError
- crosscutting.logger.logger
- psycopg_pool.ConnectionPool
- Tablas: message_threads, labels, thread_labels, thread_messages, message_attachments

Constraints / Notes:
- Sin lógica de negocio: el patch llega validado desde el caso de uso.
- Queries siempre parametrizadas; los nombres de columna del SET salen de una
  whitelist interna, nunca del request.
- Último en escribir gana: no hay control de versión optimista.
============================================================
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Iterable, List, Optional, Sequence

from psycopg_pool import ConnectionPool

from ....crosscutting.exceptions import DatabaseError
from ....crosscutting.logger import logger
from ....domain.entities import (
    Attachment,
    Label,
    Message,
    MessageThread,
    ThreadChanges,
)
from ....domain.value_objects import ThreadFolder, ThreadPriority, ThreadStatus

# R: Mapeo campo del patch -> columna (whitelist del SET dinámico).
_PATCH_COLUMNS = {
    "status": "status",
    "priority": "priority",
    "folder": "folder",
    "read": "is_read",
    "private_note": "private_note",
    "assigned_admin": "assigned_admin",
}


class PostgresThreadRepository:
    """R: Implementación PostgreSQL del repositorio de hilos de soporte."""

    _SELECT_COLUMNS = """
        id, subject, sender_name, sender_email, status, priority, folder,
        is_read, private_note, assigned_admin, created_at, updated_at
    """

    _ORDER_BY = "ORDER BY updated_at DESC, id DESC"

    def __init__(self, pool: Optional[ConnectionPool] = None):
        self._pool = pool

    def _get_pool(self) -> ConnectionPool:
        if self._pool is not None:
            return self._pool

        from ...db.pool import get_pool

        return get_pool()

    # =========================================================
    # Mapping
    # =========================================================
    @staticmethod
    def _row_to_thread(row: tuple) -> MessageThread:
        try:
            status = ThreadStatus(row[4])
            priority = ThreadPriority(row[5])
            folder = ThreadFolder(row[6])
        except ValueError as exc:
            raise DatabaseError(f"Invalid thread state in database: {row[4:7]}") from exc

        return MessageThread(
            id=row[0],
            subject=row[1],
            sender_name=row[2],
            sender_email=row[3],
            status=status,
            priority=priority,
            folder=folder,
            read=row[7],
            private_note=row[8],
            assigned_admin=row[9],
            created_at=row[10],
            updated_at=row[11],
        )

    @staticmethod
    def _row_to_message(row: tuple) -> Message:
        return Message(
            id=row[0],
            content=row[1],
            author_role=row[2],
            author_name=row[3],
            created_at=row[4],
        )

    # =========================================================
    # Helpers de carga (misma conexión)
    # =========================================================
    @staticmethod
    def _load_labels(conn, thread_ids: Sequence[int]) -> dict[int, list[Label]]:
        rows = conn.execute(
            """
            SELECT tl.thread_id, l.id, l.name, l.color
            FROM thread_labels tl
            JOIN labels l ON l.id = tl.label_id
            WHERE tl.thread_id = ANY(%s)
            ORDER BY l.name ASC, l.id ASC
            """,
            (list(thread_ids),),
        ).fetchall()
        out: dict[int, list[Label]] = {}
        for thread_id, label_id, name, color in rows:
            out.setdefault(thread_id, []).append(Label(id=label_id, name=name, color=color))
        return out

    @staticmethod
    def _load_attachments(conn, message_ids: Sequence[int]) -> dict[int, list[Attachment]]:
        if not message_ids:
            return {}
        rows = conn.execute(
            """
            SELECT message_id, id, file_name, url, mime_type, size_bytes
            FROM message_attachments
            WHERE message_id = ANY(%s)
            ORDER BY id ASC
            """,
            (list(message_ids),),
        ).fetchall()
        out: dict[int, list[Attachment]] = {}
        for message_id, att_id, file_name, url, mime_type, size_bytes in rows:
            out.setdefault(message_id, []).append(
                Attachment(
                    id=att_id,
                    file_name=file_name,
                    url=url,
                    mime_type=mime_type,
                    size_bytes=size_bytes,
                )
            )
        return out

    # =========================================================
    # Lecturas
    # =========================================================
    def get_thread(self, thread_id: int) -> Optional[MessageThread]:
        context_msg = "PostgresThreadRepository: get_thread failed"
        try:
            pool = self._get_pool()
            with pool.connection() as conn:
                row = conn.execute(
                    f"SELECT {self._SELECT_COLUMNS} FROM message_threads WHERE id = %s",
                    (thread_id,),
                ).fetchone()
                if row is None:
                    return None

                thread = self._row_to_thread(row)
                thread.labels = self._load_labels(conn, [thread_id]).get(thread_id, [])

                message_rows = conn.execute(
                    """
                    SELECT id, content, author_role, author_name, created_at
                    FROM thread_messages
                    WHERE thread_id = %s
                    ORDER BY created_at ASC, id ASC
                    """,
                    (thread_id,),
                ).fetchall()
                messages = [self._row_to_message(r) for r in message_rows]
                attachments = self._load_attachments(conn, [m.id for m in messages])
                for message in messages:
                    message.attachments = attachments.get(message.id, [])
                thread.conversation = messages
                return thread
        except DatabaseError:
            raise
        except Exception as exc:
            logger.exception(context_msg, extra={"thread_id": thread_id, "error": str(exc)})
            raise DatabaseError(f"{context_msg}: {exc}") from exc

    def list_threads(
        self,
        *,
        folder: Optional[ThreadFolder] = None,
        status: Optional[ThreadStatus] = None,
        priority: Optional[ThreadPriority] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[MessageThread]:
        if limit <= 0:
            return []
        offset = max(offset, 0)

        clauses: list[str] = []
        params: list[object] = []
        for column, value in (("folder", folder), ("status", status), ("priority", priority)):
            if value is not None:
                clauses.append(f"{column} = %s")
                params.append(value.value)
        where_sql = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        context_msg = "PostgresThreadRepository: list_threads failed"
        try:
            pool = self._get_pool()
            with pool.connection() as conn:
                rows = conn.execute(
                    f"""
                    SELECT {self._SELECT_COLUMNS}
                    FROM message_threads
                    {where_sql}
                    {self._ORDER_BY}
                    LIMIT %s OFFSET %s
                    """,
                    (*params, limit, offset),
                ).fetchall()
                threads = [self._row_to_thread(r) for r in rows]
                if not threads:
                    return []

                ids = [t.id for t in threads]
                labels = self._load_labels(conn, ids)
                latest_rows = conn.execute(
                    """
                    SELECT DISTINCT ON (thread_id)
                        thread_id, id, content, author_role, author_name, created_at
                    FROM thread_messages
                    WHERE thread_id = ANY(%s)
                    ORDER BY thread_id, created_at DESC, id DESC
                    """,
                    (ids,),
                ).fetchall()
                latest = {r[0]: self._row_to_message(r[1:]) for r in latest_rows}

                for thread in threads:
                    thread.labels = labels.get(thread.id, [])
                    thread.latest_message = latest.get(thread.id)
                return threads
        except DatabaseError:
            raise
        except Exception as exc:
            logger.exception(context_msg, extra={"error": str(exc)})
            raise DatabaseError(f"{context_msg}: {exc}") from exc

    # =========================================================
    # Escrituras
    # =========================================================
    def update_thread(
        self, thread_id: int, changes: ThreadChanges, *, updated_at: datetime
    ) -> bool:
        sets: list[str] = []
        params: list[Any] = []
        for field_name, value in changes.supplied().items():
            sets.append(f"{_PATCH_COLUMNS[field_name]} = %s")
            params.append(value.value if isinstance(value, Enum) else value)

        sets.append("updated_at = %s")
        params.extend([updated_at, thread_id])

        row = self._fetchone(
            query=f"""
                UPDATE message_threads
                SET {", ".join(sets)}
                WHERE id = %s
                RETURNING id
            """,
            params=params,
            context_msg="PostgresThreadRepository: update_thread failed",
            extra={"thread_id": thread_id, "fields": list(changes.supplied())},
        )
        return row is not None

    def ping(self) -> bool:
        row = self._fetchone(
            query="SELECT 1",
            params=(),
            context_msg="PostgresThreadRepository: ping failed",
            extra={},
        )
        return row is not None

    def _fetchone(
        self, *, query: str, params: Iterable[object], context_msg: str, extra: dict
    ) -> tuple | None:
        try:
            pool = self._get_pool()
            with pool.connection() as conn:
                return conn.execute(query, tuple(params)).fetchone()
        except Exception as exc:
            logger.exception(context_msg, extra={**extra, "error": str(exc)})
            raise DatabaseError(f"{context_msg}: {exc}") from exc
