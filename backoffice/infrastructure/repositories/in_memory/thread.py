"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/thread.py
============================================================
Class: InMemoryThreadRepository

Responsibilities:
  - Almacenar hilos de soporte en memoria (tests / local dev).
  - Replicar la vista "joined" y el orden del repo Postgres:
      - conversación más vieja primero
      - listados updated_at DESC, id DESC
  - Aplicar ThreadChanges atómicamente bajo lock.

Collaborators:
  - domain.entities.MessageThread, ThreadChanges
  - domain.repositories.ThreadRepository

Constraints / Notes:
  - Thread-safe: acceso protegido por Lock.
  - Copias profundas al devolver: mutar el resultado no altera el store.
============================================================
"""

from __future__ import annotations

import copy
from datetime import datetime, timezone
from threading import Lock
from typing import Dict, Iterable, List, Optional

from ....domain.entities import MessageThread, ThreadChanges
from ....domain.repositories import ThreadRepository
from ....domain.value_objects import ThreadFolder, ThreadPriority, ThreadStatus


class InMemoryThreadRepository(ThreadRepository):
    def __init__(self, threads: Iterable[MessageThread] = ()) -> None:
        self._lock = Lock()
        self._threads: Dict[int, MessageThread] = {}
        for thread in threads:
            self.add_thread(thread)

    def add_thread(self, thread: MessageThread) -> None:
        """Seed helper (tests / local dev)."""
        with self._lock:
            self._threads[thread.id] = copy.deepcopy(thread)

    @staticmethod
    def _updated_sort_key(thread: MessageThread) -> datetime:
        return thread.updated_at or datetime.min.replace(tzinfo=timezone.utc)

    @staticmethod
    def _joined_view(thread: MessageThread) -> MessageThread:
        view = copy.deepcopy(thread)
        view.conversation.sort(
            key=lambda m: (m.created_at or datetime.min.replace(tzinfo=timezone.utc), m.id)
        )
        view.latest_message = None
        return view

    def get_thread(self, thread_id: int) -> Optional[MessageThread]:
        with self._lock:
            thread = self._threads.get(thread_id)
            return self._joined_view(thread) if thread else None

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

        with self._lock:
            candidates = [
                self._joined_view(t)
                for t in self._threads.values()
                if (folder is None or t.folder == folder)
                and (status is None or t.status == status)
                and (priority is None or t.priority == priority)
            ]

        candidates.sort(key=lambda t: (self._updated_sort_key(t), t.id), reverse=True)
        page = candidates[offset : offset + limit]
        for thread in page:
            thread.latest_message = thread.conversation[-1] if thread.conversation else None
            thread.conversation = []
        return page

    def update_thread(
        self, thread_id: int, changes: ThreadChanges, *, updated_at: datetime
    ) -> bool:
        with self._lock:
            thread = self._threads.get(thread_id)
            if thread is None:
                return False
            changes.apply_to(thread, updated_at=updated_at)
            return True

    def ping(self) -> bool:
        return True
