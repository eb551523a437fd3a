"""
CRC — domain/repositories.py

Name
- Domain Repository Interfaces (Protocols)

Responsibilities
- Define persistence contracts for the domain layer (ports).
- Keep the application/domain independent from infrastructure (PostgreSQL, in-memory).
- Enable dependency inversion and straightforward unit testing.

Collaborators
- domain.entities: Account, AccountSummary, MessageThread, ThreadChanges
- infrastructure.repositories: postgres/*, in_memory/* implementations

Constraints
- Pure interfaces only: no side effects, no infrastructure imports, no SQL.
- "Not found" is returned as None / False, never raised.

Notes
- We use typing.Protocol for structural subtyping ("duck typing").
"""

from datetime import datetime
from typing import List, Optional, Protocol

from .entities import Account, AccountSummary, MessageThread, ThreadChanges
from .value_objects import Role, ThreadFolder, ThreadPriority, ThreadStatus


class AccountRepository(Protocol):
    """
    R: Interface for staff account persistence.

    Implementations must provide:
      - Case-insensitive unique email (callers pass normalized emails)
      - Listing newest-created first with session counts
      - Session rows created on login (for counting)
    """

    def list_accounts(self) -> List[AccountSummary]:
        """R: All accounts, ordered by created_at DESC."""
        ...

    def get_account(self, account_id: str) -> Optional[Account]: ...

    def get_account_by_email(self, email: str) -> Optional[Account]: ...

    def create_account(self, account: Account) -> Account:
        """R: Persist a new account. Raises DuplicateAccountError on email clash."""
        ...

    def update_account(
        self,
        account_id: str,
        *,
        updated_at: datetime,
        name: Optional[str] = None,
        role: Optional[Role] = None,
        is_active: Optional[bool] = None,
        permissions: Optional[List[str]] = None,
        allowed_pages: Optional[List[str]] = None,
        can_manage_users: Optional[bool] = None,
        password_hash: Optional[str] = None,
    ) -> Optional[Account]:
        """R: None fields stay unchanged; updated_at is always refreshed."""
        ...

    def delete_account(self, account_id: str) -> bool: ...

    def record_login(
        self, account_id: str, *, logged_in_at: datetime, expires_at: datetime
    ) -> None:
        """R: Set last_login_at and append a session row."""
        ...


class ThreadRepository(Protocol):
    """
    R: Interface for support message threads.

    Implementations must provide:
      - Joined read (labels + conversation oldest-first + attachments)
      - Single-statement partial update
    """

    def get_thread(self, thread_id: int) -> Optional[MessageThread]: ...

    def list_threads(
        self,
        *,
        folder: Optional[ThreadFolder] = None,
        status: Optional[ThreadStatus] = None,
        priority: Optional[ThreadPriority] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[MessageThread]:
        """R: Ordered by updated_at DESC, with labels and latest_message."""
        ...

    def update_thread(
        self, thread_id: int, changes: ThreadChanges, *, updated_at: datetime
    ) -> bool:
        """R: True if a row was updated, False if the thread does not exist."""
        ...

    def ping(self) -> bool: ...
