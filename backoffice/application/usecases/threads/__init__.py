from .get_thread import GetThreadUseCase
from .list_threads import ListThreadsUseCase
from .thread_inputs import ThreadPatch, parse_thread_id, validate_thread_patch
from .thread_results import ThreadError, ThreadErrorCode, ThreadListResult, ThreadResult
from .update_thread import UpdateThreadUseCase

__all__ = [
    "GetThreadUseCase",
    "ListThreadsUseCase",
    "ThreadError",
    "ThreadErrorCode",
    "ThreadListResult",
    "ThreadPatch",
    "ThreadResult",
    "UpdateThreadUseCase",
    "parse_thread_id",
    "validate_thread_patch",
]
