"""Thread id -> thread name, for logging thread names instead of numbers.

Every calling thread keeps its own bounded cache, so lookups never contend on a
lock. The price is that two threads formatting records from the same thread will
each look it up once.
"""

import threading
import typing as ty
from collections import OrderedDict

MAX_SIGNED_32BIT = 2**31 - 1
SYNTHETIC_ID_THRESHOLD = MAX_SIGNED_32BIT // 2
# ids above this are not real thread ids that we could look up, e.g. a pointer-sized `ident`.
CACHE_SIZE = 10_000
# native ids get reused once the OS wraps around (pid_max on Linux), so a cached
# name is only trusted while it agrees with the name the record carries.
UNKNOWN_THREAD_NAME = "Unknown thread with ID "


class ThreadNameCache:
    """Insertion-ordered; once it holds more than `maxsize` names, the oldest one goes."""

    def __init__(self, maxsize: int = CACHE_SIZE):
        self.maxsize = maxsize
        self._names: "OrderedDict[int, str]" = OrderedDict()

    def get(self, thread_id: int) -> ty.Optional[str]:
        return self._names.get(thread_id)

    def put(self, thread_id: int, name: str):
        self._names[thread_id] = name
        if len(self._names) > self.maxsize:
            self._names.popitem(last=False)

    def clear(self):
        self._names.clear()

    def __contains__(self, thread_id: object) -> bool:
        return thread_id in self._names

    def __len__(self) -> int:
        return len(self._names)


class ThreadIntrospector:
    def thread_name(self, thread_id: int) -> ty.Optional[str]:
        """Name of the live Python thread with this native id (or ident), if any."""
        for thread in threading.enumerate():
            if thread_id in (thread.native_id, thread.ident):
                return thread.name
        return None


_INTROSPECTOR: ty.Optional[ThreadIntrospector] = None
_INTROSPECTOR_LOCK = threading.Lock()


def thread_introspector() -> ThreadIntrospector:
    global _INTROSPECTOR
    with _INTROSPECTOR_LOCK:
        if _INTROSPECTOR is None:
            _INTROSPECTOR = ThreadIntrospector()
        return _INTROSPECTOR


class _PerThread(threading.local):
    def __init__(self):
        # threading.local runs this once in every thread that touches it.
        self.cache = ThreadNameCache()


_PER_THREAD = _PerThread()


def thread_local_cache() -> ThreadNameCache:
    return _PER_THREAD.cache


def resolve_thread_name(
    thread_id: int,
    *,
    current_name: ty.Optional[str] = None,
    cache: ty.Optional[ThreadNameCache] = None,
    introspector: ty.Optional[ThreadIntrospector] = None,
) -> str:
    """`current_name` is what the caller believes the thread is called, e.g. a record's
    `threadName`. A cached name that disagrees with it is looked up again, since the OS
    may have handed a dead thread's id to a new one.
    """
    cache = cache if cache is not None else thread_local_cache()
    name = cache.get(thread_id)
    if name is not None and (
        not current_name or name == current_name or thread_id > SYNTHETIC_ID_THRESHOLD
    ):
        return name

    if thread_id > SYNTHETIC_ID_THRESHOLD:
        name = UNKNOWN_THREAD_NAME + str(thread_id)
    else:
        if introspector is None:
            introspector = thread_introspector()
        name = introspector.thread_name(thread_id)
        if name is None:
            # the thread may be gone, or not started yet; don't remember that.
            return str(thread_id)

    cache.put(thread_id, name)
    return name
