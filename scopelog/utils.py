"""Utility helpers used across ``scopelog`` modules."""

import errno
import os
import time
import traceback
from contextlib import contextmanager
from typing import Any


# the function to get the full error information from an exception.
def get_full_error_info(e: BaseException) -> str:
    """
    Get the full error information from an exception.

    Args:
        e (BaseException): The exception to get the error information from.

    Returns:
        str: The full error information.
    """
    return "".join(traceback.format_exception(type(e), e, e.__traceback__))


def safe_str(value: Any) -> str:
    """
    Best-effort ``str(value)`` that never raises.

    Objects whose ``__str__`` fails render as ``<unprintable TypeName>``.
    """
    try:
        return str(value)
    except Exception:
        return f"<unprintable {type(value).__name__}>"


def get_error_message(e: BaseException) -> str:
    """Return the message of an exception, falling back to its type name."""
    message = safe_str(e)
    return message if message else type(e).__name__


@contextmanager
def acquire_file_lock(lock_path: str | None, timeout: float = 10.0, poll_interval: float = 0.05):
    """
    Cross-process file lock with waiting. Uses fcntl when available and
    falls back to an exclusive create + retry strategy otherwise.

    - Never swallows exceptions raised inside the locked block.
    - Treats Windows-specific permission errors as a contention signal.
    - A ``lock_path`` of ``None`` means no locking.
    """
    if lock_path is None:
        yield
        return

    dir_name = os.path.dirname(lock_path)
    if dir_name:
        os.makedirs(dir_name, exist_ok=True)

    # Try fcntl-based advisory lock first (POSIX platforms)
    if os.name != "nt":  # pragma: no cover - platform specific guard
        try:
            import fcntl  # type: ignore

            f = open(lock_path, "a+")
        except (ImportError, OSError):
            f = None
        if f is not None:
            try:
                fcntl.flock(f.fileno(), fcntl.LOCK_EX)
                yield
            finally:
                try:
                    fcntl.flock(f.fileno(), fcntl.LOCK_UN)
                finally:
                    f.close()
            return

    # Fallback: spin on exclusive create of lock file, then unlink on exit
    start = time.time()
    fd = None
    contended_errnos = {errno.EEXIST, errno.EACCES, errno.EPERM, errno.EBUSY}

    try:
        while True:
            try:
                fd = os.open(lock_path, os.O_CREAT | os.O_EXCL | os.O_RDWR)
                break
            except OSError as exc:
                # Windows reports open files as PermissionError (EACCES / EPERM)
                if exc.errno in contended_errnos:
                    if time.time() - start > timeout:
                        raise TimeoutError(f"Timeout acquiring lock: {lock_path}") from exc
                    time.sleep(poll_interval)
                    continue
                raise

        yield
    finally:
        if fd is not None:
            try:
                os.close(fd)
            except OSError:
                pass

            try:
                os.unlink(lock_path)
            except FileNotFoundError:
                pass
            except PermissionError:
                # Windows may briefly deny removal if another process raced to
                # open the file after we closed our handle.
                pass
