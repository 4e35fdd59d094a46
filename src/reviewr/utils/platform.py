"""Cross-platform abstractions for Windows and POSIX systems.

This module provides platform-agnostic functions for:
- File locking (fcntl on POSIX, msvcrt on Windows)
- Unbuffered keyboard input for the terminal browser (termios on POSIX,
  msvcrt on Windows)

All functions are designed to work correctly on both Windows and POSIX systems.
"""

import logging
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import IO, Any, Final

logger = logging.getLogger(__name__)

# Platform detection
IS_WINDOWS: Final[bool] = sys.platform == "win32"
IS_POSIX: Final[bool] = os.name == "posix"

# Windows prefixes arrow, navigation and function keys with one of these bytes
_WINDOWS_EXTENDED_PREFIXES: Final[tuple[str, ...]] = ("\x00", "\xe0")


# =============================================================================
# File Locking
# =============================================================================


def acquire_file_lock(file_handle: IO[Any], blocking: bool = False) -> bool:
    """Acquire an exclusive lock on a file.

    Uses fcntl.flock() on POSIX systems and msvcrt.locking() on Windows.

    Args:
        file_handle: Open file handle to lock.
        blocking: If True, block until lock is acquired. If False, fail immediately
                  if lock is not available.

    Returns:
        True if lock was acquired, False if non-blocking and lock unavailable.

    Raises:
        OSError: If blocking=True and lock cannot be acquired, or other I/O errors.
    """
    if IS_WINDOWS:
        import msvcrt

        try:
            lock_mode = msvcrt.LK_LOCK if blocking else msvcrt.LK_NBLCK  # type: ignore[attr-defined]
            file_handle.seek(0)
            msvcrt.locking(file_handle.fileno(), lock_mode, 1)  # type: ignore[attr-defined]
            return True
        except OSError:
            if not blocking:
                return False
            raise
    else:
        import fcntl

        try:
            flags = fcntl.LOCK_EX
            if not blocking:
                flags |= fcntl.LOCK_NB
            fcntl.flock(file_handle, flags)
            return True
        except OSError:
            if not blocking:
                return False
            raise


def release_file_lock(file_handle: IO[Any]) -> None:
    """Release a file lock.

    Args:
        file_handle: File handle that was previously locked.

    Note:
        This is a no-op if the file was not locked. Always safe to call.
    """
    if IS_WINDOWS:
        import msvcrt

        try:
            file_handle.seek(0)
            msvcrt.locking(file_handle.fileno(), msvcrt.LK_UNLCK, 1)  # type: ignore[attr-defined]
        except OSError as e:
            logger.debug(f"Failed to release Windows file lock: {e}")
    else:
        import fcntl

        try:
            fcntl.flock(file_handle, fcntl.LOCK_UN)
        except OSError as e:
            logger.debug(f"Failed to release POSIX file lock: {e}")


# =============================================================================
# Keyboard Input
# =============================================================================


@contextmanager
def cbreak_terminal() -> Iterator[None]:
    """Put stdin into cbreak mode for the duration of the block.

    Keys are delivered one at a time without echo. On Windows msvcrt already
    reads unbuffered, so this is a no-op there. When stdin is not a terminal
    (piped input, tests) the mode is left alone.
    """
    if IS_WINDOWS or not sys.stdin.isatty():
        yield
        return

    import termios
    import tty

    fd = sys.stdin.fileno()
    saved = termios.tcgetattr(fd)
    try:
        tty.setcbreak(fd)
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)


def read_key_sequence() -> str:
    """Block until a key is pressed and return its raw character sequence.

    Escape sequences (arrow keys, Shift+Tab) are returned whole, for
    example ``"\\x1b[A"``. On Windows the two-character extended codes are
    returned as-is, for example ``"\\xe0H"``.
    """
    if IS_WINDOWS:
        import msvcrt

        first = msvcrt.getwch()  # type: ignore[attr-defined]
        if first in _WINDOWS_EXTENDED_PREFIXES:
            return first + msvcrt.getwch()  # type: ignore[attr-defined]
        return first

    import select

    fd = sys.stdin.fileno()
    first = os.read(fd, 1).decode("utf-8", errors="replace")
    if first != "\x1b":
        return first

    # A lone Escape has nothing queued behind it
    sequence = first
    while select.select([fd], [], [], 0.05)[0]:
        sequence += os.read(fd, 1).decode("utf-8", errors="replace")
        if len(sequence) >= 3 and (sequence[-1].isalpha() or sequence[-1] == "~"):
            break
    return sequence
