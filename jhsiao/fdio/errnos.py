"""Define relevant errno."""
__all__ = [
    'EAGAIN', 'EWOULDBLOCK', 'WOULDBLOCK', 'EINTR',
    'EBADF', 'error']
import os
import platform
try:
    import errno
except ImportError:
    EINTR = 4
    EAGAIN = 11
    EWOULDBLOCK = 10035 if platform.system() == 'Windows' else 11
    EBADF = 9
else:
    EINTR = getattr(errno, 'EINTR', 4)
    EAGAIN = getattr(errno, 'EAGAIN', 11)
    EWOULDBLOCK = getattr(
        errno,
        'EWOULDBLOCK',
        10035 if platform.system() == 'Windows' else 11)
    EBADF = getattr(errno, 'EBADF', 9)

WOULDBLOCK = set([EAGAIN, EWOULDBLOCK])

def error(code, detail=None):
    """Make an OSError for errno `code`.

    detail: str, appended to the strerror message.
    The subclass is chosen by OSError itself (EBADF -> OSError,
    ENOENT -> FileNotFoundError, etc).
    """
    msg = os.strerror(code)
    if detail:
        msg = '{}: {}'.format(msg, detail)
    return OSError(code, msg)
