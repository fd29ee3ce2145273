"""Single-syscall reads on raw descriptors.

The fd should be in non-blocking mode (`os.set_blocking(fd, False)`)
for timeouts to have any effect.  Regular files never report
would-block, so for them `read()` is just `readn()`.
"""
__all__ = ['readn', 'read']
import io
import os
import traceback

from . import errnos
from .polling import wait_readable

def readn(fd, count=None, verbose=False):
    """Read up to count bytes with a single os.read().

    count: int, max bytes to read.  None -> io.DEFAULT_BUFFER_SIZE.
    verbose: print tracebacks of read errors.

    Return (data, err, again):
        (bytes, None, None): some data.
        (None, None, None): eof.
        (None, None, True): would block.
        (None, err, None): os.read() raised OSError err.
    EINTR is retried immediately.
    """
    if count is None:
        count = io.DEFAULT_BUFFER_SIZE
    while 1:
        try:
            data = os.read(fd, count)
        except OSError as e:
            if e.errno in errnos.WOULDBLOCK:
                return None, None, True
            elif e.errno == errnos.EINTR:
                continue
            if verbose:
                traceback.print_exc()
            return None, e, None
        if data:
            return data, None, None
        return None, None, None

def read(fd, count=None, timeout=None, verbose=False):
    """Read up to count bytes, waiting at most once for readability.

    If the first attempt would block, wait up to `timeout` seconds for
    the fd to become readable and try exactly once more.  The timeout
    applies to this call only; callers that loop get a fresh timeout
    per call.

    Return (data, err, timedout):
        (bytes, None, None): some data.
        (None, None, None): eof.
        (None, None, True): timed out, or the retry would still block.
        (None, err, None): read or wait failed.
    """
    data, err, again = readn(fd, count, verbose)
    if again:
        fd, err, timedout = wait_readable(fd, timeout, verbose)
        if fd is None:
            return None, err, timedout
        return readn(fd, count, verbose)
    return data, err, None
