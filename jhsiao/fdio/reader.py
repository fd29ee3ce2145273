"""Buffered reading from a file descriptor.

Reads come in three shapes: a byte count, a line (delimited by '\n'
or '\r\n') or everything up to eof.  All of them return a triple:

    (data, err, timedout)

At most one item is set.  (None, None, None) means eof.  err is an
OSError (EBADF after close()).  timedout is True if the fd was not
readable within the timeout; nothing is lost and the read can be
retried.  Invalid arguments raise instead.

The timeout is per syscall, not per call: a read that needs several
syscalls may wait up to `timeout` for each of them.  For timeouts to
apply to pipes etc, the fd should be non-blocking.

Not threadsafe.
"""
__all__ = ['Reader', 'new']
import io
import os

from . import errnos, rawio

def _check_timeout(sec):
    """Validate a timeout in seconds.  None means wait forever."""
    if sec is None:
        return None
    if isinstance(sec, bool) or not isinstance(sec, (int, float)):
        raise TypeError(
            'sec must be number or None, got {}'.format(type(sec).__name__))
    if sec < 0:
        raise ValueError('sec must be >= 0, got {}'.format(sec))
    return sec

class Reader(object):
    """Read bytes, lines, or everything from a fd.

    Unconsumed data read from the fd is kept in `buf` until a later
    read returns it.
    """
    def __init__(
            self, fd, f=None, timeout=None,
            bufsize=io.DEFAULT_BUFFER_SIZE, verbose=False):
        """Initialize a Reader.

        fd: int, the fd to read from.
        f: object with close() that owns fd, closed by close().
            None if fd is borrowed, in which case close() does nothing.
        timeout: seconds to wait for readability, None = forever.
        bufsize: max bytes per syscall when the size is not known.
        verbose: print tracebacks of read errors.
        """
        timeout = _check_timeout(timeout)
        if bufsize < 1:
            raise ValueError('bufsize must be > 0')
        self.fd = fd
        self.f = f
        self.buf = bytearray()
        self._timeout = timeout
        self.bufsize = bufsize
        self.verbose = verbose

    def __repr__(self):
        state = 'closed' if self.fd < 0 else 'fd={}'.format(self.fd)
        return '<{}.{} {}>'.format(
            type(self).__module__, type(self).__name__, state)

    def __enter__(self):
        return self

    def __exit__(self, tp, exc, tb):
        self.close()

    def __del__(self):
        if getattr(self, 'f', None) is not None:
            self.close()

    def fileno(self):
        """Return the fd.  Negative after close()."""
        return self.fd

    @property
    def timeout(self):
        return self._timeout

    def set_timeout(self, sec=None):
        """Set timeout in seconds for subsequent reads.  None = forever."""
        self._timeout = _check_timeout(sec)

    def close(self):
        """Close the owned file, if any.

        The fd becomes ~fd so it stays negative even if it was 0.
        Calling close() again does nothing.
        Return (ok, err).
        """
        f = self.f
        if f is None:
            return True, None
        self.f = None
        self.fd = ~self.fd
        del self.buf[:]
        try:
            f.close()
        except OSError as e:
            return False, e
        return True, None

    def _ebadf(self):
        return errnos.error(errnos.EBADF, 'reader is closed')

    def _read(self, count=None):
        return rawio.read(
            self.fd, count or self.bufsize, self._timeout, self.verbose)

    def readn(self, n):
        """Read n bytes.

        If eof is reached first, return whatever was buffered, which may
        be fewer than n bytes.  On error or timeout, any bytes read so far
        stay buffered for the next call.  n == 0 returns (None, None, None)
        without reading.
        """
        if isinstance(n, bool) or not isinstance(n, int):
            raise TypeError('n must be int, got {}'.format(type(n).__name__))
        if n < 0:
            raise ValueError('invalid argument (negative number)')
        if self.fd < 0:
            return None, self._ebadf(), None
        if n == 0:
            return None, None, None
        buf = self.buf
        while len(buf) < n:
            data, err, timedout = self._read(min(n - len(buf), self.bufsize))
            if data is None:
                if err is None and not timedout and buf:
                    ret = bytes(buf)
                    del buf[:]
                    return ret, None, None
                return None, err, timedout
            buf += data
        ret = bytes(buf[:n])
        del buf[:n]
        return ret, None, None

    def readall(self):
        """Read until eof.

        If a read fails or times out, everything read by this call
        (including previously buffered data) is discarded.
        """
        if self.fd < 0:
            return None, self._ebadf(), None
        out = self.buf
        self.buf = bytearray()
        while 1:
            data, err, timedout = self._read()
            if data is None:
                if err is not None or timedout:
                    return None, err, timedout
                break
            out += data
        if out:
            return bytes(out), None, None
        return None, None, None

    def readline(self, with_delimiter=False):
        """Read a line ending in '\\n' or '\\r\\n'.

        with_delimiter: keep the line ending.
        A trailing line without a line ending is returned at eof.
        """
        if self.fd < 0:
            return None, self._ebadf(), None
        buf = self.buf
        nl = buf.find(b'\n')
        while nl < 0:
            start = len(buf)
            data, err, timedout = self._read()
            if data is None:
                if err is not None or timedout:
                    return None, err, timedout
                if buf:
                    ret = bytes(buf)
                    del buf[:]
                    return ret, None, None
                return None, None, None
            buf += data
            nl = buf.find(b'\n', start)
        end = nl + 1
        if with_delimiter:
            line = bytes(buf[:end])
        elif nl and buf[nl-1] == 0x0d:
            line = bytes(buf[:nl-1])
        else:
            line = bytes(buf[:nl])
        del buf[:end]
        return line, None, None

    def read(self, fmt=None):
        """Read according to fmt.

        fmt: int or str
            int: readn(fmt)
            'l': readline() (default)
            'L': readline(True)
            'a': readall()
            str formats may be prefixed with '*'.
        """
        if fmt is None:
            return self.readline()
        if isinstance(fmt, bool) or not isinstance(fmt, (int, str)):
            raise TypeError(
                'fmt must be int, str or None, got {}'.format(
                    type(fmt).__name__))
        if isinstance(fmt, int):
            return self.readn(fmt)
        spec = fmt[1:] if fmt[:1] == '*' else fmt
        if spec == 'l':
            return self.readline()
        elif spec == 'L':
            return self.readline(True)
        elif spec == 'a':
            return self.readall()
        raise ValueError("fmt must be 'a', 'l' or 'L', got {!r}".format(fmt))

    def lines(self):
        """Iterate over lines without line endings until eof.

        Read errors are raised.  A timeout raises TimeoutError; the
        reader is still usable afterwards.
        """
        while 1:
            line, err, timedout = self.readline()
            if line is not None:
                yield line
            elif err is not None:
                raise err
            elif timedout:
                raise TimeoutError(
                    'fd {} not readable within {}s'.format(
                        self.fd, self._timeout))
            else:
                return

    __iter__ = lines


def new(src, timeout=None, **kwargs):
    """Create a Reader that owns its fd.

    src: str, bytes, os.PathLike, int or file-like with fileno().
        paths are opened read-only.
        fds and file objects are duplicated with os.dup() so that
        closing either one does not affect the other.  The duplicate
        shares the file offset and blocking mode with the original.
    timeout: seconds, None = forever.
    kwargs: passed to Reader.

    Raise OSError if the fd cannot be acquired (ENOENT, EBADF, ...) or
    TypeError for unsupported src.
    """
    timeout = _check_timeout(timeout)
    if isinstance(src, (str, bytes, os.PathLike)):
        f = io.open(src, 'rb', buffering=0)
        return _owning(f, timeout, kwargs)
    if isinstance(src, bool) or not (
            isinstance(src, int) or hasattr(src, 'fileno')):
        raise TypeError(
            'file, pathname or file descriptor expected, got {}'.format(
                type(src).__name__))
    if isinstance(src, int):
        if src < 0:
            raise errnos.error(errnos.EBADF, 'fd {}'.format(src))
        fd = os.dup(src)
    else:
        fd = os.dup(src.fileno())
    try:
        f = io.open(fd, 'rb', buffering=0)
    except Exception:
        os.close(fd)
        raise
    return _owning(f, timeout, kwargs)

def _owning(f, timeout, kwargs):
    """Return a Reader owning f.  f is closed if Reader() raises."""
    try:
        return Reader(f.fileno(), f, timeout, **kwargs)
    except Exception:
        f.close()
        raise
