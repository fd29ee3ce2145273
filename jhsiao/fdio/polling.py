"""Wait for descriptors to become readable.

Windows only supports select, and only for sockets.  Everywhere else
poll is preferred because select cannot handle fds >= FD_SETSIZE.
"""
__all__ = ['Poller', 'wait_readable']
import select
import traceback

from . import errnos

def getfd(item):
    """Get the fd if not an fd (int)."""
    if isinstance(item, int):
        return item
    else:
        return item.fileno()

class _Poller(object):
    """Base read poller class.

    Registered items should have a fileno() or be a fileno.
    Registered items when polled are returned as was registered.
    """
    def __iter__(self):
        """Iterate on items that have been registered."""
        return iter(self.items.values())

    def __len__(self):
        return len(self.items)

    def __enter__(self):
        return self

    def __exit__(self, tp, exc, tb):
        self.close()

    def register(self, item):
        """Register an item for reading.

        Items that are already registered are replaced.
        """
        raise NotImplementedError

    def unregister(self, item):
        """Unregister an item by value or fd."""
        raise NotImplementedError

    def poll(self, timeout=None):
        """Return the list of readable items.

        timeout: seconds.  Negative timeout or None means no timeout.
        An empty list means the timeout elapsed.
        """
        raise NotImplementedError

    def close(self):
        self.items.clear()

if hasattr(select, 'select'):
    __all__.append('SelectPoller')
    class SelectPoller(_Poller):
        """Wrap the select interface in poll-like interface."""
        backend = 'select'

        def __init__(self):
            self.items = {}

        def register(self, item):
            self.items[getfd(item)] = item

        def unregister(self, item):
            self.items.pop(getfd(item), None)

        def poll(self, timeout=None):
            if timeout is not None and timeout < 0:
                timeout = None
            if not self.items:
                return []
            fds = list(self.items)
            r, _, x = select.select(fds, (), fds, timeout)
            return [self.items[fd] for fd in set(r).union(x)]

    Poller = SelectPoller

if hasattr(select, 'poll'):
    __all__.append('PollPoller')
    class PollPoller(_Poller):
        """Wrap select.poll.

        Hangup and error events count as readable: the next read on the
        fd reports eof or the error itself.
        """
        backend = 'poll'
        r = select.POLLIN | select.POLLPRI
        NVAL = select.POLLNVAL

        def __init__(self):
            self.e = select.poll()
            self.items = {}

        def register(self, item):
            fd = getfd(item)
            if fd in self.items:
                self.unregister(fd)
            self.e.register(fd, self.r)
            self.items[fd] = item

        def unregister(self, item):
            fd = getfd(item)
            if self.items.pop(fd, None) is not None:
                self.e.unregister(fd)

        def poll(self, timeout=None):
            if timeout is None or timeout < 0:
                timeout = -1
            else:
                timeout *= 1000
            vals = self.e.poll(timeout)
            for fd, flag in vals:
                if flag & self.NVAL:
                    raise errnos.error(errnos.EBADF, 'fd {}'.format(fd))
            return [self.items[fd] for fd, flag in vals]

        def close(self):
            for fd in list(self.items):
                self.e.unregister(fd)
            self.items.clear()

    Poller = PollPoller

try:
    id(Poller)
except NameError:
    raise Exception('could not find supported polling mechanisms')


def wait_readable(fd, timeout=None, verbose=False):
    """Wait until fd is readable.

    timeout: seconds, None or negative to wait forever.
    verbose: print tracebacks of polling errors.

    Return (fd, err, timedout):
        (fd, None, None): fd is readable (or at eof/error).
        (None, None, True): timeout elapsed.
        (None, err, None): polling failed with OSError err.
    """
    with Poller() as poller:
        try:
            poller.register(fd)
            ready = poller.poll(timeout)
        except (OSError, ValueError) as e:
            if verbose:
                traceback.print_exc()
            if isinstance(e, ValueError):
                # select/poll reject negative fds with ValueError
                e = errnos.error(errnos.EBADF, str(e))
            return None, e, None
    if ready:
        return fd, None, None
    return None, None, True
