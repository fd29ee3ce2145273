import errno
import os
import time

import pytest

from jhsiao.fdio import polling

POLLERS = [
    getattr(polling, name)
    for name in ('SelectPoller', 'PollPoller')
    if hasattr(polling, name)]

@pytest.fixture
def pipe():
    r, w = os.pipe()
    fds = [r, w]
    yield fds
    for fd in fds:
        if fd is not None:
            os.close(fd)

@pytest.mark.parametrize('pollercls', POLLERS)
def test_poller(pollercls, pipe):
    r, w = pipe
    with pollercls() as poller:
        poller.register(r)
        assert list(poller) == [r]
        assert len(poller) == 1
        now = time.monotonic()
        assert poller.poll(.1) == []
        assert time.monotonic() - now > .05

        os.write(w, b'x')
        now = time.monotonic()
        assert poller.poll(1) == [r]
        assert time.monotonic() - now < .5

        poller.unregister(r)
        assert len(poller) == 0
        poller.unregister(r)

@pytest.mark.parametrize('pollercls', POLLERS)
def test_poller_hangup(pollercls, pipe):
    r, w = pipe
    os.close(w)
    pipe[1] = None
    with pollercls() as poller:
        poller.register(r)
        assert poller.poll(1) == [r]

def test_wait_readable(pipe):
    r, w = pipe
    now = time.monotonic()
    assert polling.wait_readable(r, .1) == (None, None, True)
    assert time.monotonic() - now >= .08
    os.write(w, b'x')
    assert polling.wait_readable(r, 1) == (r, None, None)
    assert polling.wait_readable(r) == (r, None, None)

def test_wait_readable_errors():
    fd, err, timedout = polling.wait_readable(-1, .1)
    assert fd is None and timedout is None
    assert err.errno == errno.EBADF

    r, w = os.pipe()
    os.close(r)
    os.close(w)
    fd, err, timedout = polling.wait_readable(r, .1)
    assert fd is None and timedout is None
    assert err.errno == errno.EBADF
