# Copyright ClusterHQ Inc.  See LICENSE file for details.

"""
Helpers for testing hellod.
"""

import io

from twisted.internet import reactor
from twisted.internet.testing import MemoryReactorClock
from twisted.trial.unittest import TestCase
from twisted.web.client import Agent, HTTPConnectionPool

from ..httpapi import create_api_site

__all__ = [
    "FakeSysModule", "ShutdownMemoryReactor", "react_once",
    "build_integration_tests",
]


class FakeSysModule(object):
    """
    Stands in for ``sys``: ``argv`` as given, text buffers for ``stdout``
    and ``stderr``.
    """
    def __init__(self, argv=None):
        if argv is None:
            argv = ["hellod"]
        self.argv = argv
        self.stdout = io.StringIO()
        self.stderr = io.StringIO()


class ShutdownMemoryReactor(MemoryReactorClock):
    """
    A ``MemoryReactorClock`` which can run its ``before shutdown``
    triggers.
    """
    def shut_down(self):
        """
        Call the ``before shutdown`` triggers in the order they were added.
        """
        triggers = self.triggers.get("before", {}).get("shutdown", [])
        for f, args, kwargs in triggers:
            f(*args, **kwargs)


def react_once(main, argv=(), _reactor=None):
    """
    A stand-in for ``task.react`` which runs nothing.

    ``main`` is called; if its ``Deferred`` has not fired, the reactor is
    shut down with ``ShutdownMemoryReactor.shut_down``. Exits the way
    ``react`` does: the ``SystemExit`` code ``main`` failed with, 1 for any
    other failure, 0 on success.
    """
    finished = main(_reactor, *argv)
    if not finished.called:
        _reactor.shut_down()
    failures = []
    finished.addErrback(failures.append)
    if not failures:
        raise SystemExit(0)
    if failures[0].check(SystemExit):
        raise SystemExit(failures[0].value.code)
    raise SystemExit(1)


def build_integration_tests(mixin_class, name, fixture):
    """
    Build a ``TestCase`` which runs the tests in ``mixin_class`` against a
    ``HelloWorldResource`` served on a real loopback TCP port.

    The tests get ``self.api``, ``self.agent`` (a ``twisted.web.client.Agent``)
    and ``self.url(path)``, which turns a path into a URL on that port.

    :param mixin_class: A mixin class of test methods.
    :param str name: Appended to the name of the generated class.
    :param fixture: A callable that takes the ``TestCase`` and returns the
        ``HelloWorldResource`` to serve.

    :return: A ``TestCase`` subclass.
    """
    class RealTests(mixin_class, TestCase):
        """
        Tests that the API is available over the network.
        """
        def setUp(self):
            self.api = fixture(self)
            self.port = reactor.listenTCP(
                0, create_api_site(self.api), interface="127.0.0.1",
            )
            self.addCleanup(self.port.stopListening)
            pool = HTTPConnectionPool(reactor, persistent=True)
            self.addCleanup(pool.closeCachedConnections)
            self.agent = Agent(reactor, pool=pool)
            super(RealTests, self).setUp()

        def url(self, path):
            return b"http://127.0.0.1:%d%s" % (self.port.getHost().port, path)

    RealTests.__name__ += name
    RealTests.__qualname__ = RealTests.__name__
    RealTests.__module__ = mixin_class.__module__
    return RealTests
