# Copyright ClusterHQ Inc.  See LICENSE file for details.
# -*- test-case-name: hellod.test.test_script -*-

"""
The ``hellod`` command: serve ``Hello world`` over HTTP on port 8080.
"""

import sys

from bitmath import MiB

from eliot import (
    Logger, FileDestination, add_destinations, remove_destination,
)

from twisted.application.service import Service
from twisted.internet import task, reactor as global_reactor
from twisted.internet.defer import Deferred, maybeDeferred
from twisted.internet.endpoints import serverFromString
from twisted.python import log as twisted_log
from twisted.python.filepath import FilePath
from twisted.python.log import err, textFromEventDict
from twisted.python.logfile import LogFile
from twisted.python.usage import Options, UsageError

from . import HTTP_PORT, __version__
from ._logging import LISTENING, LISTEN_FAILED, TWISTED_LOG_MESSAGE
from .httpapi import listen_api

__all__ = [
    "LISTEN_ENDPOINT", "HelloOptions", "HelloScript", "ScriptRunner",
    "main_for_service", "hellod_main",
]

# All interfaces.
LISTEN_ENDPOINT = "tcp:%d" % (HTTP_PORT,)

LOGFILE_LENGTH = int(MiB(100).to_Byte().value)
LOGFILE_COUNT = 5

_logger = Logger()


class HelloOptions(Options):
    """
    Command line options for ``hellod``.

    ``logfile`` is where Eliot messages go, standard output unless
    ``--logfile`` is given. ``verbosity`` counts ``--verbose`` flags.
    """
    synopsis = "Usage: hellod [options]"
    longdesc = "Answer every HTTP request on port %d with 'Hello world'." % (
        HTTP_PORT,)

    def __init__(self, sys_module=None):
        """
        :param sys_module: A ``sys``-like object, for tests. ``sys`` if not
            given.
        """
        Options.__init__(self)
        if sys_module is None:
            sys_module = sys
        self._sys_module = sys_module
        self["verbosity"] = 0
        self["logfile"] = sys_module.stdout

    def opt_version(self):
        """Print the program's version and exit."""
        self._sys_module.stdout.write(__version__ + "\n")
        raise SystemExit(0)

    def opt_verbose(self):
        """
        Also log Twisted's informational messages, including a line per
        request. Errors are always logged.
        """
        self["verbosity"] += 1
    opt_v = opt_verbose

    def opt_logfile(self, logfile_path):
        """
        Log to this file, rotated every 100 MiB, instead of standard output.
        """
        logfile = FilePath(logfile_path)
        if not logfile.parent().exists():
            logfile.parent().makedirs()
        self["logfile"] = LogFile.fromFullPath(
            logfile.path,
            rotateLength=LOGFILE_LENGTH,
            maxRotatedFiles=LOGFILE_COUNT,
        )


class HelloScript(object):
    """
    Listen on the HTTP port and serve until the reactor shuts down.

    :ivar logger: The Eliot ``Logger`` to write to.
    """
    logger = _logger

    def __init__(self, endpoint_description=LISTEN_ENDPOINT,
                 sys_module=None):
        """
        :param str endpoint_description: A ``serverFromString`` description
            of where to listen.
        :param sys_module: A ``sys``-like object whose ``stderr`` receives
            the fatal error report. ``sys`` if not given.
        """
        self.endpoint_description = endpoint_description
        if sys_module is None:
            sys_module = sys
        self.stderr = sys_module.stderr

    def main(self, reactor, options):
        """
        :return: A ``Deferred`` firing once the reactor has shut down and
            the port is closed, or failing with ``SystemExit(1)`` if the
            port could not be bound.
        """
        endpoint = serverFromString(reactor, self.endpoint_description)
        listening = listen_api(endpoint)
        listening.addCallbacks(
            self._serve, self._listen_failed, callbackArgs=(reactor,))
        return listening

    def _serve(self, service, reactor):
        LISTENING(
            endpoint=self.endpoint_description,
            port=getattr(service.port.getHost(), "port", None),
        ).write(self.logger)
        return main_for_service(reactor, service)

    def _listen_failed(self, reason):
        message = reason.getErrorMessage()
        LISTEN_FAILED(
            endpoint=self.endpoint_description, reason=message,
        ).write(self.logger)
        self.stderr.write(
            "ERROR: Could not listen on %s: %s\n" % (
                self.endpoint_description, message))
        raise SystemExit(1)


def main_for_service(reactor, service):
    """
    Start ``service`` and stop it before ``reactor`` shuts down.

    :return: A ``Deferred`` firing with the result of stopping the service.
    """
    service.startService()
    stopped = Deferred()

    def stop():
        maybeDeferred(service.stopService).chainDeferred(stopped)
        return stopped
    reactor.addSystemEventTrigger("before", "shutdown", stop)
    return stopped


class _EliotLogService(Service):
    """
    While running, write Eliot messages to a file and copy the legacy
    Twisted log into Eliot: errors always, everything else only when
    ``verbosity`` is at least 1.

    :ivar logger: The Eliot ``Logger`` Twisted log events are written to.
    """
    logger = _logger

    def __init__(self, log_file, verbosity, publisher=twisted_log):
        self.destination = FileDestination(file=log_file)
        self.verbosity = verbosity
        self.publisher = publisher

    def startService(self):
        Service.startService(self)
        add_destinations(self.destination)
        self.publisher.addObserver(self._observe)

    def stopService(self):
        Service.stopService(self)
        self.publisher.removeObserver(self._observe)
        remove_destination(self.destination)

    def _observe(self, event):
        error = bool(event.get("isError"))
        if not error and self.verbosity < 1:
            return
        text = textFromEventDict(event)
        if text is None:
            return
        TWISTED_LOG_MESSAGE(error=error, message=text).write(self.logger)


class ScriptRunner(object):
    """
    Run a script under ``task.react`` with its options parsed and logging
    started.

    :ivar _react: ``task.react``, replaceable in tests.
    """
    _react = staticmethod(task.react)

    def __init__(self, script, options, reactor=None, sys_module=None):
        """
        :param script: An object with a ``main(reactor, options)`` method
            returning a ``Deferred``.
        :param Options options: The option parser for ``script``.
        :param reactor: The reactor to run. The global one if not given.
        :param sys_module: A ``sys``-like object supplying ``argv`` and
            ``stderr``. ``sys`` if not given.
        """
        self.script = script
        self.options = options
        if reactor is None:
            reactor = global_reactor
        self.reactor = reactor
        if sys_module is None:
            sys_module = sys
        self.sys_module = sys_module

    def _parse_options(self, arguments):
        try:
            self.options.parseOptions(arguments)
        except UsageError as e:
            self.sys_module.stderr.write(str(self.options))
            self.sys_module.stderr.write("ERROR: %s\n" % (e,))
            raise SystemExit(1)
        return self.options

    def _run(self, reactor, options):
        running = maybeDeferred(self.script.main, reactor, options)

        def failed(reason):
            if not reason.check(SystemExit):
                err(reason, "hellod failed")
            return reason
        running.addErrback(failed)
        return running

    def main(self):
        """
        Parse ``argv`` and run the script; exits via ``SystemExit``.
        """
        # --version and --help exit here, before any logging starts.
        options = self._parse_options(self.sys_module.argv[1:])
        log_service = _EliotLogService(
            options["logfile"], options["verbosity"])
        log_service.startService()
        try:
            self._react(self._run, [options], _reactor=self.reactor)
        finally:
            log_service.stopService()


def hellod_main():
    """
    Script entry point that runs the HTTP server.
    """
    return ScriptRunner(script=HelloScript(), options=HelloOptions()).main()
