# Copyright ClusterHQ Inc.  See LICENSE file for details.
# -*- test-case-name: hellod.test.test_httpapi -*-

"""
The HTTP interface of hellod: every request is answered with ``Hello world``.
"""

from eliot import Logger

from twisted.application.service import Service
from twisted.web.resource import Resource
from twisted.web.server import Site

from ._logging import REQUEST

__all__ = [
    "RESPONSE_BODY", "HelloWorldResource", "create_api_site", "listen_api",
]

RESPONSE_BODY = b"Hello world"

_logger = Logger()


class HelloWorldResource(Resource):
    """
    The catch-all HTTP responder.

    As a leaf, it is handed every request without ``twisted.web`` walking
    (or decoding) the path, and it overrides ``render`` so no method is
    turned away.

    :ivar logger: The Eliot ``Logger`` requests are logged to, or ``None``
        for the default one.
    """
    isLeaf = True
    logger = None

    def _get_logger(self):
        if self.logger is None:
            return _logger
        return self.logger

    def render(self, request):
        with REQUEST(self._get_logger(), request_path=request.path,
                     method=request.method) as action:
            request.setHeader(
                b"content-length", b"%d" % (len(RESPONSE_BODY),))
            action.add_success_fields(code=request.code)
            if request.method == b"HEAD":
                # Site.render would otherwise warn and reset the length.
                return b""
            return RESPONSE_BODY


def create_api_site(resource=None):
    """
    :param HelloWorldResource resource: The responder to serve. A new one if
        not given.
    :return: A ``Site`` serving ``resource`` at its root.
    """
    if resource is None:
        resource = HelloWorldResource()
    return Site(resource)


class _ListeningPortService(Service):
    """
    An ``IService`` owning a port which is already listening; stopping the
    service stops listening.

    :ivar IListeningPort port: The bound port.
    """
    def __init__(self, port):
        self.port = port

    def stopService(self):
        Service.stopService(self)
        return self.port.stopListening()


def listen_api(endpoint, resource=None):
    """
    Bind the HTTP interface on ``endpoint``.

    :param IStreamServerEndpoint endpoint: Where to listen.
    :param HelloWorldResource resource: The responder to serve. A new one if
        not given.

    :return: A ``Deferred`` firing with an ``IService`` provider wrapping
        the listening port, or failing with the endpoint's error, for
        example ``CannotListenError`` if the port is taken.
    """
    listening = endpoint.listen(create_api_site(resource))
    listening.addCallback(_ListeningPortService)
    return listening
