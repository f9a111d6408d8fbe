# Copyright ClusterHQ Inc.  See LICENSE file for details.

"""
This module defines the Eliot log events emitted by hellod.
"""

from eliot import Field, ActionType, MessageType, fields

__all__ = [
    "REQUEST", "LISTENING", "LISTEN_FAILED", "TWISTED_LOG_MESSAGE",
    ]

LOG_SYSTEM = u"hellod"


def _text(value):
    """
    Serialize a ``bytes`` value taken off the wire as text.
    """
    if isinstance(value, bytes):
        return value.decode("utf-8", "replace")
    return value


METHOD = Field(u"method", _text,
               u"The HTTP method of the request.")
REQUEST_PATH = Field(
    u"request_path", _text,
    u"The absolute path of the resource to which the request was issued.")
RESPONSE_CODE = Field.forTypes(
    u"code", [int],
    u"The response code for the request.")

ENDPOINT = Field.forTypes(
    u"endpoint", [str],
    u"The description of the server endpoint.")
PORT = Field.forTypes(
    u"port", [int, None],
    u"The TCP port number which was bound, if any.")
REASON = Field.forTypes(
    u"reason", [str],
    u"Why listening on the endpoint failed.")


REQUEST = ActionType(
    LOG_SYSTEM + u":api:request",
    [REQUEST_PATH, METHOD],
    [RESPONSE_CODE],
    u"A request was received on the HTTP interface.")

LISTENING = MessageType(
    LOG_SYSTEM + u":listening",
    [ENDPOINT, PORT],
    u"The HTTP interface is listening for connections.")

LISTEN_FAILED = MessageType(
    LOG_SYSTEM + u":listen_failed",
    [ENDPOINT, REASON],
    u"The HTTP interface could not listen on its endpoint.")

TWISTED_LOG_MESSAGE = MessageType(
    u"twisted:log", fields(error=bool, message=str),
    u"A log message from Twisted.")
