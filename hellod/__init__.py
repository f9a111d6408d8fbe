# Copyright ClusterHQ Inc.  See LICENSE file for details.

"""
hellod is an HTTP server which answers every request with ``Hello world``.
"""

import os
import sys

from ._version import __version__

__all__ = ["__version__", "HTTP_PORT"]

# Fixed; there is no option to change it.
HTTP_PORT = 8080

if os.path.basename(sys.argv[0]) == "trial":
    # Eliot messages from the tests end up in _trial_temp/test.log.
    from eliot.twisted import redirectLogsForTrial
    redirectLogsForTrial()
