# Copyright ClusterHQ Inc.  See LICENSE file for details.

"""
Functional tests for the installed ``hellod`` command.
"""
