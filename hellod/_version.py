# Copyright ClusterHQ Inc.  See LICENSE file for details.

"""
The version of hellod, kept free of imports so ``setup.py`` can read it.
"""

__version__ = "1.0.0"
