"""
APIHUB operation group tooling.

Builds an operation group from the operations of a package version that carry
a given custom tag, and optionally exports the group to a file.
"""
__version__ = "0.1.0"
