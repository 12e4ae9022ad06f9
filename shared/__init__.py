"""
Shared infrastructure for the document record access layer.

Subpackages:
- config: Settings, logging, constants
- infrastructure: Store connection, correlation IDs
- utils: Exceptions
"""
