"""
Release identifiers for the Blog Generator service.

`__version__` is the package release and follows semantic versioning. `API_VERSION` names the HTTP
contract: it is the path segment routes are mounted under and the `version` reported by /health,
and it only moves on breaking API changes.
"""

__version__ = "1.0.0"
API_VERSION = "v1"
