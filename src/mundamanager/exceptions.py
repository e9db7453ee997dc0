"""Exceptions raised by the service layer.

Validation problems are plain ``ValueError``; these two cover the cases the
HTTP layer must tell apart from bad input.
"""


class NotFoundError(LookupError):
    """A referenced row does not exist."""


class PermissionDeniedError(PermissionError):
    """The acting user may not perform the operation."""
