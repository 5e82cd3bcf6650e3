"""
repositories/exceptions.py
--------------------------
Exception hierarchy raised by the order repository.
"""


class NorthwindError(Exception):
    """Base exception for all repository errors."""


class ValidationError(NorthwindError):
    """Raised before any I/O when caller-supplied arguments are invalid."""


class NotFoundError(NorthwindError):
    """Raised when a required row (order, employee, shipper, product) is missing."""


class RepositoryError(NorthwindError):
    """
    Raised when a transactional write fails.

    The transaction has been rolled back and the connection closed by
    the time this is raised; the driver failure is kept as `__cause__`.
    """
