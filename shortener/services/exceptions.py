"""Exceptions raised by the service layer."""


class ServiceClosedError(RuntimeError):
    """Exception raised when a request reaches a service that has been closed."""

    pass
