"""Exceptions for the Mutation Coordinator."""


class CoordinatorError(Exception):
    """Base exception for coordinator errors."""

    pass


class MalformedIntentError(CoordinatorError):
    """Inbound message has an unknown type or is missing required fields."""

    pass
