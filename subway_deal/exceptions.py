"""
Custom exception hierarchy for the Subway Deal engine and server.

Provides typed errors that can be handled consistently across
the rules engine, the session registry, and the API layer.
"""


class SubwayDealError(Exception):
    """Base exception for all game-related errors."""


class NotFoundError(SubwayDealError):
    """Card or player is not where it was expected."""


class InvalidOperationError(SubwayDealError):
    """Operation is not allowed in the current state of a component."""


class GameNotFoundError(SubwayDealError):
    """Game session does not exist."""


class SessionLimitError(SubwayDealError):
    """No more game sessions can be opened."""
