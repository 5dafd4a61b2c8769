"""
Custom exceptions shared by all layers.

NOTE: GameError does not derive from ValueError. Pydantic only wraps ValueError/AssertionError raised in validators,
so raising one of these inside a validator reaches the caller as-is.
"""


class GameError(Exception):
    """Top-level exception for anything going wrong while playing a game."""


class GameStateError(GameError):
    """The game is not in a phase that allows the requested operation."""


class IllegalMoveError(GameError):
    """Pawn move to a cell that is not among the legal destinations."""


class IllegalWallError(GameError):
    """Wall placement rejected by the wall validator."""


class NoWallsLeftError(IllegalWallError):
    pass


class WallOutOfBoundsError(IllegalWallError):
    pass


class WallCollisionError(IllegalWallError):
    pass


class WallEnclosesPlayerError(IllegalWallError):
    pass


class InvalidActionError(GameError):
    """Action payload that cannot be interpreted."""


class InvalidRequestError(GameError):
    """Request / configuration data failed validation."""


class RepositoryError(GameError):
    pass


class ChannelError(GameError):
    """Shared game-state channel could not deliver or find a game."""
