"""
Type definitions used across layers
"""

from enum import StrEnum


class Phase(StrEnum):
    MENU = "menu"
    AWAITING_OPPONENT = "awaiting opponent"
    PLAYING = "playing"
    GAME_OVER = "game over"


class EndReason(StrEnum):
    GOAL_REACHED = "goal reached"
    TIMEOUT = "timeout"


class Orientation(StrEnum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class ActionType(StrEnum):
    MOVE = "MOVE"
    PLACE_WALL = "PLACE_WALL"
    TIMEOUT = "TIMEOUT"
    PASS = "PASS"


class GameMode(StrEnum):
    PVP = "PVP"
    PVC = "PVC"


class Difficulty(StrEnum):
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


class AiBackend(StrEnum):
    LOCAL = "LOCAL"
    REMOTE = "REMOTE"


class StartPosition(StrEnum):
    CENTER = "CENTER"
    RANDOM = "RANDOM"
