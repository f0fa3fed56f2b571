from enum import Enum

Coord = tuple[int, int]  # (row, col)


class Direction(str, Enum):
    N = "N"
    S = "S"
    E = "E"
    W = "W"


class PieceKind(str, Enum):
    START = "start"
    END = "end"
    PATH = "path"
    OBSTACLE = "obstacle"
    DECORATION = "decoration"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class ActionLogResult(str, Enum):
    APPLIED = "applied"
    ILLEGAL = "illegal"
    ERROR = "error"
