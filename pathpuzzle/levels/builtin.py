from ..models.enums import Difficulty
from ..models.level import Level
from .validation import create_grid, generate_locked_cells

_LEVEL_2_GRID = create_grid(3, 5, [
    ["debut_1", "puzzle_1", None, None, None],
    [None, "puzzle_2", "puzzle_3", None, None],
    [None, None, "puzzle_4", "puzzle_2", "fin_1"],
])

_LEVEL_3_GRID = create_grid(3, 5, [
    ["debut_1", None, None, None, "puzzle_1"],
    [None, None, "puzzle_3", None, "puzzle_2"],
    ["puzzle_4", None, "puzzle_1", None, "fin_1"],
])


def builtin_levels() -> list[Level]:
    """Published levels shipped with the game. Fresh objects on every call."""
    return [
        Level(
            id=1,
            name="Niveau 1 - Initiation",
            grid=create_grid(3, 5, [
                [None, None, None, None, None],
                ["fin_2", None, None, "puzzle_1", None],
                [None, "obstacle_1", None, None, "debut_1"],
            ]),
            locked_cells=[
                {"row": 1, "col": 0},
                {"row": 1, "col": 3},
                {"row": 2, "col": 1},
                {"row": 2, "col": 4},
            ],
            description=(
                "Créez votre premier chemin ! Placez le Petit Chaperon Rouge et sa "
                "grand-mère, puis connectez-les avec des chemins."
            ),
            difficulty=Difficulty.EASY,
            published=True,
        ),
        Level(
            id=2,
            name="Niveau 2 - Chemin simple",
            grid=create_grid(3, 5, _LEVEL_2_GRID),
            locked_cells=generate_locked_cells(_LEVEL_2_GRID),
            description=(
                "Complétez le chemin commencé pour permettre au Petit Chaperon Rouge "
                "d'atteindre sa destination."
            ),
            difficulty=Difficulty.EASY,
            published=True,
        ),
        Level(
            id=3,
            name="Niveau 3 - Parcours défi",
            grid=create_grid(3, 5, _LEVEL_3_GRID),
            locked_cells=generate_locked_cells(_LEVEL_3_GRID),
            description=(
                "Un niveau plus complexe avec des pièces déjà placées. Complétez le "
                "chemin pour gagner !"
            ),
            difficulty=Difficulty.MEDIUM,
            published=True,
        ),
    ]


def get_level_by_id(level_id: int) -> Level | None:
    return next((lv for lv in builtin_levels() if lv.id == level_id), None)


def get_default_level() -> Level:
    return builtin_levels()[0]
