"""Recipe selection across the favorites / novelties / others pools.

Selection state is an explicit object threaded through every slot of one
generation run; cursors wrap with modulo over the (category-filtered) pool.
"""
import random
from typing import List, NamedTuple, Optional
from weekplan.domain.Recipe import Recipe
from weekplan.utilities.exceptions import NoRecipesAvailable

FAVORITES = "favorites"
NOVELTIES = "novelties"
OTHERS = "others"
FALLBACK = "fallback"


class SelectionState:
    """Per-run cursors. Not persisted; never shared between runs."""

    def __init__(self, favorite_index: int = 0, novelty_index: int = 0, other_index: int = 0,
                 novelty_count: int = 0, avoid_category: Optional[str] = None,
                 max_novelties: int = 0, favorite_ratio: float = 0.0):
        self.favorite_index = favorite_index
        self.novelty_index = novelty_index
        self.other_index = other_index
        self.novelty_count = novelty_count
        self.avoid_category = avoid_category
        self.max_novelties = max_novelties
        self.favorite_ratio = favorite_ratio

    def __repr__(self) -> str:
        return (f"SelectionState(fav={self.favorite_index}, nov={self.novelty_index}, "
                f"other={self.other_index}, novelties_used={self.novelty_count}/{self.max_novelties}, "
                f"avoid={self.avoid_category!r})")

    def advance(self, source: str) -> None:
        if source == FAVORITES:
            self.favorite_index += 1
        elif source == NOVELTIES:
            self.novelty_index += 1
            self.novelty_count += 1
        elif source == OTHERS:
            self.other_index += 1


class Selection(NamedTuple):
    recipe: Recipe
    source: str


def _without_category(recipes: List[Recipe], category: Optional[str]) -> List[Recipe]:
    if not category:
        return list(recipes)
    return [r for r in recipes if r.category != category]


def choose_recipe(favorites: List[Recipe], novelties: List[Recipe], others: List[Recipe],
                  state: SelectionState, rng: Optional[random.Random] = None) -> Selection:
    """Pick one recipe without touching ``state``.

    Priority: novelty while under the cap, then a favorite with probability
    ``favorite_ratio``, then the others pool, then the first recipe left in any
    pool. Raises NoRecipesAvailable when every pool is empty.
    """
    rng = rng or random
    favs = _without_category(favorites, state.avoid_category)
    novs = _without_category(novelties, state.avoid_category)
    rest = _without_category(others, state.avoid_category)

    if state.novelty_count < state.max_novelties and novs:
        return Selection(novs[state.novelty_index % len(novs)], NOVELTIES)

    # Evaluated only when favorites exist so an empty pool consumes no randomness
    if favs and rng.random() < state.favorite_ratio:
        return Selection(favs[state.favorite_index % len(favs)], FAVORITES)

    if rest:
        return Selection(rest[state.other_index % len(rest)], OTHERS)

    remaining = favs + novs + rest
    if remaining:
        return Selection(remaining[0], FALLBACK)

    raise NoRecipesAvailable("No recipes available for this slot")


class SelectionCycler:
    """Stateful selector for one generation run."""

    def __init__(self, favorites: List[Recipe], novelties: List[Recipe], others: List[Recipe],
                 state: SelectionState, rng: Optional[random.Random] = None):
        self.favorites = list(favorites)
        self.novelties = list(novelties)
        self.others = list(others)
        self.state = state
        self.rng = rng or random.Random()

    @property
    def is_empty(self) -> bool:
        return not (self.favorites or self.novelties or self.others)

    def select(self, avoid_category: Optional[str] = None) -> Selection:
        self.state.avoid_category = avoid_category
        picked = choose_recipe(self.favorites, self.novelties, self.others, self.state, self.rng)
        self.state.advance(picked.source)
        return picked
