import random
import unittest
from weekplan.domain.Recipe import Recipe
from weekplan.logic.selection.cycler import (
    FALLBACK, FAVORITES, NOVELTIES, OTHERS, SelectionCycler, SelectionState, choose_recipe,
)
from weekplan.utilities.exceptions import NoRecipesAvailable


def _r(id, category="main", **flags):
    return Recipe(id=id, title=id, category=category, **flags)


class TestChooseRecipe(unittest.TestCase):
    def setUp(self):
        self.rng = random.Random(42)
        self.favorites = [_r("F0", "a"), _r("F1", "b"), _r("F2", "c"), _r("F3", "d")]

    def test_favorite_cursor_wraps_with_modulo(self):
        state = SelectionState(favorite_index=5, favorite_ratio=1.0)
        picked = choose_recipe(self.favorites, [], [], state, self.rng)
        self.assertEqual(picked.recipe.id, "F1")
        self.assertEqual(picked.source, FAVORITES)

    def test_two_favorites_index_five_picks_second(self):
        state = SelectionState(favorite_index=5, favorite_ratio=1.0)
        picked = choose_recipe([_r("F1"), _r("F2")], [], [], state, self.rng)
        self.assertEqual(picked.recipe.id, "F2")

    def test_choose_does_not_mutate_state(self):
        state = SelectionState(favorite_index=2, novelty_index=1, max_novelties=1, favorite_ratio=0.5)
        before = repr(state)
        choose_recipe(self.favorites, [_r("N0"), _r("N1")], [_r("O0")], state, self.rng)
        self.assertEqual(repr(state), before)

    def test_frozen_state_and_seed_give_same_pick(self):
        state = SelectionState(favorite_index=1, other_index=3, favorite_ratio=0.5)
        picks = {choose_recipe(self.favorites, [], [_r("O0"), _r("O1")], state, random.Random(7)).recipe.id
                 for _ in range(5)}
        self.assertEqual(len(picks), 1)

    def test_novelty_first_while_under_cap(self):
        state = SelectionState(max_novelties=1, favorite_ratio=1.0)
        picked = choose_recipe(self.favorites, [_r("N0", "z")], [], state, self.rng)
        self.assertEqual((picked.recipe.id, picked.source), ("N0", NOVELTIES))

    def test_others_when_favorite_coin_fails(self):
        state = SelectionState(favorite_ratio=0.0)
        picked = choose_recipe(self.favorites, [], [_r("O0")], state, self.rng)
        self.assertEqual((picked.recipe.id, picked.source), ("O0", OTHERS))

    def test_fallback_to_first_remaining_recipe(self):
        state = SelectionState(favorite_ratio=0.0)
        picked = choose_recipe(self.favorites, [], [], state, self.rng)
        self.assertEqual((picked.recipe.id, picked.source), ("F0", FALLBACK))

    def test_avoid_category_filters_every_pool(self):
        state = SelectionState(favorite_ratio=1.0, avoid_category="a")
        picked = choose_recipe(self.favorites, [], [], state, self.rng)
        self.assertEqual(picked.recipe.id, "F1")

    def test_empty_pools_raise(self):
        with self.assertRaises(NoRecipesAvailable):
            choose_recipe([], [], [], SelectionState(), self.rng)


class TestSelectionCycler(unittest.TestCase):
    def test_favorites_win_when_ratio_is_one_and_novelties_used_up(self):
        state = SelectionState(novelty_count=2, max_novelties=2, favorite_ratio=1.0)
        cycler = SelectionCycler([_r("F1", "a"), _r("F2", "b")], [], [_r("O1", "c")], state, random.Random(1))
        picks = [cycler.select() for _ in range(6)]
        self.assertEqual([p.recipe.id for p in picks], ["F1", "F2", "F1", "F2", "F1", "F2"])
        self.assertTrue(all(p.source == FAVORITES for p in picks))
        self.assertEqual(cycler.state.favorite_index, 6)

    def test_novelty_cap_is_respected(self):
        cycler = SelectionCycler([], [_r("N1", "x"), _r("N2", "y")], [_r("O1", "o"), _r("O2", "p")],
                                 SelectionState(max_novelties=1, favorite_ratio=0.0), random.Random(3))
        picks = [cycler.select() for _ in range(10)]
        self.assertEqual(sum(1 for p in picks if p.source == NOVELTIES), 1)
        self.assertEqual(picks[0].recipe.id, "N1")
        self.assertEqual(cycler.state.novelty_count, 1)

    def test_fallback_does_not_advance_cursors(self):
        cycler = SelectionCycler([_r("F1")], [], [], SelectionState(favorite_ratio=0.0), random.Random(3))
        cycler.select()
        cycler.select()
        self.assertEqual(cycler.state.favorite_index, 0)

    def test_is_empty(self):
        self.assertTrue(SelectionCycler([], [], [], SelectionState()).is_empty)
        self.assertFalse(SelectionCycler([], [], [_r("O1")], SelectionState()).is_empty)

    def test_same_seed_same_sequence(self):
        pools = ([_r("F1", "a"), _r("F2", "b")], [_r("N1", "c")], [_r("O1", "d"), _r("O2", "e")])

        def run(seed):
            cycler = SelectionCycler(*pools, SelectionState(max_novelties=1, favorite_ratio=0.5),
                                     random.Random(seed))
            return [cycler.select().recipe.id for _ in range(12)]

        self.assertEqual(run(11), run(11))


if __name__ == '__main__':
    unittest.main()
