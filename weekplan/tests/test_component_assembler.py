import random
import unittest
from weekplan.domain.FoodComponent import FoodComponent
from weekplan.logic.assembly.components import ComponentAssembler, assemble, role_for, select_components
from weekplan.utilities.constants import (
    BASE_CARB, MAIN_PROTEIN, PRIMARY_VEGETABLE, SECONDARY_VEGETABLE, SIDE,
)
from weekplan.utilities.exceptions import InsufficientComponents


def _c(id, category):
    return FoodComponent(id=id, name=id, category=category, default_quantity=120, unit="g")


class TestComponentAssembler(unittest.TestCase):
    def setUp(self):
        self.proteins = [_c("P1", "PROTEIN"), _c("P2", "PROTEIN"), _c("P3", "PROTEIN")]
        self.vegetables = [_c("V1", "VEGETABLE"), _c("V2", "VEGETABLE"), _c("V3", "VEGETABLE")]
        self.carbs = [_c("C1", "CARB"), _c("C2", "CARB")]
        self.extras = [_c("S1", "SAUCE")]

    def _assembler(self, seed=5):
        return ComponentAssembler(self.proteins + self.vegetables + self.carbs + self.extras,
                                  random.Random(seed))

    def test_meal_composition_and_order(self):
        assembler = self._assembler()
        sizes = set()
        for _ in range(30):
            meal = assembler.assemble()
            roles = [mc.role for mc in meal]
            sizes.add(len(meal))
            self.assertEqual(roles[0], MAIN_PROTEIN)
            self.assertEqual(roles[-1], BASE_CARB)
            self.assertEqual(roles[1], PRIMARY_VEGETABLE)
            if len(meal) == 4:
                self.assertEqual(roles[2], SECONDARY_VEGETABLE)
            self.assertEqual([mc.order for mc in meal], list(range(len(meal))))
            self.assertTrue(all(mc.quantity == 120 and mc.unit == "g" for mc in meal))
            self.assertNotIn("S1", [mc.component_id for mc in meal])
        # With 30 draws both one- and two-vegetable meals show up
        self.assertEqual(sizes, {3, 4})

    def test_vegetables_are_distinct(self):
        assembler = self._assembler(seed=9)
        for _ in range(20):
            ids = [mc.component_id for mc in assembler.assemble() if mc.role.endswith("_VEGETABLE")]
            self.assertEqual(len(ids), len(set(ids)))

    def test_recent_proteins_are_avoided(self):
        assembler = self._assembler()
        history = [assembler.assemble()[0].component_id for _ in range(12)]
        for i in range(2, len(history)):
            self.assertNotIn(history[i], history[i - 2:i])
        self.assertEqual(len(assembler.recent_proteins), 2)

    def test_recency_falls_back_to_full_pool(self):
        proteins = [_c("P1", "PROTEIN")]
        picks = [select_components(proteins, self.vegetables, self.carbs, ["P1"], random.Random(i))[0].id
                 for i in range(3)]
        self.assertEqual(picks, ["P1", "P1", "P1"])

    def test_assemble_function_avoids_recent_proteins(self):
        meal = assemble(self.proteins, self.vegetables, self.carbs, {"P1", "P2"}, random.Random(2))
        self.assertEqual(meal[0].component_id, "P3")
        self.assertEqual(meal[-1].role, BASE_CARB)

    def test_missing_category_raises(self):
        assembler = ComponentAssembler(self.proteins + self.vegetables, random.Random(1))
        self.assertFalse(assembler.can_assemble)
        with self.assertRaises(InsufficientComponents) as ctx:
            assembler.assemble()
        self.assertIn("carb", ctx.exception.message)

    def test_role_for(self):
        self.assertEqual(role_for(_c("V", "VEGETABLE"), 0), PRIMARY_VEGETABLE)
        self.assertEqual(role_for(_c("V", "VEGETABLE"), 1), SECONDARY_VEGETABLE)
        self.assertEqual(role_for(_c("F", "FRUIT")), SIDE)


if __name__ == '__main__':
    unittest.main()
