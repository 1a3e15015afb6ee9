import unittest
from weekplan.domain.DietProfile import DietProfile
from weekplan.domain.Family import MealScheduleTemplate
from weekplan.domain.Plan import Meal, MealComponent
from weekplan.utilities.exceptions import InvalidJSONSchedule, InvalidPayload
from weekplan.utilities.validators import (
    AddComponentInput, CutoffInput, DietProfileInput, parse_payload, parse_schedule,
)


class TestDomain(unittest.TestCase):
    def test_diet_profile_bounds(self):
        with self.assertRaises(ValueError):
            DietProfile(favorite_ratio=1.5)
        with self.assertRaises(ValueError):
            DietProfile(max_novelties=-1)

    def test_meal_portions_must_be_positive(self):
        with self.assertRaises(ValueError):
            Meal(portions=0)

    def test_setting_recipe_clears_components(self):
        meal = Meal()
        meal.set_components([MealComponent(component_id="c1", order=3), MealComponent(component_id="c2", order=1)])
        self.assertEqual([mc.component_id for mc in meal.meal_components], ["c2", "c1"])
        self.assertEqual([mc.order for mc in meal.meal_components], [0, 1])
        self.assertTrue(meal.is_component_based)
        meal.set_recipe("r1")
        self.assertEqual(meal.meal_components, [])
        self.assertFalse(meal.is_empty)

    def test_template_slots_follow_grid_order(self):
        template = MealScheduleTemplate(schedule=[
            {"day_of_week": "WEDNESDAY", "meal_types": ["DINNER", "LUNCH"]},
            {"day_of_week": "MONDAY", "meal_types": ["DINNER"]},
        ])
        self.assertEqual(template.slots(), [("MONDAY", "DINNER"), ("WEDNESDAY", "LUNCH"), ("WEDNESDAY", "DINNER")])


class TestValidators(unittest.TestCase):
    def test_schedule_is_normalized(self):
        data = parse_schedule({"name": "Weekdays", "schedule": [{"day_of_week": "monday", "meal_types": ["dinner"]}]})
        self.assertEqual(data.schedule[0].day_of_week, "MONDAY")
        self.assertEqual(data.schedule[0].meal_types, ["DINNER"])

    def test_malformed_schedules(self):
        bad = [
            {"name": "Empty", "schedule": []},
            {"name": "Dup", "schedule": [{"day_of_week": "MONDAY", "meal_types": ["LUNCH"]},
                                         {"day_of_week": "MONDAY", "meal_types": ["DINNER"]}]},
            {"name": "No meals", "schedule": [{"day_of_week": "MONDAY", "meal_types": []}]},
            {"name": "Bad day", "schedule": [{"day_of_week": "FUNDAY", "meal_types": ["LUNCH"]}]},
            {"name": "Bad meal", "schedule": [{"day_of_week": "MONDAY", "meal_types": ["BRUNCH"]}]},
            "not json",
        ]
        for payload in bad:
            with self.assertRaises(InvalidJSONSchedule):
                parse_schedule(payload)

    def test_diet_profile_input(self):
        data = parse_payload(DietProfileInput, {"allergies": [" Milk", "milk", ""], "favorite_ratio": 0.4})
        self.assertEqual(data.allergies, ["milk"])
        with self.assertRaises(InvalidPayload):
            parse_payload(DietProfileInput, {"favorite_ratio": 2})
        with self.assertRaises(InvalidPayload):
            parse_payload(DietProfileInput, {"max_novelties": -1})

    def test_component_and_cutoff_inputs(self):
        with self.assertRaises(InvalidPayload):
            parse_payload(AddComponentInput, {"component_id": "c1", "quantity": 0})
        with self.assertRaises(InvalidPayload):
            parse_payload(CutoffInput, {"cutoff_time": "25:00"})
        self.assertEqual(parse_payload(CutoffInput, {"cutoff_time": "18:30"}).cutoff_time, "18:30")


if __name__ == '__main__':
    unittest.main()
