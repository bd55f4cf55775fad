import unittest

from skintrack_backend.services.profile import (
    InvalidProfileUpdateError,
    Profile,
    order_goals,
    profile_completion,
    toggle_goal,
    validate_profile_update,
)


class ValidateProfileUpdateTests(unittest.TestCase):
    def test_normalizes_accepted_fields(self):
        cleaned = validate_profile_update(
            {
                "name": "  Ana  ",
                "skin_type": "Combination",
                "allergies": [{"ingredient": " Retinol ", "severity": "high"}],
                "onboarding_status": "complete",
            }
        )

        self.assertEqual(
            cleaned,
            {
                "name": "Ana",
                "skin_type": "Combination",
                "allergies": [{"ingredient": "Retinol", "severity": "high"}],
                "onboarding_status": "complete",
            },
        )

    def test_rejects_bad_shapes(self):
        cases = [
            {"password_hash": "x"},
            {"goals": "Hydration"},
            {"goals": [1, 2]},
            {"streak": 1.5},
            {"xp": True},
            {"skin_tone": 3},
            {"allergies": ["Retinol"]},
            {"onboarding_status": ["complete"]},
        ]
        for fields in cases:
            with self.subTest(fields=fields):
                with self.assertRaises(InvalidProfileUpdateError):
                    validate_profile_update(fields)


class GoalHelperTests(unittest.TestCase):
    def test_order_goals_follows_catalog_then_custom(self):
        self.assertEqual(
            order_goals(["Oil Control", "Glass skin", "Hydration", "Hydration"]),
            ["Hydration", "Oil Control", "Glass skin"],
        )

    def test_toggle_goal(self):
        self.assertEqual(toggle_goal([], "Hydration"), ["Hydration"])
        self.assertEqual(toggle_goal(["Hydration", "Brightening"], "Hydration"), ["Brightening"])


class ProfileTests(unittest.TestCase):
    def test_from_dict_ignores_credentials(self):
        profile = Profile.from_dict(
            {"id": "1", "email": "a@b.com", "name": "A", "password_hash": "h"}
        )

        self.assertNotIn("password_hash", profile.to_dict())
        self.assertEqual(profile.title, "Glow Seeker")

    def test_merged_preserves_untouched_fields(self):
        profile = Profile(id="1", email="a@b.com", name="A", xp=10, streak=3)

        merged = profile.merged({"xp": 50})

        self.assertEqual((merged.xp, merged.streak, merged.name), (50, 3, "A"))
        self.assertEqual(profile.xp, 10)

    def test_completion_reports_sections(self):
        profile = Profile(
            id="1",
            email="a@b.com",
            name="A",
            skin_type="Oily",
            skin_tone="Medium",
            goals=["Hydration"],
        )

        self.assertEqual(
            profile_completion(profile),
            {
                "skin_profile": True,
                "goals": True,
                "allergies": False,
                "complete": False,
            },
        )


if __name__ == "__main__":
    unittest.main()
