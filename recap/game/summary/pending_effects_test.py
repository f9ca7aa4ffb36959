import unittest

from recap.game.schema.summary import TurnSummary
from recap.game.summary.pending_effects import PendingAbilityBoost, PendingFieldEnds


def _intimidate() -> PendingAbilityBoost:
    return PendingAbilityBoost(
        source_ref="p1a",
        source_name="Gyarados",
        source_icon="gyarados",
        ability="Intimidate",
        anchor_turn=TurnSummary(turn=1),
    )


class PendingAbilityBoostTest(unittest.TestCase):
    def test_targets_grouped_in_order(self):
        pending = _intimidate()
        pending.add("p2a", "Garchomp", "garchomp", "-1 ATK")
        pending.add("p2b", "Landorus", "landorus", "-1 ATK")
        detail = pending.to_detail()
        self.assertEqual(detail.text, "Gyarados' Intimidate: Garchomp -1 ATK; Landorus -1 ATK")
        self.assertEqual(detail.subject_ref, "p1a")
        self.assertIn("/sprites/gen5/garchomp.png", detail.markup)

    def test_own_changes_have_no_name(self):
        pending = PendingAbilityBoost(
            source_ref="p1a",
            source_name="Porygon-Z",
            source_icon="porygonz",
            ability="Download",
            anchor_turn=TurnSummary(turn=1),
        )
        pending.add("p1a", "Porygon-Z", "porygonz", "+1 SPA")
        self.assertEqual(pending.to_detail().text, "Porygon-Z's Download: +1 SPA")

    def test_several_changes_for_one_target(self):
        pending = _intimidate()
        pending.add("p2a", "Kingambit", "kingambit", "-1 ATK")
        pending.add("p2a", "Kingambit", "kingambit", "+2 ATK")
        self.assertEqual(pending.to_detail().text, "Gyarados' Intimidate: Kingambit -1 ATK, +2 ATK")

    def test_no_targets(self):
        self.assertEqual(_intimidate().to_detail().text, "Gyarados' Intimidate")


class PendingFieldEndsTest(unittest.TestCase):
    def test_drain(self):
        pending = PendingFieldEnds()
        pending.add("Trick Room")
        pending.add("Rain")
        pending.add("Trick Room")
        self.assertEqual(len(pending), 2)
        self.assertEqual(pending.drain().text, "Trick Room, Rain ended")
        self.assertEqual(len(pending), 0)
        self.assertIsNone(pending.drain())

    def test_empty_names_ignored(self):
        pending = PendingFieldEnds()
        pending.add("")
        self.assertIsNone(pending.drain())


if __name__ == "__main__":
    unittest.main()
