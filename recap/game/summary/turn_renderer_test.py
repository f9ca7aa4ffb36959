import unittest

from recap.game.schema.enums import ActionType
from recap.game.schema.summary import ActionSummary, DetailEntry, LeadEntry, TurnSummary
from recap.game.summary.turn_renderer import (
    action_headline,
    compact_details,
    render_action,
    render_turn,
    turn_label,
)


def _subject(ref: str, name: str, body: str) -> DetailEntry:
    return DetailEntry(
        text=f"{name} {body}",
        markup=f"{name} {body}",
        subject_ref=ref,
        subject_text=name,
        subject_markup=name,
    )


def _move(**kwargs) -> ActionSummary:
    defaults = dict(
        action_type=ActionType.MOVE,
        verb="Thunderbolt",
        move_id="thunderbolt",
        actor_ref="p1a",
        actor_name="Pikachu",
        actor_icon="pikachu",
        target_refs=["p2a"],
        target_names=["Squirtle"],
        target_icons=["squirtle"],
    )
    defaults.update(kwargs)
    return ActionSummary(**defaults)


class TurnLabelTest(unittest.TestCase):
    def test_labels(self):
        self.assertEqual(turn_label(TurnSummary(turn=0)), "Lead")
        self.assertEqual(turn_label(TurnSummary(turn=0, label="Lead")), "Lead")
        self.assertEqual(turn_label(TurnSummary(turn=12)), "T12")


class ActionHeadlineTest(unittest.TestCase):
    def test_move_with_target(self):
        markup, text = action_headline(_move())
        self.assertEqual(text, "Pikachu Thunderbolt → Squirtle")
        self.assertIn("/sprites/gen5/pikachu.png", markup)
        self.assertIn("/sprites/gen5/squirtle.png", markup)
        self.assertTrue(markup.endswith("Squirtle"))

    def test_switch_shows_previous_occupant(self):
        action = ActionSummary(
            action_type=ActionType.SWITCH,
            verb="switches",
            actor_ref="p2a",
            actor_name="Lapras",
            actor_icon="lapras",
            from_icon="squirtle",
            from_name="Squirtle",
        )
        _, text = action_headline(action)
        self.assertEqual(text, "Squirtle → Lapras switches")

    def test_names_are_escaped_in_markup(self):
        markup, text = action_headline(_move(actor_name="<Sparky>", target_refs=[], target_names=[], target_icons=[]))
        self.assertEqual(text, "<Sparky> Thunderbolt")
        self.assertIn("&lt;Sparky&gt;", markup)
        self.assertNotIn("<Sparky>", markup)


class RenderActionTest(unittest.TestCase):
    def test_no_details(self):
        _, text = render_action(_move())
        self.assertEqual(text, "Pikachu Thunderbolt → Squirtle")

    def test_target_hp_change_uses_comma_form(self):
        action = _move(details=[_subject("p2a", "Squirtle", "100% → 48%")])
        self.assertEqual(compact_details(action), ("100% → 48%", "100% → 48%"))
        _, text = render_action(action)
        self.assertEqual(text, "Pikachu Thunderbolt → Squirtle, 100% → 48%")

    def test_target_hp_and_stat_changes_use_comma_form(self):
        action = _move(
            verb="Snarl",
            details=[_subject("p2a", "Squirtle", "90%"), _subject("p2a", "Squirtle", "-1 SPA")],
        )
        _, text = render_action(action)
        self.assertEqual(text, "Pikachu Snarl → Squirtle, 90%; -1 SPA")

    def test_other_details_use_dash_form(self):
        action = _move(
            details=[
                _subject("p2a", "Squirtle", "100% → 48%"),
                DetailEntry.plain("The attack was weakened!"),
            ]
        )
        self.assertIsNone(compact_details(action))
        _, text = render_action(action)
        self.assertEqual(
            text,
            "Pikachu Thunderbolt → Squirtle — Squirtle 100% → 48%; The attack was weakened!",
        )

    def test_detail_about_actor_uses_dash_form(self):
        action = _move(details=[_subject("p1a", "Pikachu", "-1 DEF")])
        _, text = render_action(action)
        self.assertEqual(text, "Pikachu Thunderbolt → Squirtle — Pikachu -1 DEF")

    def test_without_target_uses_dash_form(self):
        action = _move(target_refs=[], target_names=[], target_icons=[], details=[DetailEntry.plain("fails")])
        _, text = render_action(action)
        self.assertEqual(text, "Pikachu Thunderbolt — fails")


class RenderTurnTest(unittest.TestCase):
    def test_lead_turn(self):
        turn = TurnSummary(
            turn=0,
            label="Lead",
            lead_entries=[
                LeadEntry(side="p1", text="Pikachu", markup="P"),
                LeadEntry(side="p2", text="Squirtle", markup="S"),
            ],
            header_events=[DetailEntry.plain("Rain started (from Drizzle)")],
        )
        lines = render_turn(turn)
        self.assertEqual(lines.text, ["Lead Pikachu vs Squirtle Rain started (from Drizzle)"])
        self.assertEqual(
            lines.markup,
            ["<div><strong>Lead</strong> P&nbsp;vs&nbsp;S Rain started (from Drizzle)</div>"],
        )

    def test_line_order_and_indentation(self):
        turn = TurnSummary(
            turn=3,
            tera_events=[DetailEntry.plain("Terastallize Pikachu → Electric")],
            actions=[_move()],
            end_events=[DetailEntry.plain("Rain ended"), DetailEntry.plain("Squirtle 50% → 56%")],
        )
        lines = render_turn(turn)
        self.assertEqual(
            lines.text,
            [
                "T3",
                "  Terastallize Pikachu → Electric",
                "  Pikachu Thunderbolt → Squirtle",
                "    Rain ended; Squirtle 50% → 56%",
            ],
        )
        self.assertEqual(lines.markup[0], "<div><strong>T3</strong></div>")
        self.assertTrue(lines.markup[1].startswith("<div>&nbsp;&nbsp;Terastallize"))
        self.assertEqual(lines.markup[3], "<div>&nbsp;&nbsp;&nbsp;&nbsp;Rain ended; Squirtle 50% → 56%</div>")

    def test_markup_and_text_have_same_line_count(self):
        turn = TurnSummary(turn=1, actions=[_move(), _move(verb="Quick Attack")])
        lines = render_turn(turn)
        self.assertEqual(len(lines.markup), len(lines.text))
        self.assertEqual(len(lines.text), 3)


if __name__ == "__main__":
    unittest.main()
