from absl.testing import absltest, parameterized

from recap.game.summary.parse_context import ParseContext
from recap.game.summary.summary_assembler import (
    BattleResult,
    render_header,
    render_team_preview,
    resolve_result,
)


def _context(**kwargs) -> ParseContext:
    ctx = ParseContext(**kwargs)
    ctx.players.update({"p1": "Ash", "p2": "Misty"})
    return ctx


class ResolveResultTest(parameterized.TestCase):
    @parameterized.named_parameters(
        ("inferred_from_winner", "Ash", None, BattleResult("Ash", "Misty", "p1", "p2")),
        ("winner_matched_by_id", "misty", None, BattleResult("misty", "Ash", "p2", "p1")),
        ("explicit_loser", "Ash", "misty", BattleResult("Ash", "Misty", "p1", "p2")),
        ("winner_left_and_returned", "Ash", "Ash", BattleResult("Ash", "Misty", "p1", "p2")),
        ("unknown_winner", "Brock", None, BattleResult("Brock", None, None, None)),
        ("unfinished", None, None, BattleResult()),
    )
    def test_resolve_result(self, winner, loser, expected):
        ctx = _context(winner=winner, loser=loser)
        self.assertEqual(resolve_result(ctx), expected)


class RenderHeaderTest(absltest.TestCase):
    def test_plain(self):
        markup, text = render_header(_context())
        self.assertEqual(text, "Ash vs Misty")
        self.assertEqual(markup, "<div><strong>Ash</strong> vs <strong>Misty</strong></div>")

    def test_format_and_note(self):
        _, text = render_header(_context(format_name="[Gen 9] OU", result_note="Forfeit"))
        self.assertEqual(text, "Ash vs Misty — [Gen 9] OU (Forfeit)")

    def test_result_tags(self):
        markup, text = render_header(_context(winner="Misty"))
        self.assertEqual(text, "[L] Ash vs [W] Misty")
        self.assertEqual(markup, "<div><strong>[L] Ash</strong> vs <strong>[W] Misty</strong></div>")

    def test_explicit_loser_without_winner(self):
        _, text = render_header(_context(loser="Ash", result_note="Forfeit"))
        self.assertEqual(text, "[L] Ash vs Misty (Forfeit)")

    def test_names_are_escaped(self):
        ctx = _context()
        ctx.players["p2"] = "<b>Misty</b>"
        markup, text = render_header(ctx)
        self.assertEqual(text, "Ash vs <b>Misty</b>")
        self.assertIn("&lt;b&gt;Misty&lt;/b&gt;", markup)


class RenderTeamPreviewTest(absltest.TestCase):
    def test_no_species(self):
        self.assertIsNone(render_team_preview(_context()))

    def test_rosters(self):
        ctx = _context()
        for species in ("Pikachu", "Charizard"):
            ctx.registry.register_species("p1", species)
        ctx.registry.register_species("p2", "Squirtle")
        markup, text = render_team_preview(ctx)
        self.assertEqual(text, "Team Preview: Ash Pikachu · Charizard vs Misty Squirtle")
        self.assertTrue(markup.startswith("<div><strong>Team Preview:</strong> "))
        self.assertIn("/sprites/gen5/charizard.png", markup)
        self.assertIn("&nbsp;&nbsp;vs&nbsp;&nbsp;", markup)


if __name__ == "__main__":
    absltest.main()
