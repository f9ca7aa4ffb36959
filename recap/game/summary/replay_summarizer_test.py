from absl.testing import absltest

from recap.game.exceptions import ReplayValidationError
from recap.game.schema.replay_data import MISSING_LOG_MESSAGE, ReplayData
from recap.game.summary.replay_summarizer import ReplayMeta, ReplaySummarizer, SummarizedReplay

BATTLE_LOG = "\n".join(
    [
        "|j|☆Ash",
        "|j|☆Misty",
        "|player|p1|Ash|1|",
        "|player|p2|Misty|2|",
        "|gametype|singles",
        "|gen|9",
        "|tier|[Gen 9] OU",
        "|poke|p1|Pikachu, L50|",
        "|poke|p2|Squirtle, L50|",
        "|start",
        "|switch|p1a: Pikachu|Pikachu, L50|100/100",
        "|switch|p2a: Squirtle|Squirtle, L50|100/100",
        "|turn|1",
        "|move|p1a: Pikachu|Thunderbolt|p2a: Squirtle",
        "|-damage|p2a: Squirtle|0 fnt",
        "|faint|p2a: Squirtle",
        "|turn|2",
        "|win|Ash",
    ]
)


class ReplaySummarizerTest(absltest.TestCase):
    def setUp(self):
        self.summarizer = ReplaySummarizer()

    def test_full_battle_text(self):
        result = self.summarizer.summarize_log(BATTLE_LOG)
        self.assertEqual(
            result.text.split("\n"),
            [
                "[W] Ash vs [L] Misty — [Gen 9] OU",
                "Team Preview: Ash Pikachu vs Misty Squirtle",
                "Lead Pikachu vs Squirtle",
                "T1",
                "  Pikachu Thunderbolt → Squirtle, 100% → KO",
                "Winner: Ash",
            ],
        )

    def test_full_battle_markup(self):
        lines = self.summarizer.summarize_log(BATTLE_LOG).html.split("\n")
        self.assertLen(lines, 5)
        self.assertEqual(lines[0], "<div><strong>[W] Ash</strong> vs <strong>[L] Misty</strong> — [Gen 9] OU</div>")
        for line in lines:
            self.assertTrue(line.startswith("<div>"))
            self.assertTrue(line.endswith("</div>"))
        self.assertNotIn("Winner", "\n".join(lines))

    def test_meta(self):
        result = self.summarizer.summarize_log(BATTLE_LOG, replay_id="gen9ou-1")
        self.assertEqual(
            result.meta,
            ReplayMeta(
                id="gen9ou-1",
                format="[Gen 9] OU",
                players=["Ash", "Misty"],
                winner="Ash",
                loser="Misty",
                result_note=None,
            ),
        )

    def test_same_input_renders_identically(self):
        first = self.summarizer.summarize_log(BATTLE_LOG)
        second = ReplaySummarizer().summarize_log(BATTLE_LOG)
        self.assertEqual(first, second)
        self.assertEqual(self.summarizer.summarize_log(BATTLE_LOG), first)

    def test_turns_without_actions_are_omitted(self):
        text = self.summarizer.summarize_log(BATTLE_LOG).text
        self.assertNotIn("T2", text)

    def test_blank_log_raises(self):
        for log in (None, "", "   \n  "):
            with self.assertRaisesRegex(ReplayValidationError, MISSING_LOG_MESSAGE):
                self.summarizer.summarize_log(log)

    def test_supplied_players_and_format(self):
        log = "|turn|1\n|move|p1a: Pikachu|Thunderbolt|p2a: Squirtle"
        result = self.summarizer.summarize_log(log, players=["Red", "Blue"], format_name="gen1ou")
        self.assertEqual(result.text.split("\n")[0], "Red vs Blue — gen1ou")
        self.assertEqual(result.meta.players, ["Red", "Blue"])
        self.assertIsNone(result.meta.winner)
        self.assertIsNone(result.meta.loser)

    def test_default_player_names(self):
        result = self.summarizer.summarize_log("|turn|1\n|move|p1a: Pikachu|Thunderbolt|p2a: Squirtle")
        self.assertEqual(result.text.split("\n")[0], "Player 1 vs Player 2")
        self.assertIsNone(result.meta.format)

    def test_log_player_records_replace_supplied_names(self):
        result = self.summarizer.summarize_log(BATTLE_LOG, players=["Red", "Blue"])
        self.assertEqual(result.meta.players, ["Ash", "Misty"])

    def test_supplied_format_wins_over_tier(self):
        result = self.summarizer.summarize_log(BATTLE_LOG, format_name="gen9ou")
        self.assertEqual(result.meta.format, "gen9ou")

    def test_generation_fallback(self):
        result = self.summarizer.summarize_log("|gen|8\n|turn|1\n|move|p1a: Pikachu|Thunderbolt|p2a: Squirtle")
        self.assertEqual(result.meta.format, "Gen 8")

    def test_forfeit(self):
        log = "\n".join(
            [
                "|player|p1|Ash",
                "|player|p2|Misty",
                "|turn|1",
                "|move|p1a: Pikachu|Thunderbolt|p2a: Squirtle",
                "|-message|Misty forfeited.",
                "|win|Ash",
            ]
        )
        result = self.summarizer.summarize_log(log)
        self.assertEqual(result.text.split("\n")[0], "[W] Ash vs [L] Misty (Forfeit)")
        self.assertEqual(result.meta.result_note, "Forfeit")
        self.assertEqual(result.meta.loser, "Misty")

    def test_winner_who_left_and_returned_is_not_the_loser(self):
        log = "\n".join(
            [
                "|player|p1|Ash",
                "|player|p2|Misty",
                "|switch|p1a: Pikachu|Pikachu, L50|100/100",
                "|switch|p2a: Squirtle|Squirtle, L50|100/100",
                "|turn|1",
                "|l|☆Ash",
                "|j|☆Ash",
                "|move|p1a: Pikachu|Thunderbolt|p2a: Squirtle",
                "|-damage|p2a: Squirtle|0 fnt",
                "|faint|p2a: Squirtle",
                "|win|Ash",
            ]
        )
        result = self.summarizer.summarize_log(log)
        self.assertEqual(result.meta.winner, "Ash")
        self.assertEqual(result.meta.loser, "Misty")
        self.assertEqual(result.text.split("\n")[0], "[W] Ash vs [L] Misty")

    def test_summarize_replay_data(self):
        data = ReplayData(id="gen9ou-2", format="[Gen 9] OU", log=BATTLE_LOG, players=["Ash", "Misty"])
        result = self.summarizer.summarize(data)
        self.assertEqual(result.meta.id, "gen9ou-2")
        self.assertEqual(result.meta.winner, "Ash")

    def test_to_dict(self):
        summary = SummarizedReplay(html="<div>x</div>", text="x", meta=ReplayMeta(id="r1", players=["A", "B"]))
        self.assertEqual(
            summary.to_dict(),
            {
                "html": "<div>x</div>",
                "text": "x",
                "meta": {
                    "id": "r1",
                    "format": None,
                    "players": ["A", "B"],
                    "winner": None,
                    "loser": None,
                    "result_note": None,
                },
            },
        )


if __name__ == "__main__":
    absltest.main()
