from absl.testing import absltest, parameterized

from recap.game.events.battle_event import (
    AbilityEvent,
    BoostEvent,
    CantEvent,
    DamageEvent,
    DragEvent,
    FieldStartEvent,
    GenEvent,
    HealEvent,
    IgnoredEvent,
    LeaveEvent,
    MessageEvent,
    MoveEvent,
    PlayerEvent,
    PokeEvent,
    SideStartEvent,
    SwitchEvent,
    TierEvent,
    TurnEvent,
    UnboostEvent,
    UnknownEvent,
    WeatherEvent,
)
from recap.game.protocol.message_parser import MessageParser
from recap.game.schema.pokemon_ref import PokemonRef


class MessageParserTest(parameterized.TestCase):
    @parameterized.parameters(
        ("|turn|1", 1),
        ("|turn|10", 10),
        ("turn|25", 25),
    )
    def test_parse_turn(self, raw_message: str, expected_turn: int) -> None:
        parser = MessageParser()
        event = parser.parse(raw_message)
        self.assertIsInstance(event, TurnEvent)
        self.assertEqual(event.turn_number, expected_turn)

    def test_parse_player(self) -> None:
        event = MessageParser().parse("|player|p1|Ash|red|1500")
        self.assertIsInstance(event, PlayerEvent)
        self.assertEqual(event.player_id, "p1")
        self.assertEqual(event.username, "Ash")

    def test_parse_player_without_name(self) -> None:
        event = MessageParser().parse("|player|p2|")
        self.assertIsInstance(event, PlayerEvent)
        self.assertEqual(event.username, "")

    @parameterized.parameters(
        ("|tier|[Gen 9] OU", TierEvent),
        ("|format|[Gen 9] OU", TierEvent),
        ("|gen|9", GenEvent),
        ("|l|☆Misty", LeaveEvent),
        ("|-terrain|Electric Terrain", FieldStartEvent),
        ("|-message|Misty forfeited.", MessageEvent),
        ("|drag|p2a: Lapras|Lapras, L84|100/100", DragEvent),
        ("|-heal|p1a: Pikachu|60/100|[from] item: Leftovers", HealEvent),
        ("|-unboost|p2a: Garchomp|atk|1", UnboostEvent),
    )
    def test_message_type_map(self, raw_message: str, expected_type: type) -> None:
        self.assertIsInstance(MessageParser().parse(raw_message), expected_type)

    def test_parse_switch(self) -> None:
        event = MessageParser().parse("|switch|p1a: Sparky|Pikachu, L50, M|100/100 par")
        self.assertIsInstance(event, SwitchEvent)
        self.assertEqual(event.pokemon, PokemonRef(ref="p1a", side="p1", nickname="Sparky"))
        self.assertEqual(event.species, "Pikachu")
        self.assertEqual(event.hp_status, "100/100 par")
        self.assertEqual(event.annotations, ())

    def test_parse_move_with_target(self) -> None:
        event = MessageParser().parse("|move|p1a: Pikachu|Thunderbolt|p2a: Squirtle")
        self.assertIsInstance(event, MoveEvent)
        self.assertEqual(event.move_name, "Thunderbolt")
        self.assertEqual(event.target, PokemonRef(ref="p2a", side="p2", nickname="Squirtle"))

    def test_parse_move_without_target(self) -> None:
        event = MessageParser().parse("|move|p1a: Pikachu|Thunderbolt||[still]|[miss]")
        self.assertIsInstance(event, MoveEvent)
        self.assertIsNone(event.target)
        self.assertEqual(event.annotations, ("[still]", "[miss]"))

    def test_parse_cant(self) -> None:
        event = MessageParser().parse("|cant|p2a: Snorlax|slp")
        self.assertIsInstance(event, CantEvent)
        self.assertEqual(event.reason, "slp")
        self.assertIsNone(event.move_name)

    def test_parse_damage_annotations(self) -> None:
        event = MessageParser().parse("|-damage|p2a: Squirtle|50/100|[from] item: Life Orb")
        self.assertIsInstance(event, DamageEvent)
        self.assertEqual(event.hp_status, "50/100")
        self.assertEqual(event.annotations, ("[from] item: Life Orb",))

    def test_parse_boost(self) -> None:
        event = MessageParser().parse("|-boost|p1a: Scizor|atk|2")
        self.assertIsInstance(event, BoostEvent)
        self.assertEqual(event.delta_text, "+2 ATK")

    def test_parse_ability_with_boost_marker(self) -> None:
        event = MessageParser().parse("|-ability|p1a: Gyarados|Intimidate|boost")
        self.assertIsInstance(event, AbilityEvent)
        self.assertTrue(event.grants_boost)

    def test_parse_weather_upkeep(self) -> None:
        event = MessageParser().parse("|-weather|RainDance|[upkeep]")
        self.assertIsInstance(event, WeatherEvent)
        self.assertTrue(event.is_upkeep)
        self.assertFalse(event.is_clear)

    def test_parse_side_start(self) -> None:
        event = MessageParser().parse("|-sidestart|p2: Misty|move: Stealth Rock")
        self.assertIsInstance(event, SideStartEvent)
        self.assertEqual(event.side, "p2")
        self.assertEqual(event.condition, "move: Stealth Rock")

    def test_parse_poke(self) -> None:
        event = MessageParser().parse("|poke|p1|Urshifu-*, L50|")
        self.assertIsInstance(event, PokeEvent)
        self.assertEqual(event.species, "Urshifu-*")

    @parameterized.parameters("|c|Ash|gg", "|upkeep", "|-crit|p2a: Squirtle", "|", "|t:|1700000000")
    def test_ignored_records(self, raw_message: str) -> None:
        self.assertIsInstance(MessageParser().parse(raw_message), IgnoredEvent)

    def test_unknown_tag(self) -> None:
        event = MessageParser().parse("|-mysterytag|p1a: Pikachu")
        self.assertIsInstance(event, UnknownEvent)
        self.assertEqual(event.message_type, "-mysterytag")

    @parameterized.parameters("|turn|abc", "|-boost|p1a: Scizor|atk|lots", "|switch")
    def test_malformed_records_become_unknown(self, raw_message: str) -> None:
        self.assertIsInstance(MessageParser().parse(raw_message), UnknownEvent)

    def test_parse_log_skips_blank_lines(self) -> None:
        log = "|player|p1|Ash\r\n\n   \n|turn|1\n"
        events = MessageParser().parse_log(log)
        self.assertLen(events, 2)
        self.assertIsInstance(events[0], PlayerEvent)
        self.assertEqual(events[0].username, "Ash")
        self.assertIsInstance(events[1], TurnEvent)


if __name__ == "__main__":
    absltest.main()
