from typing import Dict, FrozenSet, List, Type

from absl import logging

from recap.game.events.battle_event import (
    AbilityEvent,
    ActivateEvent,
    BattleEndEvent,
    BattleEvent,
    BoostEvent,
    CantEvent,
    CureStatusEvent,
    DamageEvent,
    DetailsChangeEvent,
    DragEvent,
    EndItemEvent,
    EndVolatileEvent,
    FailEvent,
    FaintEvent,
    FieldEndEvent,
    FieldStartEvent,
    FormeChangeEvent,
    GenEvent,
    HealEvent,
    IgnoredEvent,
    ImmuneEvent,
    ItemEvent,
    LeaveEvent,
    MessageEvent,
    MissEvent,
    MoveEvent,
    PlayerEvent,
    PokeEvent,
    ReplaceEvent,
    SetHpEvent,
    SideEndEvent,
    SideStartEvent,
    SingleTurnEvent,
    StartVolatileEvent,
    StatusEvent,
    SwitchEvent,
    TerastallizeEvent,
    TierEvent,
    TurnEvent,
    UnboostEvent,
    UnknownEvent,
    WeatherEvent,
    split_record,
)


class MessageParser:
    MESSAGE_TYPE_MAP: Dict[str, Type[BattleEvent]] = {
        "turn": TurnEvent,
        "win": BattleEndEvent,
        "l": LeaveEvent,
        "player": PlayerEvent,
        "gen": GenEvent,
        "tier": TierEvent,
        "format": TierEvent,
        "poke": PokeEvent,
        "switch": SwitchEvent,
        "drag": DragEvent,
        "replace": ReplaceEvent,
        "move": MoveEvent,
        "cant": CantEvent,
        "-damage": DamageEvent,
        "-heal": HealEvent,
        "-sethp": SetHpEvent,
        "faint": FaintEvent,
        "-boost": BoostEvent,
        "-unboost": UnboostEvent,
        "-status": StatusEvent,
        "-curestatus": CureStatusEvent,
        "-ability": AbilityEvent,
        "-item": ItemEvent,
        "-enditem": EndItemEvent,
        "-start": StartVolatileEvent,
        "-end": EndVolatileEvent,
        "-singleturn": SingleTurnEvent,
        "-activate": ActivateEvent,
        "-immune": ImmuneEvent,
        "-fail": FailEvent,
        "-miss": MissEvent,
        "-weather": WeatherEvent,
        "-fieldstart": FieldStartEvent,
        "-terrain": FieldStartEvent,
        "-fieldend": FieldEndEvent,
        "-sidestart": SideStartEvent,
        "-sideend": SideEndEvent,
        "-terastallize": TerastallizeEvent,
        "-formechange": FormeChangeEvent,
        "detailschange": DetailsChangeEvent,
        "-message": MessageEvent,
    }

    # Records that are part of the protocol but never show up in a summary.
    IGNORED_MESSAGE_TYPES: FrozenSet[str] = frozenset(
        {
            "",
            "c",
            "chat",
            "j",
            "join",
            "n",
            "raw",
            "html",
            "t:",
            "start",
            "upkeep",
            "gametype",
            "teamsize",
            "teampreview",
            "clearpoke",
            "rule",
            "rated",
            "inactive",
            "inactiveoff",
            "timestamp",
            "-hint",
            "-center",
            "-crit",
            "-supereffective",
            "-resisted",
            "-hitcount",
            "-anim",
            "-nothing",
        }
    )

    def parse(self, raw_message: str) -> BattleEvent:
        parts = split_record(raw_message)
        message_type = parts[0] if parts else ""

        if message_type in self.IGNORED_MESSAGE_TYPES:
            return IgnoredEvent(raw_message=raw_message, message_type=message_type)

        event_class = self.MESSAGE_TYPE_MAP.get(message_type)
        if event_class is None:
            logging.warning("Unknown message type: %s", message_type)
            return UnknownEvent(raw_message=raw_message, message_type=message_type)

        try:
            return event_class.parse_raw_message(raw_message)
        except (IndexError, ValueError) as e:
            logging.warning("Malformed %s record %r: %s", message_type, raw_message, e)
            return UnknownEvent(raw_message=raw_message, message_type=message_type)

    def parse_log(self, log: str) -> List[BattleEvent]:
        """Parse a newline-separated log, skipping blank lines."""
        return [self.parse(line.rstrip("\r")) for line in log.split("\n") if line.strip()]
