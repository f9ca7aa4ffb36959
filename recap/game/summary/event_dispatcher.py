"""Folds battle events into a ParseContext.

The main entry point is EventDispatcher.apply(), which routes one event to
the handler for its type. Handlers mutate the context in place; a run owns
its context exclusively.
"""

import html
import re
from typing import Optional, Tuple

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
    DragEvent,
    EndItemEvent,
    EndVolatileEvent,
    FailEvent,
    FaintEvent,
    FieldEndEvent,
    FieldStartEvent,
    FormeChangeEvent,
    GenEvent,
    IgnoredEvent,
    ImmuneEvent,
    ItemEvent,
    LeaveEvent,
    MessageEvent,
    MissEvent,
    MoveEvent,
    PlayerEvent,
    PokeEvent,
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
)
from recap.game.schema.enums import ActionType
from recap.game.schema.object_name_normalizer import normalize_name
from recap.game.schema.pokemon_ref import parse_pokemon_ref
from recap.game.schema.sprites import render_icon_label
from recap.game.schema.summary import ActionSummary, DetailEntry, LeadEntry
from recap.game.schema.utils import (
    PRESENTATION_ONLY_TAGS,
    annotation_tag,
    annotation_value,
    effect_source_kind,
    field_display_name,
    format_hp_status,
    parse_hp_status,
    possessive,
    prettify_move,
    side_condition_display_name,
    simplify_annotations,
    strip_effect_prefix,
    with_extras,
)
from recap.game.summary.parse_context import ParseContext
from recap.game.summary.pending_effects import PendingAbilityBoost

# Sources of damage/healing that only happen at the end of a turn.
END_OF_TURN_SOURCES = frozenset(
    {
        "leftovers",
        "blacksludge",
        "stickybarb",
        "sandstorm",
        "hail",
        "psn",
        "tox",
        "brn",
        "leechseed",
        "saltcure",
        "grassyterrain",
        "raindish",
        "icebody",
        "dryskin",
        "solarpower",
        "poisonheal",
        "nightmare",
        "curse",
        "aquaring",
        "ingrain",
        "bind",
        "wrap",
        "firespin",
        "whirlpool",
        "sandtomb",
        "clamp",
        "magmastorm",
        "infestation",
        "thundercage",
        "snaptrap",
    }
)

PROTECT_MOVES = frozenset(
    {
        "protect",
        "detect",
        "kingsshield",
        "spikyshield",
        "banefulbunker",
        "obstruct",
        "silktrap",
        "burningbulwark",
        "maxguard",
    }
)

# Field effect id -> move ids whose use already announces it.
FIELD_STARTING_MOVES = {
    "raindance": frozenset({"raindance"}),
    "sunnyday": frozenset({"sunnyday"}),
    "sandstorm": frozenset({"sandstorm"}),
    "hail": frozenset({"hail"}),
    "snow": frozenset({"snowscape", "chillyreception"}),
    "snowscape": frozenset({"snowscape", "chillyreception"}),
}

STATUS_CODES = frozenset({"slp", "par", "frz", "brn", "psn", "tox"})

_FORFEIT_RE = re.compile(r"^(.*?)\s*forfeited\.?$", re.IGNORECASE)
_TIMER_RE = re.compile(r"\btimer\b|seconds? left|\binactiv", re.IGNORECASE)
_LEADING_SYMBOLS_RE = re.compile(r"^[^A-Za-z0-9]+")


class EventDispatcher:
    """Functions for applying battle events to a ParseContext.

    All methods are static. Each handler owns the policy for one record
    family; the context owns the buffers they share.
    """

    @staticmethod
    def apply(ctx: ParseContext, event: BattleEvent) -> None:
        """Apply one event to the context.

        Subclasses are matched before their bases, so UnboostEvent reaches
        the boost handler and HealEvent the damage handler.

        Args:
            ctx: Context of the current run (mutated in place)
            event: Parsed battle event
        """
        if isinstance(event, TurnEvent):
            EventDispatcher._apply_turn(ctx, event)
        elif isinstance(event, SwitchEvent):
            EventDispatcher._apply_switch(ctx, event)
        elif isinstance(event, MoveEvent):
            EventDispatcher._apply_move(ctx, event)
        elif isinstance(event, CantEvent):
            EventDispatcher._apply_cant(ctx, event)
        elif isinstance(event, DamageEvent):
            EventDispatcher._apply_damage(ctx, event)
        elif isinstance(event, BoostEvent):
            EventDispatcher._apply_boost(ctx, event)
        elif isinstance(event, CureStatusEvent):
            EventDispatcher._apply_curestatus(ctx, event)
        elif isinstance(event, StatusEvent):
            EventDispatcher._apply_status(ctx, event)
        elif isinstance(event, AbilityEvent):
            EventDispatcher._apply_ability(ctx, event)
        elif isinstance(event, EndItemEvent):
            EventDispatcher._apply_enditem(ctx, event)
        elif isinstance(event, ItemEvent):
            EventDispatcher._apply_item(ctx, event)
        elif isinstance(event, SingleTurnEvent):
            EventDispatcher._apply_singleturn(ctx, event)
        elif isinstance(event, ActivateEvent):
            EventDispatcher._apply_activate(ctx, event)
        elif isinstance(event, EndVolatileEvent):
            EventDispatcher._apply_end_volatile(ctx, event)
        elif isinstance(event, StartVolatileEvent):
            EventDispatcher._apply_start_volatile(ctx, event)
        elif isinstance(event, FailEvent):
            EventDispatcher._apply_fail(ctx, event)
        elif isinstance(event, ImmuneEvent):
            EventDispatcher._apply_immune(ctx, event)
        elif isinstance(event, MissEvent):
            EventDispatcher._apply_miss(ctx, event)
        elif isinstance(event, FaintEvent):
            EventDispatcher._apply_faint(ctx, event)
        elif isinstance(event, WeatherEvent):
            EventDispatcher._apply_weather(ctx, event)
        elif isinstance(event, FieldEndEvent):
            EventDispatcher._apply_fieldend(ctx, event)
        elif isinstance(event, FieldStartEvent):
            EventDispatcher._apply_fieldstart(ctx, event)
        elif isinstance(event, SideEndEvent):
            EventDispatcher._apply_sideend(ctx, event)
        elif isinstance(event, SideStartEvent):
            EventDispatcher._apply_sidestart(ctx, event)
        elif isinstance(event, TerastallizeEvent):
            EventDispatcher._apply_terastallize(ctx, event)
        elif isinstance(event, FormeChangeEvent):
            ctx.registry.update_species(event.pokemon.ref, event.species)
        elif isinstance(event, PokeEvent):
            ctx.registry.register_species(event.player_id, event.species)
        elif isinstance(event, PlayerEvent):
            EventDispatcher._apply_player(ctx, event)
        elif isinstance(event, TierEvent):
            EventDispatcher._apply_tier(ctx, event)
        elif isinstance(event, GenEvent):
            # Kept apart from format_name: "Gen N" only shows when no tier record names the format.
            ctx.generation = ctx.generation or event.generation.strip() or None
        elif isinstance(event, BattleEndEvent):
            ctx.winner = event.winner or ctx.winner
        elif isinstance(event, LeaveEvent):
            EventDispatcher._apply_leave(ctx, event)
        elif isinstance(event, MessageEvent):
            EventDispatcher._apply_message(ctx, event)
        elif isinstance(event, IgnoredEvent):
            return
        elif isinstance(event, UnknownEvent):
            logging.debug(f"Skipping unknown record: {event.raw_message}")
        else:
            logging.error(f"Unhandled event type: {type(event).__name__}: {event}")

    @staticmethod
    def _apply_turn(ctx: ParseContext, event: TurnEvent) -> None:
        turn = ctx.start_turn(event.turn_number)
        logging.debug(f"Opened turn {turn.turn}")

    @staticmethod
    def _apply_player(ctx: ParseContext, event: PlayerEvent) -> None:
        if event.player_id in ctx.players and event.username.strip():
            ctx.players[event.player_id] = event.username.strip()

    @staticmethod
    def _apply_tier(ctx: ParseContext, event: TierEvent) -> None:
        """First non-empty tier wins, even over an earlier gen record; a caller-supplied format is never replaced."""
        if not ctx.format_name and event.tier.strip():
            ctx.format_name = event.tier.strip()

    @staticmethod
    def _apply_leave(ctx: ParseContext, event: LeaveEvent) -> None:
        """A player leaving before the end is taken as the loser.

        Only names that resolve to one of the two players count, and the
        winner leaving after the win record is not a loss.
        """
        name = _LEADING_SYMBOLS_RE.sub("", event.username).strip()
        name_id = normalize_name(name)
        if not name_id:
            return
        if ctx.winner and normalize_name(ctx.winner) == name_id:
            return
        for player in ctx.players.values():
            if normalize_name(player) == name_id:
                ctx.loser = player
                return

    @staticmethod
    def _apply_message(ctx: ParseContext, event: MessageEvent) -> None:
        match = _FORFEIT_RE.match(event.message)
        if match:
            ctx.result_note = "Forfeit"
            if not ctx.loser and match.group(1).strip():
                ctx.loser = match.group(1).strip()
            return
        if event.message and not _TIMER_RE.search(event.message):
            ctx.append_detail(DetailEntry.plain(event.message))

    @staticmethod
    def _caused_by_move(annotations: Tuple[str, ...]) -> bool:
        """Whether a switch record was forced by the move that is still open.

        Any annotation beyond presentation-only ones counts as the move's
        doing ("[from] U-turn", "[move] Parting Shot"), unless its [from]
        source is an ability or item (Emergency Exit, Eject Button). A bare
        switch record is never merged.
        """
        meaningful = [segment for segment in annotations if annotation_tag(segment) not in PRESENTATION_ONLY_TAGS]
        if not meaningful:
            return False
        source = annotation_value(meaningful, "from")
        return source is None or effect_source_kind(source) not in ("ability", "item")

    @staticmethod
    def _consolidate_stat_details(action: ActionSummary) -> None:
        """Merge the action's stat-delta details into one comma-joined line."""
        deltas = [detail for detail in action.details if detail.is_stat_delta()]
        if len(deltas) < 2:
            return
        first = deltas[0]
        bodies = [detail.without_subject() for detail in deltas]
        text_body = ", ".join(text for text, _ in bodies)
        markup_body = ", ".join(markup for _, markup in bodies)
        if all(detail.subject_ref == first.subject_ref for detail in deltas) and first.subject_text:
            merged = DetailEntry(
                text=f"{first.subject_text} {text_body}",
                markup=f"{first.subject_markup} {markup_body}",
                subject_ref=first.subject_ref,
                subject_text=first.subject_text,
                subject_markup=first.subject_markup,
            )
        else:
            merged = DetailEntry(
                text=", ".join(detail.text for detail in deltas),
                markup=", ".join(detail.markup for detail in deltas),
            )
        index = action.details.index(first)
        remaining = [detail for detail in action.details if detail not in deltas]
        remaining.insert(index, merged)
        action.details[:] = remaining

    @staticmethod
    def _apply_switch(ctx: ParseContext, event: SwitchEvent) -> None:
        """Switch, drag and replace records.

        In priority order the record becomes: a detail of the move that
        forced it, a lead entry, a replacement after a faint ("enters"), or
        a voluntary switch showing the previous occupant.
        """
        ctx.flush_ability_boost()
        ref = event.pokemon.ref
        registry = ctx.registry

        previous = registry.get(ref)
        previous_icon: Optional[str] = None
        previous_name: Optional[str] = None
        if previous is not None and (previous.species or previous.nickname):
            previous_icon = previous.icon_id
            previous_name = registry.display_name(ref)

        pokemon = registry.update_species(ref, event.species)
        if event.pokemon.nickname:
            pokemon.nickname = event.pokemon.nickname
        hp = parse_hp_status(event.hp_status)
        pokemon.last_display_hp = format_hp_status(hp) if event.hp_status.strip() else None
        pokemon.status = hp.status
        pokemon.fainted = hp.fainted
        name = registry.display_name(ref)

        action = ctx.current_action
        if (
            action is not None
            and action.action_type == ActionType.MOVE
            and action.actor_ref == ref
            and EventDispatcher._caused_by_move(event.annotations)
        ):
            EventDispatcher._consolidate_stat_details(action)
            if previous_name:
                text = f"{previous_name} → {name}"
                markup = f"{render_icon_label(previous_icon, previous_name)} → {render_icon_label(pokemon.icon_id, name)}"
            else:
                text = f"→ {name}"
                markup = f"→ {render_icon_label(pokemon.icon_id, name)}"
            action.details.append(DetailEntry(text=text, markup=markup))
            logging.debug(f"Merged forced switch into {action.verb}: {text}")
            return

        if ctx.lead_phase:
            ctx.current_turn.lead_entries.append(
                LeadEntry(side=pokemon.side, text=name, markup=render_icon_label(pokemon.icon_id, name))
            )
            ctx.current_action = None
            return

        if ctx.fainted_this_turn:
            switch = ActionSummary(
                action_type=ActionType.SWITCH,
                verb="enters",
                actor_ref=ref,
                actor_name=name,
                actor_icon=pokemon.icon_id,
            )
        else:
            switch = ActionSummary(
                action_type=ActionType.SWITCH,
                verb="is dragged in" if isinstance(event, DragEvent) else "switches",
                actor_ref=ref,
                actor_name=name,
                actor_icon=pokemon.icon_id,
                from_icon=previous_icon,
                from_name=previous_name,
            )
        if hp.fainted:
            switch.details.append(DetailEntry.plain("fainted on entry"))
        ctx.open_action(switch)

    @staticmethod
    def _apply_move(ctx: ParseContext, event: MoveEvent) -> None:
        ctx.flush_ability_boost()
        ref = event.pokemon.ref
        registry = ctx.registry
        actor = registry.get_or_create(ref, event.pokemon.side)
        if event.pokemon.nickname:
            actor.nickname = event.pokemon.nickname

        action = ActionSummary(
            action_type=ActionType.MOVE,
            verb=prettify_move(event.move_name),
            move_id=normalize_name(event.move_name),
            actor_ref=ref,
            actor_name=registry.display_name(ref),
            actor_icon=actor.icon_id,
        )
        target = event.target
        if target is not None and target.ref != ref:
            target_pokemon = registry.get_or_create(target.ref, target.side)
            if not target_pokemon.nickname and not target_pokemon.species and target.nickname:
                target_pokemon.nickname = target.nickname
            action.target_refs.append(target.ref)
            action.target_names.append(registry.display_name(target.ref))
            action.target_icons.append(target_pokemon.icon_id)

        extras = simplify_annotations(event.annotations)
        if extras:
            action.details.append(DetailEntry.plain("; ".join(extras)))
        ctx.open_action(action)
        ctx.moves_this_turn.append(action.move_id)

    @staticmethod
    def _apply_cant(ctx: ParseContext, event: CantEvent) -> None:
        ref = event.pokemon.ref
        pokemon = ctx.registry.get_or_create(ref, event.pokemon.side)
        if event.pokemon.nickname and not pokemon.nickname:
            pokemon.nickname = event.pokemon.nickname
        reason = strip_effect_prefix(event.reason)
        if reason.lower() in STATUS_CODES:
            reason = reason.upper()
        verb = f"can't move ({reason})"
        if event.move_name:
            verb = f"can't move ({reason} while using {prettify_move(strip_effect_prefix(event.move_name))})"
        ctx.open_action(
            ActionSummary(
                action_type=ActionType.NOTE,
                verb=verb,
                actor_ref=ref,
                actor_name=ctx.registry.display_name(ref),
                actor_icon=pokemon.icon_id,
            )
        )

    @staticmethod
    def _is_end_of_turn(annotations: Tuple[str, ...]) -> bool:
        if any(annotation_tag(segment) == "partiallytrapped" for segment in annotations):
            return True
        source = annotation_value(annotations, "from")
        return source is not None and normalize_name(strip_effect_prefix(source)) in END_OF_TURN_SOURCES

    @staticmethod
    def _apply_damage(ctx: ParseContext, event: DamageEvent) -> None:
        """Damage, heal and sethp records.

        End-of-turn sources (Leftovers, poison, weather) go to the turn's
        trailing lines and close the open action; everything after them in
        the turn is residual too.
        """
        ref = event.pokemon.ref
        pokemon = ctx.registry.get_or_create(ref, event.pokemon.side)
        hp = parse_hp_status(event.hp_status)
        formatted = format_hp_status(hp)
        previous = pokemon.last_display_hp
        pokemon.last_display_hp = formatted
        pokemon.status = hp.status
        pokemon.fainted = hp.fainted

        change = f"{previous} → {formatted}" if previous and previous != formatted else formatted
        extras = [
            text
            for text in simplify_annotations(event.annotations)
            if text != "partiallytrapped"
        ]
        detail = ctx.subject_detail(ref, with_extras(change, extras))

        if EventDispatcher._is_end_of_turn(event.annotations):
            ctx.flush_field_ends()
            ctx.current_action = None
            ctx.current_turn.end_events.append(detail)
        else:
            ctx.append_detail(detail)

    @staticmethod
    def _apply_boost(ctx: ParseContext, event: BoostEvent) -> None:
        """Boost and unboost records.

        Unsourced changes right after a boosting ability announcement join
        that ability's line. A move's own stat raise is folded into its verb
        ("Swords Dance, +2 ATK"). Anything else is a detail.
        """
        ref = event.pokemon.ref
        pokemon = ctx.registry.get_or_create(ref, event.pokemon.side)
        has_source = annotation_value(event.annotations, "from") is not None
        delta = event.delta_text

        pending = ctx.pending_ability_boost
        if pending is not None and not has_source:
            pending.add(ref, ctx.registry.display_name(ref), pokemon.icon_id, delta)
            return

        action = ctx.current_action
        if (
            not isinstance(event, UnboostEvent)
            and not has_source
            and action is not None
            and action.action_type == ActionType.MOVE
            and action.actor_ref == ref
        ):
            action.verb = f"{action.verb}, {delta}"
            return

        extras = simplify_annotations(event.annotations)
        ctx.append_detail(ctx.subject_detail(ref, with_extras(delta, extras)))

    @staticmethod
    def _apply_status(ctx: ParseContext, event: StatusEvent) -> None:
        pokemon = ctx.registry.get_or_create(event.pokemon.ref, event.pokemon.side)
        pokemon.status = event.status.lower()
        extras = simplify_annotations(event.annotations)
        ctx.append_detail(ctx.subject_detail(event.pokemon.ref, with_extras(event.status.upper(), extras)))

    @staticmethod
    def _apply_curestatus(ctx: ParseContext, event: CureStatusEvent) -> None:
        pokemon = ctx.registry.get_or_create(event.pokemon.ref, event.pokemon.side)
        pokemon.status = None
        extras = simplify_annotations(event.annotations)
        ctx.append_detail(
            ctx.subject_detail(event.pokemon.ref, with_extras(f"cured {event.status.upper()}", extras))
        )

    @staticmethod
    def _apply_ability(ctx: ParseContext, event: AbilityEvent) -> None:
        ref = event.pokemon.ref
        pokemon = ctx.registry.get_or_create(ref, event.pokemon.side)
        ability = strip_effect_prefix(event.ability)
        if event.grants_boost:
            ctx.flush_ability_boost()
            ctx.pending_ability_boost = PendingAbilityBoost(
                source_ref=ref,
                source_name=ctx.registry.display_name(ref),
                source_icon=pokemon.icon_id,
                ability=ability,
                anchor_turn=ctx.current_turn,
                anchor_action=ctx.current_action,
            )
            return
        extras = simplify_annotations(segment for segment in event.annotations if segment != "boost")
        ctx.append_detail(ctx.subject_detail(ref, with_extras(ability, extras), owner=True))

    @staticmethod
    def _apply_item(ctx: ParseContext, event: ItemEvent) -> None:
        extras = simplify_annotations(event.annotations)
        ctx.append_detail(
            ctx.subject_detail(event.pokemon.ref, with_extras(strip_effect_prefix(event.item), extras), owner=True)
        )

    @staticmethod
    def _apply_enditem(ctx: ParseContext, event: EndItemEvent) -> None:
        eaten = any(annotation_tag(segment) == "eat" for segment in event.annotations)
        extras = simplify_annotations(segment for segment in event.annotations if annotation_tag(segment) != "eat")
        item = strip_effect_prefix(event.item)
        body = f"{item} {'consumed' if eaten else 'lost'}"
        ctx.append_detail(ctx.subject_detail(event.pokemon.ref, with_extras(body, extras), owner=True))

    @staticmethod
    def _apply_start_volatile(ctx: ParseContext, event: StartVolatileEvent) -> None:
        if any(annotation_tag(segment) == "silent" for segment in event.annotations):
            return
        extras = simplify_annotations(event.annotations)
        ctx.append_detail(ctx.subject_detail(event.pokemon.ref, with_extras(strip_effect_prefix(event.effect), extras)))

    @staticmethod
    def _apply_end_volatile(ctx: ParseContext, event: EndVolatileEvent) -> None:
        if any(annotation_tag(segment) == "silent" for segment in event.annotations):
            return
        extras = simplify_annotations(event.annotations)
        body = f"{strip_effect_prefix(event.effect)} ended"
        ctx.append_detail(ctx.subject_detail(event.pokemon.ref, with_extras(body, extras)))

    @staticmethod
    def _is_protect(ctx: ParseContext, ref: str, effect_id: str) -> bool:
        if effect_id in PROTECT_MOVES:
            return True
        return ref in ctx.protecting_this_turn and effect_id.endswith(("shield", "guard", "bunker", "bulwark"))

    @staticmethod
    def _apply_singleturn(ctx: ParseContext, event: SingleTurnEvent) -> None:
        ref = event.pokemon.ref
        effect = strip_effect_prefix(event.effect)
        effect_id = normalize_name(effect)
        if effect_id in PROTECT_MOVES:
            ctx.protecting_this_turn.add(ref)

        action = ctx.current_action
        if action is not None and action.actor_ref == ref and action.move_id == effect_id:
            return
        extras = simplify_annotations(event.annotations)
        ctx.append_detail(ctx.subject_detail(ref, with_extras(effect, extras)))

    @staticmethod
    def _apply_activate(ctx: ParseContext, event: ActivateEvent) -> None:
        ref = event.pokemon.ref
        effect = strip_effect_prefix(event.effect)
        effect_id = normalize_name(effect)
        action = ctx.current_action

        if EventDispatcher._is_protect(ctx, ref, effect_id) and action is not None:
            if action.mark_target(ref, " (Protect)"):
                return
            if action.actor_ref == ref and action.move_id == effect_id:
                return

        extras = simplify_annotations(event.annotations)
        ctx.append_detail(ctx.subject_detail(ref, with_extras(f"activates {effect}", extras)))

    @staticmethod
    def _apply_immune(ctx: ParseContext, event: ImmuneEvent) -> None:
        action = ctx.current_action
        if action is not None and action.mark_target(event.pokemon.ref, " (immune)"):
            return
        extras = simplify_annotations(event.annotations)
        ctx.append_detail(ctx.subject_detail(event.pokemon.ref, with_extras("immune", extras)))

    @staticmethod
    def _apply_fail(ctx: ParseContext, event: FailEvent) -> None:
        extras = simplify_annotations(event.annotations)
        ctx.append_detail(ctx.subject_detail(event.pokemon.ref, with_extras("fails", extras)))

    @staticmethod
    def _apply_miss(ctx: ParseContext, event: MissEvent) -> None:
        body = "misses"
        if event.target is not None:
            ctx.registry.get_or_create(event.target.ref, event.target.side)
            body = f"misses {ctx.registry.display_name(event.target.ref)}"
        ctx.append_detail(ctx.subject_detail(event.pokemon.ref, body))

    @staticmethod
    def _apply_faint(ctx: ParseContext, event: FaintEvent) -> None:
        pokemon = ctx.registry.get_or_create(event.pokemon.ref, event.pokemon.side)
        pokemon.fainted = True
        ctx.fainted_this_turn.add(event.pokemon.ref)

    @staticmethod
    def _apply_weather(ctx: ParseContext, event: WeatherEvent) -> None:
        if event.is_upkeep:
            return
        if event.is_clear:
            if ctx.active_weather:
                ctx.pending_field_ends.add(ctx.active_weather)
                ctx.active_weather = None
            return
        name = field_display_name(event.weather)
        ctx.active_weather = name
        EventDispatcher._announce_field_start(ctx, event.weather, name, event.annotations)

    @staticmethod
    def _apply_fieldstart(ctx: ParseContext, event: FieldStartEvent) -> None:
        name = field_display_name(event.effect)
        EventDispatcher._announce_field_start(ctx, event.effect, name, event.annotations)

    @staticmethod
    def _apply_fieldend(ctx: ParseContext, event: FieldEndEvent) -> None:
        ctx.pending_field_ends.add(field_display_name(event.effect))

    @staticmethod
    def _announce_field_start(ctx: ParseContext, effect: str, name: str, annotations: Tuple[str, ...]) -> None:
        """Header line for a weather/terrain/room start.

        Skipped when a move used this turn already started it. Starts caused
        by the ability or item of the Pokemon that just switched in are
        folded into that switch's verb.
        """
        effect_id = normalize_name(strip_effect_prefix(effect))
        starters = FIELD_STARTING_MOVES.get(effect_id, frozenset({effect_id}))
        if any(move_id in starters for move_id in ctx.moves_this_turn):
            return

        source = annotation_value(annotations, "from")
        origin = annotation_value(annotations, "of")
        action = ctx.current_action
        if source is not None and origin and effect_source_kind(source) in ("ability", "item"):
            origin_ref = parse_pokemon_ref(origin).ref
            if action is not None and action.action_type == ActionType.SWITCH and action.actor_ref == origin_ref:
                action.verb = f"{action.verb}, {name} ({strip_effect_prefix(source)})"
                return

        extras = simplify_annotations(annotations)
        ctx.push_header(DetailEntry.plain(with_extras(f"{name} started", extras)))

    @staticmethod
    def _apply_sidestart(ctx: ParseContext, event: SideStartEvent) -> None:
        condition_id = normalize_name(strip_effect_prefix(event.condition))
        ctx.side_conditions.setdefault(event.side, set()).add(condition_id)

    @staticmethod
    def _apply_sideend(ctx: ParseContext, event: SideEndEvent) -> None:
        """Announce a side condition ending, if it was ever announced as active.

        Removal by a move or ability (Defog, Rapid Spin) is reported where it
        happens; natural expiry waits with the other field ends.
        """
        condition_id = normalize_name(strip_effect_prefix(event.condition))
        active = ctx.side_conditions.setdefault(event.side, set())
        if condition_id not in active:
            return
        active.discard(condition_id)
        name = f"{possessive(ctx.player_name(event.side))} {side_condition_display_name(event.condition)}"
        if annotation_value(event.annotations, "from") is not None:
            extras = simplify_annotations(event.annotations)
            ctx.append_detail(DetailEntry.plain(with_extras(f"{name} removed", extras)))
        else:
            ctx.pending_field_ends.add(name)

    @staticmethod
    def _apply_terastallize(ctx: ParseContext, event: TerastallizeEvent) -> None:
        ref = event.pokemon.ref
        pokemon = ctx.registry.get_or_create(ref, event.pokemon.side)
        pokemon.tera_type = event.tera_type
        name = ctx.registry.display_name(ref)
        ctx.current_turn.tera_events.append(
            DetailEntry(
                text=f"Terastallize {name} → {event.tera_type}",
                markup=(
                    f"Terastallize {render_icon_label(pokemon.icon_id, name)} → "
                    f"{html.escape(event.tera_type, quote=False)}"
                ),
            )
        )
