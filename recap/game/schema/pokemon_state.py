"""Pokemon registry for log summaries.

Each battler slot ("p1a", "p2b", ...) owns one mutable PokemonState that is
updated in place as the log reveals species, nicknames, HP and status.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from recap.game.schema.object_name_normalizer import normalize_icon_id, normalize_name
from recap.game.schema.pokemon_ref import side_of

DEFAULT_ICON_ID = "pokeball"
MIRROR_SUFFIX = " (P2)"


def icon_id_for(species: str) -> str:
    """Sprite identifier for a species, or the default icon when it normalizes empty."""
    return normalize_icon_id(species) or DEFAULT_ICON_ID


@dataclass
class PokemonState:
    """Last known facts about the Pokemon occupying one battler slot."""

    ref: str
    side: str
    species: str = ""
    icon_id: str = DEFAULT_ICON_ID
    nickname: Optional[str] = None
    last_display_hp: Optional[str] = None
    status: Optional[str] = None
    fainted: bool = False
    tera_type: Optional[str] = None

    @property
    def label(self) -> str:
        """Name shown in summaries: nickname, else species, else the slot key."""
        return self.nickname or self.species or self.ref


@dataclass
class TeamRoster:
    """Species seen for one side, in first-seen order, unique by species id."""

    species: List[str] = field(default_factory=list)
    _ids: Set[str] = field(default_factory=set, repr=False)

    def add(self, species: str) -> None:
        species_id = normalize_name(species)
        if not species_id:
            return

        # Team preview hides some formes ("Urshifu-*"); the first concrete
        # forme seen later takes over that roster entry.
        if not species.endswith("-*"):
            for index, known in enumerate(self.species):
                base = known[:-2]
                if known.endswith("-*") and (species == base or species.startswith(f"{base}-")):
                    self._ids.discard(normalize_name(known))
                    self.species[index] = species
                    self._ids.add(species_id)
                    return

        if species_id in self._ids:
            return
        self.species.append(species)
        self._ids.add(species_id)

    def __contains__(self, species_id: object) -> bool:
        return species_id in self._ids

    def __len__(self) -> int:
        return len(self.species)


class PokemonRegistry:
    """Owns every PokemonState of a run plus both team rosters."""

    def __init__(self) -> None:
        self._pokemon: Dict[str, PokemonState] = {}
        self.teams: Dict[str, TeamRoster] = {"p1": TeamRoster(), "p2": TeamRoster()}

    def get(self, ref: str) -> Optional[PokemonState]:
        return self._pokemon.get(ref)

    def get_or_create(self, ref: str, side: str, species: str = "") -> PokemonState:
        """Return the state for ref, creating it on first reference."""
        existing = self._pokemon.get(ref)
        if existing is not None:
            return existing
        created = PokemonState(ref=ref, side=side, species=species, icon_id=icon_id_for(species))
        self._pokemon[ref] = created
        return created

    def update_species(self, ref: str, species: str) -> PokemonState:
        """Rewrite species and icon of a slot and register the species on its roster."""
        side = side_of(ref)
        pokemon = self.get_or_create(ref, side, species)
        pokemon.species = species
        pokemon.icon_id = normalize_icon_id(species) or pokemon.icon_id
        self.register_species(side, species)
        return pokemon

    def register_species(self, side: str, species: str) -> None:
        team = self.teams.get(side)
        if team is not None:
            team.add(species)

    def is_mirrored(self, species: str) -> bool:
        """Whether a species appears on both rosters."""
        species_id = normalize_name(species)
        return bool(species_id) and all(species_id in team for team in self.teams.values())

    def display_name(self, ref: str) -> str:
        """Resolve the name to freeze into an action or detail.

        The second side's Pokemon get MIRROR_SUFFIX when both rosters hold
        the same species.
        """
        pokemon = self.get_or_create(ref, side_of(ref))
        name = pokemon.label
        if pokemon.side == "p2" and self.is_mirrored(pokemon.species):
            return f"{name}{MIRROR_SUFFIX}"
        return name

    def __len__(self) -> int:
        return len(self._pokemon)
