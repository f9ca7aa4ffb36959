"""Enums and protocol lookup tables for battle log summaries."""

from enum import Enum


class ActionType(Enum):
    """Kind of in-turn deed recorded in a turn summary."""

    MOVE = "move"
    SWITCH = "switch"
    NOTE = "note"


class Weather(Enum):
    """Field weather conditions."""

    SUN = "sun"
    RAIN = "rain"
    SANDSTORM = "sandstorm"
    HAIL = "hail"
    SNOW = "snow"
    HARSH_SUN = "desolateland"
    HEAVY_RAIN = "primordialsea"
    STRONG_WINDS = "deltastream"

    @classmethod
    def from_protocol(cls, protocol_str: str) -> "Weather":
        """Parse weather from protocol string.

        Args:
            protocol_str: Weather string from protocol (e.g., "SunnyDay", "RainDance")

        Returns:
            Weather enum value

        Raises:
            ValueError: If protocol string is not recognized

        Examples:
            >>> Weather.from_protocol("SunnyDay")
            Weather.SUN
            >>> Weather.from_protocol("Snow")
            Weather.SNOW
        """
        mapping = {
            "sun": cls.SUN,
            "sunnyday": cls.SUN,
            "rain": cls.RAIN,
            "raindance": cls.RAIN,
            "sand": cls.SANDSTORM,
            "sandstorm": cls.SANDSTORM,
            "hail": cls.HAIL,
            "snow": cls.SNOW,
            "snowscape": cls.SNOW,
            "desolateland": cls.HARSH_SUN,
            "primordialsea": cls.HEAVY_RAIN,
            "deltastream": cls.STRONG_WINDS,
        }
        normalized = protocol_str.lower().replace("move:", "").replace(" ", "").strip()
        if normalized not in mapping:
            raise ValueError(f"Unknown weather protocol string: {protocol_str}")
        return mapping[normalized]

    @property
    def display_name(self) -> str:
        return {
            Weather.SUN: "Sun",
            Weather.RAIN: "Rain",
            Weather.SANDSTORM: "Sandstorm",
            Weather.HAIL: "Hail",
            Weather.SNOW: "Snow",
            Weather.HARSH_SUN: "Harsh Sun",
            Weather.HEAVY_RAIN: "Heavy Rain",
            Weather.STRONG_WINDS: "Strong Winds",
        }[self]


class Terrain(Enum):
    """Field terrain conditions."""

    ELECTRIC = "electricterrain"
    GRASSY = "grassyterrain"
    PSYCHIC = "psychicterrain"
    MISTY = "mistyterrain"

    @classmethod
    def from_protocol(cls, protocol_str: str) -> "Terrain":
        """Parse terrain from protocol string.

        Args:
            protocol_str: Terrain string from protocol (e.g., "Electric Terrain", "move: grassy terrain")

        Returns:
            Terrain enum value

        Raises:
            ValueError: If protocol string is not recognized
        """
        mapping = {
            "electric": cls.ELECTRIC,
            "electricterrain": cls.ELECTRIC,
            "grassy": cls.GRASSY,
            "grassyterrain": cls.GRASSY,
            "psychic": cls.PSYCHIC,
            "psychicterrain": cls.PSYCHIC,
            "misty": cls.MISTY,
            "mistyterrain": cls.MISTY,
        }
        normalized = protocol_str.lower().replace("move:", "").replace(" ", "").strip()
        if normalized not in mapping:
            raise ValueError(f"Unknown terrain protocol string: {protocol_str}")
        return mapping[normalized]

    @property
    def display_name(self) -> str:
        return {
            Terrain.ELECTRIC: "Electric Terrain",
            Terrain.GRASSY: "Grassy Terrain",
            Terrain.PSYCHIC: "Psychic Terrain",
            Terrain.MISTY: "Misty Terrain",
        }[self]


class FieldEffect(Enum):
    """Global field effects."""

    TRICK_ROOM = "trickroom"
    MAGIC_ROOM = "magicroom"
    WONDER_ROOM = "wonderroom"
    GRAVITY = "gravity"
    MUD_SPORT = "mudsport"
    WATER_SPORT = "watersport"

    @classmethod
    def from_protocol(cls, protocol_str: str) -> "FieldEffect":
        """Parse a field effect from protocol string (e.g., "move: Trick Room").

        Raises:
            ValueError: If protocol string is not recognized
        """
        normalized = protocol_str.lower().replace("move:", "").replace(" ", "").strip()
        for effect in cls:
            if effect.value == normalized:
                return effect
        raise ValueError(f"Unknown field effect protocol string: {protocol_str}")

    @property
    def display_name(self) -> str:
        return {
            FieldEffect.TRICK_ROOM: "Trick Room",
            FieldEffect.MAGIC_ROOM: "Magic Room",
            FieldEffect.WONDER_ROOM: "Wonder Room",
            FieldEffect.GRAVITY: "Gravity",
            FieldEffect.MUD_SPORT: "Mud Sport",
            FieldEffect.WATER_SPORT: "Water Sport",
        }[self]


class SideCondition(Enum):
    """Side-specific field conditions."""

    REFLECT = "reflect"
    LIGHT_SCREEN = "lightscreen"
    AURORA_VEIL = "auroraveil"
    STEALTH_ROCK = "stealthrock"
    SPIKES = "spikes"
    TOXIC_SPIKES = "toxicspikes"
    STICKY_WEB = "stickyweb"
    TAILWIND = "tailwind"
    SAFEGUARD = "safeguard"
    MIST = "mist"
    LUCKY_CHANT = "luckychant"

    @classmethod
    def from_protocol(cls, protocol_str: str) -> "SideCondition":
        """Parse side condition from protocol string.

        Args:
            protocol_str: Side condition string from protocol (e.g., "move: Stealth Rock", "Spikes")

        Returns:
            SideCondition enum value

        Raises:
            ValueError: If protocol string is not recognized
        """
        normalized = protocol_str.lower().replace("move:", "").replace(" ", "").strip()
        for condition in cls:
            if condition.value == normalized:
                return condition
        raise ValueError(f"Unknown side condition protocol string: {protocol_str}")

    @property
    def display_name(self) -> str:
        return {
            SideCondition.REFLECT: "Reflect",
            SideCondition.LIGHT_SCREEN: "Light Screen",
            SideCondition.AURORA_VEIL: "Aurora Veil",
            SideCondition.STEALTH_ROCK: "Stealth Rock",
            SideCondition.SPIKES: "Spikes",
            SideCondition.TOXIC_SPIKES: "Toxic Spikes",
            SideCondition.STICKY_WEB: "Sticky Web",
            SideCondition.TAILWIND: "Tailwind",
            SideCondition.SAFEGUARD: "Safeguard",
            SideCondition.MIST: "Mist",
            SideCondition.LUCKY_CHANT: "Lucky Chant",
        }[self]
