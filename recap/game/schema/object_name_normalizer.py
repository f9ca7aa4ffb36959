import re

_NON_ID_CHARS = re.compile(r"[^a-z0-9]+")
_NON_ICON_CHARS = re.compile(r"[^a-z0-9-]+")


def normalize_name(name: str) -> str:
    """Normalize Pokemon object names to match Pokemon Showdown's toID function.

    Converts names to lowercase and removes all non-alphanumeric characters.
    This handles species, moves, abilities, items, and player names consistently.

    Args:
        name: The name to normalize (e.g., "Farfetch'd", "Will-O-Wisp", "Mr. Mime")

    Returns:
        Normalized name with only lowercase alphanumeric characters

    Examples:
        >>> normalize_name("Farfetch'd")
        'farfetchd'
        >>> normalize_name("Mr. Mime")
        'mrmime'
    """
    if not name:
        return ""
    return _NON_ID_CHARS.sub("", name.lower())


def normalize_icon_id(species: str) -> str:
    """Normalize a species name into a sprite identifier.

    Same as normalize_name() except that hyphens survive, since forme
    sprites are addressed as "<species>-<forme>".

    Examples:
        >>> normalize_icon_id("Ho-Oh")
        'ho-oh'
        >>> normalize_icon_id("Mr. Mime")
        'mrmime'
    """
    if not species:
        return ""
    return _NON_ICON_CHARS.sub("", species.lower()).strip("-")
