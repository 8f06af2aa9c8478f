# teamdex/constants.py
# Closed sets the engine works with: the 18 battle types and the 9 habitats.

from enum import Enum

from teamdex.errors import UnknownType

MAX_TEAM_SIZE = 6


class PokeType(str, Enum):
    NORMAL = "normal"
    FIRE = "fire"
    WATER = "water"
    ELECTRIC = "electric"
    GRASS = "grass"
    ICE = "ice"
    FIGHTING = "fighting"
    POISON = "poison"
    GROUND = "ground"
    FLYING = "flying"
    PSYCHIC = "psychic"
    BUG = "bug"
    ROCK = "rock"
    GHOST = "ghost"
    DRAGON = "dragon"
    DARK = "dark"
    STEEL = "steel"
    FAIRY = "fairy"

    @classmethod
    def parse(cls, value, strict: bool = False):
        """
        Map a loose name ("Fire", " water ", {"name": "ice"}) onto a member.
        Unknown names give None, or raise UnknownType when strict=True.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, dict):
            # PokeAPI shapes: {"name": ...} or {"type": {"name": ...}}
            value = value.get("name") or (value.get("type") or {}).get("name")
        key = str(value or "").strip().lower()
        try:
            return cls(key)
        except ValueError:
            if strict:
                raise UnknownType(f"unknown type: {value!r}") from None
            return None

    def label(self) -> str:
        return self.value.capitalize()


class Habitat(str, Enum):
    CAVE = "cave"
    FOREST = "forest"
    GRASSLAND = "grassland"
    MOUNTAIN = "mountain"
    RARE = "rare"
    ROUGH_TERRAIN = "rough-terrain"
    SEA = "sea"
    URBAN = "urban"
    WATERS_EDGE = "waters-edge"

    @classmethod
    def parse(cls, value, strict: bool = False):
        if isinstance(value, cls):
            return value
        if isinstance(value, dict):
            value = value.get("name")
        key = str(value or "").strip().lower()
        try:
            return cls(key)
        except ValueError:
            if strict:
                raise UnknownType(f"unknown habitat: {value!r}") from None
            return None


# canonical scan order used everywhere a deterministic answer is needed
TYPES = list(PokeType)

DEFAULT_HABITAT = Habitat.GRASSLAND
