# teamdex/habitat.py
"""
Habitat inference for species PokeAPI has no habitat for (most of Gen 4+).

Order of precedence: the species' own habitat, then the best matching type
combination rule, then the primary type's usual habitat, then grassland.
"""

import logging
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple

from teamdex.constants import DEFAULT_HABITAT, Habitat, PokeType
from teamdex.logger import log_action

T = PokeType
H = Habitat


class CombinationRule(NamedTuple):
    types: frozenset
    habitat: Habitat
    priority: int


def _rule(a, b, habitat, priority):
    return CombinationRule(frozenset((a, b)), habitat, priority)


# Scanned top to bottom; among equal priorities the first declared rule wins.
COMBINATION_RULES: List[CombinationRule] = [
    # water
    _rule(T.WATER, T.FLYING, H.WATERS_EDGE, 10),
    _rule(T.WATER, T.GROUND, H.WATERS_EDGE, 10),
    _rule(T.WATER, T.GRASS, H.WATERS_EDGE, 9),
    _rule(T.WATER, T.BUG, H.WATERS_EDGE, 9),
    _rule(T.WATER, T.ICE, H.SEA, 9),
    _rule(T.WATER, T.DRAGON, H.SEA, 9),
    _rule(T.WATER, T.PSYCHIC, H.SEA, 8),
    _rule(T.WATER, T.DARK, H.SEA, 8),
    _rule(T.WATER, T.STEEL, H.SEA, 8),
    _rule(T.WATER, T.ROCK, H.WATERS_EDGE, 9),
    _rule(T.WATER, T.POISON, H.SEA, 8),
    # caves
    _rule(T.ROCK, T.GROUND, H.CAVE, 10),
    _rule(T.ROCK, T.DARK, H.CAVE, 9),
    _rule(T.ROCK, T.STEEL, H.CAVE, 9),
    _rule(T.GROUND, T.DARK, H.CAVE, 8),
    _rule(T.GROUND, T.STEEL, H.CAVE, 8),
    _rule(T.ROCK, T.PSYCHIC, H.MOUNTAIN, 8),
    # forest
    _rule(T.GRASS, T.BUG, H.FOREST, 10),
    _rule(T.GRASS, T.POISON, H.FOREST, 10),
    _rule(T.GRASS, T.FLYING, H.FOREST, 9),
    _rule(T.GRASS, T.FAIRY, H.FOREST, 9),
    _rule(T.BUG, T.POISON, H.FOREST, 9),
    _rule(T.BUG, T.FLYING, H.FOREST, 9),
    _rule(T.BUG, T.STEEL, H.FOREST, 8),
    # mountain
    _rule(T.FLYING, T.DRAGON, H.MOUNTAIN, 10),
    _rule(T.FLYING, T.PSYCHIC, H.MOUNTAIN, 8),
    _rule(T.FLYING, T.STEEL, H.MOUNTAIN, 8),
    _rule(T.DRAGON, T.GROUND, H.MOUNTAIN, 9),
    # urban
    _rule(T.ELECTRIC, T.STEEL, H.URBAN, 10),
    _rule(T.ELECTRIC, T.FLYING, H.URBAN, 8),
    _rule(T.STEEL, T.PSYCHIC, H.URBAN, 9),
    _rule(T.STEEL, T.FAIRY, H.URBAN, 8),
    # rough terrain
    _rule(T.FIGHTING, T.ROCK, H.ROUGH_TERRAIN, 9),
    _rule(T.FIGHTING, T.GROUND, H.ROUGH_TERRAIN, 9),
    _rule(T.FIGHTING, T.STEEL, H.ROUGH_TERRAIN, 8),
    _rule(T.FIGHTING, T.DARK, H.ROUGH_TERRAIN, 8),
    # rare
    _rule(T.GHOST, T.FAIRY, H.RARE, 10),
    _rule(T.GHOST, T.PSYCHIC, H.RARE, 9),
    _rule(T.FAIRY, T.PSYCHIC, H.RARE, 9),
    _rule(T.DRAGON, T.PSYCHIC, H.RARE, 8),
    _rule(T.DRAGON, T.FAIRY, H.RARE, 9),
    # fire
    _rule(T.FIRE, T.FLYING, H.MOUNTAIN, 9),
    _rule(T.FIRE, T.ROCK, H.MOUNTAIN, 9),
    _rule(T.FIRE, T.GROUND, H.ROUGH_TERRAIN, 8),
    _rule(T.FIRE, T.FIGHTING, H.ROUGH_TERRAIN, 9),
    _rule(T.FIRE, T.STEEL, H.ROUGH_TERRAIN, 8),
    _rule(T.FIRE, T.DRAGON, H.MOUNTAIN, 9),
    # ice
    _rule(T.ICE, T.FLYING, H.MOUNTAIN, 9),
    _rule(T.ICE, T.PSYCHIC, H.MOUNTAIN, 8),
    _rule(T.ICE, T.STEEL, H.MOUNTAIN, 8),
    _rule(T.ICE, T.GROUND, H.MOUNTAIN, 9),
    # dark / poison
    _rule(T.DARK, T.POISON, H.URBAN, 8),
    _rule(T.DARK, T.STEEL, H.URBAN, 9),
    _rule(T.DARK, T.FLYING, H.URBAN, 7),
    _rule(T.POISON, T.FLYING, H.URBAN, 7),
    # grassland
    _rule(T.NORMAL, T.FLYING, H.GRASSLAND, 9),
    _rule(T.NORMAL, T.FAIRY, H.GRASSLAND, 8),
    _rule(T.NORMAL, T.PSYCHIC, H.GRASSLAND, 7),
]

SINGLE_TYPE_HABITATS: Dict[PokeType, Habitat] = {
    T.NORMAL: H.GRASSLAND,
    T.FIRE: H.ROUGH_TERRAIN,
    T.WATER: H.SEA,
    T.ELECTRIC: H.URBAN,
    T.GRASS: H.FOREST,
    T.ICE: H.MOUNTAIN,
    T.FIGHTING: H.ROUGH_TERRAIN,
    T.POISON: H.URBAN,
    T.GROUND: H.CAVE,
    T.FLYING: H.MOUNTAIN,
    T.PSYCHIC: H.URBAN,
    T.BUG: H.FOREST,
    T.ROCK: H.CAVE,
    T.GHOST: H.RARE,
    T.DRAGON: H.MOUNTAIN,
    T.DARK: H.URBAN,
    T.STEEL: H.URBAN,
    T.FAIRY: H.RARE,
}


def _known_types(profile: Iterable) -> List[PokeType]:
    out: List[PokeType] = []
    for raw in profile or []:
        t = PokeType.parse(raw)
        if t is not None and t not in out:
            out.append(t)
    return out


def best_combination(types: Iterable) -> Optional[CombinationRule]:
    have = set(_known_types(types))
    best = None
    for rule in COMBINATION_RULES:
        if rule.types <= have and (best is None or rule.priority > best.priority):
            best = rule
    return best


def infer_habitat_from_types(profile: Iterable) -> Habitat:
    types = _known_types(profile)
    rule = best_combination(types)
    if rule is not None:
        return rule.habitat
    # primary type first, in the order the species lists them
    for t in types:
        if t in SINGLE_TYPE_HABITATS:
            return SINGLE_TYPE_HABITATS[t]
    return DEFAULT_HABITAT


def infer_habitat(authoritative, profile: Iterable) -> Habitat:
    """Never returns None: the species' habitat if it has one, else an inferred one."""
    return resolve_habitat(authoritative, profile)[0]


def resolve_habitat(authoritative, profile: Iterable) -> Tuple[Habitat, str]:
    """Like infer_habitat, also saying where the answer came from ("api" or "inferred")."""
    if authoritative:
        habitat = Habitat.parse(authoritative)
        if habitat is not None:
            return habitat, "api"
        log_action(f"ignoring unknown habitat {authoritative!r}", logging.WARNING)
    return infer_habitat_from_types(profile), "inferred"


class HabitatStyle(NamedTuple):
    image: str
    fallback_gradient: str
    overlay_opacity: float


HABITAT_STYLES: Dict[Habitat, HabitatStyle] = {
    H.CAVE: HabitatStyle("/habitats/cave.png", "linear-gradient(135deg, #434343 0%, #1a1a1a 100%)", 0.3),
    H.FOREST: HabitatStyle("/habitats/forest.png", "linear-gradient(135deg, #2d5016 0%, #1a3409 100%)", 0.3),
    H.GRASSLAND: HabitatStyle("/habitats/grassland.png", "linear-gradient(135deg, #9ab86c 0%, #6b8e23 100%)", 0.25),
    H.MOUNTAIN: HabitatStyle("/habitats/mountain.png", "linear-gradient(135deg, #8b7355 0%, #5d4e37 100%)", 0.3),
    H.RARE: HabitatStyle("/habitats/rare.png", "linear-gradient(135deg, #9333ea 0%, #581c87 100%)", 0.35),
    H.ROUGH_TERRAIN: HabitatStyle("/habitats/rough-terrain.png", "linear-gradient(135deg, #a0826d 0%, #6d5d4b 100%)", 0.3),
    H.SEA: HabitatStyle("/habitats/sea.png", "linear-gradient(135deg, #0077be 0%, #003d5c 100%)", 0.3),
    H.URBAN: HabitatStyle("/habitats/urban.png", "linear-gradient(135deg, #757575 0%, #424242 100%)", 0.35),
    H.WATERS_EDGE: HabitatStyle("/habitats/waters-edge.png", "linear-gradient(135deg, #4fc3f7 0%, #0288d1 100%)", 0.25),
}


def habitat_background(habitat) -> Optional[HabitatStyle]:
    h = Habitat.parse(habitat)
    if h is None:
        return None
    return HABITAT_STYLES[h]
