# teamdex/type_chart.py
# Gen 6+ type chart, written attacker-first the way it is usually printed.
# Used in offline mode and as a known-good reference in tests.

from teamdex.constants import TYPES, PokeType

T = PokeType

# attacking type -> defenders it hits for 2x
SUPER_EFFECTIVE = {
    T.NORMAL: [],
    T.FIRE: [T.GRASS, T.ICE, T.BUG, T.STEEL],
    T.WATER: [T.FIRE, T.GROUND, T.ROCK],
    T.ELECTRIC: [T.WATER, T.FLYING],
    T.GRASS: [T.WATER, T.GROUND, T.ROCK],
    T.ICE: [T.GRASS, T.GROUND, T.FLYING, T.DRAGON],
    T.FIGHTING: [T.NORMAL, T.ICE, T.ROCK, T.DARK, T.STEEL],
    T.POISON: [T.GRASS, T.FAIRY],
    T.GROUND: [T.FIRE, T.ELECTRIC, T.POISON, T.ROCK, T.STEEL],
    T.FLYING: [T.GRASS, T.FIGHTING, T.BUG],
    T.PSYCHIC: [T.FIGHTING, T.POISON],
    T.BUG: [T.GRASS, T.PSYCHIC, T.DARK],
    T.ROCK: [T.FIRE, T.ICE, T.FLYING, T.BUG],
    T.GHOST: [T.PSYCHIC, T.GHOST],
    T.DRAGON: [T.DRAGON],
    T.DARK: [T.PSYCHIC, T.GHOST],
    T.STEEL: [T.ICE, T.ROCK, T.FAIRY],
    T.FAIRY: [T.FIGHTING, T.DRAGON, T.DARK],
}

# attacking type -> defenders that take 0.5x
NOT_VERY_EFFECTIVE = {
    T.NORMAL: [T.ROCK, T.STEEL],
    T.FIRE: [T.FIRE, T.WATER, T.ROCK, T.DRAGON],
    T.WATER: [T.WATER, T.GRASS, T.DRAGON],
    T.ELECTRIC: [T.ELECTRIC, T.GRASS, T.DRAGON],
    T.GRASS: [T.FIRE, T.GRASS, T.POISON, T.FLYING, T.BUG, T.DRAGON, T.STEEL],
    T.ICE: [T.FIRE, T.WATER, T.ICE, T.STEEL],
    T.FIGHTING: [T.POISON, T.FLYING, T.PSYCHIC, T.BUG, T.FAIRY],
    T.POISON: [T.POISON, T.GROUND, T.ROCK, T.GHOST],
    T.GROUND: [T.GRASS, T.BUG],
    T.FLYING: [T.ELECTRIC, T.ROCK, T.STEEL],
    T.PSYCHIC: [T.PSYCHIC, T.STEEL],
    T.BUG: [T.FIRE, T.FIGHTING, T.POISON, T.FLYING, T.GHOST, T.STEEL, T.FAIRY],
    T.ROCK: [T.FIGHTING, T.GROUND, T.STEEL],
    T.GHOST: [T.DARK],
    T.DRAGON: [T.STEEL],
    T.DARK: [T.FIGHTING, T.DARK, T.FAIRY],
    T.STEEL: [T.FIRE, T.WATER, T.ELECTRIC, T.STEEL],
    T.FAIRY: [T.FIRE, T.POISON, T.STEEL],
}

# attacking type -> defenders that are immune
NO_EFFECT = {
    T.NORMAL: [T.GHOST],
    T.ELECTRIC: [T.GROUND],
    T.FIGHTING: [T.GHOST],
    T.POISON: [T.STEEL],
    T.GROUND: [T.FLYING],
    T.PSYCHIC: [T.DARK],
    T.GHOST: [T.NORMAL],
    T.DRAGON: [T.FAIRY],
}


def damage_relations_payload(type_name) -> dict:
    """
    Render one type's relations in the PokeAPI /type/{name} shape so offline
    data goes through exactly the same parser as live data.
    """
    t = PokeType.parse(type_name, strict=True)

    def names(types):
        return [{"name": x.value} for x in TYPES if x in types]

    def attackers(table):
        return [atk for atk, defenders in table.items() if t in defenders]

    return {
        "name": t.value,
        "damage_relations": {
            "double_damage_from": names(attackers(SUPER_EFFECTIVE)),
            "half_damage_from": names(attackers(NOT_VERY_EFFECTIVE)),
            "no_damage_from": names(attackers(NO_EFFECT)),
            "double_damage_to": names(SUPER_EFFECTIVE.get(t, [])),
            "half_damage_to": names(NOT_VERY_EFFECTIVE.get(t, [])),
            "no_damage_to": names(NO_EFFECT.get(t, [])),
        },
    }
