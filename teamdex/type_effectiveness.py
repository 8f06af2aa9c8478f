# teamdex/type_effectiveness.py
import logging
from typing import Dict, Iterable, List, Mapping

from teamdex.constants import TYPES, PokeType
from teamdex.errors import MalformedProfile
from teamdex.logger import log_action
from teamdex.relations import DamageRelations

MAX_PROFILE_SIZE = 2


def normalize_profile(types: Iterable, strict: bool = False, max_size: int = MAX_PROFILE_SIZE) -> tuple:
    """
    Ordered, de-duplicated tuple of known types. Unknown names are dropped.
    With strict=True an empty or oversized result raises MalformedProfile.
    """
    out: List[PokeType] = []
    for raw in types or []:
        t = PokeType.parse(raw)
        if t is not None and t not in out:
            out.append(t)
    if strict and not out:
        raise MalformedProfile(f"no known types in {list(types or [])!r}")
    if strict and len(out) > max_size:
        raise MalformedProfile(f"at most {max_size} types allowed, got {len(out)}")
    return tuple(out)


def compute_effectiveness(profile: Iterable, relations: Mapping[PokeType, DamageRelations]) -> Dict[PokeType, float]:
    """defense: incoming attack type -> multiplier vs this profile"""
    defense = {atk: 1.0 for atk in TYPES}
    for ptype in normalize_profile(profile, max_size=len(TYPES)):
        rel = relations.get(ptype)
        if rel is None:
            # missing data degrades to neutral instead of failing the whole roster
            log_action(f"no relations for {ptype.value}; treating as neutral", logging.WARNING)
            continue
        for atk in TYPES:
            defense[atk] *= rel.defense_factor(atk)
    return defense


def offense_rows(profile: Iterable, relations: Mapping[PokeType, DamageRelations]) -> Dict[PokeType, Dict[PokeType, float]]:
    """for each of the profile's types (move type), multiplier vs each single-type defender"""
    offense = {}
    for mtype in normalize_profile(profile, max_size=len(TYPES)):
        rel = relations.get(mtype)
        if rel is None:
            continue
        offense[mtype] = {defn: rel.offense_factor(defn) for defn in TYPES}
    return offense


def weaknesses_of(effectiveness: Mapping[PokeType, float]) -> List[PokeType]:
    return [t for t in TYPES if effectiveness.get(t, 1.0) > 1]


def resistances_of(effectiveness: Mapping[PokeType, float]) -> List[PokeType]:
    return [t for t in TYPES if effectiveness.get(t, 1.0) < 1]


# ---- Buckets: up to 3 defender types -> labels including 8x and 1/8x
BUCKETS_ORDER = ["8x", "4x", "2x", "1x", "1/2x", "1/4x", "1/8x", "0x"]
BUCKET_LABELS = {
    8.0: "8x",
    4.0: "4x",
    2.0: "2x",
    1.0: "1x",
    0.5: "1/2x",
    0.25: "1/4x",
    0.125: "1/8x",
    0.0: "0x",
}


def multiplier_label(mult: float) -> str:
    return BUCKET_LABELS.get(float(mult), "1x")


def defense_buckets(effectiveness: Mapping[PokeType, float]) -> Dict[str, List[PokeType]]:
    buckets = {k: [] for k in BUCKETS_ORDER}
    for atk in TYPES:
        buckets[multiplier_label(effectiveness.get(atk, 1.0))].append(atk)
    return buckets
