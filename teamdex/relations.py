# teamdex/relations.py
# Damage relation values and the repository that supplies them to the engine.

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from threading import Lock
from typing import Callable, Dict, Iterable, Mapping, Optional

from teamdex.constants import PokeType
from teamdex.errors import DataUnavailable
from teamdex.logger import log_action

EMPTY = frozenset()


def _type_set(entries) -> frozenset:
    """PokeAPI lists [{"name": "fire", "url": ...}]; plain names are accepted too."""
    out = set()
    for entry in entries or []:
        t = PokeType.parse(entry)
        if t is not None:
            out.add(t)
    return frozenset(out)


@dataclass(frozen=True)
class DamageRelations:
    """How attacks affect one defending type (the *_from sets) and how its own attacks land (*_to)."""
    type: PokeType
    double_from: frozenset = EMPTY
    half_from: frozenset = EMPTY
    no_from: frozenset = EMPTY
    double_to: frozenset = EMPTY
    half_to: frozenset = EMPTY
    no_to: frozenset = EMPTY

    @classmethod
    def from_api(cls, payload: Mapping, type_name=None) -> "DamageRelations":
        """Build from a /type/{name} payload. Raises UnknownType for a non-canonical type name."""
        t = PokeType.parse(type_name or payload.get("name"), strict=True)
        rel = payload.get("damage_relations") or {}
        return cls(
            type=t,
            double_from=_type_set(rel.get("double_damage_from")),
            half_from=_type_set(rel.get("half_damage_from")),
            no_from=_type_set(rel.get("no_damage_from")),
            double_to=_type_set(rel.get("double_damage_to")),
            half_to=_type_set(rel.get("half_damage_to")),
            no_to=_type_set(rel.get("no_damage_to")),
        )

    def defense_factor(self, attacking: PokeType) -> float:
        # immunity wins, then weakness, then resistance
        if attacking in self.no_from:
            return 0.0
        if attacking in self.double_from:
            return 2.0
        if attacking in self.half_from:
            return 0.5
        return 1.0

    def offense_factor(self, defending: PokeType) -> float:
        if defending in self.no_to:
            return 0.0
        if defending in self.double_to:
            return 2.0
        if defending in self.half_to:
            return 0.5
        return 1.0


RelationTable = Dict[PokeType, DamageRelations]


@dataclass
class RelationRepository:
    """
    Hands out DamageRelations per type. `fetch` returns a PokeAPI-shaped payload
    (or None when the data could not be obtained). Results are memoized for the
    lifetime of the repository: type relations do not change.
    """
    fetch: Callable[[str], Optional[Mapping]]
    max_workers: int = 8
    _memo: Dict[PokeType, DamageRelations] = field(default_factory=dict, init=False, repr=False)
    _lock: Lock = field(default_factory=Lock, init=False, repr=False)

    def get(self, type_name) -> Optional[DamageRelations]:
        t = PokeType.parse(type_name)
        if t is None:
            return None
        with self._lock:
            if t in self._memo:
                return self._memo[t]
        payload = self.fetch(t.value)
        if not payload:
            log_action(f"relations unavailable for {t.value}", logging.WARNING)
            return None
        rel = DamageRelations.from_api(payload, t)
        with self._lock:
            self._memo[t] = rel
        return rel

    def require(self, type_name) -> DamageRelations:
        rel = self.get(type_name)
        if rel is None:
            raise DataUnavailable(f"no damage relations for {type_name!r}", resource=str(type_name))
        return rel

    def snapshot(self, types: Iterable) -> RelationTable:
        """
        Fetch relations for every distinct known type concurrently and return
        one complete table. Types whose data could not be fetched are absent.
        """
        wanted = []
        for name in types:
            t = PokeType.parse(name)
            if t is not None and t not in wanted:
                wanted.append(t)
        if not wanted:
            return {}
        workers = max(1, min(self.max_workers, len(wanted)))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(self.get, wanted))
        return {t: rel for t, rel in zip(wanted, results) if rel is not None}


def chart_repository(max_workers: int = 8) -> RelationRepository:
    """Repository backed by the bundled chart; never touches the network."""
    from teamdex.type_chart import damage_relations_payload
    return RelationRepository(fetch=damage_relations_payload, max_workers=max_workers)


def api_repository(max_workers: int = 8) -> RelationRepository:
    """Repository backed by PokeAPI through the disk cache."""
    from teamdex.cache import get_type_cached
    return RelationRepository(fetch=get_type_cached, max_workers=max_workers)
