# teamdex/team.py
# Roster value + the weakness/resistance roll-up shown in the team sidebar.

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from teamdex.constants import MAX_TEAM_SIZE, TYPES, PokeType
from teamdex.errors import DuplicateMember, RosterFull
from teamdex.logger import log_action
from teamdex.pokeapi import best_sprite, pokemon_types
from teamdex.relations import RelationRepository
from teamdex.type_effectiveness import compute_effectiveness, normalize_profile


@dataclass(frozen=True)
class TeamMember:
    id: int
    name: str
    types: Tuple[PokeType, ...]
    image_url: Optional[str] = None

    @classmethod
    def from_pokemon(cls, poke_json: Mapping) -> "TeamMember":
        """Build from a /pokemon payload."""
        return cls(
            id=int(poke_json["id"]),
            name=poke_json["name"],
            types=tuple(pokemon_types(poke_json)),
            image_url=best_sprite(poke_json),
        )


@dataclass(frozen=True)
class Roster:
    """Up to six members. Every change returns a new Roster."""
    members: Tuple[TeamMember, ...] = ()

    def __post_init__(self):
        if len(self.members) > MAX_TEAM_SIZE:
            raise RosterFull(f"a team holds at most {MAX_TEAM_SIZE} members")
        ids = [m.id for m in self.members]
        if len(set(ids)) != len(ids):
            raise DuplicateMember("a member can only appear once")

    def __len__(self):
        return len(self.members)

    def __iter__(self):
        return iter(self.members)

    @property
    def is_full(self) -> bool:
        return len(self.members) >= MAX_TEAM_SIZE

    def contains(self, member_id: int) -> bool:
        return any(m.id == member_id for m in self.members)

    def add(self, member: TeamMember) -> "Roster":
        if self.is_full:
            raise RosterFull(f"team is full ({MAX_TEAM_SIZE})")
        if self.contains(member.id):
            raise DuplicateMember(f"{member.name} is already on the team")
        return Roster(self.members + (member,))

    def remove(self, member_id: int) -> "Roster":
        return Roster(tuple(m for m in self.members if m.id != member_id))

    def unique_types(self) -> List[PokeType]:
        seen: List[PokeType] = []
        for m in self.members:
            for t in normalize_profile(m.types):
                if t not in seen:
                    seen.append(t)
        return seen


# --------------------------------------------------------------------------- #
# Aggregation
# --------------------------------------------------------------------------- #

@dataclass(frozen=True)
class AggregateCounts:
    weaknesses: Dict[PokeType, int]
    resistances: Dict[PokeType, int]

    def _ranked(self, counts):
        order = {t: i for i, t in enumerate(TYPES)}
        nonzero = [(t, n) for t, n in counts.items() if n > 0]
        return sorted(nonzero, key=lambda x: (-x[1], order[x[0]]))

    def ranked_weaknesses(self) -> List[Tuple[PokeType, int]]:
        return self._ranked(self.weaknesses)

    def ranked_resistances(self) -> List[Tuple[PokeType, int]]:
        return self._ranked(self.resistances)


def aggregate_team(effectiveness_maps: Iterable[Mapping[PokeType, float]]) -> AggregateCounts:
    """
    Count, per attacking type, how many members take more than / less than
    neutral damage. A 4x weakness still counts once; 0x counts as a resistance.
    """
    weaknesses = {t: 0 for t in TYPES}
    resistances = {t: 0 for t in TYPES}
    for eff in effectiveness_maps:
        for t in TYPES:
            mult = eff.get(t, 1.0)
            if mult > 1:
                weaknesses[t] += 1
            elif mult < 1:
                resistances[t] += 1
    return AggregateCounts(weaknesses=weaknesses, resistances=resistances)


# --------------------------------------------------------------------------- #
# Status
# --------------------------------------------------------------------------- #

class TeamStatus(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    GOOD = "good"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class TeamSummary:
    status: TeamStatus
    message: str
    type: Optional[PokeType] = None


CRITICAL_MSG = (
    "Critically Weak: Your team has a major, uncovered weakness to {label} attacks. "
    "You should immediately add a Pokémon that resists this type."
)
WARNING_MSG = (
    "Unbalanced: Your team is vulnerable to {label} attacks and lacks a solid counter. "
    "Adding a Pokémon that resists {label} is highly recommended."
)
GOOD_MSG = (
    "Well Balanced: Your team has its key weaknesses covered. "
    "This is a solid and synergistic defensive composition."
)
NEUTRAL_MSG = (
    "This team is still in development. "
    "Try to cover your most common weaknesses to improve its defensive synergy."
)


def classify_team_status(counts: AggregateCounts) -> TeamSummary:
    """First matching rule wins; types are scanned in canonical order."""
    weak = counts.weaknesses
    resist = counts.resistances

    for t in TYPES:
        if weak.get(t, 0) >= 3 and resist.get(t, 0) == 0:
            return TeamSummary(TeamStatus.CRITICAL, CRITICAL_MSG.format(label=t.label()), t)

    for t in TYPES:
        if weak.get(t, 0) >= 2 and resist.get(t, 0) == 0:
            return TeamSummary(TeamStatus.WARNING, WARNING_MSG.format(label=t.label()), t)

    if not any(weak.get(t, 0) >= 3 for t in TYPES):
        major = [t for t in TYPES if weak.get(t, 0) >= 2]
        # a team with no major weakness at all stays neutral
        if major and all(resist.get(t, 0) >= 1 for t in major):
            return TeamSummary(TeamStatus.GOOD, GOOD_MSG)

    return TeamSummary(TeamStatus.NEUTRAL, NEUTRAL_MSG)


# --------------------------------------------------------------------------- #
# Full pass
# --------------------------------------------------------------------------- #

@dataclass(frozen=True)
class TeamAnalysis:
    roster: Roster
    effectiveness: Tuple[Dict[PokeType, float], ...]
    counts: AggregateCounts
    summary: TeamSummary
    missing_types: Tuple[PokeType, ...] = field(default=())


def analyze_team(roster: Roster, repository: RelationRepository) -> TeamAnalysis:
    """
    Recompute everything from one relation snapshot. Types whose relations
    could not be fetched contribute neutrally and are listed in missing_types.
    """
    wanted = roster.unique_types()
    relations = repository.snapshot(wanted)
    missing = tuple(t for t in wanted if t not in relations)
    if missing:
        log_action(f"team analysis degraded; missing relations for {[t.value for t in missing]}", logging.WARNING)

    maps = tuple(compute_effectiveness(m.types, relations) for m in roster)
    counts = aggregate_team(maps)
    return TeamAnalysis(
        roster=roster,
        effectiveness=maps,
        counts=counts,
        summary=classify_team_status(counts),
        missing_types=missing,
    )
