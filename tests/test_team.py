from __future__ import annotations

from itertools import permutations

import pytest

from teamdex.constants import MAX_TEAM_SIZE, TYPES, PokeType
from teamdex.errors import DuplicateMember, RosterFull
from teamdex.relations import RelationRepository, chart_repository
from teamdex.team import (
    AggregateCounts,
    Roster,
    TeamMember,
    TeamStatus,
    aggregate_team,
    analyze_team,
    classify_team_status,
)
from teamdex.type_chart import damage_relations_payload
from teamdex.type_effectiveness import compute_effectiveness

T = PokeType


def _member(member_id: int, *types: PokeType) -> TeamMember:
    return TeamMember(id=member_id, name=f"mon-{member_id}", types=tuple(types))


def _counts(weak: dict | None = None, resist: dict | None = None) -> AggregateCounts:
    weaknesses = {t: 0 for t in TYPES}
    resistances = {t: 0 for t in TYPES}
    weaknesses.update(weak or {})
    resistances.update(resist or {})
    return AggregateCounts(weaknesses=weaknesses, resistances=resistances)


# --------------------------------------------------------------------------- #
# Aggregation
# --------------------------------------------------------------------------- #

def test_quadruple_weakness_counts_once(chart) -> None:
    counts = aggregate_team([compute_effectiveness([T.ROCK, T.GROUND], chart)])
    assert counts.weaknesses[T.WATER] == 1
    assert counts.resistances[T.WATER] == 0
    # immunity is a resistance
    assert counts.resistances[T.ELECTRIC] == 1


def test_neutral_combination_counts_nowhere(chart) -> None:
    counts = aggregate_team([compute_effectiveness([T.FIRE, T.STEEL], chart)])
    assert counts.weaknesses[T.FIRE] == 0
    assert counts.resistances[T.FIRE] == 0


def test_aggregate_is_order_independent(chart) -> None:
    maps = [
        compute_effectiveness([T.FIRE], chart),
        compute_effectiveness([T.WATER, T.GROUND], chart),
        compute_effectiveness([T.GHOST, T.FAIRY], chart),
    ]
    expected = aggregate_team(maps)
    for perm in permutations(maps):
        assert aggregate_team(list(perm)) == expected


def test_counts_never_exceed_roster_size(chart) -> None:
    maps = [compute_effectiveness([t], chart) for t in TYPES[:MAX_TEAM_SIZE]]
    counts = aggregate_team(maps)
    for t in TYPES:
        assert 0 <= counts.weaknesses[t] <= len(maps)
        assert 0 <= counts.resistances[t] <= len(maps)
        assert counts.weaknesses[t] + counts.resistances[t] <= len(maps)


def test_empty_team_has_zero_counts() -> None:
    counts = aggregate_team([])
    assert set(counts.weaknesses.values()) == {0}
    assert set(counts.resistances.values()) == {0}
    assert counts.ranked_weaknesses() == []


def test_ranked_weaknesses_by_count_then_canonical_order() -> None:
    counts = _counts(weak={T.ROCK: 1, T.WATER: 2, T.GROUND: 2})
    assert counts.ranked_weaknesses() == [(T.WATER, 2), (T.GROUND, 2), (T.ROCK, 1)]


# --------------------------------------------------------------------------- #
# Status
# --------------------------------------------------------------------------- #

def test_three_uncovered_is_critical() -> None:
    summary = classify_team_status(_counts(weak={T.ICE: 3}))
    assert summary.status is TeamStatus.CRITICAL
    assert summary.type is T.ICE
    assert "Ice" in summary.message


def test_critical_beats_earlier_warning() -> None:
    summary = classify_team_status(_counts(weak={T.FIRE: 2, T.ICE: 3}))
    assert summary.status is TeamStatus.CRITICAL
    assert summary.type is T.ICE


def test_two_uncovered_is_warning() -> None:
    summary = classify_team_status(_counts(weak={T.GROUND: 2, T.WATER: 2}, resist={T.WATER: 1}))
    assert summary.status is TeamStatus.WARNING
    assert summary.type is T.GROUND
    assert "Ground" in summary.message


def test_warning_picks_first_type_in_canonical_order() -> None:
    summary = classify_team_status(_counts(weak={T.FAIRY: 2, T.FIRE: 2}))
    assert summary.type is T.FIRE


def test_covered_major_weaknesses_are_good() -> None:
    summary = classify_team_status(_counts(weak={T.WATER: 2, T.ROCK: 2, T.ICE: 1}, resist={T.WATER: 1, T.ROCK: 2}))
    assert summary.status is TeamStatus.GOOD
    assert summary.type is None


def test_covered_triple_weakness_is_not_good() -> None:
    summary = classify_team_status(_counts(weak={T.WATER: 3}, resist={T.WATER: 1}))
    assert summary.status is TeamStatus.NEUTRAL


def test_no_major_weakness_is_neutral() -> None:
    assert classify_team_status(_counts()).status is TeamStatus.NEUTRAL
    assert classify_team_status(_counts(weak={T.FIRE: 1, T.ICE: 1})).status is TeamStatus.NEUTRAL


def test_classification_is_deterministic() -> None:
    counts = _counts(weak={T.DARK: 2, T.BUG: 2, T.FIRE: 2})
    first = classify_team_status(counts)
    assert all(classify_team_status(counts) == first for _ in range(5))


# --------------------------------------------------------------------------- #
# Roster
# --------------------------------------------------------------------------- #

def test_roster_is_immutable_value() -> None:
    empty = Roster()
    one = empty.add(_member(1, T.FIRE))
    assert len(empty) == 0
    assert len(one) == 1
    assert one.contains(1)
    assert one.remove(1) == empty
    assert one.remove(99) == one


def test_roster_rejects_seventh_member() -> None:
    roster = Roster()
    for i in range(MAX_TEAM_SIZE):
        roster = roster.add(_member(i, T.NORMAL))
    assert roster.is_full
    with pytest.raises(RosterFull):
        roster.add(_member(42, T.FIRE))
    with pytest.raises(RosterFull):
        Roster(tuple(_member(i, T.NORMAL) for i in range(MAX_TEAM_SIZE + 1)))


def test_roster_rejects_duplicates() -> None:
    roster = Roster().add(_member(1, T.FIRE))
    with pytest.raises(DuplicateMember):
        roster.add(_member(1, T.WATER))


def test_unique_types_keeps_first_seen_order() -> None:
    roster = Roster((_member(1, T.WATER, T.GROUND), _member(2, T.FIRE), _member(3, T.GROUND)))
    assert roster.unique_types() == [T.WATER, T.GROUND, T.FIRE]


def test_member_from_pokemon_payload() -> None:
    payload = {
        "id": 6,
        "name": "charizard",
        "types": [
            {"slot": 2, "type": {"name": "flying"}},
            {"slot": 1, "type": {"name": "fire"}},
        ],
        "sprites": {"front_default": "front.png"},
    }
    member = TeamMember.from_pokemon(payload)
    assert member.types == (T.FIRE, T.FLYING)
    assert member.image_url == "front.png"


# --------------------------------------------------------------------------- #
# Full pass
# --------------------------------------------------------------------------- #

def test_three_fire_types_are_critically_weak_to_water() -> None:
    roster = Roster(tuple(_member(i, T.FIRE) for i in range(3)))
    analysis = analyze_team(roster, chart_repository())
    assert analysis.summary.status is TeamStatus.CRITICAL
    assert analysis.summary.type is T.WATER
    assert analysis.counts.weaknesses[T.WATER] == 3
    assert analysis.missing_types == ()


def test_two_fire_types_are_a_warning() -> None:
    roster = Roster((_member(1, T.FIRE), _member(2, T.FIRE, T.FLYING)))
    analysis = analyze_team(roster, chart_repository())
    assert analysis.summary.status is TeamStatus.WARNING
    assert analysis.summary.type is T.WATER


def test_empty_roster_analysis_is_neutral() -> None:
    analysis = analyze_team(Roster(), chart_repository())
    assert analysis.summary.status is TeamStatus.NEUTRAL
    assert analysis.effectiveness == ()


def test_missing_relations_degrade_to_neutral() -> None:
    def fetch(name):
        return None if name == "ground" else damage_relations_payload(name)

    roster = Roster((_member(1, T.ROCK, T.GROUND),))
    analysis = analyze_team(roster, RelationRepository(fetch=fetch))
    assert analysis.missing_types == (T.GROUND,)
    # only rock's half of the typing is applied
    assert analysis.effectiveness[0][T.WATER] == 2.0
    assert analysis.effectiveness[0][T.ELECTRIC] == 1.0
