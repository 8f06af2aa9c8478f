from __future__ import annotations

import json
import logging
import os

import pytest

from teamdex import cache
from teamdex.constants import PokeType
from teamdex.relations import RelationRepository
from teamdex.team import Roster, TeamMember, analyze_team
from teamdex.type_chart import damage_relations_payload


@pytest.fixture
def data_dir(tmp_path):
    original = cache.DATA_DIR
    cache.configure(tmp_path)
    yield tmp_path
    cache.configure(original)


def _type_fetch(calls):
    def fetch(name):
        calls.append(name)
        return {"name": name, "damage_relations": {"double_damage_from": [{"name": "water"}]}}
    return fetch


def test_type_is_fetched_once_and_persisted(data_dir) -> None:
    calls = []
    first = cache.get_type_cached("Fire", fetch=_type_fetch(calls))
    second = cache.get_type_cached("fire", fetch=_type_fetch(calls))
    assert first == second
    assert calls == ["fire"]

    with open(os.path.join(data_dir, cache.CACHE_FILE), encoding="utf-8") as f:
        on_disk = json.load(f)
    assert on_disk["type"]["fire"]["damage_relations"]["double_damage_from"] == [{"name": "water"}]


def test_fetch_errors_are_logged_not_raised(data_dir) -> None:
    def boom(name):
        raise ConnectionError("offline")

    assert cache.get_type_cached("fire", fetch=boom) is None
    assert cache.get_pokemon_cached("pikachu", fetch=boom) is None
    assert cache.get_species_cached("pikachu", fetch=boom) == {}


def test_species_payload_is_trimmed(data_dir) -> None:
    payload = {"name": "turtwig", "habitat": None, "varieties": [], "flavor_text_entries": ["..."]}
    species = cache.get_species_cached("turtwig", fetch=lambda name: payload)
    assert species == {"name": "turtwig", "habitat": None}


def test_corrupt_cache_file_is_moved_aside(data_dir) -> None:
    path = os.path.join(data_dir, cache.CACHE_FILE)
    with open(path, "w", encoding="utf-8") as f:
        f.write("{not json")
    cache.configure(data_dir)

    assert cache.get_pokemon_cached("eevee", fetch=lambda name: {"id": 133, "name": name})["id"] == 133
    leftovers = [p for p in os.listdir(data_dir) if ".corrupt." in p]
    assert len(leftovers) == 1


def test_backup_refresh_recover(data_dir) -> None:
    cache.get_pokemon_cached("eevee", fetch=lambda name: {"id": 133, "name": name})
    assert cache.backup_cache() is not None

    cache.refresh_cache()
    calls = []
    cache.get_type_cached("ice", fetch=_type_fetch(calls))
    assert calls == ["ice"]

    assert cache.recover_cache() is True
    assert cache.get_pokemon_cached("eevee", fetch=lambda name: None)["id"] == 133


def test_recover_without_backup(data_dir) -> None:
    assert cache.recover_cache() is False


def test_corrupt_cache_that_cannot_be_moved_still_analyzes(data_dir, monkeypatch) -> None:
    path = os.path.join(data_dir, cache.CACHE_FILE)
    with open(path, "w", encoding="utf-8") as f:
        f.write("{not json")
    cache.configure(data_dir)

    real_replace = os.replace

    def read_only_replace(src, dst):
        if ".corrupt." in str(dst):
            raise PermissionError("read-only volume")
        return real_replace(src, dst)

    monkeypatch.setattr(cache.os, "replace", read_only_replace)
    repo = RelationRepository(fetch=lambda name: cache.get_type_cached(name, fetch=damage_relations_payload))
    analysis = analyze_team(Roster((TeamMember(1, "x", (PokeType.FIRE,)),)), repo)

    assert analysis.missing_types == ()
    assert analysis.counts.weaknesses[PokeType.WATER] == 1


def test_failures_are_logged_as_errors(data_dir, caplog) -> None:
    def boom(name):
        raise ConnectionError("offline")

    caplog.set_level(logging.INFO, logger="teamdex")
    cache.get_type_cached("fire", fetch=boom)
    cache.recover_cache()

    levels = {r.getMessage(): r.levelno for r in caplog.records}
    assert levels["ERROR fetching type fire: offline"] == logging.ERROR
    assert levels["Recover failed: no cache backups found"] == logging.WARNING
