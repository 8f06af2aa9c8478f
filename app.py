from flask import Flask, jsonify, request

from teamdex import cache
from teamdex.cache import (
    backup_cache,
    get_pokemon_cached,
    get_species_cached,
    recover_cache,
    refresh_cache,
)
from teamdex.config import settings
from teamdex.constants import MAX_TEAM_SIZE, TYPES, PokeType
from teamdex.counters import counters_for
from teamdex.errors import DataUnavailable, MalformedProfile, RosterError, UnknownType
from teamdex.habitat import habitat_background, resolve_habitat
from teamdex.logger import configure_logging, log_action
from teamdex.pokeapi import best_sprite, pokemon_types, species_habitat
from teamdex.relations import api_repository, chart_repository
from teamdex.team import Roster, TeamMember, analyze_team
from teamdex.type_effectiveness import (
    compute_effectiveness,
    defense_buckets,
    normalize_profile,
    offense_rows,
)

app = Flask(__name__)
configure_logging(settings.log_file)

# one repository per process: relation data never changes, memoize forever
if settings.offline:
    repository = chart_repository(settings.max_workers)
else:
    repository = api_repository(settings.max_workers)


# helpers: enum-keyed maps -> plain json
def _names(types):
    return [t.value for t in types]


def _type_map(m):
    return {t.value: v for t, v in m.items()}


def _buckets(b):
    return {label: _names(types) for label, types in b.items()}


def _error(message, status):
    return jsonify({"error": message}), status


@app.errorhandler(DataUnavailable)
def data_unavailable(e):
    log_action(f"upstream data unavailable: {e}")
    return _error(str(e), 503)


@app.errorhandler(UnknownType)
def unknown_type(e):
    return _error(str(e), 404)


@app.errorhandler(RosterError)
def roster_error(e):
    return _error(str(e), 400)


@app.errorhandler(MalformedProfile)
def malformed_profile(e):
    return _error(str(e), 400)


# --------------------------------------------------------------------------- #
# Cache maintenance
# --------------------------------------------------------------------------- #

@app.route('/toggle_logging')
def toggle_logging():
    cache.set_verbose(not cache.ENABLE_VERBOSE_LOGGING)
    state = "enabled" if cache.ENABLE_VERBOSE_LOGGING else "disabled"
    return jsonify({"message": f"Verbose logging {state}"})


@app.route('/backup_cache')
def backup_cache_route():
    path = backup_cache()
    return jsonify({"ok": path is not None, "path": path})


@app.route('/refresh_cache')
def refresh_cache_route():
    refresh_cache()
    return jsonify({"ok": True})


@app.route('/recover_cache')
def recover_cache_route():
    ok = recover_cache()
    return jsonify({"ok": ok, "message": 'Recovered cache' if ok else 'Recover failed'})


@app.route('/')
def home():
    return jsonify({"app": "teamdex", "types": _names(TYPES), "max_team_size": MAX_TEAM_SIZE})


# --------------------------------------------------------------------------- #
# Creature pages
# --------------------------------------------------------------------------- #

def _load_pokemon(name):
    poke = get_pokemon_cached(name)
    if not poke:
        return None, _error(f"Pokémon '{name}' not found", 404)
    return poke, None


@app.route('/pokemon/<name>')
def pokemon_detail(name):
    """detail page data: typing, habitat, defensive and offensive matchups"""
    poke, err = _load_pokemon(name)
    if err:
        return err

    types = pokemon_types(poke)
    species = get_species_cached(poke.get("species", {}).get("name") or name)
    habitat, source = resolve_habitat(species_habitat(species), types)
    style = habitat_background(habitat)

    relations = repository.snapshot(types)
    defense = compute_effectiveness(types, relations)

    return jsonify({
        "name": poke["name"].capitalize(),
        "id": poke["id"],
        "sprite": best_sprite(poke),
        "types": _names(types),
        "habitat": habitat.value,
        "habitat_source": source,
        "habitat_background": style._asdict() if style else None,
        "effectiveness": {
            "defense": _type_map(defense),
            "defense_buckets": _buckets(defense_buckets(defense)),
            "offense": {t.value: _type_map(row) for t, row in offense_rows(types, relations).items()},
        },
        "missing_types": _names(t for t in types if t not in relations),
    })


@app.route('/habitat/<name>')
def habitat_view(name):
    poke, err = _load_pokemon(name)
    if err:
        return err
    types = pokemon_types(poke)
    species = get_species_cached(poke.get("species", {}).get("name") or name)
    habitat, source = resolve_habitat(species_habitat(species), types)
    return jsonify({"name": poke["name"], "types": _names(types), "habitat": habitat.value, "source": source})


# --------------------------------------------------------------------------- #
# Team builder
# --------------------------------------------------------------------------- #

def _roster_from_args():
    raw = request.args.get("members", "")
    names = [n.strip().lower() for n in raw.split(",") if n.strip()]
    if len(names) > MAX_TEAM_SIZE:
        raise RosterError(f"a team holds at most {MAX_TEAM_SIZE} members")
    roster = Roster()
    for n in names:
        poke, err = _load_pokemon(n)
        if err:
            return None, err
        roster = roster.add(TeamMember.from_pokemon(poke))
    return roster, None


@app.route('/team')
def team_view():
    roster, err = _roster_from_args()
    if err:
        return err

    analysis = analyze_team(roster, repository)
    counts = analysis.counts
    return jsonify({
        "members": [
            {"id": m.id, "name": m.name, "types": _names(m.types), "image_url": m.image_url,
             "effectiveness": _type_map(eff)}
            for m, eff in zip(roster, analysis.effectiveness)
        ],
        "weaknesses": [[t.value, n] for t, n in counts.ranked_weaknesses()],
        "resistances": [[t.value, n] for t, n in counts.ranked_resistances()],
        "status": analysis.summary.status.value,
        "message": analysis.summary.message,
        "status_type": analysis.summary.type.value if analysis.summary.type else None,
        "missing_types": _names(analysis.missing_types),
        "is_full": roster.is_full,
    })


@app.route('/counters/<type_name>')
def counters_view(type_name):
    """types that hit the given weakness for 2x; the UI filters the list by these"""
    weakness = PokeType.parse(type_name, strict=True)
    counters = counters_for(weakness, repository)
    return jsonify({"weakness": weakness.value, "counters": _names(t for t in TYPES if t in counters)})


@app.route("/type_tool")
def type_tool():
    # ad hoc defender typing, up to 3 types
    raw = [request.args.get(k) or "" for k in ("d1", "d2", "d3")]
    if not any(raw):
        raw = ["water"]
    profile = normalize_profile([r for r in raw if r], strict=True, max_size=3)

    relations = repository.snapshot(profile)
    defense = compute_effectiveness(profile, relations)
    return jsonify({
        "defense_types": _names(profile),
        "defense": _buckets(defense_buckets(defense)),
        "missing_types": _names(t for t in profile if t not in relations),
    })


if __name__ == '__main__':
    app.run(debug=True)
