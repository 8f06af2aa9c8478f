# teamdex/pokeapi.py
# Thin PokeAPI client: one shared session with retries, plus payload extractors.

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from teamdex.config import settings
from teamdex.constants import Habitat, PokeType

_session = None


def get_session() -> requests.Session:
    """Lazily build the shared session (retries + backoff on 429/5xx)."""
    global _session
    if _session is None:
        s = requests.Session()
        s.headers.update({"Accept": "application/json", "User-Agent": "teamdex/1.0"})
        retry = Retry(
            total=settings.retries,
            backoff_factor=settings.backoff,
            status_forcelist=settings.retry_statuses,
        )
        adapter = HTTPAdapter(max_retries=retry)
        s.mount("https://", adapter)
        s.mount("http://", adapter)
        _session = s
    return _session


def _url(*parts) -> str:
    return "/".join([settings.api_base.rstrip("/")] + [str(p).strip("/") for p in parts]) + "/"


def json_fetch(url: str, timeout: float | None = None):
    r = get_session().get(url, timeout=timeout or settings.timeout)
    r.raise_for_status()
    return r.json()


def get_pokemon(name_or_id):
    """Full /pokemon payload or None on 404."""
    url = _url("pokemon", str(name_or_id).strip().lower())
    res = get_session().get(url, timeout=settings.timeout)
    if res.status_code != 200:
        return None
    return res.json()


def get_species(name_or_id):
    url = _url("pokemon-species", str(name_or_id).strip().lower())
    res = get_session().get(url, timeout=settings.timeout)
    if res.status_code != 200:
        return {}
    return res.json()


def get_type(name: str):
    # returns minimal payload needed by type effectiveness
    n = str(name).strip().lower()
    data = json_fetch(_url("type", n))
    return {
        "name": data.get("name", n),
        "damage_relations": data.get("damage_relations", {}),
    }


# --------------------------------------------------------------------------- #
# Payload extractors
# --------------------------------------------------------------------------- #

def pokemon_types(poke_json) -> list[PokeType]:
    """Types in slot order; names outside the 18 are dropped."""
    entries = sorted((poke_json or {}).get("types", []), key=lambda t: t.get("slot", 0))
    out = []
    for entry in entries:
        t = PokeType.parse(entry)
        if t is not None and t not in out:
            out.append(t)
    return out


def species_habitat(species_json):
    """Authoritative habitat, or None when the species has none (Gen 4+)."""
    habitat = (species_json or {}).get("habitat")
    if not habitat:
        return None
    return Habitat.parse(habitat)


def best_sprite(p):
    """return the best available sprite url"""
    s = (p or {}).get("sprites", {}) or {}
    other = s.get("other", {}) or {}
    return (
        other.get("official-artwork", {}).get("front_default")
        or s.get("front_default")
        or other.get("home", {}).get("front_default")
    )
