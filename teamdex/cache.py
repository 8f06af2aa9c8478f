# teamdex/cache.py
# Disk cache for PokeAPI payloads (pokemon, species, type relations) with safe writes.

import json
import logging
import os
import shutil
import tempfile
import threading
from datetime import datetime
from glob import glob

from teamdex import pokeapi
from teamdex.config import settings
from teamdex.logger import log_action

# --------------------------------------------------------------------------- #
# Paths & flags
# --------------------------------------------------------------------------- #

DATA_DIR = str(settings.data_dir)
CACHE_FILE = "pokemon_cache.json"

# Sections kept inside the cache file
SECTIONS = ["pokemon", "species", "type"]

ENABLE_VERBOSE_LOGGING = settings.verbose

_lock = threading.RLock()
_cache = None


def configure(data_dir):
    """Point the cache at another directory and drop whatever is in memory."""
    global DATA_DIR, _cache
    with _lock:
        DATA_DIR = str(data_dir)
        _cache = None


def _path() -> str:
    return os.path.join(DATA_DIR, CACHE_FILE)


def _atomic_write(path: str, obj: dict):
    """Write JSON through a temp file + rename so a crash never leaves half a file."""
    d = os.path.dirname(path) or "."
    tmp_path = None
    try:
        with tempfile.NamedTemporaryFile("w", dir=d, delete=False, encoding="utf-8", newline="\n") as tmp:
            tmp_path = tmp.name
            json.dump(obj, tmp, separators=(",", ":"), ensure_ascii=False)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_path, path)
    except Exception:
        if tmp_path and os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise


def _load() -> dict:
    """Read the cache file; a corrupt file is moved aside and we start empty."""
    os.makedirs(DATA_DIR, exist_ok=True)
    path = _path()
    data = {}
    if os.path.exists(path):
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            log_action(f"ERROR loading cache: {e}", logging.ERROR)
            bad = f"{path}.corrupt.{datetime.now().strftime('%Y%m%d_%H%M%S')}"
            try:
                os.replace(path, bad)
                log_action(f"backed up corrupt cache to {bad}")
            except OSError as move_err:
                log_action(f"ERROR moving corrupt cache aside: {move_err}", logging.ERROR)
            data = {}
    if not isinstance(data, dict):
        data = {}
    for key in SECTIONS:
        data.setdefault(key, {})

    # stale temp files from interrupted writes
    for p in glob(os.path.join(DATA_DIR, "tmp*")):
        try:
            os.remove(p)
            log_action(f"removed stale temp file: {p}")
        except OSError:
            pass
    return data


def _sections() -> dict:
    global _cache
    with _lock:
        if _cache is None:
            _cache = _load()
        return _cache


def _hit(label: str):
    if ENABLE_VERBOSE_LOGGING:
        log_action(f"CACHE HIT: {label}")


# --------------------------------------------------------------------------- #
# Public API
# --------------------------------------------------------------------------- #

def set_verbose(on: bool):
    """Enable/disable verbose cache logs."""
    global ENABLE_VERBOSE_LOGGING
    ENABLE_VERBOSE_LOGGING = bool(on)


def get_pokemon_cached(name, fetch=None):
    """Cached /pokemon payload; None when PokeAPI does not know the name."""
    name = str(name).strip().lower()
    m = _sections()["pokemon"]
    if name in m:
        _hit(name)
        return m[name]
    log_action(f"CACHE MISS: {name} - Fetching from API")
    try:
        data = (fetch or pokeapi.get_pokemon)(name)
    except Exception as e:
        log_action(f"ERROR fetching pokemon {name}: {e}", logging.ERROR)
        return None
    if data:
        with _lock:
            m[name] = data
        save_cache()
    return data


def get_species_cached(name, fetch=None):
    """Cached species payload; {} when unavailable."""
    name = str(name).strip().lower()
    m = _sections()["species"]
    if name in m:
        _hit(f"species {name}")
        return m[name]
    try:
        data = (fetch or pokeapi.get_species)(name)
    except Exception as e:
        log_action(f"ERROR fetching species {name}: {e}", logging.ERROR)
        return {}
    if data:
        # only the fields we read; species payloads are large
        trimmed = {
            "name": data.get("name", name),
            "habitat": data.get("habitat"),
        }
        with _lock:
            m[name] = trimmed
        save_cache()
        return trimmed
    return {}


def get_type_cached(type_name, fetch=None):
    """Cached /type payload (name + damage_relations) or None on failure."""
    type_name = str(type_name).strip().lower()
    m = _sections()["type"]
    if type_name in m:
        _hit(f"type {type_name}")
        return m[type_name]
    try:
        data = (fetch or pokeapi.get_type)(type_name)
    except Exception as e:
        log_action(f"ERROR fetching type {type_name}: {e}", logging.ERROR)
        return None
    if not data:
        return None
    cleaned = {
        "name": data.get("name", type_name),
        "damage_relations": data.get("damage_relations", {}),
    }
    with _lock:
        m[type_name] = cleaned
    save_cache()
    return cleaned


# --------------------------------------------------------------------------- #
# Save / backup / refresh
# --------------------------------------------------------------------------- #

def save_cache():
    with _lock:
        try:
            _atomic_write(_path(), _sections())
            log_action("Cache saved to disk")
        except OSError as e:
            log_action(f"ERROR saving cache: {e}", logging.ERROR)


def refresh_cache():
    """Clear cache file + memory."""
    global _cache
    with _lock:
        _cache = {k: {} for k in SECTIONS}
        if os.path.exists(_path()):
            try:
                os.remove(_path())
            except OSError as e:
                log_action(f"ERROR removing cache file: {e}", logging.ERROR)
    log_action("Cache manually refreshed")


def backup_cache():
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    backup_path = os.path.join(DATA_DIR, f"pokemon_cache_backup_{timestamp}.json")
    with _lock:
        try:
            _atomic_write(backup_path, _sections())
            log_action(f"Backup created: {backup_path}")
            return backup_path
        except OSError as e:
            log_action(f"ERROR creating backup: {e}", logging.ERROR)
            return None


def recover_cache():
    """Restore the cache from the most recent backup."""
    global _cache
    backups = sorted(glob(os.path.join(DATA_DIR, "pokemon_cache_backup_*.json")), reverse=True)
    if not backups:
        log_action("Recover failed: no cache backups found", logging.WARNING)
        return False
    src = backups[0]
    with _lock:
        try:
            shutil.copyfile(src, _path())
            with open(_path(), "r", encoding="utf-8") as f:
                recovered = json.load(f)
            for k in SECTIONS:
                recovered.setdefault(k, {})
            _cache = recovered
            log_action(f"Recovered cache from: {src} (size={os.path.getsize(src)} bytes)")
            return True
        except (OSError, ValueError) as e:
            log_action(f"ERROR recovering cache from {src}: {e}", logging.ERROR)
            return False
