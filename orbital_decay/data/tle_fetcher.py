"""
CelesTrak GP group fetcher with a disk cache.

Used to seed a world with real debris populations (e.g. "cosmos-2251-debris").
 - Cache only successful payloads, keyed by group, with a TTL
 - Detect HTML/error pages served with a 200 status
 - Small retry with backoff on transient network errors
"""
from __future__ import annotations

import json
import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Tuple

import requests

from orbital_decay.config.settings import TLE_CACHE_FILE, TLE_CACHE_TTL

logger = logging.getLogger(__name__)

CELESTRAK_GP_URL = "https://celestrak.org/NORAD/elements/gp.php"
USER_AGENT = "OrbitalDecayEngine/1.0"
MAX_ATTEMPTS = 3


# -----------------------
# Cache helpers
# -----------------------
def _load_cache(cache_file: Path) -> dict:
    if not cache_file.exists():
        return {}
    try:
        data = json.loads(cache_file.read_text(encoding="utf-8"))
        if isinstance(data, dict):
            return data
        logger.warning("TLE cache content not a dict; starting fresh.")
        return {}
    except (OSError, ValueError):
        logger.warning("TLE cache file unreadable or corrupt, starting fresh.")
        return {}


def _save_cache(cache_file: Path, cache: dict) -> None:
    try:
        cache_file.write_text(json.dumps(cache, indent=2), encoding="utf-8")
    except OSError as e:
        logger.warning("Failed to write TLE cache: %s", e)


def _cache_get(cache: dict, group: str, now: datetime) -> Optional[str]:
    entry = cache.get(group)
    if not isinstance(entry, dict):
        return None
    try:
        ts = datetime.fromisoformat(entry["timestamp"])
    except (KeyError, TypeError, ValueError):
        return None
    if now - ts >= TLE_CACHE_TTL:
        return None
    text = entry.get("text")
    if not isinstance(text, str) or not parse_tle_text(text):
        return None
    logger.info("TLE cache hit for group %s", group)
    return text


# -----------------------
# Parsing
# -----------------------
def _looks_like_html(text: str) -> bool:
    t = (text or "").lower()
    return ("<html" in t) or ("<!doctype html" in t) or ("</html>" in t)


def parse_tle_text(text: str) -> List[Tuple[str, str, str]]:
    """
    Split a TLE catalogue (3-line or 2-line form) into (name, line1, line2) triples.
    2-line entries are named after their catalogue number.
    """
    lines = [l.strip() for l in (text or "").splitlines() if l.strip()]
    out = []
    i = 0
    while i < len(lines) - 1:
        if lines[i].startswith("1 ") and lines[i + 1].startswith("2 "):
            out.append((f"NORAD-{lines[i][2:7].strip()}", lines[i], lines[i + 1]))
            i += 2
            continue
        if i + 2 < len(lines) and lines[i + 1].startswith("1 ") and lines[i + 2].startswith("2 "):
            out.append((lines[i], lines[i + 1], lines[i + 2]))
            i += 3
            continue
        i += 1
    return out


# -----------------------
# Fetch
# -----------------------
def _fetch_celestrak_group(group: str) -> str:
    params = {"GROUP": group, "FORMAT": "TLE"}
    headers = {"User-Agent": USER_AGENT, "Accept": "text/plain, */*;q=0.8"}

    last_exc: Optional[Exception] = None
    for attempt in range(1, MAX_ATTEMPTS + 1):
        try:
            resp = requests.get(CELESTRAK_GP_URL, params=params, headers=headers, timeout=15)
            resp.raise_for_status()
            text = resp.text or ""
            ct = (resp.headers.get("Content-Type", "") or "").lower()
            if "text/html" in ct or _looks_like_html(text):
                raise RuntimeError("CelesTrak returned an HTML page instead of TLE data")
            if not parse_tle_text(text):
                raise RuntimeError(f"CelesTrak returned no TLE entries for group {group!r}")
            return text
        except requests.HTTPError as he:
            last_exc = he
            status = he.response.status_code if he.response is not None else None
            if status == 404:
                raise RuntimeError(f"CelesTrak: group {group!r} not found (404)") from he
        except (requests.RequestException, RuntimeError) as e:
            last_exc = e
        logger.warning("CelesTrak attempt %d/%d for %s failed: %s", attempt, MAX_ATTEMPTS, group, last_exc)
        if attempt < MAX_ATTEMPTS:
            time.sleep(0.6 * attempt)

    raise RuntimeError(f"CelesTrak failed after retries for group {group!r}: {last_exc}") from last_exc


def fetch_tle_group(group: str, cache_file: Optional[str] = None) -> List[Tuple[str, str, str]]:
    """
    Public fetcher: disk cache (TTL) first, then CelesTrak.
    Raises RuntimeError when the group cannot be obtained.
    """
    path = Path(cache_file or TLE_CACHE_FILE)
    now = datetime.now(timezone.utc)

    cache = _load_cache(path)
    cached = _cache_get(cache, group, now)
    if cached is not None:
        return parse_tle_text(cached)

    text = _fetch_celestrak_group(group)
    cache[group] = {"timestamp": now.isoformat(), "text": text, "source": "CelesTrak"}
    _save_cache(path, cache)
    entries = parse_tle_text(text)
    logger.info("Fetched %d TLEs for group %s from CelesTrak", len(entries), group)
    return entries
