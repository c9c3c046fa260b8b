# core/energy_source.py
from __future__ import annotations

import json
import logging
import re
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import requests

from core.dataset import Dataset, parse_dataset
from core.errors import TransportError

LOG = logging.getLogger(__name__)

SOLAREDGE_BASE_URL = "https://monitoringapi.solaredge.com"
DEFAULT_TIME_UNIT = "QUARTER_OF_AN_HOUR"
DEFAULT_TIMEOUT_S = 15.0

_OFFSET_RE = re.compile(r"^([+-])(\d{2}):?(\d{2})$")


def parse_utc_offset(text: str) -> timezone:
    """``"+02:00"`` / ``"-0530"`` / ``"Z"`` -> fixed-offset timezone."""
    raw = (text or "").strip()
    if raw in ("", "Z", "z", "UTC", "utc"):
        return timezone.utc
    match = _OFFSET_RE.match(raw)
    if not match:
        raise ValueError(f"invalid UTC offset {text!r}")
    sign, hours, minutes = match.groups()
    delta = timedelta(hours=int(hours), minutes=int(minutes))
    if delta >= timedelta(hours=24):
        raise ValueError(f"UTC offset out of range: {text!r}")
    return timezone(-delta if sign == "-" else delta)


def format_utc_offset(tz: timezone) -> str:
    delta = tz.utcoffset(None) or timedelta(0)
    total = int(delta.total_seconds())
    sign = "-" if total < 0 else "+"
    hours, rem = divmod(abs(total), 3600)
    return f"{sign}{hours:02d}:{rem // 60:02d}"


def normalize_provider_date(raw: str, offset: str) -> str:
    """
    The provider reports local wall-clock times such as ``"2024-01-01 00:15:00"``.
    Rewrite them as ISO-8601 carrying the site's offset.
    """
    text = raw.strip().replace(" ", "T", 1)
    if text.endswith(("Z", "z")) or re.search(r"[+-]\d{2}:?\d{2}$", text[10:]):
        return text
    return f"{text}{offset}"


def _get_json(url: str, *, params: Optional[Mapping[str, Any]] = None, timeout: float) -> Any:
    try:
        r = requests.get(url, params=params, headers={"Accept": "application/json"}, timeout=timeout)
    except requests.RequestException as exc:
        # The exception text echoes the query string, credentials included.
        raise TransportError(f"request to {url} failed ({type(exc).__name__})") from exc
    if not r.ok:
        raise TransportError(f"Response status: {r.status_code}", status=r.status_code)
    try:
        return r.json()
    except ValueError as exc:
        raise TransportError(f"response from {url} is not JSON: {exc}") from exc


def _to_dataset(payload: Any, origin: str) -> Dataset:
    try:
        dataset = parse_dataset(payload)
    except ValueError as exc:
        raise TransportError(f"unexpected payload from {origin}: {exc}") from exc
    LOG.info("Loaded %d samples (%s) from %s", len(dataset), dataset.unit, origin)
    return dataset


def fetch_dataset(url: str, *, timeout: float = DEFAULT_TIMEOUT_S) -> Dataset:
    """GET an endpoint that already serves the ``{"energy": {...}}`` payload."""
    return _to_dataset(_get_json(url, timeout=timeout), url)


def load_dataset_file(path: str | Path) -> Dataset:
    path = Path(path)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise TransportError(f"cannot read {path}: {exc}") from exc
    except ValueError as exc:
        raise TransportError(f"{path} is not valid JSON: {exc}") from exc
    return _to_dataset(payload, str(path))


class SolarEdgeClient:
    """Fetch one day of site energy from the SolarEdge monitoring API."""

    def __init__(
        self,
        site_id: str,
        api_key: str,
        *,
        utc_offset: str = "+00:00",
        base_url: str = SOLAREDGE_BASE_URL,
        time_unit: str = DEFAULT_TIME_UNIT,
        timeout: float = DEFAULT_TIMEOUT_S,
    ):
        if not site_id:
            raise ValueError("site_id is required")
        if not api_key:
            raise ValueError("api_key is required")
        self.site_id = str(site_id)
        self.api_key = api_key
        self.tz = parse_utc_offset(utc_offset)
        self.base_url = base_url.rstrip("/")
        self.time_unit = time_unit
        self.timeout = float(timeout)

    @property
    def energy_url(self) -> str:
        return f"{self.base_url}/site/{self.site_id}/energy"

    def today(self) -> date:
        return datetime.now(tz=self.tz).date()

    def params(self, day: date) -> Dict[str, str]:
        return {
            "timeUnit": self.time_unit,
            "startDate": day.isoformat(),
            "endDate": day.isoformat(),
            "api_key": self.api_key,
        }

    def fetch_raw(self, day: date | None = None) -> Dict[str, Any]:
        """Return the provider payload with dates rewritten as offset-aware ISO strings."""
        day = day or self.today()
        LOG.info("Requesting site %s energy for %s", self.site_id, day.isoformat())
        data = _get_json(self.energy_url, params=self.params(day), timeout=self.timeout)
        energy = data.get("energy") if isinstance(data, Mapping) else None
        if not isinstance(energy, Mapping):
            raise TransportError("provider response has no 'energy' object")
        offset = format_utc_offset(self.tz)
        values = []
        for entry in energy.get("values") or []:
            if isinstance(entry, Mapping) and isinstance(entry.get("date"), str):
                entry = {**entry, "date": normalize_provider_date(entry["date"], offset)}
            values.append(entry)
        return {"energy": {**energy, "values": values}}

    def fetch_dataset(self, day: date | None = None) -> Dataset:
        return _to_dataset(self.fetch_raw(day), self.energy_url)
