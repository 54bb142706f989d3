"""Location providers for the optional local-support step.

A provider either returns a :class:`Location` or raises
:class:`GeolocationError`; the onboarding flow turns the error into a
notice and carries on without location data.
"""

from __future__ import annotations

import os
import re
from typing import Optional, Protocol

import httpx
from pydantic import ValidationError

from .schemas import Location


DEFAULT_GEO_URL = os.getenv("ADMISSIONS_NAVIGATOR_GEO_URL", "https://ipapi.co/json/")
DEFAULT_GEO_TIMEOUT_S = float(os.getenv("ADMISSIONS_NAVIGATOR_GEO_TIMEOUT_S", "5"))


class GeolocationError(RuntimeError):
    """Location was denied or could not be determined."""


class LocationProvider(Protocol):
    def get_location(self) -> Location:  # pragma: no cover - interface only
        ...


class DeniedLocationProvider:
    """The user declined to share a location."""

    def get_location(self) -> Location:
        raise GeolocationError("Location access was denied.")


_LAT_LON = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*[, ]\s*(-?\d+(?:\.\d+)?)\s*$")


class ManualLocationProvider:
    """Coordinates typed by the user, e.g. ``"37.5665, 126.9780"``."""

    def __init__(self, text: str) -> None:
        self.text = text

    def get_location(self) -> Location:
        m = _LAT_LON.match(self.text or "")
        if not m:
            raise GeolocationError(f"Could not read coordinates from {self.text!r}.")
        try:
            return Location(latitude=float(m.group(1)), longitude=float(m.group(2)))
        except ValidationError as e:
            raise GeolocationError("Coordinates are out of range.") from e


class IpLocationProvider:
    """Approximate position from an IP geolocation service.

    The service must answer with a JSON object carrying ``latitude`` and
    ``longitude`` keys (ipapi.co does).
    """

    def __init__(
        self,
        url: str = DEFAULT_GEO_URL,
        timeout_s: float = DEFAULT_GEO_TIMEOUT_S,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self.url = url
        self.timeout_s = timeout_s
        self.http_client = http_client

    def _fetch(self) -> dict:
        if self.http_client is not None:
            r = self.http_client.get(self.url)
        else:
            with httpx.Client(timeout=httpx.Timeout(self.timeout_s), follow_redirects=True) as c:
                r = c.get(self.url, headers={"User-Agent": "admissions-navigator/1.0"})
        r.raise_for_status()
        return r.json()

    def get_location(self) -> Location:
        try:
            data = self._fetch()
        except (httpx.HTTPError, ValueError) as e:
            raise GeolocationError(f"Location lookup failed: {e}") from e

        if not isinstance(data, dict):
            raise GeolocationError("Location lookup returned an unexpected payload.")
        try:
            return Location(latitude=data.get("latitude"), longitude=data.get("longitude"))
        except ValidationError as e:
            raise GeolocationError("Location lookup returned no usable coordinates.") from e
