"""Command-line route targets and their default query parameters."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from openf1_tap.data.endpoints import LATEST

DEFAULT_INTERVAL_THRESHOLD = 0.005


@dataclass(frozen=True)
class RouteTarget:
    """A named target: an endpoint, its default parameters, and its polling mode."""

    name: str
    endpoint: str
    default_params: Mapping[str, Any] = field(default_factory=dict)
    requires_interval: bool = False

    def build_params(self, overrides: Mapping[str, Any] | None = None) -> dict[str, Any]:
        params = dict(self.default_params)
        if overrides:
            params.update(overrides)
        return params


def _target(name: str, endpoint: str, requires_interval: bool, **defaults: Any) -> RouteTarget:
    return RouteTarget(
        name=name,
        endpoint=endpoint,
        default_params=MappingProxyType(defaults),
        requires_interval=requires_interval,
    )


ROUTE_TARGETS: Mapping[str, RouteTarget] = MappingProxyType(
    {
        target.name: target
        for target in (
            _target("interval", "intervals", True, session_key=LATEST, interval=DEFAULT_INTERVAL_THRESHOLD),
            _target("intervals", "intervals", True, session_key=LATEST, interval=DEFAULT_INTERVAL_THRESHOLD),
            _target("drivers", "drivers", False, session_key=LATEST),
            _target("sessions", "sessions", False, session_key=LATEST),
            _target("weather", "weather", True, meeting_key=LATEST),
            _target("pit", "pit", False, session_key=LATEST),
            _target("stints", "stints", False, session_key=LATEST),
        )
    }
)


def get_route_target(name: str) -> RouteTarget | None:
    return ROUTE_TARGETS.get(name)


__all__ = ["ROUTE_TARGETS", "RouteTarget", "get_route_target"]
