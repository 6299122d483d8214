"""Endpoint registry and URL builder for the OpenF1 v1 API."""

from __future__ import annotations

from dataclasses import dataclass
import math
from types import MappingProxyType
from typing import Any, Mapping
from urllib.parse import quote

BASE_URL = "https://api.openf1.org/v1"

# Accepted in place of a numeric session_key / meeting_key.
LATEST = "latest"

NUMBER = "number"
STRING = "string"
KEY = "key"


class EndpointError(ValueError):
    """Raised when a URL cannot be built for an endpoint and parameter set."""


class UnknownEndpointError(EndpointError):
    """Raised for an endpoint name outside the registry."""


class UnknownParameterError(EndpointError):
    """Raised when a parameter is not recognized by the endpoint."""


class MissingParameterError(EndpointError):
    """Raised when a required parameter is absent."""


class InvalidParameterError(EndpointError):
    """Raised when a parameter value does not match its kind."""


@dataclass(frozen=True)
class EndpointParam:
    """One query parameter recognized by an endpoint."""

    name: str
    kind: str
    required: bool = False
    operator: str = "="
    wire_name: str | None = None

    @property
    def key(self) -> str:
        return self.wire_name or self.name

    @property
    def is_range(self) -> bool:
        return self.operator != "="


@dataclass(frozen=True)
class Endpoint:
    """A logical OpenF1 resource and its parameters in canonical URL order."""

    name: str
    params: tuple[EndpointParam, ...]

    @property
    def path(self) -> str:
        return f"/{self.name}"

    def param(self, name: str) -> EndpointParam:
        for param in self.params:
            if param.name == name:
                return param
        raise UnknownParameterError(f"Unknown parameter '{name}' for endpoint '{self.name}'")

    @property
    def param_names(self) -> tuple[str, ...]:
        return tuple(param.name for param in self.params)


def _endpoint(name: str, *params: EndpointParam) -> Endpoint:
    return Endpoint(name=name, params=params)


_REGISTRY = (
    _endpoint(
        "car_data",
        EndpointParam("driver_number", NUMBER, required=True),
        EndpointParam("session_key", KEY, required=True),
        EndpointParam("speed", NUMBER, operator=">="),
    ),
    _endpoint(
        "drivers",
        EndpointParam("session_key", KEY, required=True),
        EndpointParam("driver_number", NUMBER),
    ),
    _endpoint(
        "intervals",
        EndpointParam("session_key", KEY, required=True),
        EndpointParam("interval", NUMBER, operator="<"),
    ),
    _endpoint(
        "laps",
        EndpointParam("session_key", KEY, required=True),
        EndpointParam("driver_number", NUMBER, required=True),
        EndpointParam("lap_number", NUMBER, required=True),
    ),
    _endpoint(
        "location",
        EndpointParam("session_key", KEY, required=True),
        EndpointParam("driver_number", NUMBER, required=True),
        EndpointParam("date_start", STRING, required=True, operator=">", wire_name="date"),
        EndpointParam("date_end", STRING, required=True, operator="<", wire_name="date"),
    ),
    _endpoint(
        "meetings",
        EndpointParam("year", NUMBER, required=True),
        EndpointParam("country_name", STRING, required=True),
    ),
    _endpoint(
        "pit",
        EndpointParam("session_key", KEY, required=True),
        EndpointParam("pit_duration", NUMBER, operator="<"),
    ),
    _endpoint(
        "position",
        EndpointParam("meeting_key", KEY, required=True),
        EndpointParam("driver_number", NUMBER, required=True),
        EndpointParam("position", NUMBER, operator="<="),
    ),
    _endpoint(
        "race_control",
        EndpointParam("flag", STRING, required=True),
        EndpointParam("driver_number", NUMBER, required=True),
        EndpointParam("date_start", STRING, required=True, operator=">=", wire_name="date"),
        EndpointParam("date_end", STRING, required=True, operator="<", wire_name="date"),
    ),
    _endpoint(
        "sessions",
        EndpointParam("session_key", KEY),
        EndpointParam("country_name", STRING),
        EndpointParam("session_name", STRING),
        EndpointParam("year", NUMBER),
    ),
    _endpoint(
        "stints",
        EndpointParam("session_key", KEY, required=True),
        EndpointParam("tyre_age_at_start", NUMBER, operator=">="),
    ),
    _endpoint(
        "team_radio",
        EndpointParam("session_key", KEY, required=True),
        EndpointParam("driver_number", NUMBER, required=True),
    ),
    _endpoint(
        "weather",
        EndpointParam("meeting_key", KEY, required=True),
        EndpointParam("wind_direction", NUMBER, operator=">="),
        EndpointParam("track_temperature", NUMBER, operator=">="),
    ),
)

ENDPOINTS: Mapping[str, Endpoint] = MappingProxyType({ep.name: ep for ep in _REGISTRY})


def is_valid_endpoint(name: str) -> bool:
    """Return True if the name is one of the registered endpoints."""
    return name in ENDPOINTS


def get_endpoint(name: str) -> Endpoint:
    """Look up an endpoint by name."""
    try:
        return ENDPOINTS[name]
    except KeyError:
        valid = ", ".join(sorted(ENDPOINTS))
        raise UnknownEndpointError(f"Unknown endpoint '{name}' (valid: {valid})") from None


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _is_key(value: Any) -> bool:
    # Session and meeting keys are integers.
    return value == LATEST or (isinstance(value, int) and not isinstance(value, bool))


def _check_value(endpoint: Endpoint, param: EndpointParam, value: Any) -> None:
    if param.kind == NUMBER:
        ok = _is_number(value)
    elif param.kind == KEY:
        ok = _is_key(value)
    else:
        ok = isinstance(value, str)
    if not ok:
        raise InvalidParameterError(
            f"Invalid value {value!r} for '{param.name}' on endpoint '{endpoint.name}' "
            f"(expected {param.kind})"
        )


def _render(value: Any) -> str:
    # Numbers are quoted too: repr of large floats carries a "+" exponent.
    return quote(str(value), safe=":")


def build_url(endpoint_name: str, params: Mapping[str, Any], base_url: str = BASE_URL) -> str:
    """Build the request URL for an endpoint.

    Components are emitted in the endpoint's canonical order. Optional
    parameters that are absent (or None) are left out. Range parameters
    embed their comparison operator in place of ``=``, e.g. ``interval<0.005``.
    """
    endpoint = get_endpoint(endpoint_name)

    for name in params:
        if name not in endpoint.param_names:
            raise UnknownParameterError(
                f"Unknown parameter '{name}' for endpoint '{endpoint.name}' "
                f"(recognized: {', '.join(endpoint.param_names)})"
            )

    components: list[str] = []
    for param in endpoint.params:
        value = params.get(param.name)
        if value is None:
            if param.required:
                raise MissingParameterError(
                    f"Missing required parameter '{param.name}' for endpoint '{endpoint.name}'"
                )
            continue
        _check_value(endpoint, param, value)
        components.append(f"{param.key}{param.operator}{_render(value)}")

    url = f"{base_url.rstrip('/')}{endpoint.path}"
    if components:
        url = f"{url}?{'&'.join(components)}"
    return url


def parse_param_value(endpoint_name: str, param_name: str, raw: str) -> int | float | str:
    """Coerce a command-line string to the kind the parameter expects."""
    param = get_endpoint(endpoint_name).param(param_name)
    if param.kind == STRING:
        return raw
    if param.kind == KEY and raw == LATEST:
        return LATEST
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        value = float(raw)
    except ValueError:
        value = None
    if param.kind == KEY or value is None or not math.isfinite(value):
        raise InvalidParameterError(
            f"Invalid value {raw!r} for '{param_name}' on endpoint '{endpoint_name}' "
            f"(expected {param.kind})"
        )
    return value


__all__ = [
    "BASE_URL",
    "ENDPOINTS",
    "Endpoint",
    "EndpointError",
    "EndpointParam",
    "InvalidParameterError",
    "LATEST",
    "MissingParameterError",
    "UnknownEndpointError",
    "UnknownParameterError",
    "build_url",
    "get_endpoint",
    "is_valid_endpoint",
    "parse_param_value",
]
