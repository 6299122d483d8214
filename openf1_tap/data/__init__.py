"""OpenF1 endpoint registry, HTTP client and poller."""

from openf1_tap.data.endpoints import LATEST, build_url, is_valid_endpoint
from openf1_tap.data.openf1_client import OpenF1Client, OpenF1ClientError
from openf1_tap.data.poller import Poller, PollRequest, TickResult

__all__ = [
    "LATEST",
    "OpenF1Client",
    "OpenF1ClientError",
    "PollRequest",
    "Poller",
    "TickResult",
    "build_url",
    "is_valid_endpoint",
]
