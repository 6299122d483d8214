from __future__ import annotations

from typing import Any
from unittest.mock import Mock, patch

import pytest
import requests

from openf1_tap.cli import main
from openf1_tap.data.poller import Poller


@pytest.fixture(autouse=True)
def _isolate(monkeypatch) -> None:
    monkeypatch.delenv("OPENF1_BASE_URL", raising=False)
    monkeypatch.setattr("openf1_tap.cli.setup_logger", lambda *args, **kwargs: None)


def _mock_response(status_code: int, json_data: Any) -> Mock:
    response = Mock()
    response.status_code = status_code
    response.text = ""
    response.json.return_value = json_data
    return response


def test_missing_arguments_prints_usage_and_exits_1(capsys) -> None:
    with patch("requests.get") as mock_get:
        assert main([]) == 1
        assert main(["out.log"]) == 1

    assert "usage" in capsys.readouterr().out.lower()
    mock_get.assert_not_called()


def test_unknown_route_target_lists_targets_and_exits_0(tmp_path, capsys) -> None:
    path = tmp_path / "out.log"
    with patch("requests.get") as mock_get:
        assert main([str(path), "championship"]) == 0

    out = capsys.readouterr().out
    assert "Invalid route target" in out
    assert "drivers" in out
    assert "sessions" in out
    assert "intervals" in out
    mock_get.assert_not_called()
    assert not path.exists()


def test_interval_target_without_interval_exits_0(tmp_path, capsys) -> None:
    path = tmp_path / "out.log"
    with patch("requests.get") as mock_get:
        assert main([str(path), "intervals"]) == 0

    assert "requires an interval" in capsys.readouterr().out
    mock_get.assert_not_called()
    assert not path.exists()


@pytest.mark.parametrize("interval", ["0", "-10", "abc", "1.5"])
def test_bad_interval_exits_1(tmp_path, interval: str) -> None:
    with patch("requests.get") as mock_get:
        assert main([str(tmp_path / "out.log"), "intervals", interval]) == 1

    mock_get.assert_not_called()


def test_bad_param_exits_1_without_network(tmp_path) -> None:
    with patch("requests.get") as mock_get:
        assert main(["--param", "season=2023", str(tmp_path / "out.log"), "drivers"]) == 1
        assert main(["--param", "oops", str(tmp_path / "out.log"), "drivers"]) == 1

    mock_get.assert_not_called()


def test_missing_config_file_exits_1(tmp_path) -> None:
    with patch("requests.get") as mock_get:
        assert main(["--config", str(tmp_path / "nope.yaml"), str(tmp_path / "out.log"), "drivers"]) == 1

    mock_get.assert_not_called()


def test_single_shot_drivers_writes_lines(tmp_path) -> None:
    path = tmp_path / "drivers.log"
    body = [
        {"driver_number": 1, "name_acronym": "VER"},
        {"driver_number": 44, "name_acronym": "HAM"},
    ]
    with patch("requests.get", return_value=_mock_response(200, body)) as mock_get:
        assert main([str(path), "drivers"]) == 0

    mock_get.assert_called_once_with("https://api.openf1.org/v1/drivers?session_key=latest", timeout=10)
    assert path.read_text() == "driver_number: 1, name_acronym: VER\ndriver_number: 44, name_acronym: HAM\n"


def test_single_shot_param_override(tmp_path) -> None:
    path = tmp_path / "drivers.log"
    with patch("requests.get", return_value=_mock_response(200, [])) as mock_get:
        assert main(["--param", "driver_number=1", str(path), "drivers"]) == 0

    mock_get.assert_called_once_with(
        "https://api.openf1.org/v1/drivers?session_key=latest&driver_number=1", timeout=10
    )


def test_single_shot_csv(tmp_path) -> None:
    path = tmp_path / "sessions.csv"
    path.write_text("old\n")
    body = [{"session_key": 9158, "session_name": "Race"}]
    with patch("requests.get", return_value=_mock_response(200, body)):
        assert main(["--format", "csv", str(path), "sessions"]) == 0

    assert path.read_text().splitlines() == ["SESSION_KEY,SESSION_NAME", "9158,Race"]


def test_single_shot_transport_error_exits_1(tmp_path) -> None:
    path = tmp_path / "drivers.log"
    with patch("requests.get", side_effect=requests.exceptions.ConnectionError("boom")):
        assert main([str(path), "drivers"]) == 1

    assert path.read_text() == ""


def test_single_shot_http_error_exits_1(tmp_path) -> None:
    with patch("requests.get", return_value=_mock_response(500, None)):
        assert main([str(tmp_path / "drivers.log"), "drivers"]) == 1


def test_interval_mode_runs_until_interrupted(tmp_path) -> None:
    path = tmp_path / "intervals.log"

    def fake_run(self: Poller) -> None:
        self._tick()
        raise KeyboardInterrupt

    body = [{"driver_number": 1, "interval": 0.004}]
    with patch("requests.get", return_value=_mock_response(200, body)) as mock_get, patch.object(
        Poller, "run", fake_run
    ):
        assert main([str(path), "intervals", "1000"]) == 0

    mock_get.assert_called_once_with(
        "https://api.openf1.org/v1/intervals?session_key=latest&interval<0.005", timeout=10
    )
    assert path.read_text() == "driver_number: 1, interval: 0.004\n"


def test_interval_mode_survives_transport_error(tmp_path) -> None:
    path = tmp_path / "intervals.log"

    def fake_run(self: Poller) -> None:
        self._tick()
        self._tick()
        raise KeyboardInterrupt

    responses = [requests.exceptions.ConnectionError("boom"), _mock_response(200, [{"n": 1}])]
    with patch("requests.get", side_effect=responses), patch.object(Poller, "run", fake_run):
        assert main([str(path), "interval", "1000"]) == 0

    assert path.read_text() == "n: 1\n"
