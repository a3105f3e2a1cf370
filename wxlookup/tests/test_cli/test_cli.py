"""Tests for CLI commands."""

import json
from pathlib import Path

import httpx
import pytest
import respx

from wxlookup.cli import build_store, main
from wxlookup.config.loader import load_config
from wxlookup.config.schema import WEATHERAPI_BASE_URL
from wxlookup.store.coordinator import WeatherStore

FORECAST_URL = f"{WEATHERAPI_BASE_URL}/forecast.json"


@pytest.fixture
def base_args(config_yaml_path: Path) -> list[str]:
    return ["--config", str(config_yaml_path)]


class TestCLI:
    def test_no_command_returns_1(self, capsys):
        result = main([])
        assert result == 1

    def test_classify(self, capsys):
        assert main(["classify", "94102"]) == 0
        assert capsys.readouterr().out.strip() == "zip_code: 94102"

    @respx.mock
    def test_lookup(self, base_args, payload, capsys):
        route = respx.get(FORECAST_URL).mock(
            return_value=httpx.Response(200, json=payload)
        )
        result = main([*base_args, "lookup", "  San   Francisco "])
        assert result == 0
        assert route.call_count == 3
        assert route.calls[0].request.url.params["q"] == "San Francisco"
        out = capsys.readouterr().out
        assert "San Francisco" in out
        assert "Last updated: Just now" in out

    @respx.mock
    def test_lookup_json_and_persisted(self, base_args, payload, capsys):
        respx.get(FORECAST_URL).mock(return_value=httpx.Response(200, json=payload))
        assert main([*base_args, "lookup", "--json", "94102"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["location"]["city"] == "San Francisco"
        assert data["error"] is None

        assert main([*base_args, "last"]) == 0
        assert capsys.readouterr().out.strip() == "94102"

    @respx.mock
    def test_invalid_input_never_fetches(self, base_args, capsys):
        route = respx.get(FORECAST_URL)
        assert main([*base_args, "lookup", "A<>"]) == 1
        assert not route.called
        assert "at least 2 characters" in capsys.readouterr().out

    @respx.mock
    def test_lookup_not_found(self, base_args, capsys):
        respx.get(FORECAST_URL).mock(return_value=httpx.Response(400))
        assert main([*base_args, "lookup", "Atlantis"]) == 1
        out = capsys.readouterr().out
        assert "couldn't find that location" in out
        assert "Last updated: Never" in out

    @respx.mock
    def test_init_uses_default_then_last(self, base_args, payload, capsys):
        route = respx.get(FORECAST_URL).mock(
            return_value=httpx.Response(200, json=payload)
        )
        assert main([*base_args, "init"]) == 0
        assert route.calls[0].request.url.params["q"] == "Seattle"

        route.reset()
        assert main([*base_args, "lookup", "Boston"]) == 0
        route.reset()
        assert main([*base_args, "init"]) == 0
        assert route.calls[0].request.url.params["q"] == "Boston"

    def test_last_empty_and_clear(self, base_args, capsys):
        assert main([*base_args, "last"]) == 0
        assert "No location saved" in capsys.readouterr().out
        assert main([*base_args, "last", "--clear"]) == 0
        assert "cleared" in capsys.readouterr().out

    @respx.mock
    def test_last_clear_forgets_saved_location(self, base_args, payload, capsys):
        respx.get(FORECAST_URL).mock(return_value=httpx.Response(200, json=payload))
        assert main([*base_args, "lookup", "Boston"]) == 0
        assert main([*base_args, "last", "--clear"]) == 0
        capsys.readouterr()
        assert main([*base_args, "last"]) == 0
        assert "No location saved" in capsys.readouterr().out

    def test_last_clear_reports_unwritable_db(self, base_args, tmp_path: Path, capsys):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")
        args = [*base_args, "--db", str(blocker / "state.db"), "last", "--clear"]
        assert main(args) == 1
        assert "Could not clear" in capsys.readouterr().out

    def test_config_show_redacts_key(self, base_args, capsys):
        assert main([*base_args, "config", "show"]) == 0
        out = capsys.readouterr().out
        assert "test-key-123" not in out
        assert '"api_key": "***"' in out
        assert "Seattle" in out

    def test_db_override(self, base_args, tmp_path: Path, capsys):
        db_path = tmp_path / "other.db"
        assert main([*base_args, "--db", str(db_path), "last", "--clear"]) == 0
        assert db_path.exists()


class TestBuildStore:
    def test_wires_config(self, config_yaml_path: Path):
        store = build_store(load_config(config_yaml_path))
        assert isinstance(store, WeatherStore)
        assert store.default_location == "Seattle"
        assert store.client.api_key == "test-key-123"
        assert store.client.timeout == 5.0
