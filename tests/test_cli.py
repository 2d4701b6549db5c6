"""Unit tests for CLI commands.

All tests use Typer's CliRunner and mock _get_service (or _get_store) so
that no real HTTP requests are made and the user's config is untouched.
"""

import json
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from globalwinescore.auth.credentials import ConfigStore
from globalwinescore.core.exceptions import (
    AuthenticationRequiredError,
    PlanRestrictedError,
    RateLimitError,
    RemoteRejectedError,
)
from globalwinescore.core.models import ScoreFilter, ScorePage
from globalwinescore.providers.globalwinescore.auth import ENV_API_TOKEN
from globalwinescore_cli.main import app

runner = CliRunner()


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_page():
    return ScorePage(
        count=2,
        next=None,
        previous=None,
        results=[
            {
                "wine_id": 101,
                "wine_name": "Latour",
                "vintage": "2010",
                "score": 98.2,
                "confidence_index": "A+",
                "appellation": "Pauillac",
                "color": "red",
            },
            {"wine": "Old Name", "score": 91},
        ],
    )


@pytest.fixture()
def big_page(mock_page):
    mock_page.count = 250
    return mock_page


@pytest.fixture()
def store(tmp_path, monkeypatch):
    monkeypatch.delenv(ENV_API_TOKEN, raising=False)
    s = ConfigStore(tmp_path / "config.json")
    with patch("globalwinescore_cli.main._get_store", return_value=s):
        yield s


def _make_service(page):
    """Return a MagicMock ScoreService returning ``page`` from every query."""
    svc = MagicMock()
    for name in (
        "latest", "historical", "by_vintage", "by_color",
        "by_wine_id", "by_lwin", "top_rated",
    ):
        getattr(svc, name).return_value = page
    return svc


def _invoke(svc, args):
    with patch("globalwinescore_cli.main._get_service", return_value=svc):
        return runner.invoke(app, args)


# ---------------------------------------------------------------------------
# latest command
# ---------------------------------------------------------------------------


def test_latest_table_output(mock_page):
    result = _invoke(_make_service(mock_page), ["latest"])
    assert result.exit_code == 0
    assert "Latour" in result.output
    assert "Old Name" in result.output
    assert "2 result(s)" in result.output


def test_latest_placeholders(mock_page):
    result = _invoke(_make_service(mock_page), ["latest"])
    assert "NV" in result.output
    assert "N/A" in result.output


def test_latest_builds_filter():
    svc = _make_service(ScorePage(count=0))
    result = _invoke(
        svc,
        [
            "latest",
            "--vintage", "2015",
            "--color", "RED",
            "--primeurs",
            "--lwin-11", "10012342015",
            "--limit", "5",
            "--offset", "10",
            "--ordering", "-date",
        ],
    )
    assert result.exit_code == 0
    svc.latest.assert_called_once_with(
        ScoreFilter(
            vintage="2015",
            color="red",
            is_primeurs=True,
            lwin_11="10012342015",
            limit=5,
            offset=10,
            ordering="-date",
        )
    )


def test_latest_default_filter_only_has_limit():
    svc = _make_service(ScorePage(count=0))
    _invoke(svc, ["latest"])
    svc.latest.assert_called_once_with(ScoreFilter(limit=20))


def test_latest_json_output(mock_page):
    result = _invoke(_make_service(mock_page), ["latest", "--output", "json"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["count"] == 2
    assert data["next"] is None
    assert data["results"][1] == {"wine": "Old Name", "score": 91}


def test_latest_csv_output(mock_page):
    result = _invoke(_make_service(mock_page), ["latest", "-o", "csv"])
    assert result.exit_code == 0
    lines = result.output.strip().splitlines()
    assert lines[0].startswith("wine_id,wine_name,vintage,score")
    assert "Latour" in lines[1]


def test_latest_shows_more_results_hint(big_page):
    result = _invoke(_make_service(big_page), ["latest"])
    assert result.exit_code == 0
    assert "Showing 2 of 250 total results" in result.output


def test_latest_empty_page():
    result = _invoke(_make_service(ScorePage(count=0)), ["latest"])
    assert result.exit_code == 0
    assert "No results found." in result.output


def test_invalid_vintage_exits_before_query():
    svc = _make_service(ScorePage(count=0))
    result = _invoke(svc, ["latest", "--vintage", "15"])
    assert result.exit_code == 1
    assert "Invalid vintage" in result.output
    svc.latest.assert_not_called()


# ---------------------------------------------------------------------------
# derived commands
# ---------------------------------------------------------------------------


def test_vintage_command(mock_page):
    svc = _make_service(mock_page)
    result = _invoke(svc, ["vintage", "2015", "--color", "white"])
    assert result.exit_code == 0
    svc.by_vintage.assert_called_once_with(
        "2015", ScoreFilter(vintage="2015", color="white", limit=30)
    )
    assert "2015 Vintage Scores" in result.output


def test_color_command_is_case_insensitive(mock_page):
    svc = _make_service(mock_page)
    result = _invoke(svc, ["color", "PINK"])
    assert result.exit_code == 0
    svc.by_color.assert_called_once_with("pink", ScoreFilter(limit=30))
    assert "Pink Wine Scores" in result.output


def test_color_command_rejects_unknown_color(mock_page):
    svc = _make_service(mock_page)
    result = _invoke(svc, ["color", "orange"])
    assert result.exit_code != 0
    svc.by_color.assert_not_called()


def test_top_command(mock_page):
    svc = _make_service(mock_page)
    result = _invoke(svc, ["top", "--limit", "10"])
    assert result.exit_code == 0
    svc.top_rated.assert_called_once_with(ScoreFilter(limit=10))


def test_wine_command_not_found():
    svc = _make_service(ScorePage(count=0))
    result = _invoke(svc, ["wine", "999"])
    assert result.exit_code == 0
    svc.by_wine_id.assert_called_once_with("999")
    assert "No wine found with this ID." in result.output


def test_lwin_command_json(mock_page):
    svc = _make_service(mock_page)
    result = _invoke(svc, ["lwin", "1012361", "-o", "json"])
    assert result.exit_code == 0
    svc.by_lwin.assert_called_once_with("1012361")
    assert json.loads(result.output)["count"] == 2


def test_historical_command(mock_page):
    svc = _make_service(mock_page)
    result = _invoke(svc, ["historical", "--wine-id", "101"])
    assert result.exit_code == 0
    svc.historical.assert_called_once_with(ScoreFilter(wine_id="101", limit=20))


# ---------------------------------------------------------------------------
# error handling
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "error, text",
    [
        (RateLimitError("Rate limit exceeded."), "Rate limit exceeded."),
        (PlanRestrictedError("Access forbidden."), "Access forbidden."),
        (RemoteRejectedError("invalid vintage", 400), "invalid vintage"),
    ],
)
def test_errors_exit_with_code_1(error, text):
    svc = MagicMock()
    svc.historical.side_effect = error
    result = _invoke(svc, ["historical"])
    assert result.exit_code == 1
    assert "Error:" in result.output
    assert text in result.output


def test_authentication_error_shows_setup_hint():
    svc = MagicMock()
    svc.top_rated.side_effect = AuthenticationRequiredError("No token.")
    result = _invoke(svc, ["top"])
    assert result.exit_code == 1
    assert "No token." in result.output
    assert "config set" in result.output


# ---------------------------------------------------------------------------
# config commands
# ---------------------------------------------------------------------------


def test_config_set_saves_token(store):
    result = runner.invoke(app, ["config", "set", "--api-token", "abcdefgh12345678"])
    assert result.exit_code == 0
    assert store.get("api_token") == "abcdefgh12345678"


def test_config_set_without_options(store):
    result = runner.invoke(app, ["config", "set"])
    assert result.exit_code == 1
    assert "--api-token" in result.output


def test_config_show_masks_token(store):
    store.set("api_token", "abcdefgh12345678")
    result = runner.invoke(app, ["config", "show"])
    assert result.exit_code == 0
    assert "abcdefgh...5678" in result.output
    assert "abcdefgh12345678" not in result.output


def test_config_show_without_token(store):
    result = runner.invoke(app, ["config", "show"])
    assert result.exit_code == 0
    assert "not set" in result.output


def test_config_clear(store):
    store.set("api_token", "abc")
    result = runner.invoke(app, ["config", "clear"])
    assert result.exit_code == 0
    assert not store.path.exists()


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "globalwinescore" in result.output
