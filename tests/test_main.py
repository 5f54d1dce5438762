"""Tests for the command-line entry point."""
from __future__ import annotations

import json
from functools import partial
from unittest.mock import patch

import pytest

from placebot import main as cli
from placebot.client import PlaceClient
from fakeplace import SetReply


def _pattern(tmp_path):
    p = tmp_path / "dot.json"
    p.write_text(json.dumps({"pattern": [{"x": 0, "y": 0, "color": 2}, {"x": 1, "y": 0, "color": 2}]}), encoding="utf-8")
    return p


def test_once_runs_single_cycle_and_exports(tmp_path, http, fake):
    p = _pattern(tmp_path)
    with patch.object(cli, "PlaceClient", partial(PlaceClient, session=http, sleep=lambda s: None)):
        code = cli.main([
            "--refresh-token", "R", "--token", "T",
            "--pattern", f"{p} 2 2 0",
            "--base-url", "http://testserver",
            "--map-dir", str(tmp_path / "map"),
            "--once",
        ])
    assert code == 0
    assert fake.raw[2][2] == 2
    assert fake.raw[3][2] == 2
    assert len(list((tmp_path / "map").glob("board_*.png"))) == 1


def test_once_with_export_disabled(tmp_path, http, fake):
    p = _pattern(tmp_path)
    fake.set_replies = [SetReply("expired", token="T2", refresh="R2")]
    with patch.object(cli, "PlaceClient", partial(PlaceClient, session=http, sleep=lambda s: None)):
        code = cli.main([
            "--refresh-token", "R", "--token", "T",
            "--pattern", f"{p} 0 0 0",
            "--base-url", "http://testserver",
            "--map-dir", str(tmp_path / "map"),
            "--no-export", "--once",
        ])
    assert code == 0
    assert fake.set_calls[-1]["cookies"] == {"refresh": "R2", "token": "T2"}
    assert not (tmp_path / "map").exists()


def test_fatal_fetch_returns_error(tmp_path, http, fake):
    p = _pattern(tmp_path)
    fake.board_statuses = [404]
    with patch.object(cli, "PlaceClient", partial(PlaceClient, session=http, sleep=lambda s: None)):
        code = cli.main([
            "--refresh-token", "R", "--token", "T",
            "--pattern", f"{p} 0 0 0",
            "--base-url", "http://testserver",
            "--no-export", "--once",
        ])
    assert code == 1


def test_bad_pattern_returns_error(tmp_path):
    code = cli.main(["--refresh-token", "R", "--token", "T", "--pattern", "missing.json 0 0", "--once"])
    assert code == 1


def test_usage_errors(monkeypatch):
    monkeypatch.setattr(cli.config, "PLACE_TOKEN", "")
    with pytest.raises(SystemExit) as exc:
        cli.main(["--pattern", "a.json 0 0 0", "--refresh-token", "R", "--token", ""])
    assert exc.value.code == 2
    with pytest.raises(SystemExit) as exc:
        cli.main(["--refresh-token", "R", "--token", "T"])
    assert exc.value.code == 2
