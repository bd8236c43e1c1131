import argparse
import json

import pytest

from localsearch.jobs import search_cli


def test_build_parser_defaults():
    parser = search_cli.build_parser()
    args = parser.parse_args(["vegan tacos"])

    assert isinstance(parser, argparse.ArgumentParser)
    assert args.query == "vegan tacos"
    assert args.match_count == 10
    assert args.latitude is None
    assert args.unified is False


def test_run_search_job_runs_keyword_search(monkeypatch):
    captured = []

    def fake_run_keyword_search(query):
        captured.append(query)
        return {"success": True, "results": []}

    monkeypatch.setattr(search_cli, "run_keyword_search", fake_run_keyword_search)

    response = search_cli.run_search_job(query="pizza", latitude=30.0, longitude=-97.0, match_count=3)

    assert response["success"] is True
    assert captured[0].origin == {"latitude": 30.0, "longitude": -97.0}
    assert captured[0].match_count == 3


def test_main_prints_json(monkeypatch, capsys):
    monkeypatch.setattr(search_cli, "run_keyword_search", lambda query: {"success": True, "query": query.text})

    search_cli.main(["pizza", "--count", "2"])

    assert json.loads(capsys.readouterr().out) == {"success": True, "query": "pizza"}


def test_main_exits_on_vague_query():
    with pytest.raises(SystemExit) as excinfo:
        search_cli.main(["the best"])

    assert excinfo.value.code == 2
