import json

import pytest

import scatterbrush.__main__ as cli
from scatterbrush import ScriptReport


def _write_script(tmp_path, strokes):
    path = tmp_path / "strokes.json"
    path.write_text(
        json.dumps(
            {
                "surface": {"origin": [0, 0, 0], "size": [100, 0, 100], "name": "field"},
                "prototypes": [{"name": "oak"}],
                "seed": 3,
                "strokes": strokes,
            }
        ),
        encoding="utf-8",
    )
    return path


def test_main_reports_and_exports(tmp_path, capsys):
    script_path = _write_script(
        tmp_path,
        [
            {"action": "place", "prototype": "oak", "position": [50, 0, 50], "brush_size": 20},
            {"action": "place", "prototype": "oak", "position": [51, 0, 51], "brush_size": 20},
        ],
    )
    export_path = tmp_path / "out" / "field.json"

    cli.main([str(script_path), "--export-path", str(export_path), "--strategy", "sequential", "--list"])

    out = capsys.readouterr().out
    assert "Surface: field" in out
    assert "Prototypes: oak" in out
    assert "  [0] place: 1" in out
    assert "  [1] place: 0" in out
    assert "Placed: 1" in out
    assert "Instances: 1" in out
    assert "oak: (50.000, 0.000, 50.000)" in out
    assert json.loads(export_path.read_text(encoding="utf-8"))["instances"][0]["prototype"] == "oak"


def test_main_passes_seed_and_strategy(tmp_path, monkeypatch):
    script_path = _write_script(tmp_path, [])
    calls = []

    def _run_script(script, strategy=None):
        calls.append((script.seed, strategy))
        return ScriptReport(outcomes=[], instance_count=0)

    monkeypatch.setattr(cli, "run_script", _run_script)

    cli.main([str(script_path), "--seed", "99", "--strategy", "parallel"])

    assert calls == [(99, cli.QueryStrategy.PARALLEL)]


def test_main_exits_on_invalid_script(tmp_path, caplog):
    path = tmp_path / "broken.json"
    path.write_text('{"strokes": []}', encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(path)])

    assert excinfo.value.code == 1
    assert "Invalid stroke script" in caplog.text


def test_main_exits_on_malformed_values(tmp_path, caplog):
    path = tmp_path / "bad_seed.json"
    path.write_text(
        json.dumps({"surface": {"size": [10, 1, 10]}, "seed": "abc", "strokes": []}),
        encoding="utf-8",
    )

    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(path)])

    assert excinfo.value.code == 1
    assert "seed must be an integer" in caplog.text
