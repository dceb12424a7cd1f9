"""
Tests for the command-line entry point.
"""

import json

from weaponsim.main import build_parser, main


def test_parser_defaults():
    args = build_parser().parse_args([])
    assert args.config.name == "weapons.json"
    assert args.iterations is None
    assert args.seed is None
    assert not args.verbose


def test_main_runs_a_simulation(tmp_path, capsys):
    path = tmp_path / "weapons.json"
    path.write_text(
        json.dumps(
            [
                {"name": "Longsword", "damage": "1d8", "critRange": "19-20"},
                {"name": "Frost Brand", "damage": "1d8", "enchant": [{"type": "Cold", "bonus": "1d6"}]},
            ]
        ),
        encoding="utf-8",
    )
    assert main([str(path), "-n", "20", "--seed", "3"]) == 0
    output = capsys.readouterr().out
    assert "Iterations: 20" in output
    assert "Longsword" in output
    assert "Frost Brand" in output
    assert "Cold" in output


def test_main_runs_the_bundled_sample(capsys):
    assert main(["-n", "5", "--seed", "1"]) == 0
    assert "Iterations: 5" in capsys.readouterr().out


def test_main_reports_invalid_files(tmp_path):
    path = tmp_path / "weapons.json"
    path.write_text(json.dumps([{"name": "Broken", "damage": "abc"}]), encoding="utf-8")
    assert main([str(path)]) == 1
    assert main([str(tmp_path / "missing.json")]) == 1


def test_main_rejects_empty_run(tmp_path):
    path = tmp_path / "weapons.json"
    path.write_text(json.dumps([{"name": "Dagger"}]), encoding="utf-8")
    assert main([str(path), "-n", "0"]) == 1
