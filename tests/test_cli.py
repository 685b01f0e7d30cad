import json
from pathlib import Path

from stormrank.cli import main


def test_cli_prints_tables_and_exports(storm_csv: Path, tmp_path: Path, capsys):
    out_json = tmp_path / "tables.json"
    code = main(["--csv", str(storm_csv), "--audit", "--export-json", str(out_json), "--export-csv", str(tmp_path / "csv")])
    assert code == 0

    out = capsys.readouterr().out
    assert "Health impact (fatalities + injuries):" in out
    assert "THUNDERSTORM WIND" in out
    assert "with_impact" in out
    assert json.loads(out_json.read_text(encoding="utf-8"))["economic"][0]["event_type"] == "FLOOD"
    assert (tmp_path / "csv" / "crop.csv").exists()


def test_cli_missing_file(tmp_path: Path, capsys):
    code = main(["--csv", str(tmp_path / "nope.csv.bz2")])
    assert code == 1
    err = capsys.readouterr().err
    assert "E-LOAD-001" in err
    assert "Hint:" in err


def test_cli_rejects_bad_percentile(storm_csv: Path, capsys):
    assert main(["--csv", str(storm_csv), "--percentile", "2"]) == 2
    assert "percentile" in capsys.readouterr().err


def test_cli_export_to_missing_directory(storm_csv: Path, tmp_path: Path, capsys):
    code = main(["--csv", str(storm_csv), "--export-json", str(tmp_path / "no_such_dir" / "tables.json")])
    assert code == 1
    err = capsys.readouterr().err
    assert "E-EXPORT-001" in err
    assert "Hint:" in err
