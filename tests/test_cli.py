import pytest

from simlab.cli import main


def test_list(capsys):
    assert main(["list"]) == 0
    out = capsys.readouterr().out
    assert "gravity" in out
    assert "rotating-pendulum" in out


def test_new_requires_name(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["new"])
    assert excinfo.value.code != 0
    assert "usage" in capsys.readouterr().err


def test_new_then_collision(tmp_path, capsys):
    assert main(["new", "demo", "--root", str(tmp_path)]) == 0
    assert (tmp_path / "sketches" / "demo" / "sketch.py").exists()
    assert main(["new", "demo", "--root", str(tmp_path)]) == 1
    assert "already exists" in capsys.readouterr().err


def test_run_unknown_sketch(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["run", "no-such-sketch"])
    assert excinfo.value.code == 2
    assert "Unknown sketch" in capsys.readouterr().err


def test_run_thumbnail(tmp_path):
    out = tmp_path / "thumb.png"
    code = main(
        [
            "run",
            "rotating-pendulum",
            "--thumb",
            str(out),
            "--width",
            "200",
            "--height",
            "150",
            "--settings",
            str(tmp_path / "settings.json"),
        ]
    )
    assert code == 0
    assert out.exists()


def test_run_scaffolded_sketch_thumbnail(tmp_path):
    assert main(["new", "demo", "--root", str(tmp_path)]) == 0
    out = tmp_path / "demo.png"
    code = main(
        [
            "run",
            str(tmp_path / "sketches" / "demo"),
            "--thumb",
            str(out),
            "--settings",
            str(tmp_path / "settings.json"),
        ]
    )
    assert code == 0
    assert out.exists()


def test_analyze_without_runs(tmp_path, capsys):
    assert main(["analyze", "--runs-dir", str(tmp_path)]) == 1
    assert "last_run.txt" in capsys.readouterr().err


def test_list_includes_scaffolded_sketches(tmp_path, capsys):
    assert main(["new", "demo", "--root", str(tmp_path)]) == 0
    (tmp_path / "sketches" / "notes").mkdir()
    capsys.readouterr()

    assert main(["list", "--root", str(tmp_path)]) == 0
    out = capsys.readouterr().out
    assert "gravity" in out
    assert str(tmp_path / "sketches" / "demo") in out
    assert "notes" not in out
