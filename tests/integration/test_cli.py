"""End-to-end tests of the trash command line against a temporary XDG data home."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from iron_bin import __version__
from iron_bin.app import main
from iron_bin.services import logger as logger_service


@pytest.fixture(autouse=True)
def fixture_reset_logging() -> Iterator[None]:
    # main() installs handlers bound to the captured streams of the current test.
    yield
    root = logging.getLogger()
    for handler in logger_service._installed:
        root.removeHandler(handler)
        handler.close()
    logger_service._installed.clear()


@pytest.fixture(name="data_dir")
def fixture_data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    monkeypatch.setenv("XDG_DATA_HOME", str(data_dir))
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "state"))
    monkeypatch.delenv("IRON_BIN_LOG_LEVEL", raising=False)
    return data_dir


@pytest.fixture(name="home")
def fixture_home(tmp_path: Path) -> Path:
    home = tmp_path / "home"
    home.mkdir()
    return home.resolve()


def write_file(path: Path, content: str = "abc") -> Path:
    path.write_text(content, encoding="utf-8")
    return path


def test_version(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["--version"])
    assert excinfo.value.code == 0
    assert capsys.readouterr().out == f"trash {__version__}\n"


def test_missing_command_is_a_usage_error(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main([])
    assert excinfo.value.code == 2
    assert "usage: trash" in capsys.readouterr().err


def test_list_absent_trash(data_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["list"]) == 0

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""
    assert list(data_dir.iterdir()) == []


def test_put_file_and_list(
    data_dir: Path, home: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    file = write_file(home / "test.txt")

    assert main(["put", str(file)]) == 0
    assert not file.exists()
    assert capsys.readouterr().out == ""

    assert main(["ls"]) == 0
    captured = capsys.readouterr()
    assert captured.out == f"{file}\n"
    assert captured.err == ""
    assert (data_dir / "Trash" / "info" / "test.txt.trashinfo").is_file()


def test_put_reports_each_failure(
    data_dir: Path, home: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    good = write_file(home / "good.txt")
    missing = home / "missing.txt"

    assert main(["put", "-v", str(missing), str(good)]) == 1

    captured = capsys.readouterr()
    assert not good.exists()
    assert f"trashed {good} on " in captured.out
    assert "total 1 trashed" in captured.out
    assert f"cannot trash {missing}" in captured.err
    assert "1 not trashed" in captured.err


def test_list_verbose_and_sorted(
    data_dir: Path, home: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    small = write_file(home / "b.txt", "x")
    large = write_file(home / "a.txt", "y" * 1500)
    assert main(["put", str(small), str(large)]) == 0
    capsys.readouterr()

    assert main(["list", "-v", "-H"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "total 2"
    assert lines[1].strip().startswith("1.5kB")
    assert lines[1].endswith(str(large))
    assert lines[2].strip().startswith("1B")
    assert lines[2].endswith(str(small))


def test_list_patterns(data_dir: Path, home: Path, capsys: pytest.CaptureFixture[str]) -> None:
    keep = write_file(home / "notes.md")
    other = write_file(home / "data.csv")
    assert main(["put", str(keep), str(other)]) == 0
    capsys.readouterr()

    assert main(["list", "*.md"]) == 0
    assert capsys.readouterr().out == f"{keep}\n"


def test_list_reports_broken_entries(
    data_dir: Path, home: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    file = write_file(home / "ok.txt")
    assert main(["put", str(file)]) == 0
    (data_dir / "Trash" / "info" / "broken.trashinfo").write_text("nope", encoding="utf-8")
    capsys.readouterr()

    assert main(["list"]) == 0
    captured = capsys.readouterr()
    assert captured.out == f"{file}\n"
    assert "cannot read trash entry broken" in captured.err


def test_put_and_restore_file(
    data_dir: Path, home: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    file1 = write_file(home / "test1.txt")
    file2 = write_file(home / "test2.txt")
    assert main(["put", str(file1), str(file2)]) == 0

    assert main(["restore", str(file1)]) == 0

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""
    assert file1.exists()
    assert not file2.exists()


def test_restore_relative_path(
    data_dir: Path, home: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    file = write_file(home / "rel.txt")
    assert main(["put", str(file)]) == 0
    monkeypatch.chdir(home)

    assert main(["restore", "rel.txt"]) == 0
    assert file.exists()


def test_restore_most_recent_without_arguments(
    data_dir: Path, home: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    file = write_file(home / "test.txt")
    assert main(["put", str(file)]) == 0

    assert main(["restore", "-v"]) == 0
    assert file.exists()
    assert "total 1 restored" in capsys.readouterr().out


def test_restore_from_empty_trash(data_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["restore"]) == 1
    assert "empty trash" in capsys.readouterr().err


def test_restore_unknown_and_existing_paths(
    data_dir: Path, home: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    file = write_file(home / "a.txt", "old")
    assert main(["put", str(file)]) == 0
    write_file(file, "new")

    assert main(["restore", str(home / "unknown.txt"), str(file)]) == 1

    err = capsys.readouterr().err
    assert "not found in trash" in err
    assert "already exists" in err
    assert "2 not restored" in err
    assert file.read_text(encoding="utf-8") == "new"


def test_empty(data_dir: Path, home: Path, capsys: pytest.CaptureFixture[str]) -> None:
    files = [write_file(home / name) for name in ("a.txt", "b.txt")]
    assert main(["put", *map(str, files)]) == 0

    # Not a terminal, so no confirmation prompt.
    assert main(["empty", "-v"]) == 0
    assert "total 2 removed" in capsys.readouterr().out

    assert main(["list"]) == 0
    assert capsys.readouterr().out == ""
    assert list((data_dir / "Trash" / "files").iterdir()) == []


@pytest.mark.parametrize("argv", [["list"], ["empty", "-f"], ["restore"]])
def test_unreadable_trash_is_reported(
    data_dir: Path, argv: list[str], capsys: pytest.CaptureFixture[str]
) -> None:
    trash = data_dir / "Trash"
    (trash / "files").mkdir(parents=True)
    (trash / "info").write_text("", encoding="utf-8")

    assert main(argv) == 1
    assert "cannot read trash info directory" in capsys.readouterr().err
