from datetime import datetime
from pathlib import Path

from iron_bin.services.formatting import format_bytes, format_datetime, format_path, format_size


def test_format_bytes_small_values_have_no_decimals() -> None:
    assert format_bytes(0) == "0B"
    assert format_bytes(512) == "512B"


def test_format_bytes_uses_decimal_units() -> None:
    assert format_bytes(1500) == "1.5kB"
    assert format_bytes(2_000_000) == "2.0MB"
    assert format_bytes(1500, space=True) == "1.5 kB"


def test_format_bytes_unknown_size() -> None:
    assert format_bytes(None) == "?"


def test_format_size_raw_and_human_readable() -> None:
    assert format_size(1234) == "1234"
    assert format_size(1234, human_readable=True) == "1.2kB"
    assert format_size(None, human_readable=True) == "?"


def test_format_datetime_uses_locale_format() -> None:
    instant = datetime(2025, 2, 17, 13, 14, 15)
    assert format_datetime(instant) == instant.strftime("%c")


def test_format_path_quotes_only_when_asked() -> None:
    path = Path("/home/u/my file.txt")
    assert format_path(path, quote=False) == "/home/u/my file.txt"
    assert format_path(path, quote=True) == "'/home/u/my file.txt'"
    assert format_path(Path("/plain"), quote=True) == "/plain"
