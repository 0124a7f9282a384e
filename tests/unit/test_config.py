from iron_bin.services.config import Settings


def test_settings_default_log_level() -> None:
    assert Settings.from_env({}).log_level == "WARNING"


def test_settings_read_log_level_from_environment() -> None:
    assert Settings.from_env({"IRON_BIN_LOG_LEVEL": "debug"}).log_level == "DEBUG"


def test_settings_ignore_unknown_log_level() -> None:
    assert Settings.from_env({"IRON_BIN_LOG_LEVEL": "chatty"}).log_level == "WARNING"
