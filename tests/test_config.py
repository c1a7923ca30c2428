import logging

import pytz

from beads_app.core.config import DEFAULT_BD_BIN, TREND_WINDOW_DAYS, AppSettings, load_settings


def test_defaults_without_file(tmp_path, monkeypatch):
    monkeypatch.delenv("BD_BIN", raising=False)
    settings = load_settings(tmp_path)
    assert settings == AppSettings()
    assert settings.bd_bin == DEFAULT_BD_BIN
    assert settings.trend_window_days == TREND_WINDOW_DAYS
    assert settings.tz is pytz.UTC


def test_yaml_overrides_with_section(tmp_path, monkeypatch):
    monkeypatch.delenv("BD_BIN", raising=False)
    (tmp_path / "dashboard.yaml").write_text(
        "dashboard:\n  timezone: America/Santiago\n  trend_window_days: 14\n  project_name: Nacre\n"
    )
    settings = load_settings(tmp_path)
    assert settings.timezone == "America/Santiago"
    assert settings.trend_window_days == 14
    assert settings.project_name == "Nacre"
    assert settings.tz.zone == "America/Santiago"


def test_flat_yaml_and_env_override(tmp_path, monkeypatch):
    (tmp_path / "dashboard.yaml").write_text("bd_bin: /opt/bd\nmax_table_rows: 50\n")
    monkeypatch.setenv("BD_BIN", "/usr/local/bin/bd")
    settings = load_settings(tmp_path)
    assert settings.bd_bin == "/usr/local/bin/bd"
    assert settings.max_table_rows == 50


def test_unknown_timezone_dropped(tmp_path, monkeypatch, caplog):
    monkeypatch.delenv("BD_BIN", raising=False)
    (tmp_path / "dashboard.yaml").write_text("timezone: Mars/Olympus\n")
    with caplog.at_level(logging.WARNING):
        settings = load_settings(tmp_path)
    assert settings.timezone == "UTC"
    assert "Unknown timezone" in caplog.text


def test_malformed_yaml_falls_back(tmp_path, monkeypatch, caplog):
    monkeypatch.delenv("BD_BIN", raising=False)
    (tmp_path / "dashboard.yaml").write_text("dashboard: [unclosed\n")
    with caplog.at_level(logging.WARNING):
        settings = load_settings(tmp_path)
    assert settings == AppSettings()
    assert "Ignoring unreadable" in caplog.text
