"""Tests for QSettings-backed configuration."""

import pytest
from PySide6.QtCore import QSettings

from quickplay.settings import (
    AUTOFIT_KEY,
    HWDEC_KEY,
    TERMINATE_GRACE_KEY,
    AppSettings,
    load_app_settings,
    save_app_settings,
)


@pytest.fixture
def ini(qt_app, tmp_path):
    return QSettings(str(tmp_path / "settings.ini"), QSettings.IniFormat)


def test_defaults_when_empty(ini):
    config = load_app_settings(ini)
    assert config == AppSettings()
    assert config.terminate_grace_ms == 100
    assert config.close_suppress_ms == 500


def test_save_and_load(ini):
    save_app_settings(
        AppSettings(extra_mpv_path="/opt/mpv", autofit_percent=60, hwdec="no", terminate_grace_ms=250),
        ini,
    )
    config = load_app_settings(ini)
    assert config.extra_mpv_path == "/opt/mpv"
    assert config.autofit_percent == 60
    assert config.hwdec == "no"
    assert config.terminate_grace_ms == 250


def test_out_of_range_values_are_clamped(ini):
    ini.setValue(AUTOFIT_KEY, 500)
    ini.setValue(TERMINATE_GRACE_KEY, 1)
    config = load_app_settings(ini)
    assert config.autofit_percent == 100
    assert config.terminate_grace_ms == 10


def test_invalid_values_fall_back(ini):
    ini.setValue(AUTOFIT_KEY, "big")
    ini.setValue(HWDEC_KEY, "vaapi-copy-everything")
    config = load_app_settings(ini)
    assert config.autofit_percent == 80
    assert config.hwdec == "auto"
