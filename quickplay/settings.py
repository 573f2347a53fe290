from dataclasses import dataclass

from PySide6.QtCore import QSettings

from .utils import get_user_data_path

EXTRA_MPV_PATH_KEY = "player/extra_mpv_path"
AUTOFIT_KEY = "player/autofit_percent"
HWDEC_KEY = "player/hwdec"
TERMINATE_GRACE_KEY = "player/terminate_grace_ms"
CLOSE_SUPPRESS_KEY = "preview/close_suppress_ms"

HWDEC_CHOICES = {"auto", "auto-safe", "no"}


@dataclass
class AppSettings:
    extra_mpv_path: str = ""
    autofit_percent: int = 80
    hwdec: str = "auto"
    terminate_grace_ms: int = 100
    close_suppress_ms: int = 500


def _to_int(value, default: int, min_value: int | None = None, max_value: int | None = None) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        number = int(default)
    if min_value is not None:
        number = max(min_value, number)
    if max_value is not None:
        number = min(max_value, number)
    return number


def _to_choice(value, default: str, allowed: set[str]) -> str:
    token = str(value or "").strip()
    if token in allowed:
        return token
    return default


def get_settings() -> QSettings:
    """Returns a QSettings object pointing to a visible .ini file."""
    path = get_user_data_path("settings.ini")
    return QSettings(path, QSettings.IniFormat)


def load_app_settings(settings: QSettings | None = None) -> AppSettings:
    if settings is None:
        settings = get_settings()
    defaults = AppSettings()
    return AppSettings(
        extra_mpv_path=str(settings.value(EXTRA_MPV_PATH_KEY, "") or "").strip(),
        autofit_percent=_to_int(settings.value(AUTOFIT_KEY, defaults.autofit_percent), defaults.autofit_percent, 10, 100),
        hwdec=_to_choice(settings.value(HWDEC_KEY, defaults.hwdec), defaults.hwdec, HWDEC_CHOICES),
        terminate_grace_ms=_to_int(
            settings.value(TERMINATE_GRACE_KEY, defaults.terminate_grace_ms),
            defaults.terminate_grace_ms,
            10,
            2000,
        ),
        close_suppress_ms=_to_int(
            settings.value(CLOSE_SUPPRESS_KEY, defaults.close_suppress_ms),
            defaults.close_suppress_ms,
            0,
            5000,
        ),
    )


def save_app_settings(config: AppSettings, settings: QSettings | None = None) -> None:
    if settings is None:
        settings = get_settings()
    settings.setValue(EXTRA_MPV_PATH_KEY, str(config.extra_mpv_path or ""))
    settings.setValue(AUTOFIT_KEY, _to_int(config.autofit_percent, 80, 10, 100))
    settings.setValue(HWDEC_KEY, _to_choice(config.hwdec, "auto", HWDEC_CHOICES))
    settings.setValue(TERMINATE_GRACE_KEY, _to_int(config.terminate_grace_ms, 100, 10, 2000))
    settings.setValue(CLOSE_SUPPRESS_KEY, _to_int(config.close_suppress_ms, 500, 0, 5000))
    settings.sync()
