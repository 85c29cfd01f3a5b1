from PySide6.QtCore import QTimer
from PySide6.QtWidgets import QApplication, QSystemTrayIcon
from rt.core.alerts import AlertSink
from rt.core.errors import AlertDispatchFailure

# Number of beeps per cue, spaced _BEEP_GAP_MS apart.
_BEEPS = {"start": 1, "stop": 1, "alarm": 3}
_BEEP_GAP_MS = 300


class QtAlertSink(AlertSink):
    """System beeps for cues and a tray balloon for expired fixed sessions."""

    def __init__(self, settings, tray=None):
        self._settings = settings
        self._tray = tray

    def cue(self, kind):
        if not self._settings.get("sounds_enabled", True):
            return
        if QApplication.instance() is None:
            raise AlertDispatchFailure("No QApplication to beep with")
        for i in range(_BEEPS.get(kind, 1)):
            QTimer.singleShot(i * _BEEP_GAP_MS, QApplication.beep)

    def notify_expired(self, station_name):
        if not self._settings.get("notifications_enabled", True):
            return
        if self._tray is None or not QSystemTrayIcon.isSystemTrayAvailable():
            raise AlertDispatchFailure("System tray notifications are unavailable")
        self._tray.showMessage(
            "Time's Up!",
            f"Session on {station_name} has finished.",
            QSystemTrayIcon.Warning,
            10000,
        )
