"""Main application module — MainWindow wiring the hall to Qt widgets."""

import sys
from PySide6.QtCore import Qt, QTimer
from PySide6.QtWidgets import (
    QApplication,
    QGridLayout,
    QInputDialog,
    QLabel,
    QMainWindow,
    QMessageBox,
    QStyle,
    QSystemTrayIcon,
    QVBoxLayout,
    QWidget,
)
from rt.common.logger import log
from rt.common.setup import PATHS
from rt.core.config import load_settings
from rt.core.hall import Hall
from rt.core.store import JsonStore
from rt.ui.alerts import QtAlertSink
from rt.ui.ticker import QtTicker
from rt.ui.widgets import (
    build_header,
    build_ledger_table,
    build_station_card,
    fill_ledger_table,
    update_station_card,
)
from rt.util.misc import format_money

CARDS_PER_ROW = 3


# ---------------------------------------------------------------------------
# Main window
# ---------------------------------------------------------------------------

# Main window of the rental timer. Shows one card per station, the revenue total and the ledger.
class MainWindow(QMainWindow):

    def __init__(self, store=None):
        super().__init__()
        self.setWindowTitle("Rental Timer")
        icon = self.style().standardIcon(QStyle.SP_ComputerIcon)
        self.setWindowIcon(icon)

        # -- Load settings and state --
        store = store or JsonStore(PATHS.current)
        self.settings = load_settings(store)
        self.currency = self.settings["currency"]
        if self.settings["always_on_top"]:
            self.setWindowFlags(self.windowFlags() | Qt.WindowStaysOnTopHint)

        self._tray = QSystemTrayIcon(icon, self)
        if QSystemTrayIcon.isSystemTrayAvailable():
            self._tray.show()

        self.hall = Hall(
            store,
            ticker=QtTicker(self.settings["tick_interval_ms"], parent=self),
            alerts=QtAlertSink(self.settings, tray=self._tray),
            settings=self.settings,
            snapshot_dir=PATHS.snapshots,
        )

        self._cards = {}  # station id -> widget dict
        self._expired_seen = set()

        # -- Build UI skeleton --
        central = QWidget()
        self.setCentralWidget(central)
        main_lay = QVBoxLayout(central)

        header, self._header = build_header(self.currency, self._on_add_station, self._on_reset_ledger)
        main_lay.addWidget(header)

        self._grid_widget = QWidget()
        self._grid = QGridLayout(self._grid_widget)
        self._grid.setContentsMargins(0, 0, 0, 0)
        main_lay.addWidget(self._grid_widget)

        main_lay.addWidget(QLabel("Session log"))
        self._ledger_table = build_ledger_table()
        main_lay.addWidget(self._ledger_table, 1)

        self._rebuild_cards()
        self._rebuild_ledger()

        # -- Display refresh (1 s). Engine ticks run on their own timers. --
        self._display_timer = QTimer(self)
        self._display_timer.timeout.connect(self._refresh)
        self._display_timer.start(1000)

    # ------------------------------------------------------------------ #
    #  Building                                                            #
    # ------------------------------------------------------------------ #

    def _rebuild_cards(self):
        """Tear down and recreate every station card."""
        self._cards.clear()
        while self._grid.count():
            item = self._grid.takeAt(0)
            w = item.widget()
            if w:
                w.hide()
                w.deleteLater()

        for i, engine in enumerate(self.hall.engines()):
            card, widgets = build_station_card(
                engine, self.currency,
                on_start=self._on_start,
                on_stop=self._on_stop,
                on_rename=self._on_rename,
                on_rate=self.hall.set_rate,
                on_mode=self._on_mode,
                on_minutes=self.hall.set_fixed_minutes,
                on_customer=self.hall.set_customer_name,
            )
            self._grid.addWidget(card, i // CARDS_PER_ROW, i % CARDS_PER_ROW)
            self._cards[engine.station_id] = widgets
        self._refresh()

    def _rebuild_ledger(self):
        fill_ledger_table(self._ledger_table, self.hall.ledger.records, self._on_delete_record)
        self._header["revenue"].setText(f"{format_money(self.hall.total_revenue())} {self.currency}")

    def _refresh(self):
        for engine in self.hall.engines():
            w = self._cards.get(engine.station_id)
            if w is None:
                continue
            update_station_card(w, engine, self.currency)

            # Flash the taskbar entry the first time we see a station expire
            if engine.expired and engine.station_id not in self._expired_seen:
                self._expired_seen.add(engine.station_id)
                QApplication.alert(self)
            elif not engine.expired:
                self._expired_seen.discard(engine.station_id)

    # ------------------------------------------------------------------ #
    #  Handlers                                                            #
    # ------------------------------------------------------------------ #

    def _on_start(self, station_id):
        error = self.hall.start(station_id)
        if error:
            QMessageBox.warning(self, "Cannot start", error)
        self._refresh()

    def _on_stop(self, station_id):
        record = self.hall.stop(station_id)
        if record is not None:
            self._rebuild_ledger()
        self._refresh()

    def _on_mode(self, station_id, mode):
        self.hall.set_mode(station_id, mode)
        self._refresh()

    def _on_rename(self, station_id):
        current = self.hall.registry.name_of(station_id)
        name, ok = QInputDialog.getText(self, "Rename Station", "Station name:", text=current)
        if ok and self.hall.rename_station(station_id, name):
            self._refresh()

    def _on_add_station(self):
        self.hall.add_station()
        self._rebuild_cards()
        QTimer.singleShot(0, self.adjustSize)

    def _on_delete_record(self, record_id):
        if self.settings["confirm_delete"]:
            if QMessageBox.question(
                    self, "Confirm Delete",
                    "Delete this session record?"
            ) != QMessageBox.Yes:
                return
        if self.hall.delete_record(record_id):
            self._rebuild_ledger()

    def _on_reset_ledger(self):
        if self.settings["confirm_reset"]:
            if QMessageBox.question(
                    self, "Confirm Reset",
                    "Clear every session record? Revenue goes back to zero."
            ) != QMessageBox.Yes:
                return
        self.hall.reset_ledger()
        self._rebuild_ledger()

    # ------------------------------------------------------------------ #
    #  Window close                                                        #
    # ------------------------------------------------------------------ #

    def closeEvent(self, event):
        # Running sessions stay active on disk and resume on next launch
        self._display_timer.stop()
        self.hall.shutdown()
        self._tray.hide()
        event.accept()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main():
    app = QApplication(sys.argv)
    window = MainWindow()
    window.show()
    log.info("Main window shown.")
    sys.exit(app.exec())
