"""Widget builders — station cards, header, and ledger table.

Each builder returns a (container, widget_dict) tuple.  The widget_dict maps
logical names to sub-widgets so MainWindow can update them on every refresh.
"""

from PySide6.QtCore import Qt
from PySide6.QtGui import QFont
from PySide6.QtWidgets import (
    QAbstractItemView,
    QComboBox,
    QFrame,
    QGridLayout,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QLineEdit,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)
from rt.core.engine import SessionMode, STATUS_ACTIVE, STATUS_EXPIRED, STATUS_STANDBY
from rt.util.misc import format_clock, format_duration, format_money

STATUS_COLORS = {
    STATUS_STANDBY: "#64748b",
    STATUS_ACTIVE: "#06b6d4",
    STATUS_EXPIRED: "#ef4444",
}

# Fixed-mode countdowns turn this color in their last five minutes.
WARNING_COLOR = "#eab308"
WARNING_SECONDS = 300

LEDGER_COLUMNS = ["Station", "Customer", "Started", "Duration", "Rate", "Cost", ""]


def build_station_card(engine, currency, on_start, on_stop, on_rename,
                       on_rate, on_mode, on_minutes, on_customer):
    """Build one station card.

    Returns (container, widget_dict).
    """
    sid = engine.station_id

    card = QFrame()
    card.setObjectName("stationCard")
    card.setFrameShape(QFrame.StyledPanel)
    lay = QVBoxLayout(card)

    # Row 0: name + status
    name_lbl = QLabel(engine.name)
    name_font = QFont()
    name_font.setPointSize(13)
    name_font.setBold(True)
    name_lbl.setFont(name_font)
    rename_btn = QPushButton("\u270E")
    rename_btn.setToolTip("Rename station")
    rename_btn.setFixedWidth(28)
    rename_btn.clicked.connect(lambda _=False: on_rename(sid))

    status_lbl = QLabel(engine.status)
    status_lbl.setAlignment(Qt.AlignRight | Qt.AlignVCenter)

    head = QHBoxLayout()
    head.addWidget(name_lbl, 1)
    head.addWidget(rename_btn)
    head.addWidget(status_lbl)
    lay.addLayout(head)

    # Row 1: mode + minutes
    mode_box = QComboBox()
    mode_box.addItems([m.value for m in SessionMode])
    mode_box.setCurrentText(engine.mode.value)
    mode_box.currentTextChanged.connect(lambda text: on_mode(sid, text))

    minutes_input = QLineEdit(engine.fixed_minutes)
    minutes_input.setPlaceholderText("Minutes")
    minutes_input.textEdited.connect(lambda text: on_minutes(sid, text))

    mode_row = QHBoxLayout()
    mode_row.addWidget(mode_box)
    mode_row.addWidget(minutes_input)
    lay.addLayout(mode_row)

    # Row 2: clock
    caption_lbl = QLabel("")
    caption_lbl.setAlignment(Qt.AlignCenter)
    time_lbl = QLabel(format_clock(engine.display_seconds))
    time_font = QFont()
    time_font.setPointSize(26)
    time_font.setBold(True)
    time_lbl.setFont(time_font)
    time_lbl.setAlignment(Qt.AlignCenter)
    lay.addWidget(caption_lbl)
    lay.addWidget(time_lbl)

    # Row 3: rate + live cost
    rate_input = QLineEdit(engine.hourly_rate)
    rate_input.setPlaceholderText(f"Rate ({currency}/h)")
    rate_input.textEdited.connect(lambda text: on_rate(sid, text))
    cost_lbl = QLabel(f"{format_money(engine.current_cost)} {currency}")
    cost_lbl.setAlignment(Qt.AlignRight | Qt.AlignVCenter)

    grid = QGridLayout()
    grid.addWidget(QLabel("Hourly rate"), 0, 0)
    grid.addWidget(QLabel("Current cost"), 0, 1)
    grid.addWidget(rate_input, 1, 0)
    grid.addWidget(cost_lbl, 1, 1)
    lay.addLayout(grid)

    # Row 4: customer
    customer_input = QLineEdit(engine.customer_name)
    customer_input.setPlaceholderText("Player name...")
    customer_input.textEdited.connect(lambda text: on_customer(sid, text))
    lay.addWidget(customer_input)

    # Row 5: start / stop
    start_btn = QPushButton("Start")
    start_btn.clicked.connect(lambda _=False: on_start(sid))
    stop_btn = QPushButton("Stop")
    stop_btn.clicked.connect(lambda _=False: on_stop(sid))
    btn_row = QHBoxLayout()
    btn_row.addWidget(start_btn)
    btn_row.addWidget(stop_btn)
    lay.addLayout(btn_row)

    widget_dict = {
        "card": card, "name": name_lbl, "rename": rename_btn, "status": status_lbl,
        "mode": mode_box, "minutes": minutes_input,
        "caption": caption_lbl, "time": time_lbl,
        "rate": rate_input, "cost": cost_lbl,
        "customer": customer_input,
        "start": start_btn, "stop": stop_btn,
    }
    return card, widget_dict


def update_station_card(w, engine, currency):
    """Push the engine's current state into an already-built card."""
    status = engine.status
    running = engine.active
    fixed = engine.mode is SessionMode.FIXED

    w["name"].setText(engine.name)
    w["status"].setText(status)
    w["status"].setStyleSheet(f"color: {STATUS_COLORS[status]}; font-weight: bold;")

    display = engine.display_seconds
    w["caption"].setText("Remaining" if fixed else "Duration")
    w["time"].setText(format_clock(display))
    if running and fixed and not engine.expired and display < WARNING_SECONDS:
        color = WARNING_COLOR
    else:
        color = STATUS_COLORS[status]
    w["time"].setStyleSheet(f"color: {color};")
    w["cost"].setText(f"{format_money(engine.current_cost)} {currency}")

    # Inputs are idle-only; the engine refuses the edits anyway
    for key in ("mode", "rate", "customer"):
        w[key].setEnabled(not running)
    w["minutes"].setEnabled(not running and fixed)
    w["start"].setEnabled(not running)
    w["stop"].setEnabled(running)

    # A stop clears the customer name, reflect it without clobbering what's being typed
    if not w["customer"].hasFocus() and w["customer"].text() != engine.customer_name:
        w["customer"].setText(engine.customer_name)


def build_header(currency, on_add_station, on_reset):
    """Build the header bar with the revenue total.

    Returns (container, widget_dict).
    """
    header = QWidget()
    lay = QHBoxLayout(header)
    lay.setContentsMargins(0, 0, 0, 0)

    title = QLabel("Rental Timer")
    title_font = QFont()
    title_font.setPointSize(16)
    title_font.setBold(True)
    title.setFont(title_font)

    revenue_lbl = QLabel(f"{format_money(0)} {currency}")
    revenue_font = QFont()
    revenue_font.setPointSize(16)
    revenue_lbl.setFont(revenue_font)
    revenue_lbl.setToolTip("Total revenue in the ledger")

    add_btn = QPushButton("Add Station")
    add_btn.clicked.connect(on_add_station)

    reset_btn = QPushButton("Reset")
    reset_btn.setToolTip("Clear every ledger record")
    reset_btn.clicked.connect(on_reset)

    lay.addWidget(title)
    lay.addStretch(1)
    lay.addWidget(QLabel("Revenue:"))
    lay.addWidget(revenue_lbl)
    lay.addWidget(reset_btn)
    lay.addWidget(add_btn)

    return header, {"revenue": revenue_lbl, "add": add_btn, "reset": reset_btn}


def build_ledger_table():
    table = QTableWidget(0, len(LEDGER_COLUMNS))
    table.setHorizontalHeaderLabels(LEDGER_COLUMNS)
    table.setEditTriggers(QAbstractItemView.NoEditTriggers)
    table.setSelectionBehavior(QAbstractItemView.SelectRows)
    table.verticalHeader().setVisible(False)
    table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
    return table


def fill_ledger_table(table, records, on_delete):
    table.setRowCount(0)
    for row, record in enumerate(records):
        table.insertRow(row)
        cells = [
            record.station_name,
            record.customer_name,
            record.start_time.strftime("%H:%M"),
            format_duration(record.duration_seconds),
            format_money(record.hourly_rate),
            format_money(record.total_cost),
        ]
        for col, text in enumerate(cells):
            table.setItem(row, col, QTableWidgetItem(text))
        x_btn = QPushButton("X")
        x_btn.setToolTip("Delete this record")
        x_btn.clicked.connect(lambda _=False, rid=record.id: on_delete(rid))
        table.setCellWidget(row, len(cells), x_btn)
