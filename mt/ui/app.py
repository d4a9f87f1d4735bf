import re
import sys
from PySide6.QtCore import Qt, QTimer
from PySide6.QtWidgets import (
    QApplication,
    QMainWindow,
    QMessageBox,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)
from mt.common.logger import log
from mt.core import config
from mt.core.registry import TimeUnitRegistry, UnknownUnitError
from mt.core.units import RunState, UnitKind
from mt.ui.qt_ticker import QtScheduler
from mt.ui.row_factory import RowFactory, UIBlueprint
from mt.ui.theme import THEMES, SIZES, build_stylesheet

_SANITIZE = re.compile(r"[^a-zA-Z0-9\s'.\-_]+")


# ---------------------------------------------------------------------------
# Main window
# ---------------------------------------------------------------------------

# Main window of the app. Shows one row per stopwatch/countdown, plus a footer for adding new ones. Every handler
# addresses units by id and resolves them against the registry at the moment of the click.
class MainWindow(QMainWindow):

    def __init__(self):
        super().__init__()
        self.setWindowTitle("MultiTimer")

        # -- Load settings --
        self._settings_data = config.load_settings()
        s = self._settings_data["settings"]
        self.theme = s["theme"] if s["theme"] in THEMES else "Light"
        self.ui_size = s["size"] if s["size"] in SIZES else "Regular"
        self.font_family = s["font"]
        self.always_on_top = s["always_on_top"]
        self.confirm_delete = s["confirm_delete"]

        if self.always_on_top:
            self.setWindowFlags(self.windowFlags() | Qt.WindowStaysOnTopHint)

        # -- Units --
        self.registry = TimeUnitRegistry(
            scheduler=QtScheduler(self),
            interval_ms=s["tick_interval_ms"],
            default_countdown_seconds=s["default_countdown_seconds"],
        )
        self._registry_unsubscribe = self.registry.subscribe(self._on_registry_change)

        self._widgets = {}          # unit id -> widget dict
        self._unsubscribers = []    # unit subscriptions owned by the current set of rows

        # -- Build UI skeleton --
        central = QWidget()
        self.setCentralWidget(central)
        self._main_lay = QVBoxLayout(central)

        self._grid_widget = QWidget()
        self._grid = QVBoxLayout(self._grid_widget)
        self._grid.setContentsMargins(0, 0, 0, 0)
        self._grid.setAlignment(Qt.AlignTop)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(self._grid_widget)
        self._main_lay.addWidget(scroll, 1)

        self._apply_style()
        self._build_footer()
        self._rebuild_rows()
        self.resize(820, 420)

    # ------------------------------------------------------------------ #
    #  Style                                                               #
    # ------------------------------------------------------------------ #

    def _apply_style(self):
        style = build_stylesheet(self.theme)
        self.setStyleSheet(style)
        app = QApplication.instance()
        if app is not None:
            app.setStyleSheet(style)

        s = SIZES[self.ui_size]
        self._main_lay.setContentsMargins(s["padding"], s["padding"], s["padding"], s["padding"])
        self._main_lay.setSpacing(s["padding"])
        self._blueprint = UIBlueprint.compute(THEMES[self.theme], s, self.font_family)

    # ------------------------------------------------------------------ #
    #  Row building                                                        #
    # ------------------------------------------------------------------ #

    def _build_footer(self):
        footer, footer_widgets = RowFactory.footer(
            self._blueprint,
            on_add_stopwatch=lambda _=False: self._on_add(UnitKind.STOPWATCH),
            on_add_countdown=lambda _=False: self._on_add(UnitKind.COUNTDOWN),
        )
        self._add_input = footer_widgets["add_input"]
        self._main_lay.addWidget(footer)

    def _clear_rows(self):
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self._widgets.clear()

        while self._grid.count():
            item = self._grid.takeAt(0)
            w = item.widget()
            if w:
                w.hide()
                w.deleteLater()

    def _rebuild_rows(self):
        """Tear down and recreate every unit row, in registry order."""
        self._clear_rows()
        bp = self._blueprint

        for unit in self.registry:
            snap = unit.snapshot()
            if unit.kind is UnitKind.COUNTDOWN:
                rc, wd = RowFactory.countdown(
                    bp, snap,
                    on_rename=self._on_rename,
                    on_set_duration=self._on_set_duration,
                    on_toggle=self._on_toggle,
                    on_stop=self._on_stop,
                    on_remove=self._on_remove,
                )
            else:
                rc, wd = RowFactory.stopwatch(
                    bp, snap,
                    on_rename=self._on_rename,
                    on_toggle=self._on_toggle,
                    on_stop=self._on_stop,
                    on_remove=self._on_remove,
                )
            self._grid.addWidget(rc)
            self._widgets[unit.id] = wd
            self._unsubscribers.append(
                unit.subscribe(lambda s, wd=wd: RowFactory.refresh(self._blueprint, wd, s)))

    def _on_registry_change(self, event, unit):
        log.debug(f"Registry {event} unit {unit.id}, rebuilding rows")
        self._rebuild_rows()

    # ------------------------------------------------------------------ #
    #  Button handlers                                                     #
    # ------------------------------------------------------------------ #

    # Resolves an id against the registry right now. Rows can be stale for a moment after a delete, so a missing
    # unit is logged and ignored rather than crashing the event loop.
    def _unit(self, uid):
        try:
            return self.registry.get_by_id(uid)
        except UnknownUnitError:
            log.warning(f"Ignored action on unit {uid}, which no longer exists")
            return None

    def _on_add(self, kind):
        name = _SANITIZE.sub("", self._add_input.text()).strip()
        if kind is UnitKind.COUNTDOWN:
            self.registry.add_countdown(name)
        else:
            self.registry.add_stopwatch(name)
        self._add_input.clear()

    def _on_rename(self, uid, text):
        unit = self._unit(uid)
        if unit is not None:
            unit.rename(text.strip())

    def _on_set_duration(self, uid, minutes_text, seconds_text):
        unit = self._unit(uid)
        if unit is not None and unit.kind is UnitKind.COUNTDOWN:
            unit.set_duration_input(minutes_text, seconds_text)

    def _on_toggle(self, uid):
        unit = self._unit(uid)
        if unit is not None:
            # A finished countdown re-arms from its configured duration before starting again.
            if unit.kind is UnitKind.COUNTDOWN and unit.run_state is RunState.STOPPED:
                unit.rearm()
            unit.toggle()

    def _on_stop(self, uid):
        unit = self._unit(uid)
        if unit is not None:
            unit.stop()

    def _on_remove(self, uid):
        unit = self._unit(uid)
        if unit is None:
            return
        if self.confirm_delete:
            label = unit.name or f"{unit.kind.value} {unit.id}"
            if QMessageBox.question(
                    self, "Confirm Delete",
                    f"Delete '{label}'?"
            ) != QMessageBox.Yes:
                return
        try:
            self.registry.remove(uid)
        except UnknownUnitError:
            log.warning(f"Unit {uid} was already removed before delete was confirmed")
            return
        QTimer.singleShot(0, self.adjustSize)

    # ------------------------------------------------------------------ #
    #  Window close                                                        #
    # ------------------------------------------------------------------ #

    def closeEvent(self, event):
        # Stops every unit (and so every ticker) before Qt starts tearing widgets down.
        self._registry_unsubscribe()
        self._clear_rows()
        self.registry.clear()
        try:
            config.save_settings(self._settings_data)
        except OSError as e:
            log.warning("Failed to save settings on exit", exc_info=True)
            QMessageBox.warning(self, "Save Error",
                                f"Failed to save settings:\n{e}")
        event.accept()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main():
    app = QApplication(sys.argv)
    window = MainWindow()
    window.show()
    sys.exit(app.exec())
