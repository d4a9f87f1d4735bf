from dataclasses import dataclass
from typing import Any
from collections.abc import Callable
from PySide6.QtCore import Qt
from PySide6.QtGui import QFont, QFontMetrics, QIntValidator
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QSizePolicy,
    QWidget,
)
from mt.core.units import UnitKind, UnitSnapshot

_ICONS = {
    "play": "\u25B6",
    "pause": "\u23F8",
    "stop": "\u25A0",
    "delete": "X",
}


# Pre-computed fonts and sizes shared by every row built in one rebuild pass.
@dataclass
class UIBlueprint:
    theme: dict          # resolved theme dict (THEMES[name])
    size: dict           # resolved size dict (SIZES[name])
    font_family: str
    h_spacing: int
    btn_spacing: int
    name_w: int
    time_w: int
    duration_w: int
    label_font: QFont
    time_font: QFont
    action_font: QFont

    @staticmethod
    def compute(theme, size, font_family):
        horizontal_spacing = size.get("h_spacing", size["padding"])
        label_font = QFont(font_family, size["label"])
        time_font = QFont(font_family, size["time"])
        action_font = QFont(font_family, size["action"])
        return UIBlueprint(
            theme=theme, size=size, font_family=font_family,
            h_spacing=horizontal_spacing, btn_spacing=max(1, horizontal_spacing // 2),
            name_w=QFontMetrics(label_font).horizontalAdvance("M" * 12),
            time_w=QFontMetrics(time_font).horizontalAdvance("000:00:00 "),
            duration_w=QFontMetrics(action_font).horizontalAdvance("0000") + 12,
            label_font=label_font, time_font=time_font, action_font=action_font,
        )


# Purely organizational class to group functions that build rows (stopwatches, countdowns, and the footer). Each
# builder returns a (container, widget_dict) tuple, where widget_dict maps logical names to sub-widgets so that
# refresh() can update them from a UnitSnapshot later on.
class RowFactory:

    @staticmethod
    def _row_container(blueprint: UIBlueprint):
        t = blueprint.theme
        rc = QWidget()
        rc.setObjectName("rowBg")
        rc.setStyleSheet(
            f"#rowBg {{ background-color: {t['row_bg']}; border-bottom: 1px solid {t['row_separator']}; }}")
        rc_lay = QHBoxLayout(rc)
        rc_lay.setContentsMargins(blueprint.size["padding"], 0, blueprint.size["padding"], 0)
        rc_lay.setSpacing(blueprint.h_spacing)
        return rc, rc_lay

    @staticmethod
    def _name_edit(blueprint: UIBlueprint, uid, snap: UnitSnapshot, placeholder, on_rename):
        name_edit = QLineEdit(snap.name)
        name_edit.setPlaceholderText(placeholder)
        name_edit.setFont(blueprint.label_font)
        name_edit.setFixedWidth(blueprint.name_w)
        name_edit.editingFinished.connect(lambda: on_rename(uid, name_edit.text()))
        return name_edit

    @staticmethod
    def _time_label(blueprint: UIBlueprint, snap: UnitSnapshot):
        time_lbl = QLabel(snap.display)
        time_lbl.setFont(blueprint.time_font)
        time_lbl.setAlignment(Qt.AlignCenter)
        time_lbl.setFixedWidth(blueprint.time_w)
        return time_lbl

    @staticmethod
    def _controls(blueprint: UIBlueprint, uid, on_toggle, on_stop, on_remove):
        toggle_btn = QPushButton()
        toggle_btn.setFont(blueprint.action_font)
        toggle_btn.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Fixed)
        toggle_btn.clicked.connect(lambda _=False: on_toggle(uid))

        stop_btn = QPushButton(_ICONS["stop"])
        stop_btn.setFont(blueprint.action_font)
        stop_btn.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Fixed)
        stop_btn.clicked.connect(lambda _=False: on_stop(uid))

        x_btn = QPushButton(_ICONS["delete"])
        x_btn.setFont(blueprint.action_font)
        x_btn.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Fixed)
        x_btn.clicked.connect(lambda _=False: on_remove(uid))

        ctl_container = QWidget()
        ctl_container.setObjectName("ctlCt")
        ctl_container.setStyleSheet("#ctlCt { background: transparent; }")
        ctl_lay = QHBoxLayout(ctl_container)
        ctl_lay.setContentsMargins(0, 0, 0, 0)
        ctl_lay.setSpacing(blueprint.btn_spacing)
        ctl_lay.addWidget(toggle_btn)
        ctl_lay.addWidget(stop_btn)
        ctl_lay.addWidget(x_btn)
        return ctl_container, toggle_btn, stop_btn, x_btn

    @staticmethod
    # Builds a single stopwatch row: name, HH:MM:SS, then toggle / stop / delete.
    def stopwatch(blueprint: UIBlueprint,
                  snap: UnitSnapshot,
                  on_rename: Callable[...,Any],
                  on_toggle: Callable[...,Any],
                  on_stop: Callable[...,Any],
                  on_remove: Callable[...,Any]):
        uid = snap.id
        rc, rc_lay = RowFactory._row_container(blueprint)

        name_edit = RowFactory._name_edit(blueprint, uid, snap, "Timer Name", on_rename)
        rc_lay.addWidget(name_edit)

        time_lbl = RowFactory._time_label(blueprint, snap)
        rc_lay.addWidget(time_lbl)

        ctl_container, toggle_btn, stop_btn, x_btn = RowFactory._controls(
            blueprint, uid, on_toggle, on_stop, on_remove)
        rc_lay.addWidget(ctl_container)

        widget_dict = {
            "name": name_edit, "time": time_lbl,
            "toggle": toggle_btn, "stop": stop_btn, "x": x_btn,
            "container": rc,
        }
        RowFactory.refresh(blueprint, widget_dict, snap)
        return rc, widget_dict

    @staticmethod
    # Builds a single countdown row: name, minutes/seconds inputs, MM:SS, then toggle / stop / delete.
    def countdown(blueprint: UIBlueprint,
                  snap: UnitSnapshot,
                  on_rename: Callable[...,Any],
                  on_set_duration: Callable[...,Any],
                  on_toggle: Callable[...,Any],
                  on_stop: Callable[...,Any],
                  on_remove: Callable[...,Any]):
        uid = snap.id
        rc, rc_lay = RowFactory._row_container(blueprint)

        name_edit = RowFactory._name_edit(blueprint, uid, snap, "Alarm Name", on_rename)
        rc_lay.addWidget(name_edit)

        minutes, seconds = divmod(snap.configured_duration, 60)
        minutes_edit = QLineEdit(str(minutes))
        seconds_edit = QLineEdit(str(seconds))

        # editingFinished also fires on a plain focus change, which would wipe a paused countdown's remaining time.
        # Only apply the fields once the user has actually typed in one of them.
        edited = {"dirty": False}
        def mark_dirty(_text):
            edited["dirty"] = True
        def apply_duration():
            if not edited["dirty"]:
                return
            edited["dirty"] = False
            on_set_duration(uid, minutes_edit.text(), seconds_edit.text())

        for edit, placeholder in ((minutes_edit, "Minutes"), (seconds_edit, "Seconds")):
            edit.setPlaceholderText(placeholder)
            edit.setToolTip(placeholder)
            edit.setFont(blueprint.action_font)
            edit.setFixedWidth(blueprint.duration_w)
            edit.setValidator(QIntValidator(0, 99999, edit))
            edit.textEdited.connect(mark_dirty)
            edit.editingFinished.connect(apply_duration)

        dur_container = QWidget()
        dur_container.setObjectName("durCt")
        dur_container.setStyleSheet("#durCt { background: transparent; }")
        dur_lay = QHBoxLayout(dur_container)
        dur_lay.setContentsMargins(0, 0, 0, 0)
        dur_lay.setSpacing(blueprint.btn_spacing)
        dur_lay.addWidget(minutes_edit)
        dur_lay.addWidget(QLabel(":"))
        dur_lay.addWidget(seconds_edit)
        rc_lay.addWidget(dur_container)

        time_lbl = RowFactory._time_label(blueprint, snap)
        rc_lay.addWidget(time_lbl)

        ctl_container, toggle_btn, stop_btn, x_btn = RowFactory._controls(
            blueprint, uid, on_toggle, on_stop, on_remove)
        rc_lay.addWidget(ctl_container)

        widget_dict = {
            "name": name_edit, "time": time_lbl,
            "minutes": minutes_edit, "seconds": seconds_edit,
            "toggle": toggle_btn, "stop": stop_btn, "x": x_btn,
            "container": rc,
        }
        RowFactory.refresh(blueprint, widget_dict, snap)
        return rc, widget_dict

    @staticmethod
    # Pushes a fresh snapshot into an already built row.
    def refresh(blueprint: UIBlueprint, widget_dict: dict, snap: UnitSnapshot):
        t = blueprint.theme
        if snap.is_running:
            fg = t["running_text"]
        elif snap.is_paused:
            fg = t["paused_text"]
        else:
            fg = t["text"]

        widget_dict["time"].setText(snap.display)
        widget_dict["time"].setStyleSheet(f"color: {fg};")
        widget_dict["toggle"].setText(_ICONS[snap.icon])
        widget_dict["toggle"].setToolTip("Pause" if snap.icon == "pause" else "Start")
        widget_dict["stop"].setEnabled(snap.is_running or snap.is_paused)

        if snap.kind is UnitKind.COUNTDOWN:
            widget_dict["minutes"].setEnabled(not snap.is_running)
            widget_dict["seconds"].setEnabled(not snap.is_running)
            # Nothing left to count down and nothing to re-arm from, so there's nothing to start.
            widget_dict["toggle"].setEnabled(snap.is_running or snap.progress > 0 or snap.configured_duration > 0)

    @staticmethod
    # Builds the footer bar: a name input plus the two "add" buttons.
    def footer(blueprint: UIBlueprint,
               on_add_stopwatch: Callable[...,Any],
               on_add_countdown: Callable[...,Any]):
        footer_font = QFont(blueprint.font_family, blueprint.size["action"])

        add_input = QLineEdit()
        add_input.setFont(footer_font)
        add_input.setPlaceholderText("Name...")
        add_input.returnPressed.connect(on_add_stopwatch)

        add_stopwatch_btn = QPushButton("Add Stopwatch")
        add_stopwatch_btn.setFont(footer_font)
        add_stopwatch_btn.clicked.connect(on_add_stopwatch)
        add_stopwatch_btn.setToolTip("Add a new stopwatch row")

        add_countdown_btn = QPushButton("Add Countdown")
        add_countdown_btn.setFont(footer_font)
        add_countdown_btn.clicked.connect(on_add_countdown)
        add_countdown_btn.setToolTip("Add a new countdown row")

        footer = QWidget()
        footer.setObjectName("footer")
        footer.setStyleSheet("#footer { background: transparent; }")
        f_lay = QHBoxLayout(footer)
        f_lay.setContentsMargins(0, 0, 0, 0)
        f_lay.setSpacing(blueprint.h_spacing)
        f_lay.addWidget(add_input, 1)
        f_lay.addWidget(add_stopwatch_btn)
        f_lay.addWidget(add_countdown_btn)

        footer_widgets = {
            "add_input": add_input,
            "add_stopwatch_btn": add_stopwatch_btn,
            "add_countdown_btn": add_countdown_btn,
        }
        return footer, footer_widgets
