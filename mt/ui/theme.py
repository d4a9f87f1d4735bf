"""Theme system: colors, sizes, and stylesheet generation."""

THEMES = {
    "Light": {
        "bg": "#f5f5f7",
        "row_bg": "#ffffff",
        "row_separator": "#d2d2d7",
        "text": "#1d1d1f",
        "running_text": "#0071e3",
        "paused_text": "#b36b00",
        "button_bg": "#e8e8ed",
        "button_text": "#1d1d1f",
        "button_disabled_text": "#a1a1a6",
        "input_bg": "#ffffff",
        "input_border": "#c7c7cc",
    },
    "Dark": {
        "bg": "#1c1c1e",
        "row_bg": "#2c2c2e",
        "row_separator": "#3a3a3c",
        "text": "#f2f2f7",
        "running_text": "#64d2ff",
        "paused_text": "#ffd60a",
        "button_bg": "#3a3a3c",
        "button_text": "#f2f2f7",
        "button_disabled_text": "#636366",
        "input_bg": "#1c1c1e",
        "input_border": "#48484a",
    },
}

SIZES = {
    "Compact": {"label": 9, "time": 11, "action": 9, "padding": 4, "h_spacing": 4},
    "Regular": {"label": 11, "time": 14, "action": 10, "padding": 6, "h_spacing": 6},
    "Large": {"label": 13, "time": 18, "action": 12, "padding": 8, "h_spacing": 8},
}


def build_stylesheet(theme_name):
    t = THEMES.get(theme_name, THEMES["Light"])
    return f"""
        QMainWindow, QWidget {{ background-color: {t["bg"]}; color: {t["text"]}; }}
        QPushButton {{
            background-color: {t["button_bg"]};
            color: {t["button_text"]};
            border: none;
            border-radius: 4px;
            padding: 2px 8px;
        }}
        QPushButton:disabled {{ color: {t["button_disabled_text"]}; }}
        QLineEdit {{
            background-color: {t["input_bg"]};
            border: 1px solid {t["input_border"]};
            border-radius: 3px;
            padding: 1px 4px;
        }}
    """
