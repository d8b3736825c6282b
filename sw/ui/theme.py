"""Theme system — the light and dark palettes plus stylesheet generation."""

THEMES = {
    "Light": {
        "bg": "#F5F5F7",
        "panel": "#FFFFFF",
        "text": "#1D1D1F",
        "text_grayed_out": "#A1A1A6",
        "accent": "#0A84FF",
        "accent_text": "#FFFFFF",
        "button": "#E5E5EA",
        "button_hover": "#D1D1D6",
        "countdown": "#FF9F0A",
        "running": "#30A46C",
        "split": "#6E6E73",
        "separator": "#D2D2D7",
    },
    "Dark": {
        "bg": "#1C1C1E",
        "panel": "#2C2C2E",
        "text": "#F2F2F7",
        "text_grayed_out": "#636366",
        "accent": "#0A84FF",
        "accent_text": "#FFFFFF",
        "button": "#3A3A3C",
        "button_hover": "#48484A",
        "countdown": "#FFB340",
        "running": "#4CD964",
        "split": "#AEAEB2",
        "separator": "#3A3A3C",
    },
}

SIZES = {
    "display": 48,
    "label": 12,
    "action": 11,
    "status": 10,
    "padding": 8,
    "frame_pad": 12,
}


def theme_name(dark_mode):
    return "Dark" if dark_mode else "Light"


def build_stylesheet(name):
    t = THEMES.get(name, THEMES["Light"])
    return f"""
        QMainWindow, QWidget {{ background-color: {t['bg']}; color: {t['text']}; }}
        QPushButton, QToolButton {{
            background-color: {t['button']}; color: {t['text']};
            border: 1px solid {t['separator']}; border-radius: 6px; padding: 4px 10px;
        }}
        QPushButton:hover, QToolButton:hover {{ background-color: {t['button_hover']}; }}
        QPushButton:disabled {{ color: {t['text_grayed_out']}; }}
        QPushButton:checked {{ background-color: {t['accent']}; color: {t['accent_text']}; }}
        QListWidget {{ background-color: {t['panel']}; border: 1px solid {t['separator']}; }}
        QMenu {{ background-color: {t['panel']}; color: {t['text']}; }}
        QMenu::item:selected {{ background-color: {t['accent']}; color: {t['accent_text']}; }}
        #statusLabel {{ color: {t['text_grayed_out']}; }}
    """


def display_color(name, running, countdown):
    """Colour of the big time readout for the current engine state."""
    t = THEMES.get(name, THEMES["Light"])
    if countdown:
        return t["countdown"]
    if running:
        return t["running"]
    return t["text"]
