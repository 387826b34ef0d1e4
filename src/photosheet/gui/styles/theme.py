"""
Theme definitions for the PhotoSheet GUI.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class Palette:
    # Primary
    PRIMARY: str
    PRIMARY_HOVER: str
    PRIMARY_PRESSED: str

    # Backgrounds
    BACKGROUND: str
    SURFACE: str
    HOVER: str
    DISABLED_BG: str

    # Text
    TEXT_PRIMARY: str
    TEXT_SECONDARY: str
    TEXT_DISABLED: str
    TEXT_ON_PRIMARY: str

    # Borders
    BORDER: str
    BORDER_FOCUS: str

    # Status
    ERROR: str
    SUCCESS: str
    WARNING: str
    INFO: str

    # Crop canvas
    CANVAS: str
    CROP_MASK: str
    CROP_FRAME: str


Colors = Palette(
    PRIMARY="#0364B8",
    PRIMARY_HOVER="#0A2767",
    PRIMARY_PRESSED="#0A2767",
    BACKGROUND="#f5f5f5",
    SURFACE="#ffffff",
    HOVER="#f0f0f0",
    DISABLED_BG="#e0e0e0",
    TEXT_PRIMARY="#1f1f1f",
    TEXT_SECONDARY="#666666",
    TEXT_DISABLED="#757575",
    TEXT_ON_PRIMARY="#ffffff",
    BORDER="#e0e0e0",
    BORDER_FOCUS="#28A8EA",
    ERROR="#d32f2f",
    SUCCESS="#388e3c",
    WARNING="#f57c00",
    INFO="#1976d2",
    CANVAS="#e8e8e8",
    CROP_MASK="#99000000",
    CROP_FRAME="#ffffff",
)

ColorsDark = Palette(
    PRIMARY="#3794FF",
    PRIMARY_HOVER="#4FA3FF",
    PRIMARY_PRESSED="#2A7FE8",
    BACKGROUND="#1e1e1e",
    SURFACE="#252526",
    HOVER="#21262D",
    DISABLED_BG="#3D444D",
    TEXT_PRIMARY="#E6EDF3",
    TEXT_SECONDARY="#8B949E",
    TEXT_DISABLED="#9CA3AF",
    TEXT_ON_PRIMARY="#FFFFFF",
    BORDER="#30363D",
    BORDER_FOCUS="#3794FF",
    ERROR="#F85149",
    SUCCESS="#3FB950",
    WARNING="#D29922",
    INFO="#58A6FF",
    CANVAS="#111111",
    CROP_MASK="#B3000000",
    CROP_FRAME="#E6EDF3",
)


class Fonts:
    # Font Families
    UI_FONT = "-apple-system, 'SF Pro Text', 'Segoe UI', Roboto, Helvetica, Arial, sans-serif"
    MONO_FONT = "Consolas, Monaco, Menlo, 'Courier New', monospace"

    # Sizes
    H1 = "18pt"
    H2 = "16pt"
    BODY = "14pt"
    SMALL = "12pt"
    CONSOLE = "13pt"

    # Weights
    WEIGHT_REGULAR = "400"
    WEIGHT_MEDIUM = "500"
    WEIGHT_BOLD = "600"


def build_stylesheet(C: Palette) -> str:
    """Global application stylesheet for a palette."""
    return f"""
    * {{
        font-family: {Fonts.UI_FONT};
        font-size: {Fonts.BODY};
        color: {C.TEXT_PRIMARY};
    }}

    QMainWindow, QWidget {{
        background-color: {C.BACKGROUND};
    }}

    QLabel {{
        background-color: transparent;
    }}

    QLabel#mainTitle {{
        font-size: {Fonts.H1};
        font-weight: {Fonts.WEIGHT_BOLD};
        color: {C.PRIMARY};
    }}

    QLabel#pageTitle {{
        font-size: {Fonts.H1};
        font-weight: {Fonts.WEIGHT_BOLD};
    }}

    QLabel#hint {{
        color: {C.TEXT_SECONDARY};
        font-size: {Fonts.SMALL};
    }}

    QLabel#fieldError {{
        color: {C.ERROR};
        font-size: {Fonts.SMALL};
    }}

    QLabel#warningBanner {{
        background-color: {C.WARNING};
        color: {C.TEXT_ON_PRIMARY};
        border-radius: 6px;
        padding: 8px;
    }}

    QWidget#stepHeader QLabel {{
        color: {C.TEXT_SECONDARY};
        padding: 4px 8px;
    }}
    QWidget#stepHeader QLabel[current="true"] {{
        color: {C.PRIMARY};
        font-weight: {Fonts.WEIGHT_BOLD};
    }}

    QPushButton {{
        background-color: {C.SURFACE};
        border: 1px solid {C.BORDER};
        border-radius: 6px;
        padding: 8px 16px;
        font-weight: {Fonts.WEIGHT_MEDIUM};
    }}
    QPushButton:hover {{
        background-color: {C.HOVER};
        border-color: {C.BORDER_FOCUS};
    }}
    QPushButton:disabled {{
        background-color: {C.DISABLED_BG};
        color: {C.TEXT_DISABLED};
    }}
    QPushButton[primary="true"] {{
        background-color: {C.PRIMARY};
        color: {C.TEXT_ON_PRIMARY};
        border: none;
    }}
    QPushButton[primary="true"]:hover {{
        background-color: {C.PRIMARY_HOVER};
    }}
    QPushButton[primary="true"]:pressed {{
        background-color: {C.PRIMARY_PRESSED};
    }}

    QLineEdit, QSpinBox, QComboBox {{
        border: 1px solid {C.BORDER};
        border-radius: 6px;
        padding: 6px;
        background: {C.SURFACE};
    }}
    QLineEdit:focus, QSpinBox:focus, QComboBox:focus {{
        border: 1px solid {C.BORDER_FOCUS};
    }}

    QStatusBar {{
        background-color: {C.SURFACE};
        color: {C.TEXT_SECONDARY};
    }}

    QGroupBox {{
        background-color: {C.SURFACE};
        border: 1px solid {C.BORDER};
        border-radius: 6px;
        margin-top: 12px;
    }}
    QGroupBox::title {{
        subcontrol-origin: margin;
        left: 8px;
        padding: 0 4px;
        background-color: {C.BACKGROUND};
    }}

    QGroupBox#console {{
        border-left: none;
        border-right: none;
        border-radius: 0px;
        margin-top: 24px;
    }}
    QGroupBox#console QPlainTextEdit {{
        border: none;
        background-color: {C.SURFACE};
    }}
    """


GLOBAL_STYLESHEET = build_stylesheet(Colors)
GLOBAL_STYLESHEET_DARK = build_stylesheet(ColorsDark)

# Module-level dark mode state (set explicitly when theme changes)
_is_dark_mode = False


def set_dark_mode(is_dark: bool):
    """Explicitly set the dark mode state. Called by MainWindow._apply_theme."""
    global _is_dark_mode
    _is_dark_mode = is_dark


def get_colors() -> Palette:
    """Get the appropriate color palette based on current theme."""
    return ColorsDark if _is_dark_mode else Colors


def apply_theme(app, is_dark: bool = False) -> None:
    """
    Apply the appropriate stylesheet (light or dark) to the QApplication.
    """
    set_dark_mode(is_dark)
    app.setStyleSheet(GLOBAL_STYLESHEET_DARK if is_dark else GLOBAL_STYLESHEET)


def mark_primary(button) -> None:
    """Style a QPushButton as the page's primary action."""
    button.setProperty("primary", True)
    button.style().unpolish(button)
    button.style().polish(button)

