"""
Entry point for the PySide6 GUI.
"""
import sys


def run():
    """
    Main entry point for the GUI application.
    """
    import logging
    from PySide6.QtWidgets import QApplication

    from photosheet.gui.main_window import MainWindow
    from photosheet.gui.models.settings import SettingsStore
    from photosheet.gui.styles.theme import apply_theme
    from photosheet.gui.utils.paths import APP_NAME, ensure_directories, get_settings_path

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setApplicationDisplayName(APP_NAME)
    app.setOrganizationName(APP_NAME)

    ensure_directories()

    settings = SettingsStore(get_settings_path())

    # Check for malformed settings and prompt user to reset if needed
    if not settings.check_load_error():
        sys.exit(1)  # User chose not to reset, exit app

    apply_theme(app, settings.get_dark_mode())

    window = MainWindow(settings=settings)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    run()
