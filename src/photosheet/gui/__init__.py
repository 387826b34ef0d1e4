"""
PySide6 desktop shell for PhotoSheet.

Entry point: photosheet.gui.app.run()
"""
