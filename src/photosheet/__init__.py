"""Top-level package for PhotoSheet.

Provides subpackages:
- photosheet.viewport – pan/zoom engine and crop normalisation
- photosheet.layout – printable sheet geometry
- photosheet.captions – caption validation for caption prints
- photosheet.workflow – step state machine driving the collaborator
- photosheet.client – processing collaborator interface and HTTP transport
- photosheet.gui – PySide6 app
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    import sys
    from pathlib import Path
    
    # In dev mode, read directly from pyproject.toml
    if not getattr(sys, 'frozen', False):
        pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    else:
        # In frozen mode, read from bundle root
        pyproject = Path(getattr(sys, "_MEIPASS", ".")) / "pyproject.toml"
    
    if pyproject.exists():
        try:
            content = pyproject.read_text()
            for line in content.splitlines():
                if line.strip().startswith("version"):
                    # Parse: version = "0.3.1"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass
    
    # Fallback to importlib.metadata for installed package
    try:
        from importlib.metadata import version as pkg_version, PackageNotFoundError
        return pkg_version("photosheet")
    except PackageNotFoundError:
        return "0.0.0"

__version__ = _get_version()
__all__: list[str] = ["__version__"]
