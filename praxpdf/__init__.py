# praxpdf/__init__.py
"""
PraxPDF - PDF form field editing and page merging

Batch-edits the purchasing-card form fields of PDF documents and collapses
multi-page PDFs into a single tall page while keeping their form fields.
"""

from pathlib import Path


def _get_version() -> str:
    """
    Read the version from pyproject.toml.

    Keeps the displayed version in sync with the packaging metadata without
    touching this file on every release.

    Returns:
        str: version string (e.g. "0.1.0")
    """
    try:
        import tomllib  # Python 3.11+ standard library

        pyproject_path = Path(__file__).parent.parent / "pyproject.toml"
        if pyproject_path.exists():
            with open(pyproject_path, "rb") as f:
                data = tomllib.load(f)
            return data.get("project", {}).get("version", "0.0.0")
    except Exception:
        pass

    # Fallback: hardcoded version
    return "0.1.0"


__version__ = _get_version()
__app_name__ = "PraxPDF"
