"""
Central path constants for package-bundled data files.

Bundled data files live in a single subdirectory of the package so that
``base_dir / PACKAGE_DATA_DIR / filename`` is the only pattern used.
"""

from pathlib import Path

# Subdirectory within the package that holds bundled data files.
PACKAGE_DATA_DIR = "data"


def data_path(filename: str, base_dir: "str | Path | None" = None) -> Path:
    """Return the absolute path to a bundled data file.

    Args:
        filename: Filename inside the data subdirectory.
        base_dir: Directory containing the data subdirectory; defaults to the
                  installed package directory.

    Returns:
        ``Path(base_dir) / PACKAGE_DATA_DIR / filename``
    """
    if base_dir is None:
        base_dir = Path(__file__).resolve().parent
    return Path(base_dir) / PACKAGE_DATA_DIR / filename
