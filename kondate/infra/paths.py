from pathlib import Path

from kondate.utilities.config import DATA_DIR

# Centralized paths for data files (single source of truth)


def collection_file(data_dir: Path, collection: str) -> Path:
    """One JSON file per collection: ``<data_dir>/<collection>.json``."""
    return Path(data_dir) / f'{collection}.json'


__all__ = ['DATA_DIR', 'collection_file']
