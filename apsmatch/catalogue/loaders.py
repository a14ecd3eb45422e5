# apsmatch/catalogue/loaders.py
import json
import os
from typing import Any, List

from apsmatch.core.errors import CatalogueError

CATALOGUE_FILE = "universities.json"

def _read_json(path: str) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError as e:
        raise CatalogueError(f"Catalogue file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise CatalogueError(f"Catalogue file is not valid JSON: {path}: {e}") from e

def load_catalogue(root: str) -> List[Any]:
    return _read_json(os.path.join(root, CATALOGUE_FILE))
