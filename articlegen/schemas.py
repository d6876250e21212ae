# articlegen/schemas.py
from __future__ import annotations
import json
from pathlib import Path
from typing import Any, Dict

from articlegen.errors import ConfigurationError

SCHEMA_NAMES = ("article", "ideas", "template_plan")


def load_schema(schema_dir: Path, name: str) -> Dict[str, Any]:
    """
    Read <schema_dir>/<name>.schema.json. The document is passed to the API verbatim.
    Raises ConfigurationError when the file is missing or not a JSON object.
    """
    path = Path(schema_dir) / f"{name}.schema.json"
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ConfigurationError(f"{path.name} not found in {schema_dir}") from e
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"{path.name} could not be read: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path.name} is not a JSON object")
    return data
