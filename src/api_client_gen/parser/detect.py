"""Auto-detect the format of an endpoint description file."""

import json
from pathlib import Path

import yaml


def load_document(file_path: Path):
    """Load a JSON or YAML document; ``.json`` files go through the JSON parser."""
    text = file_path.read_text(encoding="utf-8")
    if file_path.suffix.lower() == ".json":
        return json.loads(text)
    return yaml.safe_load(text)


def detect_format(file_path: Path) -> str:
    """Detect the format of an API description file.

    Returns: 'openapi' or 'description'.
    """
    try:
        data = load_document(file_path)
    except (yaml.YAMLError, ValueError):
        return "description"

    if isinstance(data, dict) and ("openapi" in data or "swagger" in data):
        return "openapi"
    return "description"
