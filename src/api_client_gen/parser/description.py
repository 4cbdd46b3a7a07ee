"""Endpoint description document parser.

Reads the YAML/JSON dump of an API's endpoints (controller, action, verb,
path, typed parameters, response type) into a DescriptionDocument.
"""

from pathlib import Path

import yaml
from pydantic import ValidationError

from api_client_gen.errors import DescriptionError

from .base import DescriptionDocument
from .detect import load_document


def parse_description(file_path: Path) -> DescriptionDocument:
    """Parse an endpoint description file into a DescriptionDocument."""
    try:
        data = load_document(file_path)
    except OSError as e:
        raise DescriptionError(f"Failed to read description: {e}", str(file_path)) from e
    except (yaml.YAMLError, ValueError) as e:
        raise DescriptionError(f"Invalid document: {e}", str(file_path)) from e

    if isinstance(data, list):
        data = {"endpoints": data}
    if not isinstance(data, dict):
        raise DescriptionError("Description root must be a mapping or a list of endpoints", str(file_path))

    try:
        return DescriptionDocument(**data)
    except ValidationError as e:
        raise DescriptionError(f"Invalid endpoint description: {e}", str(file_path)) from e
