"""Generation options, optionally loaded from a YAML config file."""

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ValidationError

from api_client_gen.errors import DescriptionError

DEFAULT_NAMESPACES = ["System.Threading.Tasks", "Refit"]


class GenerateClientOptions(BaseModel):
    """Settings shared by the model builder and the client generator."""

    namespace: str = "ApiClient"
    type_name_pattern: str = "I[controller]Api"
    access_modifier: Literal["public", "internal"] = "public"
    use_api_responses: bool = False
    additional_namespaces: list[str] = list(DEFAULT_NAMESPACES)
    models_namespace: str = "Models"  # namespace for OpenAPI schema types
    exclude_controllers: list[str] = []  # glob patterns


def load_options(config_path: Path | None = None, **overrides) -> GenerateClientOptions:
    """Load options from a YAML file, then apply non-None keyword overrides."""
    data: dict = {}
    if config_path is not None:
        try:
            loaded = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise DescriptionError(f"Failed to read config: {e}", str(config_path)) from e
        if loaded is not None and not isinstance(loaded, dict):
            raise DescriptionError("Config root must be a mapping", str(config_path))
        data.update(loaded or {})

    data.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return GenerateClientOptions(**data)
    except ValidationError as e:
        raise DescriptionError(f"Invalid options: {e}", str(config_path) if config_path else None) from e
