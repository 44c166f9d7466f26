"""Loading definitions from YAML or JSON files.

A definitions file describes an API by plain data::

    info:
      title: Pet Store
      version: "1.0"
    schemas:
      Pet:
        properties:
          name: { type: string, existence: present }
    operations:
      get_pet:
        path: /pets/{id}
        parameters:
          id: { in: path, type: integer }
        responses:
          200: { schema: Pet }
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any

import jsonschema
import yaml

from .meta.definitions import Definitions

logger = logging.getLogger(__name__)

__all__ = ["load_definitions", "definitions_from_dict", "load_data", "validate_structure"]

_SCHEMA_PATH = Path(__file__).parent / "schemas" / "definitions-schema-1.json"

# Sections holding named objects and the registry methods adding them
_NAMED_SECTIONS = (
    ("schemas", "add_schema"),
    ("parameters", "add_parameter"),
    ("request_bodies", "add_request_body"),
    ("responses", "add_response"),
    ("examples", "add_example"),
    ("headers", "add_header"),
    ("security_schemes", "add_security_scheme"),
    ("defaults", "add_default"),
    ("paths", "add_path"),
    ("operations", "add_operation"),
)


def load_data(path: str | Path) -> Any:
    """Reads a YAML or JSON file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file format isn't supported or parsing fails
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    content = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        try:
            return yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse YAML: {e}") from e
    elif suffix == ".json":
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise ValueError(f"Failed to parse JSON: {e}") from e
    raise ValueError(f"Unsupported file extension: {path.suffix}. Use .yaml, .yml, or .json")


@lru_cache(maxsize=1)
def _structure_schema() -> dict[str, Any]:
    with open(_SCHEMA_PATH) as f:
        return json.load(f)


def validate_structure(data: Any) -> None:
    """Checks the structure of definitions data.

    Raises:
        ValueError: If the structure is invalid
    """
    try:
        jsonschema.validate(instance=data, schema=_structure_schema())
    except jsonschema.ValidationError as e:
        if e.absolute_path:
            path = ".".join(str(p) for p in e.absolute_path)
            raise ValueError(f"Definitions validation error at '{path}': {e.message}") from e
        raise ValueError(f"Definitions validation error: {e.message}") from e


def definitions_from_dict(data: Mapping[str, Any], freeze: bool = True) -> Definitions:
    """Builds a definitions registry from plain data.

    Args:
        data: The parsed content of a definitions file.
        freeze: Whether to freeze the registry.

    Raises:
        ValueError: If the structure of ``data`` is invalid
        ApiMetaError: If the definitions are inconsistent, e.g. a discriminator
            refers to an undefined schema
    """
    validate_structure(data)

    info = dict(data.get("info") or {})
    if "version" in info:
        # YAML reads 1.0 as a number
        info["version"] = str(info["version"])
    definitions = Definitions(
        info=info or None, openapi_extensions=data.get("openapi_extensions")
    )
    for server in data.get("servers") or []:
        definitions.add_server(**server)
    for tag in data.get("tags") or []:
        definitions.add_tag(**tag)
    for requirement in data.get("security") or []:
        definitions.add_security_requirement(requirement)

    for section, method in _NAMED_SECTIONS:
        add = getattr(definitions, method)
        for name, keywords in (data.get(section) or {}).items():
            if isinstance(keywords, str):
                keywords = {"ref": keywords}
            add(str(name), **(keywords or {}))

    if freeze:
        definitions.freeze()
    logger.debug(
        f"Loaded definitions with {len(definitions.operations)} operations "
        f"and {len(definitions.schemas)} schemas"
    )
    return definitions


def load_definitions(path: str | Path, freeze: bool = True) -> Definitions:
    """Loads a definitions registry from a YAML or JSON file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file can't be parsed or its structure is invalid
        ApiMetaError: If the definitions are inconsistent
    """
    logger.debug(f"Loading definitions from {path}")
    data = load_data(path)
    if not isinstance(data, Mapping):
        raise ValueError(f"Definitions file {path} must contain a mapping")
    return definitions_from_dict(data, freeze=freeze)
