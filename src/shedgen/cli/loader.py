"""Load an externally supplied CLI description from a JSON or YAML file.

The file holds the serialised form of a
:class:`~shedgen.models.CliDescription`::

    name: mytool
    help: My tool
    flags:
      - {name: config, short: c, takes_value: true, value_hint: file}
    subcommands:
      - name: run
        help: Run something

Format is chosen from the file extension (``.json``, ``.yaml``, ``.yml``)
and otherwise detected from the content: JSON first, then YAML.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from shedgen.exceptions import DescriptionLoadError
from shedgen.models import CliDescription


def load_description(path: str | Path) -> CliDescription:
    """Load and validate a CLI description from *path*.

    Raises:
        DescriptionLoadError: If the file is missing, unreadable, not a
            JSON/YAML object, or does not match the description schema.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise DescriptionLoadError(f"Description file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DescriptionLoadError(f"Failed to read description file {path}: {exc}") from exc

    if not content.strip():
        raise DescriptionLoadError(f"Description file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    data = _parse_content(content, hint=hint)
    try:
        return CliDescription.model_validate(data)
    except ValidationError as exc:
        raise DescriptionLoadError(f"Invalid CLI description in {path}: {exc}") from exc


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hint is 'yaml'), then falls back to YAML.

    Raises:
        DescriptionLoadError: If the content cannot be parsed as either
            format, or is not a mapping.
    """
    json_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                raise DescriptionLoadError(f"Invalid JSON: {exc}") from exc
        else:
            return _require_mapping(result)

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        msg = "Failed to parse description as JSON or YAML"
        if json_error:
            msg += f"\n  JSON error: {json_error}"
        msg += f"\n  YAML error: {exc}"
        raise DescriptionLoadError(msg) from exc
    return _require_mapping(result)


def _require_mapping(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        raise DescriptionLoadError(f"Description must be a JSON/YAML object (got {kind})")
    return result
