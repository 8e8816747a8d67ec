"""Load map definitions from disk."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from maplayout.config import DEFAULT_VAR_NAME
from maplayout.models.definition import MapDefinition
from maplayout.scanner.codegen import load_source

logger = logging.getLogger(__name__)


def load_definition(path: str | Path, var_name: str | None = DEFAULT_VAR_NAME) -> MapDefinition:
    """Read a ``.json`` definition or a generated ``.py`` source file.

    Generated source is never executed; the literal assigned to
    ``var_name`` is read back with :func:`ast.literal_eval`.
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        data: Any = json.loads(text)
    else:
        data = load_source(text, var_name)
    definition = MapDefinition.model_validate(data)
    logger.debug("Loaded definition %s from %s", definition.name, path)
    return definition
