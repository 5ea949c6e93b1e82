# ============================================================================
# MODEL YAML PARSER
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Service - YAML model files -> DataModel
# PURPOSE: Validate hand-written data models for the generators
# CREATED: 17 OCT 2026
# ============================================================================
"""
Model YAML Parser

Two layouts are accepted and folded into one DataModel:

    models:                      dataSchema:
      - tables:                    - tableName: users   # or raw: users
          users:                     fields: {...}
            fields: {...}

Both may carry top-level roles and security sections.

Usage:
    from services.model_parser import parse_model_yaml

    model = parse_model_yaml("docs/model.yaml")
    for table in model.creatable_tables:
        ...
"""

from pathlib import Path
from typing import Any, Dict, List, Union

import yaml
from pydantic import ValidationError

from core.errors import ModelValidationError
from core.logging import ComponentType, get_logger
from core.models import DataModel

logger = get_logger(__name__, ComponentType.SERVICE)


def _tables_from_models(models: Any, source: str) -> List[Dict[str, Any]]:
    if not isinstance(models, list):
        raise ModelValidationError("'models' must be a list", path=source)

    tables = []
    for index, entry in enumerate(models):
        if not isinstance(entry, dict):
            raise ModelValidationError(f"models[{index}] must be a mapping", path=source)
        for name, table in (entry.get("tables") or {}).items():
            if table is not None and not isinstance(table, dict):
                raise ModelValidationError(f"Table '{name}' must be a mapping", path=source)
            tables.append({**(table or {}), "name": str(name)})
    return tables


def _tables_from_data_schema(data_schema: Any, source: str) -> List[Dict[str, Any]]:
    if not isinstance(data_schema, list):
        raise ModelValidationError("'dataSchema' must be a list", path=source)

    tables = []
    for index, entry in enumerate(data_schema):
        if not isinstance(entry, dict):
            raise ModelValidationError(f"dataSchema[{index}] must be a mapping", path=source)
        name = entry.get("tableName") or entry.get("raw")
        if not name:
            raise ModelValidationError(
                f"dataSchema[{index}] needs a tableName (or raw) entry", path=source
            )
        tables.append({**entry, "name": str(name)})
    return tables


def build_data_model(raw: Any, source: str = "<model>") -> DataModel:
    """
    Validate a parsed YAML document.

    Args:
        raw: Result of yaml.safe_load
        source: File name for error messages

    Returns:
        DataModel

    Raises:
        ModelValidationError: If the document has neither layout or fails validation
    """
    if not isinstance(raw, dict):
        raise ModelValidationError("Model file must contain a mapping at the top level", path=source)

    if raw.get("dataSchema") is not None:
        tables = _tables_from_data_schema(raw["dataSchema"], source)
    elif raw.get("models") is not None:
        tables = _tables_from_models(raw["models"], source)
    else:
        raise ModelValidationError("Model file needs a 'models' or 'dataSchema' section", path=source)

    try:
        model = DataModel.model_validate({
            "tables": tables,
            "roles": raw.get("roles"),
            "security": raw.get("security"),
        })
    except ValidationError as e:
        raise ModelValidationError(f"Invalid model: {e}", path=source) from e

    logger.debug(f"Parsed {len(model.tables)} tables from {source}")
    return model


def parse_model_yaml(path: Union[str, Path]) -> DataModel:
    """
    Load and validate a model YAML file.

    Args:
        path: Model file

    Returns:
        DataModel

    Raises:
        ModelValidationError: Unreadable file, bad YAML or invalid model
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except OSError as e:
        raise ModelValidationError(f"Cannot read model file: {e}", path=str(path)) from e
    except yaml.YAMLError as e:
        raise ModelValidationError(f"Invalid YAML: {e}", path=str(path)) from e

    return build_data_model(raw, str(path))


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "build_data_model",
    "parse_model_yaml",
]
