"""
registry/schema_loader.py - Compile the token and project JSON Schemas.

Schemas are compiled once at startup into SchemaValidator callables that
the orchestrator applies per entry. A missing or malformed schema is a
SchemaLoadError (fatal), never a per-entry finding.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Union

from jsonschema import Draft202012Validator, FormatChecker
from jsonschema.exceptions import SchemaError

from core.constants import CONTRACT_SCHEMA_FILE, TOKEN_SCHEMA_FILE
from core.exceptions import JSONLoadError, PathTraversalError, SchemaLoadError
from core.logging import get_logger
from validators.safe_json import safe_read_json

logger = get_logger(__name__)

DEFAULT_SCHEMA_DIR = Path(__file__).parent / "schemas"


class SchemaValidator:
    """Callable wrapper: returns a list of error messages (empty = valid)."""

    def __init__(self, label: str, validator: Draft202012Validator):
        self.label = label
        self._validator = validator

    def __call__(self, instance: Any) -> List[str]:
        errors = sorted(self._validator.iter_errors(instance), key=lambda e: list(e.absolute_path))
        return [
            f"{'/' + '/'.join(str(p) for p in err.absolute_path) if err.absolute_path else '(root)'}: {err.message}"
            for err in errors
        ]


@dataclass
class SchemaSet:
    """Compiled schemas for one run."""
    token: SchemaValidator
    contract: SchemaValidator


def compile_schema(schema_path: Union[str, Path], label: str) -> SchemaValidator:
    """
    Load and compile one schema document.

    Raises:
        SchemaLoadError: file missing, unparsable or not a valid schema
    """
    schema_path = Path(schema_path)

    if not schema_path.is_file():
        raise SchemaLoadError(
            f"{label} not found: {schema_path}",
            details={"path": str(schema_path)},
        )

    try:
        schema = safe_read_json(schema_path)
    except (JSONLoadError, PathTraversalError) as e:
        raise SchemaLoadError(
            f"{label} could not be loaded: {e.message}",
            details={"path": str(schema_path), "cause": e.code.value},
        ) from e

    if not isinstance(schema, dict):
        raise SchemaLoadError(
            f"{label} must be a JSON object",
            details={"path": str(schema_path)},
        )

    try:
        Draft202012Validator.check_schema(schema)
    except SchemaError as e:
        raise SchemaLoadError(
            f"{label} is not a valid JSON Schema: {e.message}",
            details={"path": str(schema_path)},
        ) from e

    logger.debug(f"Compiled {label}", extra={"context": {"path": str(schema_path)}})
    return SchemaValidator(label, Draft202012Validator(schema, format_checker=FormatChecker()))


def load_schemas(schema_dir: Optional[Union[str, Path]] = None) -> SchemaSet:
    """
    Compile the token and contract-project schemas.

    Args:
        schema_dir: Directory holding token.schema.json and
            contract.schema.json (default: bundled schemas)
    """
    base = Path(schema_dir) if schema_dir is not None else DEFAULT_SCHEMA_DIR
    return SchemaSet(
        token=compile_schema(base / TOKEN_SCHEMA_FILE, "Token Schema"),
        contract=compile_schema(base / CONTRACT_SCHEMA_FILE, "Contract Schema"),
    )
