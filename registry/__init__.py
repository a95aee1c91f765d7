"""
registry/ - Whole-registry validation.

Modules:
- orchestrator: RegistryValidator, phase-by-phase run
- index: per-run address index and findings accumulator
- schema_loader: JSON Schema compilation
- state_machine: run phase tracking
"""

from registry.index import RegistryIndex, ValidationRun
from registry.orchestrator import RegistryValidator, validate_registry
from registry.schema_loader import (
    DEFAULT_SCHEMA_DIR,
    SchemaSet,
    SchemaValidator,
    compile_schema,
    load_schemas,
)
from registry.state_machine import RunPhase, RunStateMachine

__all__ = [
    "RegistryIndex",
    "ValidationRun",
    "RegistryValidator",
    "validate_registry",
    "DEFAULT_SCHEMA_DIR",
    "SchemaSet",
    "SchemaValidator",
    "compile_schema",
    "load_schemas",
    "RunPhase",
    "RunStateMachine",
]
