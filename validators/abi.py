"""
validators/abi.py - Structural checks on contract ABI files.

An ABI is a JSON list of element objects. Only shape is checked; type
strings are not parsed beyond being non-empty.
"""

from typing import Any, List, Optional

from core.constants import ErrorCode
from core.models import CheckResult

ABI_ELEMENT_TYPES = frozenset({"function", "event", "constructor", "fallback", "receive", "error"})
NAMED_ELEMENT_TYPES = frozenset({"function", "event", "error"})
STATE_MUTABILITY = frozenset({"pure", "view", "nonpayable", "payable"})


def _check_params(params: Any, where: str, allow_indexed: bool) -> Optional[str]:
    """Return a problem description for a parameter list, or None."""
    if not isinstance(params, list):
        return f"{where} must be an array"

    for i, param in enumerate(params):
        label = f"{where}[{i}]"
        if not isinstance(param, dict):
            return f"{label} must be an object"

        param_type = param.get("type")
        if not isinstance(param_type, str) or not param_type:
            return f"{label} is missing a 'type' string"

        if not isinstance(param.get("name"), str):
            return f"{label} is missing a 'name' string"

        if "indexed" in param:
            if not allow_indexed:
                return f"{label} has 'indexed' outside an event"
            if not isinstance(param["indexed"], bool):
                return f"{label}.indexed must be a boolean"

        if param_type.startswith("tuple"):
            if "components" not in param:
                return f"{label} is a tuple without 'components'"
            problem = _check_params(param["components"], f"{label}.components", allow_indexed=False)
            if problem:
                return problem

    return None


def _check_element(element: Any) -> Optional[str]:
    if not isinstance(element, dict):
        return "element must be an object"

    element_type = element.get("type")
    if element_type not in ABI_ELEMENT_TYPES:
        return f"unrecognized type {element_type!r}"

    if element_type in NAMED_ELEMENT_TYPES:
        name = element.get("name")
        if not isinstance(name, str) or not name:
            return f"{element_type} is missing a 'name'"

    if "inputs" in element:
        if element_type in ("fallback", "receive"):
            return f"{element_type} must not declare inputs"
        problem = _check_params(element["inputs"], "inputs", allow_indexed=element_type == "event")
        if problem:
            return problem

    if "outputs" in element:
        if element_type != "function":
            return f"{element_type} must not declare outputs"
        problem = _check_params(element["outputs"], "outputs", allow_indexed=False)
        if problem:
            return problem

    mutability = element.get("stateMutability")
    if mutability is not None and mutability not in STATE_MUTABILITY:
        return f"invalid stateMutability {mutability!r}"

    if "anonymous" in element and not isinstance(element["anonymous"], bool):
        return "'anonymous' must be a boolean"

    return None


def validate_abi(abi: Any, contract_name: str) -> CheckResult:
    """
    Validate ABI structure.

    Args:
        abi: Parsed ABI JSON
        contract_name: Contract name (diagnostics)

    Returns:
        CheckResult with INVALID_ABI naming the first offending index
    """
    result = CheckResult()
    subject = f"{contract_name}_abi.json"

    if not isinstance(abi, list):
        return result.error(
            ErrorCode.INVALID_ABI,
            f"{contract_name}: ABI must be an array, got {type(abi).__name__}",
            subject=subject,
        )

    if not abi:
        return result.warn(
            ErrorCode.EMPTY_ABI,
            f"{contract_name}: ABI is empty",
            subject=subject,
        )

    for index, element in enumerate(abi):
        problem = _check_element(element)
        if problem:
            return result.error(
                ErrorCode.INVALID_ABI,
                f"{contract_name}: Invalid ABI element at index {index}: {problem}",
                subject=subject,
                index=index,
            )

    constructors: List[int] = [i for i, e in enumerate(abi) if e["type"] == "constructor"]
    if len(constructors) > 1:
        result.error(
            ErrorCode.INVALID_ABI,
            f"{contract_name}: Invalid ABI element at index {constructors[1]}: duplicate constructor",
            subject=subject,
            index=constructors[1],
        )

    return result
