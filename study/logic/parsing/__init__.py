"""Plan input handling: decoding, validation gate and normalization."""
from study.logic.parsing.errors import PlanInputError, ParseError, ValidationError
from study.logic.parsing.plan_parser import (
    parse_document,
    validate_document,
    validate_plan_json,
    normalize_document,
    parse_plan_json,
)

__all__ = [
    "PlanInputError", "ParseError", "ValidationError",
    "parse_document", "validate_document", "validate_plan_json",
    "normalize_document", "parse_plan_json",
]
