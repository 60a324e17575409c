"""Field validator - evaluates a single rule against a single field value.

Each check returns ``(passed, value)``; the returned value is the coerced
form (trimmed string, parsed number, parsed boolean) that the pipeline writes
into the validated copy of the request.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from .models import MISSING, RequestData, Rule, RuleKind, Violation

IDENTIFIER_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")
INT_PATTERN = re.compile(r"^[-+]?(?:0|[1-9][0-9]*)$")
FLOAT_PATTERN = re.compile(r"^[-+]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][-+]?[0-9]+)?$")
BOOLEAN_STRINGS = {"true": True, "false": False, "1": True, "0": False}

CheckResult = tuple[bool, Any]


@dataclass
class RuleOutcome:
    """Violations produced by one rule plus the (possibly coerced) value."""

    violations: list[Violation] = field(default_factory=list)
    value: Any = MISSING

    @property
    def passed(self) -> bool:
        return not self.violations


def is_absent(value: Any) -> bool:
    """Only a field missing from the request is absent; null is checked like any value."""
    return value is MISSING


def _as_text(value: Any) -> str | None:
    """Text form of a scalar; containers have none."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return str(value)
    return None


def _within(rule: Rule, number: float) -> bool:
    if rule.minimum is not None and number < rule.minimum:
        return False
    return not (rule.maximum is not None and number > rule.maximum)


def _check_exists(rule: Rule, value: Any, request: RequestData) -> CheckResult:
    return not (is_absent(value) or value is None or value == ""), value


def _check_not_empty(rule: Rule, value: Any, request: RequestData) -> CheckResult:
    text = _as_text(value)
    return text is not None and text.strip() != "", value


def _check_trim(rule: Rule, value: Any, request: RequestData) -> CheckResult:
    text = _as_text(value)
    if text is None:
        return True, value
    return True, text.strip()


def _check_identifier(rule: Rule, value: Any, request: RequestData) -> CheckResult:
    return isinstance(value, str) and IDENTIFIER_PATTERN.match(value) is not None, value


def _check_int(rule: Rule, value: Any, request: RequestData) -> CheckResult:
    if isinstance(value, bool):
        return False, value
    if isinstance(value, int):
        number = value
    elif isinstance(value, float):
        if not value.is_integer():
            return False, value
        number = int(value)
    elif isinstance(value, str) and INT_PATTERN.match(value):
        number = int(value)
    else:
        return False, value
    if not _within(rule, number):
        return False, value
    return True, number


def _check_float(rule: Rule, value: Any, request: RequestData) -> CheckResult:
    if isinstance(value, bool):
        return False, value
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str) and FLOAT_PATTERN.match(value):
        number = float(value)
    else:
        return False, value
    if not math.isfinite(number) or not _within(rule, number):
        return False, value
    return True, number


def _check_boolean(rule: Rule, value: Any, request: RequestData) -> CheckResult:
    if isinstance(value, bool):
        return True, value
    if isinstance(value, int) and value in (0, 1):
        return True, bool(value)
    if isinstance(value, str) and value.lower() in BOOLEAN_STRINGS:
        return True, BOOLEAN_STRINGS[value.lower()]
    return False, value


def _check_array(rule: Rule, value: Any, request: RequestData) -> CheckResult:
    return isinstance(value, list), value


def _check_object(rule: Rule, value: Any, request: RequestData) -> CheckResult:
    return isinstance(value, dict), value


def _check_in(rule: Rule, value: Any, request: RequestData) -> CheckResult:
    return isinstance(value, str) and value in rule.choices, value


def _check_length(rule: Rule, value: Any, request: RequestData) -> CheckResult:
    text = _as_text(value)
    if text is None:
        return False, value
    return _within(rule, len(text)), value


def _check_predicate(rule: Rule, value: Any, request: RequestData) -> CheckResult:
    if rule.predicate is None:
        raise ValueError(f"Predicate rule for {rule.field!r} has no predicate")
    return bool(rule.predicate(value, request)), value


_CHECKS: dict[RuleKind, Callable[[Rule, Any, RequestData], CheckResult]] = {
    RuleKind.EXISTS: _check_exists,
    RuleKind.NOT_EMPTY: _check_not_empty,
    RuleKind.TRIM: _check_trim,
    RuleKind.IS_IDENTIFIER: _check_identifier,
    RuleKind.IS_INT: _check_int,
    RuleKind.IS_FLOAT: _check_float,
    RuleKind.IS_BOOLEAN: _check_boolean,
    RuleKind.IS_ARRAY: _check_array,
    RuleKind.IS_OBJECT: _check_object,
    RuleKind.IS_IN: _check_in,
    RuleKind.LENGTH: _check_length,
    RuleKind.PREDICATE: _check_predicate,
}


def apply_rule(rule: Rule, value: Any, request: RequestData | None = None) -> RuleOutcome:
    """Run one rule, returning its violations and the coerced value.

    Element rules check every array element and report each offending
    element by index; a non-array value has no elements to check.
    """
    if rule.optional and is_absent(value):
        return RuleOutcome(value=value)

    check = _CHECKS[rule.kind]
    request = request if request is not None else RequestData()

    if not rule.is_element_rule:
        passed, coerced = check(rule, value, request)
        if passed:
            return RuleOutcome(value=coerced)
        return RuleOutcome(violations=[Violation(rule.field, rule.message)], value=value)

    if not isinstance(value, list):
        return RuleOutcome(value=value)

    outcome = RuleOutcome(value=[])
    for index, element in enumerate(value):
        passed, coerced = check(rule, element, request)
        if not passed:
            outcome.violations.append(Violation(f"{rule.target}[{index}]", rule.message))
        outcome.value.append(coerced)
    if not outcome.passed:
        outcome.value = value
    return outcome


def evaluate(rule: Rule, value: Any, request: RequestData | None = None) -> list[Violation]:
    """Evaluate a rule against a value and return its violations."""
    return apply_rule(rule, value, request).violations
