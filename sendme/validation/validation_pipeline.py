"""Validation pipeline for running a rule-set over a request.

Rules run in registration order. A field stops being evaluated at its first
failing rule, or as soon as an optional rule finds it absent; other fields
keep going so the caller sees every problem at once.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from .field_validator import apply_rule, is_absent
from .models import RequestData, Rule, Violation

logger = logging.getLogger(__name__)


@dataclass
class ValidationOutcome:
    """Violations plus the validated (coerced, trimmed, defaulted) request."""

    data: RequestData
    violations: list[Violation] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.violations


class ValidationPipeline:
    """Runs an ordered rule-set against requests"""

    def __init__(self, rules: Iterable[Rule] = ()) -> None:
        self.rules: tuple[Rule, ...] = tuple(rules)

    def run(self, request: RequestData) -> ValidationOutcome:
        """Validate a request without mutating it.

        Args:
            request: The raw request data

        Returns:
            ValidationOutcome whose ``data`` is a copy carrying every coercion
        """
        data = request.clone()
        outcome = ValidationOutcome(data=data)
        closed: set[str] = set()

        for rule in self.rules:
            if rule.target in closed:
                continue

            value = data.lookup(rule.location, rule.path)

            if rule.optional and is_absent(value):
                if rule.default is not None:
                    data.assign(rule.location, rule.path, rule.default)
                closed.add(rule.target)
                continue

            result = apply_rule(rule, value, data)
            if not result.passed:
                outcome.violations.extend(result.violations)
                closed.add(rule.target)
                continue

            if result.value is not value and not is_absent(result.value):
                data.assign(rule.location, rule.path, result.value)

        if outcome.violations:
            logger.debug(f"Validation produced {len(outcome.violations)} violation(s)")
        return outcome

    def validate(self, request: RequestData) -> list[Violation]:
        """Validate a request and return only the violations."""
        return self.run(request).violations


def validate(rules: Iterable[Rule], request: RequestData) -> list[Violation]:
    """Run ``rules`` over ``request`` and collect all violations."""
    return ValidationPipeline(rules).validate(request)
