"""
Declarative field rules evaluated before any persistence attempt.

A model lists its rules in ``__validation_rules__``; ``check_rules`` walks
them in order and reports every violation. Evaluation never touches the
database.
"""
import re
from dataclasses import dataclass
from typing import Any, Callable

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass(frozen=True)
class Rule:
    """One (field, predicate, message) triple."""
    field: str
    predicate: Callable[[Any], bool]
    message: str
    rule: str = "invalid"

    def violation(self, instance) -> dict | None:
        value = getattr(instance, self.field, None)
        if self.predicate(value):
            return None
        return {"field": self.field, "rule": self.rule, "message": self.message}


def is_present(value) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    return True


def required(field: str, message: str | None = None) -> Rule:
    return Rule(
        field=field,
        predicate=is_present,
        message=message or f"{field} is required",
        rule="required",
    )


def email_format(field: str, message: str | None = None) -> Rule:
    # Blank values are left to required()
    return Rule(
        field=field,
        predicate=lambda v: not is_present(v) or bool(EMAIL_PATTERN.match(v)),
        message=message or f"{field} must be a valid email address",
        rule="format",
    )


def check_rules(instance, rules=None) -> list[dict]:
    """
    Evaluate rules against an instance.

    Args:
        instance: Object whose attributes are checked
        rules: Rules to apply (defaults to the instance's __validation_rules__)

    Returns:
        list[dict]: one {field, rule, message} entry per violation, in rule order
    """
    if rules is None:
        rules = getattr(instance, "__validation_rules__", ())
    errors = []
    for rule in rules:
        v = rule.violation(instance)
        if v is not None:
            errors.append(v)
    return errors
