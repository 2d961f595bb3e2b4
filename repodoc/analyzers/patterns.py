"""Heuristic usage-pattern and technology-stack detection.

Every heuristic here is a substring match over type, method or class names
driven by the vocabulary tables below. They are not type-system facts and
false positives are expected; extend the tables rather than adding literals
to the predicates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from ..models import INTERFACE, ClassRecord, MethodRecord

DEFAULT_STACK_LABEL = "Core Java"
DEFAULT_USAGE_LABEL = "Standard Java class"


@dataclass(frozen=True)
class PatternRule:
    """Token vocabulary for one category of method-level pattern."""

    category: str
    label: str
    issue: str
    return_tokens: Tuple[str, ...] = ()
    parameter_tokens: Tuple[str, ...] = ()
    name_tokens: Tuple[str, ...] = ()

    def matches(self, method: MethodRecord) -> bool:
        if _contains_any(method.return_type, self.return_tokens):
            return True
        if any(_contains_any(parameter.type, self.parameter_tokens) for parameter in method.parameters):
            return True
        return _contains_any(method.name.lower(), self.name_tokens)


@dataclass(frozen=True)
class StackRule:
    """Maps class-level evidence to a technology label."""

    label: str
    annotations: Tuple[str, ...] = ()
    name_tokens: Tuple[str, ...] = ()

    def matches(self, record: ClassRecord) -> bool:
        if any(record.has_annotation(annotation) for annotation in self.annotations):
            return True
        return _contains_any(record.name, self.name_tokens)


PATTERN_RULES: Tuple[PatternRule, ...] = (
    PatternRule(
        category="file_io",
        label="File I/O operations",
        issue="File I/O operations may cause permission or path issues",
        return_tokens=("Path", "File"),
        parameter_tokens=("Path", "File"),
    ),
    PatternRule(
        category="network",
        label="Network operations",
        issue="Network connectivity and timeout issues",
        return_tokens=("Http", "URL"),
        name_tokens=("connect",),
    ),
    PatternRule(
        category="configuration",
        label="Configuration operations",
        issue="Configuration and properties setup issues",
        return_tokens=("Properties",),
        name_tokens=("config",),
    ),
)

STACK_RULES: Tuple[StackRule, ...] = (
    StackRule(label="Spring Boot Web", annotations=("@RestController", "@Controller")),
    StackRule(label="JPA/Hibernate", annotations=("@Entity",)),
    StackRule(label="JUnit Testing", name_tokens=("Test",)),
)

USAGE_RULES: Tuple[StackRule, ...] = (
    StackRule(label="Spring service/component", annotations=("@Service", "@Component")),
    StackRule(label="Web controller", annotations=("@RestController", "@Controller")),
    StackRule(label="JPA entity/data model", annotations=("@Entity", "@Table")),
)


def _contains_any(value: str, tokens: Sequence[str]) -> bool:
    return bool(value) and any(token in value for token in tokens)


def is_file_io(method: MethodRecord) -> bool:
    return _rule("file_io").matches(method)


def is_network(method: MethodRecord) -> bool:
    return _rule("network").matches(method)


def is_configuration(method: MethodRecord) -> bool:
    return _rule("configuration").matches(method)


def _rule(category: str) -> PatternRule:
    for rule in PATTERN_RULES:
        if rule.category == category:
            return rule
    raise KeyError(category)


def count_patterns(records: Sequence[ClassRecord]) -> Dict[str, int]:
    """Return, per pattern category, how many methods match its vocabulary."""
    counts = {rule.category: 0 for rule in PATTERN_RULES}
    for record in records:
        for method in record.methods:
            for rule in PATTERN_RULES:
                if rule.matches(method):
                    counts[rule.category] += 1
    return counts


def infer_technology_stack(records: Sequence[ClassRecord]) -> str:
    labels = [rule.label for rule in STACK_RULES if any(rule.matches(record) for record in records)]
    return ", ".join(labels) if labels else DEFAULT_STACK_LABEL


def classify_usage(record: ClassRecord) -> List[str]:
    """Return the usage-pattern labels that describe a single record."""
    labels: List[str] = []
    if record.is_entry_point:
        labels.append("Entry point class (contains main method)")
    if record.category == INTERFACE:
        labels.append("Interface definition")
    labels.extend(rule.label for rule in USAGE_RULES if rule.matches(record))
    return labels or [DEFAULT_USAGE_LABEL]


__all__ = [
    "DEFAULT_STACK_LABEL",
    "DEFAULT_USAGE_LABEL",
    "PATTERN_RULES",
    "PatternRule",
    "STACK_RULES",
    "StackRule",
    "USAGE_RULES",
    "classify_usage",
    "count_patterns",
    "infer_technology_stack",
    "is_configuration",
    "is_file_io",
    "is_network",
]
