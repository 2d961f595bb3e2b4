"""Core data models shared across repodoc components."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Mapping, Optional, Tuple

CLASS = "CLASS"
INTERFACE = "INTERFACE"
ENUM = "ENUM"
CATEGORIES: Tuple[str, ...] = (CLASS, INTERFACE, ENUM)


def _normalise_annotation(name: str) -> str:
    return name if name.startswith("@") else f"@{name}"


@dataclass(frozen=True)
class ParameterRecord:
    """A single declared method parameter."""

    type: str
    name: str


@dataclass(frozen=True)
class MethodRecord:
    """Structural view of one method or constructor."""

    name: str
    return_type: str = ""
    parameters: Tuple[ParameterRecord, ...] = ()
    exceptions: Tuple[str, ...] = ()
    annotations: Mapping[str, str] = field(default_factory=dict)
    is_public: bool = False
    is_static: bool = False
    is_abstract: bool = False
    description: Optional[str] = None


@dataclass(frozen=True)
class FieldRecord:
    """Structural view of one field."""

    name: str
    type: str
    annotations: Mapping[str, str] = field(default_factory=dict)
    is_public: bool = False
    is_static: bool = False
    is_final: bool = False
    description: Optional[str] = None


@dataclass(frozen=True)
class ClassRecord:
    """Structural record for one Java type (class, interface or enum).

    Records are produced once per source file by the parser and are never
    mutated afterwards; the category in particular is validated here and
    cannot change.
    """

    name: str
    category: str
    package: str = ""
    is_public: bool = False
    is_abstract: bool = False
    superclass: Optional[str] = None
    interfaces: Tuple[str, ...] = ()
    methods: Tuple[MethodRecord, ...] = ()
    fields: Tuple[FieldRecord, ...] = ()
    annotations: Mapping[str, str] = field(default_factory=dict)
    description: Optional[str] = None
    source: Optional[str] = None
    dependencies: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.category not in CATEGORIES:
            raise ValueError(
                f"Unknown category '{self.category}' for {self.name}; expected one of {', '.join(CATEGORIES)}"
            )

    @property
    def fully_qualified_name(self) -> str:
        if self.package:
            return f"{self.package}.{self.name}"
        return self.name

    @property
    def is_entry_point(self) -> bool:
        return any(method.name == "main" and method.is_static for method in self.methods)

    @property
    def constructors(self) -> Tuple[MethodRecord, ...]:
        # Name match only; nested and inner classes can confuse this.
        return tuple(method for method in self.methods if method.name == self.name)

    def has_annotation(self, name: str) -> bool:
        wanted = _normalise_annotation(name)
        return any(_normalise_annotation(key) == wanted for key in self.annotations)


@dataclass(frozen=True)
class RunContext:
    """Diagnostic identifiers for a single synthesis run."""

    repository: str
    repo_name: str = ""
    run_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def with_repo_name(self, repo_name: str) -> "RunContext":
        return RunContext(
            repository=self.repository,
            repo_name=repo_name,
            run_id=self.run_id,
            started_at=self.started_at,
        )


__all__ = [
    "CATEGORIES",
    "CLASS",
    "ClassRecord",
    "ENUM",
    "FieldRecord",
    "INTERFACE",
    "MethodRecord",
    "ParameterRecord",
    "RunContext",
]
