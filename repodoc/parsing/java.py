"""javalang powered parser that turns Java sources into class records."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import javalang

from ..logging import get_logger
from ..models import (
    CLASS,
    ENUM,
    INTERFACE,
    ClassRecord,
    FieldRecord,
    MethodRecord,
    ParameterRecord,
)

OUTPUT_DIR_NAME = "RepoDocAIAgent"

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".idea",
    ".gradle",
    ".mvn",
    "node_modules",
    "target",
    "build",
    "out",
    OUTPUT_DIR_NAME,
}

_JAVADOC_TAG = re.compile(r"^\s*@\w+")

_CATEGORY_BY_DECLARATION = {
    "ClassDeclaration": CLASS,
    "InterfaceDeclaration": INTERFACE,
    "EnumDeclaration": ENUM,
}


class JavaSourceParser:
    """Finds ``*.java`` files and parses the primary type of each one."""

    def __init__(self, excluded_dirs: Iterable[str] | None = None) -> None:
        self.excluded_dirs = set(excluded_dirs) if excluded_dirs is not None else set(_EXCLUDED_DIRS)
        self.logger = get_logger("parsing.java")

    def find_source_files(self, root: Path) -> List[Path]:
        found: List[Path] = []
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(name for name in dirnames if name not in self.excluded_dirs)
            for filename in sorted(filenames):
                if filename.endswith(".java"):
                    found.append(Path(dirpath) / filename)
        return found

    def parse_file(self, path: Path) -> Optional[ClassRecord]:
        try:
            source = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            self.logger.debug("Skipping unreadable source %s: %s", path, exc)
            return None
        return self.parse_source(source, origin=str(path))

    def parse_source(self, source: str, *, origin: str = "<memory>") -> Optional[ClassRecord]:
        try:
            unit = javalang.parse.parse(source)
        except (javalang.parser.JavaSyntaxError, javalang.tokenizer.LexerError) as exc:
            self.logger.debug("Skipping %s: Java syntax error %s", origin, exc)
            return None
        except (TypeError, IndexError, StopIteration) as exc:
            # javalang raises bare errors on some truncated inputs.
            self.logger.debug("Skipping %s: parser failure %s", origin, exc)
            return None

        declaration = next(
            (decl for decl in unit.types or [] if type(decl).__name__ in _CATEGORY_BY_DECLARATION),
            None,
        )
        if declaration is None:
            self.logger.debug("Skipping %s: no class, interface or enum declaration", origin)
            return None

        package = unit.package.name if unit.package is not None else ""
        category = _CATEGORY_BY_DECLARATION[type(declaration).__name__]
        modifiers = set(declaration.modifiers or ())
        superclass, interfaces = _inheritance(declaration, category)

        methods = [_constructor_record(ctor) for ctor in _members(declaration, javalang.tree.ConstructorDeclaration)]
        methods.extend(
            _method_record(method, category) for method in _members(declaration, javalang.tree.MethodDeclaration)
        )
        fields: List[FieldRecord] = []
        for field_decl in _members(declaration, javalang.tree.FieldDeclaration):
            fields.extend(_field_records(field_decl, category))

        return ClassRecord(
            name=declaration.name,
            category=category,
            package=package,
            is_public="public" in modifiers,
            is_abstract="abstract" in modifiers or category == INTERFACE,
            superclass=superclass,
            interfaces=interfaces,
            methods=tuple(methods),
            fields=tuple(fields),
            annotations=_annotations(declaration.annotations),
            description=_javadoc_summary(getattr(declaration, "documentation", None)),
            source=source,
            dependencies=_imports(unit),
        )


def _members(declaration, kind) -> List:  # type: ignore[no-untyped-def]
    body = declaration.body
    if isinstance(body, javalang.tree.EnumBody):
        items = body.declarations or []
    else:
        items = body or []
    return [item for item in items if isinstance(item, kind)]


def _inheritance(declaration, category: str) -> Tuple[Optional[str], Tuple[str, ...]]:  # type: ignore[no-untyped-def]
    if category == INTERFACE:
        # Interfaces "extend" other interfaces; report them as implemented contracts.
        parents = declaration.extends or []
        return None, tuple(_type_name(parent) for parent in parents)
    superclass = None
    if category == CLASS and declaration.extends is not None:
        superclass = _type_name(declaration.extends)
    implements = getattr(declaration, "implements", None) or []
    return superclass, tuple(_type_name(item) for item in implements)


def _method_record(method, category: str) -> MethodRecord:  # type: ignore[no-untyped-def]
    modifiers = set(method.modifiers or ())
    in_interface = category == INTERFACE
    return MethodRecord(
        name=method.name,
        return_type=_type_name(method.return_type) if method.return_type is not None else "void",
        parameters=_parameters(method.parameters),
        exceptions=tuple(method.throws or ()),
        annotations=_annotations(method.annotations),
        is_public="public" in modifiers or in_interface,
        is_static="static" in modifiers,
        is_abstract="abstract" in modifiers or (in_interface and method.body is None and "default" not in modifiers),
        description=_javadoc_summary(getattr(method, "documentation", None)),
    )


def _constructor_record(ctor) -> MethodRecord:  # type: ignore[no-untyped-def]
    modifiers = set(ctor.modifiers or ())
    return MethodRecord(
        name=ctor.name,
        return_type="",
        parameters=_parameters(ctor.parameters),
        exceptions=tuple(ctor.throws or ()),
        annotations=_annotations(ctor.annotations),
        is_public="public" in modifiers,
        description=_javadoc_summary(getattr(ctor, "documentation", None)),
    )


def _field_records(field_decl, category: str) -> List[FieldRecord]:  # type: ignore[no-untyped-def]
    modifiers = set(field_decl.modifiers or ())
    in_interface = category == INTERFACE
    type_name = _type_name(field_decl.type)
    annotations = _annotations(field_decl.annotations)
    description = _javadoc_summary(getattr(field_decl, "documentation", None))
    return [
        FieldRecord(
            name=declarator.name,
            type=type_name + "[]" * len(getattr(declarator, "dimensions", None) or []),
            annotations=annotations,
            is_public="public" in modifiers or in_interface,
            is_static="static" in modifiers or in_interface,
            is_final="final" in modifiers or in_interface,
            description=description,
        )
        for declarator in field_decl.declarators
    ]


def _parameters(parameters) -> Tuple[ParameterRecord, ...]:  # type: ignore[no-untyped-def]
    records = []
    for parameter in parameters or []:
        type_name = _type_name(parameter.type)
        if getattr(parameter, "varargs", False):
            type_name += "..."
        records.append(ParameterRecord(type=type_name, name=parameter.name))
    return tuple(records)


def _type_name(type_node) -> str:  # type: ignore[no-untyped-def]
    if type_node is None:
        return "void"
    name = getattr(type_node, "name", None) or "Object"
    arguments = getattr(type_node, "arguments", None)
    if arguments:
        rendered = ", ".join(_type_argument(argument) for argument in arguments)
        name = f"{name}<{rendered}>"
    sub_type = getattr(type_node, "sub_type", None)
    if sub_type is not None:
        name = f"{name}.{_type_name(sub_type)}"
    dimensions = getattr(type_node, "dimensions", None) or []
    return name + "[]" * len(dimensions)


def _type_argument(argument) -> str:  # type: ignore[no-untyped-def]
    inner = getattr(argument, "type", None)
    pattern = getattr(argument, "pattern_type", None)
    if inner is None:
        return "?"
    rendered = _type_name(inner)
    if pattern:
        return f"? {pattern} {rendered}"
    return rendered


def _annotations(annotations) -> Dict[str, str]:  # type: ignore[no-untyped-def]
    result: Dict[str, str] = {}
    for annotation in annotations or []:
        result[f"@{annotation.name}"] = _element_text(annotation.element)
    return result


def _element_text(element) -> str:  # type: ignore[no-untyped-def]
    if element is None:
        return ""
    if isinstance(element, list):
        parts = []
        for item in element:
            if isinstance(item, javalang.tree.ElementValuePair):
                parts.append(f"{item.name}={_element_text(item.value)}")
            else:
                parts.append(_element_text(item))
        return ", ".join(parts)
    if isinstance(element, javalang.tree.ElementArrayValue):
        values = element.values or []
        return "{" + ", ".join(_element_text(value) for value in values) + "}"
    if isinstance(element, javalang.tree.Literal):
        return str(element.value)
    if isinstance(element, javalang.tree.MemberReference):
        return f"{element.qualifier}.{element.member}" if element.qualifier else element.member
    if isinstance(element, javalang.tree.Annotation):
        return f"@{element.name}"
    value = getattr(element, "value", None)
    return str(value) if value is not None else type(element).__name__


def _imports(unit) -> Tuple[str, ...]:  # type: ignore[no-untyped-def]
    seen: Dict[str, None] = {}
    for imported in unit.imports or []:
        if imported.wildcard or imported.static:
            continue
        seen.setdefault(imported.path, None)
    return tuple(seen)


def _javadoc_summary(documentation: Optional[str]) -> Optional[str]:
    if not documentation:
        return None
    text = documentation.strip()
    if text.startswith("/**"):
        text = text[3:]
    if text.endswith("*/"):
        text = text[:-2]
    lines: List[str] = []
    for raw in text.splitlines():
        line = raw.strip()
        if line.startswith("*"):
            line = line[1:].strip()
        if _JAVADOC_TAG.match(line):
            break
        if line:
            lines.append(line)
    summary = " ".join(lines).strip()
    return summary or None


__all__ = ["JavaSourceParser", "OUTPUT_DIR_NAME"]
