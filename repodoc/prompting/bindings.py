"""Template variable bindings for each generated document.

Each builder is a pure function from class records to the flat mapping a
prompt template is rendered with. Empty summaries are replaced by a short
sentence so the model never sees a blank section.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Sequence

from ..analyzers import (
    ONBOARDING_DEPENDENCY_LIMIT,
    PATTERN_RULES,
    TROUBLESHOOTING_DEPENDENCY_LIMIT,
    classify_usage,
    collect_dependencies,
    collect_exceptions,
    count_categories,
    count_patterns,
    detect_entry_points,
    exception_methods,
    find_main_classes,
    infer_technology_stack,
    package_histogram,
    rank_complex_classes,
    sample_api_usage,
    sample_public_api,
    summarize_classes,
)
from ..models import CLASS, ENUM, INTERFACE, ClassRecord, FieldRecord, MethodRecord

NO_MAIN_METHODS = "No main methods found"


def _lines(items: Iterable[str], empty: str) -> str:
    text = "\n".join(items)
    return text if text else empty


def _package_structure(records: Sequence[ClassRecord]) -> str:
    return _lines((f"- {line}" for line in package_histogram(records)), "No packages identified")


def _counts(records: Sequence[ClassRecord]) -> Dict[str, object]:
    counts = count_categories(records)
    return {
        "total_classes": len(records),
        "class_count": counts[CLASS],
        "interface_count": counts[INTERFACE],
        "enum_count": counts[ENUM],
    }


def overview_bindings(records: Sequence[ClassRecord], repository_name: str) -> Dict[str, object]:
    entry_points = detect_entry_points(records)
    bindings: Dict[str, object] = {"repository_name": repository_name}
    bindings.update(_counts(records))
    bindings.update(
        {
            "class_summary": _lines(summarize_classes(records), "No classes found"),
            "package_structure": _package_structure(records),
            "main_classes": _lines(entry_points.names, "No main classes identified"),
        }
    )
    return bindings


def getting_started_bindings(records: Sequence[ClassRecord], repository_name: str) -> Dict[str, object]:
    main_classes = find_main_classes(records)
    entry_text = _lines(main_classes, NO_MAIN_METHODS)
    if main_classes:
        analysis = "Entry points identified:\n" + entry_text
    else:
        analysis = f"{NO_MAIN_METHODS}. This appears to be a library project."

    public_classes = [
        f"- {record.name} ({record.category.lower()}): {record.description or 'No description available'}"
        for record in sample_public_api(records)
    ]
    dependencies = collect_dependencies(records, limit=ONBOARDING_DEPENDENCY_LIMIT)

    bindings: Dict[str, object] = {"repository_name": repository_name}
    bindings.update(_counts(records))
    bindings.update(
        {
            "main_classes": entry_text,
            "public_classes": _lines(public_classes, "No public classes identified"),
            "dependencies": _lines(dependencies, "No external dependencies identified"),
            "package_structure": _package_structure(records),
            "class_analysis": _lines(public_classes, "No detailed class analysis available"),
            "entry_point_analysis": analysis,
        }
    )
    return bindings


def faq_bindings(records: Sequence[ClassRecord], repository_name: str) -> Dict[str, object]:
    pattern_counts = count_patterns(records)
    common_patterns: List[str] = []
    potential_issues: List[str] = []
    for rule in PATTERN_RULES:
        count = pattern_counts.get(rule.category, 0)
        if count:
            common_patterns.append(f"- {rule.label} ({count} methods)")
            potential_issues.append(f"- {rule.issue}")

    usage = [f"- {record.name}: Primary public API class" for record in sample_api_usage(records)]
    dependencies = collect_dependencies(records, limit=TROUBLESHOOTING_DEPENDENCY_LIMIT)

    return {
        "repository_name": repository_name,
        "total_classes": len(records),
        "technology_stack": infer_technology_stack(records),
        "common_patterns": _lines(common_patterns, "Standard Java operations"),
        "complex_classes": _lines(rank_complex_classes(records), "No particularly complex classes identified"),
        "dependencies": _lines(dependencies, "No external dependencies identified"),
        "potential_issues": _lines(potential_issues, "Standard Java runtime issues"),
        "usage_patterns": _lines(usage, "Standard library usage patterns"),
        "exception_types": _lines(collect_exceptions(records), "No exceptions declared"),
        "exception_methods": _lines(exception_methods(records), "No methods with declared exceptions"),
    }


def _visibility(is_public: bool) -> str:
    return "public" if is_public else "private/protected"


def _annotation_suffix(annotations: Mapping[str, str]) -> str:
    names = list(annotations)
    return f" [Annotations: {', '.join(names)}]" if names else ""


def _parameter_list(method: MethodRecord) -> str:
    return ", ".join(f"{parameter.type} {parameter.name}" for parameter in method.parameters)


def describe_method(method: MethodRecord) -> str:
    modifiers = ""
    if method.is_static:
        modifiers += "static "
    if method.is_abstract:
        modifiers += "abstract "
    return_type = f"{method.return_type} " if method.return_type else ""
    throws = f" throws {', '.join(method.exceptions)}" if method.exceptions else ""
    description = f": {method.description}" if method.description else ""
    return (
        f"- {_visibility(method.is_public)} {modifiers}{return_type}{method.name}({_parameter_list(method)})"
        f"{throws}{_annotation_suffix(method.annotations)}{description}"
    )


def describe_field(field: FieldRecord) -> str:
    modifiers = ""
    if field.is_static:
        modifiers += "static "
    if field.is_final:
        modifiers += "final "
    description = f": {field.description}" if field.description else ""
    return (
        f"- {_visibility(field.is_public)} {modifiers}{field.type or 'unknown'} {field.name}"
        f"{_annotation_suffix(field.annotations)}{description}"
    )


def describe_inheritance(record: ClassRecord) -> str:
    parts: List[str] = []
    if record.superclass and record.superclass != "Object":
        parts.append(f"Extends: {record.superclass}")
    if record.interfaces:
        parts.append(f"Implements: {', '.join(record.interfaces)}")
    return "\n".join(parts) if parts else "No explicit inheritance"


def class_bindings(record: ClassRecord) -> Dict[str, object]:
    constructors = [
        f"- {_visibility(method.is_public)} {method.name}({_parameter_list(method)})"
        + (f": {method.description}" if method.description else "")
        for method in record.constructors
    ]
    return {
        "class_name": record.name,
        "fully_qualified_name": record.fully_qualified_name,
        "package_name": record.package,
        "class_type": record.category,
        "is_public": record.is_public,
        "is_abstract": record.is_abstract,
        "implemented_interfaces": ", ".join(record.interfaces) if record.interfaces else "None",
        "extended_classes": record.superclass or "None",
        "source_code": record.source or "Source code not available",
        "class_description": record.description or "No description available",
        "methods_count": len(record.methods),
        "methods_details": _lines((describe_method(method) for method in record.methods), "No methods defined"),
        "fields_count": len(record.fields),
        "fields_details": _lines((describe_field(field) for field in record.fields), "No fields defined"),
        "constructors_details": _lines(constructors, "Default constructor"),
        "class_annotations": ", ".join(record.annotations) if record.annotations else "None",
        "inheritance": describe_inheritance(record),
        "usage_patterns": "\n".join(f"- {label}" for label in classify_usage(record)),
    }


__all__ = [
    "class_bindings",
    "describe_field",
    "describe_inheritance",
    "describe_method",
    "faq_bindings",
    "getting_started_bindings",
    "overview_bindings",
]
