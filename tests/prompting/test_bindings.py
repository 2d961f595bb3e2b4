"""Tests for document bindings built from class records."""

from __future__ import annotations

from repodoc.models import ClassRecord, FieldRecord, MethodRecord, ParameterRecord
from repodoc.prompting.bindings import (
    class_bindings,
    describe_inheritance,
    faq_bindings,
    getting_started_bindings,
    overview_bindings,
)
from repodoc.prompting.constants import PROJECT_OVERVIEW
from repodoc.prompting.renderer import PromptRenderer
from tests._fixtures.records import method, record, sample_records


def test_overview_bindings_for_three_records() -> None:
    bindings = overview_bindings(sample_records(), "demo")

    assert bindings["repository_name"] == "demo"
    assert bindings["total_classes"] == 3
    assert bindings["class_count"] == 1
    assert bindings["interface_count"] == 1
    assert bindings["enum_count"] == 1
    assert bindings["main_classes"] == "com.example.App"
    assert bindings["package_structure"] == "- com.example (1 classes)\n- com.example.data (2 classes)"
    assert bindings["class_summary"].splitlines() == [
        "- com.example.App (CLASS): Application entry point.",
        "- com.example.data.Repository (INTERFACE): No description available",
        "- com.example.data.Color (ENUM): No description available",
    ]


def test_overview_renders_without_leftover_placeholders() -> None:
    prompt = PromptRenderer().render(PROJECT_OVERVIEW, overview_bindings(sample_records(), "demo"))

    assert "com.example.App" in prompt
    assert "3 (1 classes, 1 interfaces, 1 enums)" in prompt
    assert "{{" not in prompt


def test_overview_falls_back_to_public_classes_without_main() -> None:
    records = [record("Api"), record("Helper", is_public=False)]

    assert overview_bindings(records, "lib")["main_classes"] == "com.example.Api"
    assert overview_bindings([], "empty")["main_classes"] == "No main classes identified"


def test_getting_started_bindings() -> None:
    bindings = getting_started_bindings(sample_records(), "demo")

    assert bindings["main_classes"] == "com.example.App"
    assert bindings["entry_point_analysis"] == "Entry points identified:\ncom.example.App"
    assert bindings["dependencies"] == "com.google.gson.Gson"
    assert bindings["public_classes"].splitlines() == [
        "- App (class): Application entry point.",
        "- Repository (interface): No description available",
    ]
    assert bindings["class_analysis"] == bindings["public_classes"]


def test_getting_started_marks_library_projects() -> None:
    bindings = getting_started_bindings([record("Api")], "lib")

    assert bindings["main_classes"] == "No main methods found"
    assert bindings["entry_point_analysis"] == "No main methods found. This appears to be a library project."
    assert bindings["dependencies"] == "No external dependencies identified"


def test_faq_bindings_defaults() -> None:
    bindings = faq_bindings(sample_records(), "demo")

    assert bindings["technology_stack"] == "Core Java"
    assert bindings["common_patterns"] == "Standard Java operations"
    assert bindings["potential_issues"] == "Standard Java runtime issues"
    assert bindings["complex_classes"] == "No particularly complex classes identified"
    assert bindings["exception_types"] == "No exceptions declared"
    assert bindings["usage_patterns"].splitlines() == [
        "- App: Primary public API class",
        "- Repository: Primary public API class",
    ]


def test_faq_bindings_report_patterns_and_exceptions() -> None:
    records = [
        record(
            "Client",
            methods=[
                method("connect", exceptions=["IOException"]),
                method("loadConfig", "Properties"),
            ],
            annotations={"@Service": ""},
        )
    ]

    bindings = faq_bindings(records, "demo")

    assert bindings["common_patterns"].splitlines() == [
        "- Network operations (1 methods)",
        "- Configuration operations (1 methods)",
    ]
    assert bindings["potential_issues"].splitlines() == [
        "- Network connectivity and timeout issues",
        "- Configuration and properties setup issues",
    ]
    assert bindings["exception_types"] == "IOException"
    assert bindings["exception_methods"] == "- Client.connect() throws: IOException"


def test_class_bindings_describe_members() -> None:
    loader = ClassRecord(
        name="Loader",
        category="CLASS",
        package="com.example.io",
        is_public=True,
        superclass="Base",
        interfaces=("Closeable",),
        methods=(
            MethodRecord(name="Loader", parameters=(ParameterRecord("String", "name"),), is_public=True),
            MethodRecord(
                name="load",
                return_type="String",
                parameters=(ParameterRecord("Path", "path"),),
                exceptions=("IOException",),
                annotations={"@Override": ""},
                is_public=True,
                description="Reads the file.",
            ),
        ),
        fields=(FieldRecord(name="cache", type="Map<String, String>", is_static=True, is_final=True),),
        annotations={"@Component": ""},
    )

    bindings = class_bindings(loader)

    assert bindings["class_name"] == "Loader"
    assert bindings["fully_qualified_name"] == "com.example.io.Loader"
    assert bindings["class_type"] == "CLASS"
    assert bindings["methods_count"] == 2
    assert bindings["methods_details"].splitlines() == [
        "- public Loader(String name)",
        "- public String load(Path path) throws IOException [Annotations: @Override]: Reads the file.",
    ]
    assert bindings["constructors_details"] == "- public Loader(String name)"
    assert bindings["fields_details"] == "- private/protected static final Map<String, String> cache"
    assert bindings["class_annotations"] == "@Component"
    assert bindings["inheritance"] == "Extends: Base\nImplements: Closeable"
    assert bindings["usage_patterns"] == "- Spring service/component"
    assert bindings["source_code"] == "Source code not available"


def test_class_bindings_defaults_for_bare_record() -> None:
    bindings = class_bindings(record("Empty"))

    assert bindings["methods_details"] == "No methods defined"
    assert bindings["fields_details"] == "No fields defined"
    assert bindings["constructors_details"] == "Default constructor"
    assert bindings["class_annotations"] == "None"
    assert bindings["implemented_interfaces"] == "None"
    assert bindings["usage_patterns"] == "- Standard Java class"


def test_object_superclass_is_not_reported() -> None:
    plain = ClassRecord(name="Plain", category="CLASS", superclass="Object")

    assert describe_inheritance(plain) == "No explicit inheritance"
