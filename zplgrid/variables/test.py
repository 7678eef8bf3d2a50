"""Unit tests for placeholder extraction."""

import pytest

from zplgrid.schema import ImageElement, LineElement, TemplateDoc, TextElement
from zplgrid.validation import parse_template_json

from .lib import (
    TEMPLATE_MACROS,
    element_placeholders,
    extract_placeholders,
    extract_template_variables,
)


class TestExtractPlaceholders:
    """Tests for scanning a single string."""

    @pytest.mark.unit
    def test_simple(self):
        assert extract_placeholders("Hi {name}") == ["name"]

    @pytest.mark.unit
    def test_doubled_braces_are_literal(self):
        assert extract_placeholders("{{name}}") == []
        assert extract_placeholders("{{literal}} {lot}") == ["lot"]

    @pytest.mark.unit
    def test_invalid_identifiers_ignored(self):
        assert extract_placeholders("{1abc} {a-b} { x } {}") == []

    @pytest.mark.unit
    def test_underscore_and_digits(self):
        assert extract_placeholders("{_x1}{y_2}") == ["_x1", "y_2"]

    @pytest.mark.unit
    def test_elements_without_templated_field(self):
        assert element_placeholders(LineElement(orientation="h", thickness_mm=0.3)) == []
        image = ImageElement(source={"kind": "url", "data": "https://x/{name}.png"})
        assert element_placeholders(image) == []
        assert element_placeholders(TextElement(text="{a}{a}")) == ["a", "a"]


class TestExtractTemplateVariables:
    """Tests for whole-document extraction."""

    @pytest.mark.unit
    def test_single_leaf_document(self):
        result = parse_template_json(
            '{"schema_version":1,"layout":{"kind":"leaf","elements":[{"type":"text","text":"Hi {name}"}]}}'
        )
        variables = extract_template_variables(result.doc)
        assert variables.variables == ["name"]
        assert variables.macros == []

    @pytest.mark.unit
    def test_complex_document(self, complex_template):
        doc = TemplateDoc.model_validate(complex_template)
        variables = extract_template_variables(doc)
        assert variables.variables == ["lot", "product", "sku"]
        assert variables.macros == ["_counter_daily", "_date_yyyy_mm_dd"]

    @pytest.mark.unit
    def test_deduplicated_and_sorted(self, sample_template):
        sample_template["layout"]["children"][1]["elements"][0]["data"] = "{sku}{name}{aaa}"
        variables = extract_template_variables(TemplateDoc.model_validate(sample_template))
        assert variables.variables == ["aaa", "name", "sku"]

    @pytest.mark.unit
    def test_macro_set(self):
        assert len(TEMPLATE_MACROS) == 16
        assert all(name.startswith("_") for name in TEMPLATE_MACROS)
