"""Tests for the framework catalog."""

import pytest

from promptstudio.frameworks import (
    DEFAULT_EVALUATION_CRITERIA,
    FRAMEWORK_IDS,
    get_framework_by_id,
    get_framework_name,
    get_template,
    get_templates,
    list_frameworks,
)
from promptstudio.prompt_generator import generate_prompt
from promptstudio.wizard.questions import get_question

REQUIRED_FIELDS = {
    "tot": {"role", "objective", "approaches", "criteria"},
    "self-consistency": {"role", "goal", "versions"},
    "cot": {"role", "problem"},
    "role": {"role", "tone", "task"},
    "reflection": {"role", "task", "criteria"},
}


class TestCatalog:
    def test_exactly_five_frameworks(self):
        ids = [f.id for f in list_frameworks()]
        assert sorted(ids) == sorted(FRAMEWORK_IDS)
        assert len(ids) == 5

    def test_list_is_stable(self):
        assert list_frameworks() is list_frameworks()

    @pytest.mark.parametrize("framework_id", FRAMEWORK_IDS)
    def test_lookup_by_id(self, framework_id):
        framework = get_framework_by_id(framework_id)
        assert framework is not None
        assert framework.id == framework_id
        assert framework.name and framework.description

    def test_unknown_id_returns_none(self):
        assert get_framework_by_id("unknown") is None
        assert get_framework_by_id("") is None

    @pytest.mark.parametrize("framework_id,required", REQUIRED_FIELDS.items())
    def test_required_fields(self, framework_id, required):
        framework = get_framework_by_id(framework_id)
        assert set(framework.required_fields) == required

    def test_optional_fields(self):
        assert get_framework_by_id("cot").get_field("context").required is False
        assert get_framework_by_id("role").get_field("examples").required is False

    def test_tot_criteria_is_multi_select_with_defaults(self):
        criteria = get_framework_by_id("tot").get_field("criteria")
        assert criteria.type == "multi-select-criteria"
        assert criteria.options == DEFAULT_EVALUATION_CRITERIA
        assert len(DEFAULT_EVALUATION_CRITERIA) == 8

    def test_field_types_are_known(self):
        for framework in list_frameworks():
            for field in framework.fields:
                assert field.type in ("text", "textarea", "number", "multi-select-criteria")

    def test_catalog_is_immutable(self):
        framework = get_framework_by_id("tot")
        with pytest.raises(Exception):
            framework.name = "changed"

    def test_template_fields_are_read_only(self):
        template = get_template("tot", "tot-career-decision")
        with pytest.raises(TypeError):
            template.fields["role"] = "changed"
        with pytest.raises(AttributeError):
            template.fields["criteria"].append("Speed")
        assert isinstance(template.fields["criteria"], tuple)

    def test_option_weights_are_read_only(self):
        option = get_question("q1").get_option("explore-ideas")
        with pytest.raises(TypeError):
            option.weights["tot"] = 99
        assert option.weights["tot"] == 5

    def test_template_dump_is_plain_json(self):
        dumped = get_template("tot", "tot-career-decision").model_dump()
        assert isinstance(dumped["fields"], dict)
        assert isinstance(dumped["fields"]["criteria"], list)

    def test_framework_name(self):
        assert get_framework_name("cot") == "Chain-of-Thought (CoT)"
        assert get_framework_name("nope") == "nope"


class TestTemplates:
    @pytest.mark.parametrize("framework_id", FRAMEWORK_IDS)
    def test_three_templates_each(self, framework_id):
        assert len(get_templates(framework_id)) == 3

    @pytest.mark.parametrize("framework_id", FRAMEWORK_IDS)
    def test_templates_generate_valid_prompts(self, framework_id):
        for template in get_templates(framework_id):
            text = generate_prompt(framework_id, template.fields)
            assert template.fields["role"] in text

    def test_get_template(self):
        template = get_template("tot", "tot-career-decision")
        assert template is not None
        assert template.category == "personal"
        assert get_template("tot", "missing") is None
        assert get_templates("unknown") == ()
