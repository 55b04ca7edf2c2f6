import pytest

from rules_audit.core.errors import RegistryLoadError
from rules_audit.rules.loaders import DEFAULT_DEFINITIONS_PATH, YamlRuleDefinitionLoader, load_rule_definitions
from rules_audit.rules.models import RuleCategory, RuleSeverity

VALID_YAML = """
rules:
  - rule_id: first_rule
    human_name: First rule
    check_description: Length must be greater than 0
    category: geometry
    field: length_in
    default_severity: error
    source_function: validateInputs
    source_line: 12
  - rule_id: second_rule
    human_name: Second rule
    check_description: "Premium feature: adds cost"
    category: premium
    field: premium
    default_severity: info
    source_function: applyApplicationRules
    source_line: 40
    message_match: "Premium feature:"
"""


class TestYamlRuleDefinitionLoader:
    def test_loads_definitions_in_file_order(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text(VALID_YAML)

        definitions = YamlRuleDefinitionLoader(path).load()

        assert [d.rule_id for d in definitions] == ["first_rule", "second_rule"]
        assert definitions[1].category == RuleCategory.PREMIUM
        assert definitions[1].default_severity == RuleSeverity.INFO
        assert definitions[1].message_match == "Premium feature:"
        assert definitions[0].message_match is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(RegistryLoadError, match="not readable"):
            YamlRuleDefinitionLoader(tmp_path / "missing.yaml").load()

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("rules: [unclosed")

        with pytest.raises(RegistryLoadError, match="not valid YAML"):
            YamlRuleDefinitionLoader(path).load()

    def test_missing_rules_list(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("definitions: []\n")

        with pytest.raises(RegistryLoadError, match="no 'rules' list"):
            YamlRuleDefinitionLoader(path).load()

    def test_entry_not_a_mapping(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("rules:\n  - just a string\n")

        with pytest.raises(RegistryLoadError) as exc_info:
            YamlRuleDefinitionLoader(path).load()

        assert exc_info.value.details == {"index": 0}

    def test_invalid_entry_reports_rule_id(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text(VALID_YAML.replace("category: geometry", "category: not_a_category"))

        with pytest.raises(RegistryLoadError) as exc_info:
            YamlRuleDefinitionLoader(path).load()

        assert exc_info.value.details["rule_id"] == "first_rule"
        assert exc_info.value.details["index"] == 0
        assert exc_info.value.details["errors"]


class TestPackagedDataset:
    def test_default_path_is_packaged(self):
        assert DEFAULT_DEFINITIONS_PATH.exists()
        assert YamlRuleDefinitionLoader().path == DEFAULT_DEFINITIONS_PATH

    def test_packaged_dataset_loads(self, packaged_definitions):
        assert len(packaged_definitions) > 50
        assert len({d.rule_id for d in packaged_definitions}) == len(packaged_definitions)

    def test_packaged_dataset_has_every_severity(self, packaged_definitions):
        assert {d.default_severity for d in packaged_definitions} == set(RuleSeverity)

    def test_load_rule_definitions_accepts_path(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text(VALID_YAML)

        assert len(load_rule_definitions(path)) == 2
        assert len(load_rule_definitions(str(path))) == 2
