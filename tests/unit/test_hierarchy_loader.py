"""Tests for loading hierarchy and measurement documents."""

import json

import pytest

from healthscore.core.exceptions import HierarchyLoadError, UnsupportedSchemaVersionError
from healthscore.core.hierarchy_loader import (
    default_hierarchy,
    hierarchy_from_dict,
    load_hierarchy,
    load_measurements,
    resolve_hierarchy,
)
from healthscore.domain.models import LATEST_SCHEMA_VERSION, StrategyId

YAML_WITH_ANCHOR = """
schemaVersion: "1.0.0"
root:
  typeId: ROOT
  strategy: WEIGHTED_AVERAGE_STRATEGY
  edges:
    - weight: 0.5
      target: &shared
        typeId: SHARED
        strategy: MAXIMUM_STRATEGY
        edges:
          - weight: 1.0
            target:
              typeId: A
              strategy: RAW_VALUE_STRATEGY
              thresholds:
                - name: warning
                  value: 40
    - weight: 0.5
      target: *shared
"""


class TestDefaultHierarchy:
    def test_root_and_weights(self):
        hierarchy = default_hierarchy()

        assert hierarchy.schema_version == LATEST_SCHEMA_VERSION
        assert hierarchy.root.type_id == "ROOT"
        assert [(e.target.type_id, e.weight) for e in hierarchy.root.edges] == [
            ("PROCESS_TRANSPARENCY", 0.1),
            ("PROCESS_COMPLIANCE", 0.1),
            ("SECURITY", 0.4),
            ("INTERNAL_QUALITY", 0.15),
            ("EXTERNAL_QUALITY", 0.25),
        ]

    def test_shared_subtrees_appear_on_every_path(self):
        type_ids = [n.type_id for n in default_hierarchy().root.walk()]

        assert type_ids.count("DOCUMENTATION") == 3
        assert type_ids.count("SIGNED_COMMITS_RATIO") == 2
        assert type_ids.count("CHECKED_IN_BINARIES") == 2

    def test_security_strategies(self):
        security = next(
            e.target for e in default_hierarchy().root.edges if e.target.type_id == "SECURITY"
        )

        strategies = {e.target.type_id: e.target.strategy for e in security.edges}
        assert strategies["MAXIMAL_VULNERABILITY"] == StrategyId.MINIMUM_STRATEGY
        assert strategies["MAXIMAL_CONTAINER_VULNERABILITY"] == StrategyId.MAXIMUM_STRATEGY

    def test_cached(self):
        assert default_hierarchy() is default_hierarchy()
        assert resolve_hierarchy(None) is default_hierarchy()

    def test_custom_path_cached(self, tmp_path):
        path = tmp_path / "hierarchy.yaml"
        path.write_text(YAML_WITH_ANCHOR)

        first = resolve_hierarchy(path)
        path.write_text("root: [unclosed")

        assert resolve_hierarchy(path) is first
        assert resolve_hierarchy(str(path)) is first


class TestLoadHierarchy:
    def test_yaml_with_anchor(self, tmp_path):
        path = tmp_path / "hierarchy.yaml"
        path.write_text(YAML_WITH_ANCHOR)

        hierarchy = load_hierarchy(path)

        assert hierarchy.schema_version == "1.0.0"
        assert [n.type_id for n in hierarchy.root.walk()] == ["ROOT", "SHARED", "A", "SHARED", "A"]
        leaf = hierarchy.root.edges[0].target.edges[0].target
        assert leaf.thresholds[0].value == 40

    def test_json_snake_case(self, tmp_path, simple_hierarchy):
        path = tmp_path / "hierarchy.json"
        path.write_text(json.dumps(simple_hierarchy.model_dump(mode="json", by_alias=False)))

        assert load_hierarchy(path) == simple_hierarchy

    def test_missing_version_defaults_to_latest(self):
        hierarchy = hierarchy_from_dict(
            {"root": {"typeId": "A", "strategy": "RAW_VALUE_STRATEGY"}}
        )

        assert hierarchy.schema_version == LATEST_SCHEMA_VERSION

    def test_unsupported_version(self):
        with pytest.raises(UnsupportedSchemaVersionError):
            hierarchy_from_dict(
                {
                    "schemaVersion": "9.9.9",
                    "root": {"typeId": "A", "strategy": "RAW_VALUE_STRATEGY"},
                }
            )

    def test_unknown_strategy_is_load_error(self):
        with pytest.raises(HierarchyLoadError, match="Invalid hierarchy document"):
            hierarchy_from_dict({"root": {"typeId": "A", "strategy": "MEDIAN_STRATEGY"}})

    def test_infinite_yaml_weight_is_load_error(self, tmp_path):
        path = tmp_path / "hierarchy.yaml"
        path.write_text(YAML_WITH_ANCHOR.replace("- weight: 0.5", "- weight: .inf", 1))

        with pytest.raises(HierarchyLoadError, match="Invalid hierarchy document"):
            load_hierarchy(path)

    def test_infinite_json_weight_is_load_error(self, tmp_path):
        path = tmp_path / "hierarchy.json"
        path.write_text(
            '{"root": {"typeId": "ROOT", "strategy": "MAXIMUM_STRATEGY", "edges": ['
            '{"weight": Infinity, "target": {"typeId": "A", "strategy": "RAW_VALUE_STRATEGY"}}'
            "]}}"
        )

        with pytest.raises(HierarchyLoadError, match="Invalid hierarchy document"):
            load_hierarchy(path)

    def test_not_a_mapping(self):
        with pytest.raises(HierarchyLoadError):
            hierarchy_from_dict(["root"])

    def test_missing_file(self, tmp_path):
        with pytest.raises(HierarchyLoadError, match="File not found"):
            load_hierarchy(tmp_path / "nope.yaml")

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("root: [unclosed")

        with pytest.raises(HierarchyLoadError, match="Could not parse"):
            load_hierarchy(path)


class TestLoadMeasurements:
    def test_json_list(self, tmp_path):
        path = tmp_path / "measurements.json"
        path.write_text(
            json.dumps(
                [
                    {"typeId": "SECRETS", "score": 100, "id": "m1", "originId": "gitleaks"},
                    {"type_id": "SAST_USAGE", "score": 0},
                ]
            )
        )

        measurements = load_measurements(path)

        assert [m.type_id for m in measurements] == ["SECRETS", "SAST_USAGE"]
        assert measurements[0].origin_id == "gitleaks"
        assert measurements[1].id is None

    def test_not_a_list(self, tmp_path):
        path = tmp_path / "measurements.json"
        path.write_text(json.dumps({"typeId": "SECRETS", "score": 100}))

        with pytest.raises(HierarchyLoadError, match="must be a list"):
            load_measurements(path)

    def test_invalid_entry(self, tmp_path):
        path = tmp_path / "measurements.json"
        path.write_text(json.dumps([{"typeId": "SECRETS", "score": "lots"}]))

        with pytest.raises(HierarchyLoadError):
            load_measurements(path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "measurements.json"
        path.write_text("[{")

        with pytest.raises(HierarchyLoadError):
            load_measurements(path)
