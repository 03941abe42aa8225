# tests/unit/core/test_document_loading.py
"""Tests for reading flow and catalog documents."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from flowguard.contracts import DuplicateSchemaError, FlowLoadError
from flowguard.core.loading import load_catalog, load_flow

CATALOG_YAML = """\
block_types:
  - id: start
    sentinel: start
    outputs: [{id: o1, kinds: [flow_out]}]
  - id: end
    sentinel: end
    inputs: [{id: i1, kinds: [flow_in]}]
  - id: delay
    inputs: [{id: in, kinds: [flow_in]}]
    outputs: [{id: out, kinds: [flow_out]}]
    parameters: [{id: duration, type: duration, default: 0}]
    rules:
      parameters:
        conditional_required:
          - condition: "mode === 'timed'"
            required_params: [duration]
"""

FLOW_YAML = """\
name: demo
blocks:
  - {id: s, type: start}
  - {id: d, type: delay, parameters: {mode: timed, duration: 5}}
  - {id: e, type: end}
connections:
  - {id: c1, source: {block: s, port: o1}, target: {block: d, port: in}}
  - {id: c2, source: {block: d, port: out}, target: {block: e, port: i1}}
"""


class TestLoadCatalog:
    """Tests for load_catalog."""

    def test_loads_schemas_into_registry(self, tmp_path: Path) -> None:
        path = tmp_path / "catalog.yaml"
        path.write_text(CATALOG_YAML)

        registry = load_catalog(path)

        assert registry.block_types() == ["delay", "end", "start"]
        delay = registry.get_block_schema("delay")
        assert delay is not None
        assert delay.rules is not None
        assert delay.parameter("duration") is not None

    def test_bad_condition_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "catalog.yaml"
        path.write_text(CATALOG_YAML.replace("mode === 'timed'", "mode is timed"))

        with pytest.raises(ValidationError):
            load_catalog(path)

    def test_conflicting_ids_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "catalog.yaml"
        path.write_text(CATALOG_YAML + "  - {id: start, deprecated: true}\n")

        with pytest.raises(DuplicateSchemaError):
            load_catalog(path)

    def test_empty_document_is_empty_catalog(self, tmp_path: Path) -> None:
        path = tmp_path / "catalog.yaml"
        path.write_text("")

        assert len(load_catalog(path)) == 0


class TestLoadFlow:
    """Tests for load_flow."""

    def test_yaml_flow_derives_port_maps(self, tmp_path: Path) -> None:
        path = tmp_path / "flow.yaml"
        path.write_text(FLOW_YAML)

        flow = load_flow(path)

        assert flow.name == "demo"
        assert flow.block_ids == ("s", "d", "e")
        d = flow.blocks[1]
        assert d.parameters == {"mode": "timed", "duration": 5}
        assert d.input_connections("in") == ("c1",)
        assert d.output_connections("out") == ("c2",)

    def test_json_flow_with_explicit_port_maps(self, tmp_path: Path) -> None:
        path = tmp_path / "flow.json"
        path.write_text(
            json.dumps(
                {
                    "blocks": [
                        {"id": "s", "type": "start", "outputs": {"o1": ["c1", "stale"]}},
                        {"id": "e", "type": "end"},
                    ],
                    "connections": [
                        {"id": "c1", "source": {"block": "s", "port": "o1"}, "target": {"block": "e", "port": "i1"}},
                    ],
                }
            )
        )

        flow = load_flow(path)

        assert flow.blocks[0].output_connections("o1") == ("c1", "stale")
        assert flow.blocks[1].input_connections("i1") == ()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_flow(tmp_path / "absent.yaml")

    def test_unparsable_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "flow.yaml"
        path.write_text("blocks: [unclosed\n")

        with pytest.raises(FlowLoadError, match="Cannot parse"):
            load_flow(path)

    def test_top_level_must_be_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "flow.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(FlowLoadError, match="mapping"):
            load_flow(path)

    def test_shape_errors_raise_validation_error(self, tmp_path: Path) -> None:
        path = tmp_path / "flow.yaml"
        path.write_text("blocks:\n  - {id: s}\n")

        with pytest.raises(ValidationError):
            load_flow(path)
