"""Tests for loading networks from TOML node files."""

from pathlib import Path

import pytest

from netpath.dsl.loader import (
    load_config,
    load_network_from_directory,
    load_network_from_files,
    load_node_from_content,
)
from netpath.model.network import (
    BranchNode,
    GeographicAnchorNode,
    GeographicWindowNode,
    GroupNode,
    ImageNode,
)

MINIMAL = 'type = "{type}"\nposition = {{ x = 0, y = 0 }}\n'


class TestLoadNode:
    @pytest.mark.parametrize(
        "node_type,cls",
        [
            ("branch", BranchNode),
            ("labeledGroup", GroupNode),
            ("geographicAnchor", GeographicAnchorNode),
            ("geographicWindow", GeographicWindowNode),
            ("image", ImageNode),
        ],
    )
    def test_type_selects_class(self, node_type, cls):
        node = load_node_from_content(MINIMAL.format(type=node_type), "n1")
        assert type(node) is cls
        assert node.id == "n1"

    def test_known_and_extra_fields(self, sample_network):
        branch = sample_network.find_branch("branch-4")
        assert branch.base.label == "Compression train"
        assert branch.base.parent_id == "group-1"
        assert branch.base.position.x == 100
        assert branch.base.extra == {
            "ambientTemperature": 18.0,
            "pressure": 8.0,
            "operator": "north",
        }

    def test_blocks(self, sample_network):
        compressor, pipe = sample_network.find_branch("branch-4").blocks
        assert compressor.type == "Compressor"
        assert compressor.quantity == 2
        assert compressor.extra == {"pressure": 12.5, "efficiency": 0.85}
        assert pipe.quantity is None
        assert pipe.effective_quantity == 1

    def test_outgoing(self, sample_network):
        branch = sample_network.find_branch("branch-4")
        assert [(o.target, o.weight) for o in branch.outgoing] == [("branch-5", 2)]

    def test_group_dimensions(self, sample_network):
        group = sample_network.find_group("group-1")
        assert (group.base.width, group.base.height) == (600, 400)
        assert group.base.extra == {"ambientTemperature": 15.0, "region": "north-sea"}

    def test_missing_type(self):
        with pytest.raises(ValueError, match="Missing 'type' field"):
            load_node_from_content("position = { x = 0, y = 0 }\n", "n1")

    def test_unknown_type(self):
        with pytest.raises(ValueError, match="Unknown node type: pump"):
            load_node_from_content(MINIMAL.format(type="pump"), "n1")

    def test_schema_violation(self):
        content = 'type = "branch"\nposition = { x = 0 }\n'
        with pytest.raises(ValueError, match="at 'position'"):
            load_node_from_content(content, "n1")

    def test_negative_quantity(self):
        content = MINIMAL.format(type="branch") + '[[block]]\ntype = "Pipe"\nquantity = -1\n'
        with pytest.raises(ValueError, match="at 'block/0/quantity'"):
            load_node_from_content(content, "n1")

    def test_invalid_toml(self):
        with pytest.raises(ValueError, match="invalid TOML"):
            load_node_from_content('type = "branch\n', "n1")


class TestLoadNetwork:
    def test_edges_from_outgoing(self, sample_network):
        assert [(e.id, e.source, e.target, e.weight) for e in sample_network.edges] == [
            ("branch-4_branch-5", "branch-4", "branch-5", 2)
        ]

    def test_default_ids(self, network_files):
        network, _ = load_network_from_files(network_files)
        assert (network.id, network.label) == ("untitled", "untitled")

    def test_bad_file_is_reported_not_fatal(self, network_files):
        network_files["broken.toml"] = "type = 'pump'\n"
        network, validation = load_network_from_files(network_files)
        assert not validation.is_valid()
        assert len(network.nodes) == 4
        assert validation.errors[0].location == "broken.toml"
        assert "Unknown node type: pump" in validation.errors[0].message

    def test_dangling_references_are_warnings(self):
        files = {
            "b1.toml": MINIMAL.format(type="branch")
            + 'parentId = "ghost-group"\n[[outgoing]]\ntarget = "ghost"\n'
        }
        network, validation = load_network_from_files(files)
        assert validation.is_valid()
        assert [w.location for w in validation.warnings] == [
            "b1/outgoing[0]/target",
            "b1/parentId",
        ]
        assert network.edges[0].target == "ghost"
        assert network.edges[0].weight == 1

    def test_config_file_name_is_ignored(self, network_files):
        network_files["config.toml"] = "[properties]\n"
        network, validation = load_network_from_files(network_files)
        assert validation.is_valid()
        assert network.find_node("config") is None


class TestLoadDirectory:
    def test_sorted_order_and_directory_name(self, network_dir: Path):
        network, validation = load_network_from_directory(network_dir)
        assert validation.is_valid()
        assert (network.id, network.label) == ("plant", "plant")
        assert [node.id for node in network.nodes] == [
            "anchor-1",
            "branch-4",
            "branch-5",
            "group-1",
        ]

    def test_non_toml_files_ignored(self, network_dir: Path):
        (network_dir / "notes.txt").write_text("not a node", encoding="utf-8")
        network, _ = load_network_from_directory(network_dir)
        assert len(network.nodes) == 4

    def test_missing_directory(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError, match="Directory does not exist"):
            load_network_from_directory(tmp_path / "nope")

    def test_not_a_directory(self, tmp_path: Path):
        path = tmp_path / "file.toml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(NotADirectoryError):
            load_network_from_directory(path)

    def test_load_config(self, network_dir: Path, sample_config):
        assert load_config(network_dir) == sample_config

    def test_load_config_absent(self, tmp_path: Path):
        assert load_config(tmp_path).properties == {}
