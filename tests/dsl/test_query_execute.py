"""Tests for netpath.dsl.query.execute.

Covers node/property/index/range/filter evaluation, network-level
collections, scope fallback on block properties, and explicit ``?scope=``
resolution against the shared sample network (see ``tests/conftest.py``).
"""

from datetime import date

import pytest

from netpath.dsl.query import (
    EmptyPathError,
    IndexOutOfRangeError,
    InvalidTypeError,
    NodeNotFoundError,
    PropertyNotFoundError,
    QueryExecutor,
    QueryParseError,
    execute,
    parse_query_path,
    run_query,
)
from netpath.model.network import Block, BranchNode, Network, NodeBase, Position

COMPRESSOR = {
    "type": "Compressor",
    "quantity": 2,
    "pressure": 12.5,
    "efficiency": 0.85,
}
PIPE = {"type": "Pipe", "quantity": 1, "length": 400, "insulated": True}

# ──────────────────────────────────────────────────────────────────────────────
# Fixtures
# ──────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def query(sample_network, resolver):
    """Run a query string against the sample network with scope resolution."""

    def _run(path: str):
        return run_query(path, sample_network, resolver)

    return _run


@pytest.fixture
def unit_network() -> Network:
    """Single branch whose block carries normalized values and originals."""
    branch = BranchNode(
        base=NodeBase(id="b1", type="branch", position=Position(0, 0)),
        blocks=[
            Block(
                type="Pipe",
                extra={
                    "length": 400.0,
                    "_length_original": "0.4 km",
                    "installed": date(2024, 1, 31),
                },
            )
        ],
    )
    return Network(id="units", label="units", nodes=[branch])


# ──────────────────────────────────────────────────────────────────────────────
# Nodes and properties
# ──────────────────────────────────────────────────────────────────────────────


class TestNodesAndProperties:
    def test_node_value(self, query):
        assert query("branch-4") == {
            "id": "branch-4",
            "type": "branch",
            "label": "Compression train",
            "position": {"x": 100, "y": 200},
            "blocks": [COMPRESSOR, PIPE],
            "outgoing": [{"target": "branch-5", "weight": 2}],
            "parentId": "group-1",
        }

    def test_non_branch_node(self, query):
        assert query("anchor-1") == {
            "id": "anchor-1",
            "type": "geographicAnchor",
            "position": {"x": -10.5, "y": 42.0},
        }

    def test_branch_without_outgoing_omits_key(self, query):
        assert "outgoing" not in query("branch-5")

    def test_block_quantity_defaults_to_one(self, query):
        assert query("branch-5/blocks/0/quantity") == 1

    def test_property(self, query):
        assert query("branch-4/label") == "Compression train"

    def test_nested_property(self, query):
        assert query("branch-4/position/x") == 100

    def test_data_segment_is_transparent(self, query):
        assert query("branch-4/data/label") == "Compression train"
        assert query("branch-4/data/blocks/0/type") == "Compressor"

    def test_unknown_node(self, query):
        with pytest.raises(NodeNotFoundError, match="Node 'missing' not found"):
            query("missing")

    def test_unknown_property(self, query):
        with pytest.raises(PropertyNotFoundError, match="Property 'nope' not found"):
            query("branch-4/nope")

    def test_property_on_non_object(self, query):
        with pytest.raises(InvalidTypeError):
            query("branch-4/label/x")


# ──────────────────────────────────────────────────────────────────────────────
# Indexing and ranges
# ──────────────────────────────────────────────────────────────────────────────


class TestIndexAndRange:
    def test_index(self, query):
        assert query("branch-4/blocks/0") == COMPRESSOR
        assert query("branch-4/blocks/1/type") == "Pipe"

    def test_index_out_of_range(self, query):
        with pytest.raises(IndexOutOfRangeError) as exc_info:
            query("branch-4/blocks/99")
        assert exc_info.value.index == 99
        assert exc_info.value.length == 2
        assert str(exc_info.value) == "Index 99 out of range (length: 2)"

    def test_index_on_non_array(self, query):
        with pytest.raises(InvalidTypeError):
            query("branch-4/label/0")

    @pytest.mark.parametrize(
        "segment,expected",
        [
            ("0:0", [COMPRESSOR]),
            ("0:1", [COMPRESSOR, PIPE]),
            ("1:", [PIPE]),
            (":0", [COMPRESSOR]),
            (":", [COMPRESSOR, PIPE]),
        ],
    )
    def test_range_is_inclusive(self, query, segment, expected):
        assert query(f"branch-4/blocks/{segment}") == expected

    def test_range_end_out_of_range(self, query):
        with pytest.raises(IndexOutOfRangeError, match="Index 2 out of range"):
            query("branch-4/blocks/0:2")

    def test_range_start_out_of_range(self, query):
        with pytest.raises(IndexOutOfRangeError, match="Index 5 out of range"):
            query("branch-4/blocks/5:")

    def test_range_start_after_end(self, query):
        with pytest.raises(InvalidTypeError):
            query("branch-4/blocks/1:0")


# ──────────────────────────────────────────────────────────────────────────────
# Filters
# ──────────────────────────────────────────────────────────────────────────────


class TestFilters:
    def test_string_equality(self, query):
        assert query("branch-4/blocks[type=Compressor]") == [COMPRESSOR]

    def test_not_equals(self, query):
        assert query("branch-4/blocks[type!=Compressor]") == [PIPE]

    def test_numeric_ordering(self, query):
        assert query("branch-4/blocks[quantity>1]") == [COMPRESSOR]
        assert query("branch-4/blocks[quantity>=1]") == [COMPRESSOR, PIPE]
        assert query("branch-4/blocks[quantity<2]") == [PIPE]
        assert query("branch-4/blocks[quantity<=0]") == []

    def test_numeric_equality_within_epsilon(self, query):
        assert query("branch-4/blocks[efficiency=0.85]") == [COMPRESSOR]
        assert query("branch-4/blocks[quantity=2.0]") == [COMPRESSOR]
        assert query("branch-4/blocks[efficiency=0.850001]") == []

    def test_boolean_literals(self, query):
        assert query("branch-4/blocks[insulated=true]") == [PIPE]
        assert query("branch-4/blocks[insulated=True]") == []

    def test_missing_field_excludes_element(self, query):
        assert query("branch-4/blocks[efficiency!=0.5]") == [COMPRESSOR]

    def test_ordering_on_string_field_matches_nothing(self, query):
        assert query("branch-4/blocks[type>1]") == []

    def test_ordering_with_non_numeric_literal_matches_nothing(self, query):
        assert query("branch-4/blocks[quantity>abc]") == []

    def test_ordering_skips_non_numeric_values(self):
        branch = BranchNode(
            base=NodeBase(id="b", type="branch", position=Position(0, 0)),
            blocks=[
                Block(type="Pipe", extra={"pressure": 15.0}),
                Block(type="Compressor", extra={"pressure": "15 bar"}),
            ],
        )
        network = Network(id="mixed", label="mixed", nodes=[branch])

        result = run_query("b/blocks[pressure>10]", network)
        assert [block["type"] for block in result] == ["Pipe"]

    def test_filter_on_non_array(self, query):
        with pytest.raises(InvalidTypeError):
            query("branch-4/position[x=100]")

    def test_range_then_filter(self, query):
        assert query("branch-4/blocks/0:1[type=Pipe]") == [PIPE]
        assert query("branch-4/blocks/0:0[type=Pipe]") == []


# ──────────────────────────────────────────────────────────────────────────────
# Network-level collections
# ──────────────────────────────────────────────────────────────────────────────


class TestNetworkCollections:
    def test_nodes(self, query):
        assert [node["id"] for node in query("nodes")] == [
            "branch-4",
            "branch-5",
            "group-1",
            "anchor-1",
        ]

    def test_nodes_filtered_by_type(self, query):
        assert [node["id"] for node in query("nodes[type=branch]")] == [
            "branch-4",
            "branch-5",
        ]

    def test_nodes_filtered_by_dotted_field(self, query):
        assert [node["id"] for node in query("nodes[position.x<0]")] == ["anchor-1"]

    def test_edges(self, query):
        assert query("edges") == [
            {
                "id": "branch-4_branch-5",
                "source": "branch-4",
                "target": "branch-5",
                "data": {"weight": 2},
            }
        ]

    def test_edges_filtered_by_weight(self, query):
        assert len(query("edges[data.weight>1]")) == 1
        assert query("edges[data.weight>2]") == []


# ──────────────────────────────────────────────────────────────────────────────
# Scope resolution
# ──────────────────────────────────────────────────────────────────────────────


class TestScopeFallback:
    def test_value_on_block_wins(self, query):
        assert query("branch-4/blocks/0/pressure") == 12.5

    def test_falls_back_to_branch(self, query):
        assert query("branch-4/blocks/1/ambientTemperature") == 18.0

    def test_block_type_override(self, query):
        # Compressor chain is group -> global
        assert query("branch-4/blocks/0/ambientTemperature") == 15.0

    def test_rule_skips_branch(self, query):
        assert query("branch-4/blocks/1/pressure") == 1.0

    def test_group_scope(self, query):
        assert query("branch-4/blocks/1/region") == "north-sea"

    def test_missing_group_is_skipped(self, query):
        assert query("branch-5/blocks/0/region") == "default"

    def test_not_found_anywhere(self, query):
        with pytest.raises(PropertyNotFoundError, match="Property 'unknown'"):
            query("branch-4/blocks/1/unknown")

    def test_no_fallback_without_resolver(self, sample_network):
        with pytest.raises(PropertyNotFoundError):
            run_query("branch-4/blocks/1/ambientTemperature", sample_network)

    def test_no_fallback_without_block_index(self, query):
        with pytest.raises(PropertyNotFoundError):
            query("branch-4/ambientTemperature")


class TestExplicitScopes:
    def test_explicit_list_overrides_configured_chain(self, query):
        assert query("branch-4/blocks/0/ambientTemperature?scope=global") == 20.0
        assert (
            query("branch-4/blocks/0/ambientTemperature?scope=block,branch") == 18.0
        )

    def test_value_on_block_is_ignored_when_block_not_listed(self, query):
        assert query("branch-4/blocks/0/pressure?scope=branch") == 8.0

    def test_unknown_scope_names_are_dropped(self, query):
        assert query("branch-4/blocks/0/ambientTemperature?scope=bogus,group") == 15.0

    def test_all_unknown_uses_configured_chain(self, query):
        assert query("branch-4/blocks/1/ambientTemperature?scope=bogus") == 18.0

    def test_not_found_in_listed_scopes(self, query):
        with pytest.raises(PropertyNotFoundError):
            query("branch-5/blocks/0/region?scope=group")

    def test_requires_block_context(self, query):
        with pytest.raises(InvalidTypeError, match="block context"):
            query("branch-4/ambientTemperature?scope=branch")

    def test_single_segment_base_resolves_against_node_id(self, query):
        with pytest.raises(NodeNotFoundError):
            query("ambientTemperature?scope=global")
        with pytest.raises(InvalidTypeError, match="block context"):
            query("branch-4?scope=global")

    def test_requires_resolver(self, sample_network):
        with pytest.raises(InvalidTypeError, match="scope resolver"):
            run_query(
                "branch-4/blocks/0/ambientTemperature?scope=global", sample_network
            )


# ──────────────────────────────────────────────────────────────────────────────
# Value conversion and entry points
# ──────────────────────────────────────────────────────────────────────────────


class TestValuesAndEntryPoints:
    def test_dates_become_iso_strings(self, unit_network):
        assert run_query("b1/blocks/0/installed", unit_network) == "2024-01-31"

    def test_unformatted_values_keep_original_keys(self, unit_network):
        block = run_query("b1/blocks/0", unit_network)
        assert block["length"] == 400.0
        assert block["_length_original"] == "0.4 km"

    def test_unit_formatter(self, unit_network):
        calls = []

        def formatter(key, value, block_type, original):
            calls.append((key, value, block_type, original))
            return original if original is not None else value

        block = run_query("b1/blocks/0", unit_network, unit_formatter=formatter)
        assert block == {
            "type": "Pipe",
            "quantity": 1,
            "length": "0.4 km",
            "installed": "2024-01-31",
        }
        assert ("length", 400.0, "Pipe", "0.4 km") in calls
        assert ("installed", "2024-01-31", "Pipe", None) in calls

    def test_execute_function(self, sample_network):
        path = parse_query_path("branch-4/label")
        assert execute(path, sample_network) == "Compression train"

    def test_parse_errors_are_wrapped(self, sample_network):
        with pytest.raises(QueryParseError, match="Parse error: Query path") as exc_info:
            run_query("", sample_network)
        assert isinstance(exc_info.value.error, EmptyPathError)

    def test_repeated_execution_is_identical(self, sample_network, resolver):
        executor = QueryExecutor(sample_network, resolver)
        path = parse_query_path("branch-4/blocks/1/ambientTemperature")
        assert executor.execute(path) == executor.execute(path) == 18.0

    def test_results_are_detached_from_network(self, sample_network):
        executor = QueryExecutor(sample_network)
        first = executor.execute(parse_query_path("branch-4/blocks/0"))
        first["pressure"] = 0
        second = executor.execute(parse_query_path("branch-4/blocks/0"))
        assert second["pressure"] == 12.5
