"""Tests for solution extraction and validation."""

import pytest

from clique_colgen.exceptions import InvalidSolutionError
from clique_colgen.independent_sets import IndependentSet
from clique_colgen.solution import (
    adjacent_pairs,
    extract_clique,
    extract_coloring,
    missing_edges,
    to_partition,
    validate_coloring,
    verify_clique,
    verify_coloring,
)


class TestVerifyClique:
    def test_valid(self, graph_5vertex):
        assert verify_clique(graph_5vertex, {1, 2, 3})

    def test_missing_edge(self, graph_5vertex):
        assert not verify_clique(graph_5vertex, {1, 2, 4})

    def test_unknown_node(self, graph_5vertex):
        assert not verify_clique(graph_5vertex, {1, 9})

    def test_empty_and_single(self, graph_5vertex):
        assert verify_clique(graph_5vertex, set())
        assert verify_clique(graph_5vertex, {4})

    def test_missing_edges_lists_pairs(self, graph_c4):
        assert missing_edges(graph_c4, [3, 1, 2]) == [(1, 3)]

    def test_adjacent_pairs_lists_edges(self, graph_c4):
        assert adjacent_pairs(graph_c4, [3, 1, 2]) == [(1, 2), (2, 3)]


class TestExtractClique:
    def test_selects_ones(self, graph_5vertex):
        values = [1.0, 0.99995, 1.0, 0.0, 0.00003]
        assert extract_clique(graph_5vertex, values) == frozenset({1, 2, 3})

    def test_rejects_non_clique(self, graph_5vertex):
        with pytest.raises(InvalidSolutionError):
            extract_clique(graph_5vertex, [1.0, 0.0, 0.0, 1.0, 0.0])


class TestToPartition:
    def test_lowest_key_wins(self):
        assert to_partition({1: {1, 2}, 2: {2, 3}}) == {1: frozenset({1, 2}), 2: frozenset({3})}

    def test_drops_empty_and_renumbers(self):
        partition = to_partition({2: {1, 2}, 5: {1}, 7: {3}})
        assert partition == {1: frozenset({1, 2}), 2: frozenset({3})}


class TestExtractColoring:
    def test_values_within_tolerance_selected(self, graph_c4):
        columns = [IndependentSet(1, frozenset({1, 3})), IndependentSet(2, frozenset({2, 4}))]
        coloring = extract_coloring(graph_c4, columns, [0.99995, 1.00004])
        assert len(coloring) == 2

    def test_values_outside_tolerance_rejected(self, graph_c4):
        columns = [IndependentSet(1, frozenset({1, 3})), IndependentSet(2, frozenset({2, 4}))]
        with pytest.raises(InvalidSolutionError):
            extract_coloring(graph_c4, columns, [1.0, 0.999])

    def test_selected_columns(self, graph_5vertex):
        columns = [
            IndependentSet(1, frozenset({1, 4})),
            IndependentSet(2, frozenset({2, 5})),
            IndependentSet(3, frozenset({3, 4})),
            IndependentSet(4, frozenset({1, 5})),
        ]
        coloring = extract_coloring(graph_5vertex, columns, [1.0, 1.0, 1.0, 0.0])
        assert coloring == {1: frozenset({1, 4}), 2: frozenset({2, 5}), 3: frozenset({3})}
        assert verify_coloring(graph_5vertex, coloring)

    def test_uncovered_node(self, graph_5vertex):
        columns = [IndependentSet(1, frozenset({1, 4})), IndependentSet(2, frozenset({2, 5}))]
        with pytest.raises(InvalidSolutionError, match="uncovered"):
            extract_coloring(graph_5vertex, columns, [1.0, 1.0])


class TestVerifyColoring:
    def test_valid(self, graph_5vertex):
        coloring = [frozenset([1, 4]), frozenset([2, 5]), frozenset([3])]
        assert verify_coloring(graph_5vertex, coloring)

    def test_valid_mapping(self, graph_5vertex):
        coloring = {1: {1, 4}, 2: {2, 5}, 3: {3}}
        assert verify_coloring(graph_5vertex, coloring)

    def test_invalid_adjacent(self, graph_5vertex):
        coloring = [frozenset([1, 2]), frozenset([3, 4]), frozenset([5])]
        assert not verify_coloring(graph_5vertex, coloring)

    def test_missing_vertex(self, graph_5vertex):
        coloring = [frozenset([1, 4]), frozenset([2, 5])]
        assert not verify_coloring(graph_5vertex, coloring)

    def test_duplicate_vertex(self, graph_5vertex):
        coloring = [frozenset([1, 4]), frozenset([2, 5]), frozenset([3, 4])]
        assert not verify_coloring(graph_5vertex, coloring)


class TestValidateColoring:
    """Tests for the detailed validate_coloring function."""

    def test_valid_coloring(self, graph_5vertex):
        coloring = [frozenset([1, 4]), frozenset([2, 5]), frozenset([3])]
        vr = validate_coloring(graph_5vertex, coloring)
        assert vr.valid
        assert vr.num_colors == 3
        assert vr.num_vertices_covered == 5
        assert vr.num_vertices_expected == 5
        assert vr.missing_vertices == []
        assert vr.duplicate_vertices == []
        assert vr.edge_violations == []

    def test_edge_violation_detected(self, graph_5vertex):
        # Vertices 1 and 2 are adjacent
        coloring = [frozenset([1, 2]), frozenset([3, 4]), frozenset([5])]
        vr = validate_coloring(graph_5vertex, coloring)
        assert not vr.valid
        assert (0, 1, 2) in vr.edge_violations

    def test_missing_and_duplicate(self, graph_5vertex):
        coloring = [frozenset([1, 4]), frozenset([2, 4]), frozenset()]
        vr = validate_coloring(graph_5vertex, coloring)
        assert not vr.valid
        assert vr.missing_vertices == [3, 5]
        assert vr.duplicate_vertices == [4]
        assert vr.empty_color_classes == [2]

    def test_mapping_input(self, graph_5vertex):
        vr = validate_coloring(graph_5vertex, {2: {3, 4}, 1: {1, 5}, 3: {2}})
        assert vr.valid
        assert vr.num_colors == 3

    def test_violations_use_class_position(self, graph_5vertex):
        vr = validate_coloring(graph_5vertex, {1: {1, 4}, 2: {2, 3, 5}})
        assert vr.edge_violations == [(1, 2, 3), (1, 3, 5)]
        assert vr.missing_vertices == []

    def test_unknown_vertex_not_a_violation(self, graph_c4):
        vr = validate_coloring(graph_c4, [{1, 3, 9}, {2, 4}])
        assert vr.edge_violations == []
        assert vr.num_vertices_covered == 5
        assert not verify_coloring(graph_c4, [{1, 3, 9}, {2, 4}])
