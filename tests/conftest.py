"""Shared test fixtures for clique-colgen."""

import pytest

from clique_colgen.graphs import (
    paper_5vertex,
    triangle,
    cycle_c4,
    complete_k5,
    empty_5,
    path_p3,
    cycle_c5,
    wheel_w5,
    KNOWN_CHROMATIC,
    KNOWN_CLIQUE,
)


@pytest.fixture
def graph_5vertex():
    """5-vertex graph from the paper (chromatic number 3)."""
    return paper_5vertex()


@pytest.fixture
def graph_triangle():
    return triangle()


@pytest.fixture
def graph_c4():
    return cycle_c4()


@pytest.fixture
def graph_k5():
    return complete_k5()


@pytest.fixture
def graph_empty5():
    return empty_5()


@pytest.fixture
def graph_p3():
    return path_p3()


@pytest.fixture
def graph_c5():
    return cycle_c5()


@pytest.fixture
def graph_w5():
    return wheel_w5()


@pytest.fixture(params=list(KNOWN_CHROMATIC.keys()))
def named_graph(request):
    """Parametrized fixture yielding (name, graph, chromatic_number, clique_number)."""
    from clique_colgen.graphs import TEST_GRAPHS

    name = request.param
    return name, TEST_GRAPHS[name](), KNOWN_CHROMATIC[name], KNOWN_CLIQUE[name]
