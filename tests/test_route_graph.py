import pytest
from pydantic import ValidationError

from bee_trails.map.hexes import HexCoord
from bee_trails.map.route_graph import EdgeConnection, RouteGraph


def _h(q, r):
    return HexCoord.from_axial(q, r)


def _line_graph(n):
    """Tiles (0,0)..(n-1,0), each linked to the next through their shared edge."""
    graph = RouteGraph()
    tiles = [graph.add_tile_node(_h(i, 0)) for i in range(n)]
    for i in range(n - 1):
        edge = graph.get_or_create_edge_node(_h(i, 0), _h(i + 1, 0))
        graph.add_link(tiles[i], edge)
        graph.add_link(edge, tiles[i + 1])
    return graph, tiles


def test_edge_connection_is_unordered():
    a, b = _h(0, 0), _h(1, -1)
    assert EdgeConnection.between(a, b) == EdgeConnection.between(b, a)
    assert hash(EdgeConnection.between(a, b)) == hash(EdgeConnection.between(b, a))
    edge = EdgeConnection(first=b, second=a)
    assert edge.first == a
    assert edge.second == b


def test_edge_connection_uses_numeric_order():
    # "10:-1" < "9:0" as strings, but 9 < 10
    edge = EdgeConnection.between(_h(10, -1), _h(9, 0))
    assert edge.first == _h(9, 0)
    edge = EdgeConnection.between(_h(-9, 3), _h(-10, 3))
    assert edge.first == _h(-10, 3)


def test_edge_connection_requires_neighbors():
    with pytest.raises(ValidationError):
        EdgeConnection.between(_h(0, 0), _h(2, 0))
    with pytest.raises(ValidationError):
        EdgeConnection.between(_h(0, 0), _h(0, 0))


def test_edge_nodes_created_once():
    graph = RouteGraph()
    n1 = graph.get_or_create_edge_node(_h(0, 0), _h(1, 0))
    n2 = graph.get_or_create_edge_node(_h(1, 0), _h(0, 0))
    n3 = graph.get_or_create_edge_node(_h(0, 0), _h(0, 1))
    assert n1 == n2
    assert n3 != n1
    assert len(graph.edge_nodes) == 2
    assert len(graph.nodes) == 2
    assert graph.edge_of(n1) == EdgeConnection.between(_h(0, 0), _h(1, 0))


def test_tile_nodes_are_unique():
    graph = RouteGraph()
    graph.add_tile_node(_h(0, 0))
    with pytest.raises(ValueError):
        graph.add_tile_node(_h(0, 0))


def test_links_are_undirected_and_idempotent():
    graph = RouteGraph()
    t = graph.add_tile_node(_h(0, 0))
    e = graph.get_or_create_edge_node(_h(0, 0), _h(1, 0))
    graph.add_link(t, e)
    graph.add_link(e, t)
    assert graph.degree(t) == 1
    assert graph.degree(e) == 1
    assert graph.edge_count == 1


def test_reachability_and_shortest_path():
    graph, tiles = _line_graph(4)
    dist = graph.reachable_from(tiles[0])
    assert dist[tiles[3]] == 6

    path = graph.shortest_path(tiles[0], tiles[3])
    assert path is not None
    assert [graph.representative_hex(n) for n in path if graph.is_tile(n)] == [
        _h(0, 0),
        _h(1, 0),
        _h(2, 0),
        _h(3, 0),
    ]

    lonely = graph.add_tile_node(_h(0, 5))
    assert lonely not in graph.reachable_from(tiles[0])
    assert graph.shortest_path(tiles[0], lonely) is None


def test_shortest_path_prefers_short_route():
    graph, tiles = _line_graph(3)
    # detour from (0,0) to (2,0) via (1,-1) and (2,-1)
    extra = [graph.add_tile_node(_h(1, -1)), graph.add_tile_node(_h(2, -1))]
    chain = [(_h(0, 0), _h(1, -1)), (_h(1, -1), _h(2, -1)), (_h(2, -1), _h(2, 0))]
    for a, b in chain:
        edge = graph.get_or_create_edge_node(a, b)
        graph.add_link(graph.tile_nodes[a], edge)
        graph.add_link(edge, graph.tile_nodes[b])
    assert extra[0] in graph.reachable_from(tiles[0])

    target = _h(2, 0)
    path = graph.shortest_path(
        tiles[0],
        tiles[2],
        heuristic=lambda n: graph.representative_hex(n).distance_to(target),
    )
    assert path is not None
    assert len(path) == 5


def test_dead_end_edges():
    graph, tiles = _line_graph(2)
    assert graph.dead_end_edges() == []

    stub = graph.get_or_create_edge_node(_h(1, 0), _h(1, 1))
    graph.add_link(tiles[1], stub)
    stub2 = graph.get_or_create_edge_node(_h(0, 0), _h(0, -1))
    graph.add_link(tiles[0], stub2)
    assert graph.dead_end_edges() == [
        EdgeConnection.between(_h(0, 0), _h(0, -1)),
        EdgeConnection.between(_h(1, 0), _h(1, 1)),
    ]
