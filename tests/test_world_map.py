import pytest

from bee_trails.map.hexes import HEX_ORIGIN, HexCoord, get_hexagon
from bee_trails.map.layout import GridConfigError, GridLayout
from bee_trails.map.route_graph import EdgeConnection
from bee_trails.map.world_map import PlacementError, WorldMap
from bee_trails.piece.models import FillerCell, PieceHexData, RouteCell

T, F = True, False
STRAIGHT = (F, T, F, F, T, F)  # E and W


def _h(q, r):
    return HexCoord.from_axial(q, r)


def _route(conns, q=0, r=0):
    return PieceHexData(offset=_h(q, r), content=RouteCell(connections=conns))


def _filler(q=0, r=0):
    return PieceHexData(offset=_h(q, r), content=FillerCell())


def _map(radius, houses):
    return WorldMap.from_layout(GridLayout.from_coords(radius, houses))


def test_create_grid():
    wm = _map(2, [(2, 0), (-2, 0)])
    assert len(wm.cells) == 19
    assert wm.houses == [_h(-2, 0), _h(2, 0)]
    assert wm.is_house(_h(2, 0))
    assert not wm.is_house(HEX_ORIGIN)
    assert not wm.is_house(_h(5, 0))
    assert wm[HEX_ORIGIN].is_free
    assert len(wm.graph.tile_nodes) == 19
    assert wm.graph.edge_count == 0


def test_create_grid_rejects_bad_houses():
    with pytest.raises(GridConfigError):
        WorldMap.create_grid(get_hexagon(1), [])
    with pytest.raises(GridConfigError):
        WorldMap.create_grid(get_hexagon(1), [_h(3, 0)])


def test_straight_piece_completes_small_grid():
    wm = _map(1, [(-1, 0), (1, 0)])
    wm.apply_placement(HEX_ORIGIN, [_route(STRAIGHT)])
    res = wm.check_completion()
    assert res is not None
    assert res.routes == [[_h(-1, 0), _h(0, 0), _h(1, 0)]]
    assert res.dead_ends == []


def test_full_junction_leaves_dead_ends():
    wm = _map(1, [(-1, 0), (1, 0)])
    wm.apply_placement(HEX_ORIGIN, [_route((T, T, T, T, T, T))])
    res = wm.check_completion()
    assert res is not None
    assert res.routes == [[_h(-1, 0), _h(0, 0), _h(1, 0)]]
    # stubs into the four empty neighbours answer to nobody
    assert len(res.dead_ends) == 4
    assert all(HEX_ORIGIN in (e.first, e.second) for e in res.dead_ends)


def test_stray_stub_is_one_dead_end():
    wm = _map(2, [(-2, 0), (2, 0)])
    wm.apply_placement(_h(0, -1), [_route((T, F, F, F, F, F))])
    assert wm.check_completion() is None
    assert wm.dead_ends() == [EdgeConnection.between(_h(0, -1), _h(1, -2))]

    row = [_route(STRAIGHT, 0, 0), _route(STRAIGHT, 1, 0), _route(STRAIGHT, 2, 0)]
    wm.apply_placement(_h(-1, 0), row)
    res = wm.check_completion()
    assert res is not None
    assert res.routes == [[_h(-2, 0), _h(-1, 0), _h(0, 0), _h(1, 0), _h(2, 0)]]
    assert res.dead_ends == [EdgeConnection.between(_h(0, -1), _h(1, -2))]


def test_mismatched_stubs_do_not_connect():
    wm = _map(2, [(-2, 0), (2, 0)])
    wm.apply_placement(HEX_ORIGIN, [_route((F, T, T, F, F, F))])
    wm.apply_placement(_h(1, 0), [_filler()])
    assert wm.check_completion() is None
    assert wm.dead_ends() == [
        EdgeConnection.between(_h(0, 0), _h(0, 1)),
        EdgeConnection.between(_h(0, 0), _h(1, 0)),
    ]
    assert wm.tile_node(_h(1, 0)) not in wm.graph.reachable_from(wm.tile_node(HEX_ORIGIN))


def test_houses_accept_any_stub():
    wm = _map(2, [(-2, 0), (2, 0)])
    wm.apply_placement(_h(-1, 0), [_route((F, F, F, F, T, F))])
    reach = wm.graph.reachable_from(wm.tile_node(_h(-2, 0)))
    assert wm.tile_node(_h(-1, 0)) in reach
    assert wm.dead_ends() == []


def test_placement_is_atomic():
    wm = _map(2, [(-2, 0), (2, 0)])
    n_nodes = len(wm.graph.nodes)

    # second cell hangs off the grid
    with pytest.raises(PlacementError):
        wm.apply_placement(_h(2, -1), [_route(STRAIGHT), _route(STRAIGHT, 1, 0)])
    assert wm[_h(2, -1)].is_free
    assert len(wm.graph.nodes) == n_nodes
    assert wm.graph.edge_count == 0

    # houses are taken
    assert not wm.can_place(_h(2, 0), [HEX_ORIGIN])
    with pytest.raises(PlacementError):
        wm.apply_placement(_h(2, 0), [_route(STRAIGHT)])

    wm.apply_placement(HEX_ORIGIN, [_route(STRAIGHT)])
    with pytest.raises(PlacementError):
        wm.apply_placement(HEX_ORIGIN, [_filler()])
    assert not wm[HEX_ORIGIN].is_free


def test_graph_only_grows():
    wm = _map(2, [(-2, 0), (2, 0)])
    n_tiles = len(wm.graph.tile_nodes)
    sizes = []
    for q, r in [(0, 0), (1, 0), (-1, 1), (0, -1)]:
        wm.apply_placement(_h(q, r), [_route((T, T, T, T, T, T))])
        sizes.append((len(wm.graph.edge_nodes), wm.graph.edge_count))
        assert len(wm.graph.tile_nodes) == n_tiles
    assert sizes == sorted(sizes)
    # three shared edges are reused
    assert len(wm.graph.edge_nodes) == 4 * 6 - 3
