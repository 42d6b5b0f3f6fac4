"""
Test script for search engine validation

Covers:
1. Grid model and editor actions
2. Frontier selection rules per strategy
3. Step-wise expansion, in-place frontier updates and termination
4. Path cost properties across strategies

Usage:
    python test_search.py
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.search import (
    ConfigurationError,
    Frontier,
    Grid,
    SearchNode,
    create_strategy,
    get_strategy_names,
    init_grid,
    init_run,
    is_optimal,
    run_to_completion,
    step,
)
from src.heuristics import get_heuristic


STRATEGIES = ["bfs", "dfs", "ucs", "gbfs", "astar"]


def open_grid(size, start, goal):
    """Grid with no walls or weights."""
    return Grid.from_rows([[0] * size for _ in range(size)], start, goal)


def manhattan_for(grid):
    return get_heuristic(grid.goal[0], grid.goal[1], mode="preset", preset="manhattan")


def solve(strategy, grid, heuristic=None):
    heuristic = heuristic or manhattan_for(grid)
    state = init_run(strategy, grid, grid.start, grid.goal, heuristic)
    return run_to_completion(state)


def test_grid_model():
    """Test grid construction and editor actions."""
    print("\n" + "="*60)
    print("TEST: Grid Model")
    print("="*60)

    grid = init_grid(20)
    print(f"  Default start={grid.start}, goal={grid.goal}")
    assert grid.start == (2, 2)
    assert grid.goal == (17, 17)
    assert all(cell == 0 for row in grid.cells for cell in row)

    # Walls never cover start/goal
    assert grid.edit_cell(5, 5, "wall")
    assert grid.is_wall(5, 5)
    assert not grid.edit_cell(2, 2, "wall")
    assert not grid.is_wall(2, 2)

    # Weight cycles 0 -> 2 -> 3 -> 4 -> 5 -> 0 and skips walls
    seen = []
    for _ in range(5):
        grid.edit_cell(6, 6, "weight")
        seen.append(grid.get_cell(6, 6))
    print(f"  Weight cycle: {seen}")
    assert seen == [2, 3, 4, 5, 0]
    assert not grid.edit_cell(5, 5, "weight")

    assert grid.edit_cell(5, 5, "erase")
    assert grid.get_cell(5, 5) == 0

    # Start/goal moves, but never onto each other
    assert grid.edit_cell(0, 0, "start")
    assert grid.start == (0, 0)
    assert not grid.edit_cell(0, 0, "goal")
    assert not grid.edit_cell(3, 3, "paint")

    grid.set_cell(4, 4, 3)
    assert grid.move_cost(4, 4) == 3
    assert grid.move_cost(4, 5) == 1
    grid.clear_walls()
    assert grid.get_cell(4, 4) == 0

    with pytest.raises(ConfigurationError):
        grid.set_cell(20, 0, 1)
    with pytest.raises(ConfigurationError):
        init_grid(0)
    with pytest.raises(ConfigurationError):
        Grid.from_rows([[0, 0], [0, 0]], (0, 0), (0, 0))
    with pytest.raises(ConfigurationError):
        Grid.from_rows([[0, 0], [0, 0]], (0, 0), (2, 0))

    print("  [PASS] Grid model tests")


def test_random_maze():
    """Test seeded maze generation keeps start/goal free."""
    print("\n" + "="*60)
    print("TEST: Random Maze")
    print("="*60)

    grid = init_grid(20)
    walls = grid.random_maze(seed=7)
    print(f"  Walls placed: {walls}")
    assert walls == grid.count_walls()
    assert 0 < walls < 20 * 20
    assert not grid.is_wall(*grid.start)
    assert not grid.is_wall(*grid.goal)

    other = init_grid(20)
    other.random_maze(seed=7)
    assert other.cells == grid.cells

    print("  [PASS] Random maze tests")


def test_neighbors():
    """Test 4-connected neighbour order and wall filtering."""
    grid = Grid.from_rows([
        [0, 1, 0],
        [0, 0, 0],
        [0, 0, 0],
    ], (1, 1), (2, 2))

    # up is a wall; order is up, down, left, right
    assert list(grid.neighbors(1, 1)) == [(2, 1), (1, 0), (1, 2)]
    assert list(grid.neighbors(0, 0)) == [(1, 0)]


def test_strategy_selection():
    """Test frontier selection and tie-breaking per strategy."""
    print("\n" + "="*60)
    print("TEST: Strategy Selection")
    print("="*60)

    frontier = Frontier()
    frontier.push(SearchNode(0, 0, g=3, h=1))  # f=4
    frontier.push(SearchNode(0, 1, g=1, h=5))  # f=6
    frontier.push(SearchNode(0, 2, g=1, h=1))  # f=2
    frontier.push(SearchNode(0, 3, g=2, h=1))  # f=3

    picks = {name: create_strategy(name).select(frontier) for name in STRATEGIES}
    print(f"  Picks: {picks}")
    assert picks["bfs"] == 0
    assert picks["dfs"] == 3
    assert picks["ucs"] == 1   # first of the two g=1 nodes
    assert picks["gbfs"] == 0  # first of the h=1 nodes
    assert picks["astar"] == 2

    assert create_strategy("bogus").name == "astar"
    assert set(STRATEGIES) <= set(get_strategy_names())
    assert is_optimal("astar") and is_optimal("ucs") and is_optimal("bfs")
    assert not is_optimal("dfs") and not is_optimal("gbfs")

    print("  [PASS] Strategy selection tests")


def test_init_run_validation():
    """Test configuration errors are raised before a run exists."""
    grid = open_grid(5, (0, 0), (4, 4))
    h = manhattan_for(grid)

    with pytest.raises(ConfigurationError):
        init_run("bfs", grid, (5, 0), (4, 4), h)
    with pytest.raises(ConfigurationError):
        init_run("bfs", grid, (0, 0), (4, -1), h)
    with pytest.raises(ConfigurationError):
        init_run("bfs", grid, (1, 1), (1, 1), h)

    state = init_run("astar", grid, (0, 0), (4, 4), h)
    assert state.frontier_size == 1
    start_node = state.frontier.get((0, 0))
    assert start_node.g == 0 and start_node.h == 8 and start_node.f == 8
    assert state.best_cost == {(0, 0): 0}
    assert state.parent_of == {(0, 0): None}
    assert not state.terminal and state.expanded_count == 0


def test_bfs_end_to_end():
    """5x5 open grid, BFS from corner to corner."""
    print("\n" + "="*60)
    print("TEST: BFS End to End")
    print("="*60)

    grid = open_grid(5, (0, 0), (4, 4))
    state = solve("bfs", grid)

    print(f"  Cost: {state.result_cost}, expanded: {state.expanded_count}, "
          f"path length: {state.path_length}")
    assert state.succeeded and state.terminal
    assert state.result_cost == 8
    assert len(state.result_path) == 9
    assert state.result_path[0] == (0, 0)
    assert state.result_path[-1] == (4, 4)
    assert state.current.path() == state.result_path

    print("  [PASS] BFS end to end tests")


def test_bfs_ucs_match_manhattan():
    """On open unit grids BFS and UCS both find the Manhattan distance."""
    pairs = [((0, 0), (5, 5)), ((3, 1), (0, 4)), ((5, 0), (0, 5)), ((2, 2), (2, 5))]
    for start, goal in pairs:
        grid = open_grid(6, start, goal)
        expected = abs(start[0] - goal[0]) + abs(start[1] - goal[1])
        bfs = solve("bfs", grid)
        ucs = solve("ucs", grid)
        assert bfs.result_cost == expected
        assert ucs.result_cost == expected


def test_path_properties():
    """Path is contiguous, avoids walls and g strictly increases along it."""
    print("\n" + "="*60)
    print("TEST: Path Properties")
    print("="*60)

    grid = Grid.from_rows([
        [0, 0, 0, 0, 0, 0],
        [0, 1, 1, 1, 1, 0],
        [0, 0, 0, 0, 1, 0],
        [1, 1, 1, 0, 1, 0],
        [0, 0, 0, 0, 0, 0],
        [0, 1, 0, 1, 1, 0],
    ], (0, 0), (5, 2))

    for name in STRATEGIES:
        state = solve(name, grid)
        path = state.result_path
        print(f"  {name}: cost={state.result_cost}, path={len(path)}, expanded={state.expanded_count}")
        assert state.succeeded
        assert len(path) == state.result_cost + 1
        assert path[0] == grid.start and path[-1] == grid.goal
        for (r1, c1), (r2, c2) in zip(path, path[1:]):
            assert abs(r1 - r2) + abs(c1 - c2) == 1
            assert not grid.is_wall(r2, c2)
        costs = [state.best_cost[p] for p in path]
        assert all(a < b for a, b in zip(costs, costs[1:]))
        assert costs[-1] == state.result_cost

    print("  [PASS] Path property tests")


def test_expanded_count_stable_after_terminal():
    """expanded_count equals |closed| and never changes once terminal."""
    grid = open_grid(6, (0, 0), (5, 3))
    for name in STRATEGIES:
        state = solve(name, grid)
        count = state.expanded_count
        assert count == len(state.closed)
        assert step(state) is None
        assert step(state) is None
        assert state.expanded_count == count
        assert state.closed.isdisjoint(state.frontier_index)


def test_closed_and_frontier_disjoint():
    """closed and the frontier index never overlap between steps."""
    grid = open_grid(7, (0, 0), (6, 6))
    grid.set_cell(3, 3, 4)
    grid.set_cell(2, 4, 1)
    for name in STRATEGIES:
        state = init_run(name, grid, grid.start, grid.goal, manhattan_for(grid))
        while not state.terminal:
            step(state)
            assert state.closed.isdisjoint(state.frontier_index)
            for node in state.frontier:
                assert state.best_cost[node.key] == node.g
                assert node.f == node.g + node.h
                assert node.key in state.parent_of


def test_astar_never_expands_more_than_ucs():
    """Admissible A* expands no more nodes than UCS."""
    print("\n" + "="*60)
    print("TEST: A* vs UCS Efficiency")
    print("="*60)

    layouts = []
    layouts.append(open_grid(10, (0, 0), (9, 9)))
    layouts.append(open_grid(10, (7, 2), (1, 8)))
    walled = init_grid(15)
    walled.random_maze(density=0.25, seed=3)
    layouts.append(walled)
    weighted = open_grid(8, (0, 0), (7, 7))
    for r in range(2, 6):
        weighted.set_cell(r, 4, 5)
    layouts.append(weighted)

    for grid in layouts:
        astar = solve("astar", grid)
        ucs = solve("ucs", grid)
        print(f"  {grid.size}x{grid.size}: astar={astar.expanded_count}, ucs={ucs.expanded_count}")
        assert astar.expanded_count <= ucs.expanded_count
        assert astar.succeeded == ucs.succeeded
        if ucs.succeeded:
            assert astar.result_cost == ucs.result_cost

    print("  [PASS] A* efficiency tests")


def test_wall_row_with_gap():
    """Full wall row except the last column forces the path through (2,4)."""
    rows = [[0] * 5 for _ in range(5)]
    rows[2] = [1, 1, 1, 1, 0]
    grid = Grid.from_rows(rows, (0, 0), (4, 4))

    for name in STRATEGIES:
        state = solve(name, grid)
        assert state.succeeded
        assert (2, 4) in state.result_path
        assert state.result_cost >= 8
        if name in ("bfs", "ucs", "astar"):
            assert state.result_cost == 8


def test_exhaustion_without_path():
    """A walled-off goal is a normal terminal outcome, not an error."""
    grid = Grid.from_rows([
        [0, 0, 0, 0],
        [0, 0, 0, 0],
        [0, 0, 1, 1],
        [0, 0, 1, 0],
    ], (0, 0), (3, 3))

    for name in STRATEGIES:
        state = solve(name, grid)
        assert state.terminal
        assert not state.succeeded
        assert state.result_path == []
        assert state.result_cost is None
        # Every reachable cell was expanded exactly once
        assert state.expanded_count == 12
        assert len(state.frontier) == 0


def test_weighted_cells():
    """UCS and A* route around heavy cells; BFS may not."""
    grid = open_grid(5, (0, 0), (0, 4))
    grid.set_cell(0, 2, 5)

    ucs = solve("ucs", grid)
    astar = solve("astar", grid)
    bfs = solve("bfs", grid)
    print(f"  Weighted: ucs={ucs.result_cost}, astar={astar.result_cost}, bfs={bfs.result_cost}")
    assert ucs.result_cost == 6
    assert astar.result_cost == 6
    assert (0, 2) not in ucs.result_path
    assert bfs.result_cost >= ucs.result_cost


def test_frontier_entry_updated_in_place():
    """A cheaper path rewrites the queued node instead of queueing a copy."""
    print("\n" + "="*60)
    print("TEST: In-place Frontier Update")
    print("="*60)

    grid = Grid.from_rows([
        [0, 0, 0],
        [5, 0, 0],
        [0, 0, 0],
    ], (0, 0), (2, 2))
    state = init_run("bfs", grid, grid.start, grid.goal, manhattan_for(grid))

    # (0,0) queues (1,0) g=5 and (0,1) g=1
    step(state)
    # (1,0) queues (1,1) with g=6
    step(state)
    node = state.frontier.get((1, 1))
    assert node.g == 6
    assert node.parent.key == (1, 0)

    # (0,1) finds (1,1) at g=2 and rewrites the queued node
    step(state)
    assert state.frontier.get((1, 1)) is node
    assert node.g == 2
    assert node.f == node.g + node.h
    assert node.parent.key == (0, 1)
    assert state.best_cost[(1, 1)] == 2
    assert state.parent_of[(1, 1)].key == (0, 1)
    assert [n.key for n in state.frontier].count((1, 1)) == 1

    run_to_completion(state)
    print(f"  Path: {state.result_path}, cost: {state.result_cost}")
    assert state.result_cost == 4
    assert state.result_path == [(0, 0), (0, 1), (1, 1), (2, 1), (2, 2)]

    print("  [PASS] In-place frontier update tests")


def test_run_to_completion_step_cap():
    """max_steps limits how many expansions one call performs."""
    grid = open_grid(6, (0, 0), (5, 5))
    state = init_run("bfs", grid, grid.start, grid.goal, manhattan_for(grid))
    run_to_completion(state, max_steps=4)
    assert state.expanded_count == 4
    assert not state.terminal
    run_to_completion(state)
    assert state.terminal and state.succeeded


def test_unknown_strategy_behaves_like_astar():
    """Unrecognised tags expand in A* order."""
    grid = open_grid(8, (0, 0), (7, 5))
    grid.set_cell(3, 3, 1)
    grid.set_cell(4, 3, 4)
    mystery = solve("mystery", grid)
    astar = solve("astar", grid)
    assert mystery.strategy == "mystery"
    assert mystery.expanded_count == astar.expanded_count
    assert mystery.result_path == astar.result_path


def main():
    """Run all tests."""
    print("\n" + "#"*60)
    print("# SEARCH ENGINE VALIDATION TESTS")
    print("#"*60)

    tests = [
        ("Grid Model", test_grid_model),
        ("Random Maze", test_random_maze),
        ("Neighbors", test_neighbors),
        ("Strategy Selection", test_strategy_selection),
        ("Init Validation", test_init_run_validation),
        ("BFS End to End", test_bfs_end_to_end),
        ("BFS/UCS Manhattan", test_bfs_ucs_match_manhattan),
        ("Path Properties", test_path_properties),
        ("Terminal Stability", test_expanded_count_stable_after_terminal),
        ("Closed/Frontier Disjoint", test_closed_and_frontier_disjoint),
        ("A* vs UCS", test_astar_never_expands_more_than_ucs),
        ("Wall Row Gap", test_wall_row_with_gap),
        ("Exhaustion", test_exhaustion_without_path),
        ("Weighted Cells", test_weighted_cells),
        ("In-place Update", test_frontier_entry_updated_in_place),
        ("Step Cap", test_run_to_completion_step_cap),
        ("Unknown Strategy", test_unknown_strategy_behaves_like_astar),
    ]

    results = []
    for name, test in tests:
        try:
            test()
            results.append((name, True))
        except AssertionError as e:
            print(f"  [FAIL] {name}: {e}")
            results.append((name, False))

    print("\n" + "="*60)
    print("SUMMARY")
    print("="*60)

    all_passed = True
    for name, passed in results:
        status = "PASS" if passed else "FAIL"
        print(f"  {name}: [{status}]")
        if not passed:
            all_passed = False

    print()
    if all_passed:
        print("All tests PASSED!")
        return 0
    else:
        print("Some tests FAILED!")
        return 1


if __name__ == "__main__":
    sys.exit(main())
