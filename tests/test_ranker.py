from scent_trail.core.ranker import select_balanced_top_n, slot_counts


def test_slot_counts():
    # 新会话：全部名额给没看过的方法
    assert slot_counts(0, 4) == (0, 4)
    assert slot_counts(1, 4) == (0, 4)
    assert slot_counts(2, 4) == (1, 3)
    assert slot_counts(5, 4) == (2, 2)
    assert slot_counts(5, 5) == (2, 3)


def test_even_split_between_visited_and_unvisited():
    candidates = [
        ("v1", 9.0),
        ("v2", 8.0),
        ("v3", 7.0),
        ("u1", 3.0),
        ("u2", 2.0),
        ("u3", 1.0),
    ]
    visited = {"current", "v1", "v2", "v3"}

    picks = select_balanced_top_n(candidates, visited, 4)

    assert picks == ["v1", "v2", "u1", "u2"]


def test_unvisited_slots_absorb_small_visited_pool():
    candidates = [("v1", 5.0), ("u1", 4.0), ("u2", 3.0), ("u3", 2.0)]
    visited = {"current", "v1"}

    assert select_balanced_top_n(candidates, visited, 4) == ["v1", "u1", "u2", "u3"]


def test_threshold_and_exclusion():
    candidates = [("current", 10.0), ("a", 0.5), ("b", 0.0), ("c", -1.0)]

    picks = select_balanced_top_n(candidates, set(), 3, exclude="current")
    assert picks == ["a"]

    assert select_balanced_top_n(candidates, set(), 3, exclude="current", threshold=1.0) == []


def test_non_positive_n():
    assert select_balanced_top_n([("a", 1.0)], set(), 0) == []


def test_chosen_candidate_is_not_picked_twice():
    candidates = [("a", 3.0), ("b", 3.0)]

    assert select_balanced_top_n(candidates, set(), 5) == ["a", "b"]
