from scent_trail.models.history import NavigationHistory


def test_empty_history_returns_sentinels():
    history = NavigationHistory()
    assert history.get_most_recent_key() is None
    assert history.get_key_at_step(0) is None
    assert history.is_empty()
    assert history.get_distinct_visited() == set()


def test_consecutive_duplicate_is_ignored():
    history = NavigationHistory()
    assert history.add_key("A") is True
    assert history.add_key("A") is False
    assert history.get_all_keys() == ["A"]
    assert len(history) == 1


def test_steps_and_distinct_visited():
    history = NavigationHistory()
    for key in ["A", "B", "A", "C"]:
        history.add_key(key)

    assert history.get_all_keys() == ["A", "B", "A", "C"]
    assert history.get_key_at_step(0) == "A"
    assert history.get_key_at_step(1) == "B"
    assert history.get_key_at_step(3) == "C"
    assert history.get_key_at_step(4) is None
    assert history.get_key_at_step(-1) is None
    assert history.get_most_recent_key() == "C"
    assert history.get_distinct_visited() == {"A", "B", "C"}
    assert history.contains("B")
    assert not history.contains("D")


def test_clear_resets_steps():
    history = NavigationHistory()
    history.add_key("A")
    history.add_key("B")
    history.clear()

    assert history.is_empty()
    assert history.get_key_at_step(0) is None
    history.add_key("C")
    assert history.get_key_at_step(0) == "C"
