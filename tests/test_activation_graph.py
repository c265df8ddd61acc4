import math

from scent_trail.core.activation_graph import ActivationGraph
from scent_trail.models.history import NavigationHistory
from scent_trail.models.node import NodeKind, NodeList


def _build_parse_graph():
    history = NavigationHistory()
    graph = ActivationGraph(history)
    for key in ["A", "B", "C"]:
        graph.link("parse", key)
    graph.link("render", "D")
    return history, graph


def _navigate(history, graph, key, words):
    if history.add_key(key):
        graph.add_to_history(key, words)


def test_node_list_dedup_and_history_duplicates():
    methods = NodeList(NodeKind.METHOD)
    first = methods.add("A")
    assert methods.add("A") is first
    assert len(methods) == 1

    history = NodeList(NodeKind.METHOD, unique=False)
    older = history.add("A")
    newer = history.add("A")
    assert older is not newer
    assert len(history) == 2
    assert history.get("A") is newer


def test_add_to_history_twice_creates_two_nodes():
    graph = ActivationGraph()
    graph.add_to_history("A", ["parse"])
    graph.add_to_history("A", ["parse"])

    assert len(graph.history_nodes()) == 2
    assert len(graph.word_nodes()) == 1
    assert all(node.weight == 1.0 for node in graph.history_nodes())


def test_reset_weights_is_idempotent():
    _history, graph = _build_parse_graph()
    graph.add_to_history("A", ["parse"])
    graph.spread_activation(0.85, 10)

    graph.reset_weights()
    graph.reset_weights()

    nodes = graph.history_nodes() + graph.word_nodes() + graph.method_nodes()
    assert all(node.weight == 1.0 for node in nodes)


def test_decay_history_compounds():
    graph = ActivationGraph()
    for key in ["A", "B", "C", "D"]:
        graph.add_to_history(key, [])

    graph.reset_weights()
    graph.decay_history(0.5, 4)

    weights = [node.weight for node in graph.history_nodes()]
    assert weights == [0.0625, 0.25, 0.5, 1.0]


def test_decay_history_respects_window():
    graph = ActivationGraph()
    for key in ["A", "B", "C"]:
        graph.add_to_history(key, [])

    graph.reset_weights()
    graph.decay_history(0.5, 2)

    assert [node.weight for node in graph.history_nodes()] == [1.0, 0.5, 1.0]


def test_spread_is_additive():
    graph = ActivationGraph()
    graph.link("parse", "B")
    graph.add_to_history("A", ["parse"])

    graph.reset_weights()
    graph.spread_activation(0.5, 1)

    word = graph.word_list.get("parse")
    method = graph.method_list.get("B")
    assert word.weight == 1.5
    assert method.weight == 1.75


def test_top_n_visited_and_unvisited():
    history, graph = _build_parse_graph()
    _navigate(history, graph, "B", ["parse"])
    _navigate(history, graph, "A", ["parse"])

    picks = graph.get_top_n_recommendations("A", 2, 10)

    assert picks == ["B", "C"]
    b_weight = graph.method_list.get("B").weight
    assert math.isclose(b_weight, 4.79525, rel_tol=1e-9)


def test_top_n_excludes_unactivated_methods():
    history, graph = _build_parse_graph()
    _navigate(history, graph, "A", ["parse"])

    picks = graph.get_top_n_recommendations("A", 5, 10)

    assert "D" not in picks
    assert "A" not in picks
    assert sorted(picks) == ["B", "C"]


def test_top_n_with_empty_history():
    _history, graph = _build_parse_graph()

    assert graph.get_top_n_recommendations("A", 3, 10) == []


def test_reset_clears_partitions():
    history, graph = _build_parse_graph()
    _navigate(history, graph, "A", ["parse"])

    graph.reset()

    assert graph.is_empty()
    assert graph.word_nodes() == []
    assert graph.history_nodes() == []
