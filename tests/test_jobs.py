from pathlib import Path

from scent_trail.core.activation_graph import ActivationGraph
from scent_trail.core.jobs import (
    create_activation_graph,
    create_similarity_matrix,
    load_graph_snapshot_job,
    load_matrix_snapshot_job,
    save_graph_snapshot_job,
    save_matrix_snapshot_job,
)
from scent_trail.core.similarity_matrix import SimilarityMatrix
from scent_trail.errors import CorpusStoreError
from scent_trail.models.history import NavigationHistory
from scent_trail.storage.in_memory import InMemoryCorpusStore


def _store():
    store = InMemoryCorpusStore()
    for key, words in {"A": ["parse"], "B": ["parse", "token"], "C": ["parse", "render"]}.items():
        store.add_method(key)
        for word in words:
            store.add_word(key, word)
    return store


class BrokenStore(InMemoryCorpusStore):
    def all_words_and_ids(self):
        raise CorpusStoreError("corpus.db: disk I/O error")

    def all_methods_and_keys(self):
        raise CorpusStoreError("corpus.db: disk I/O error")


def test_create_activation_graph_links_words_and_history():
    history = NavigationHistory()
    history.add_key("B")
    graph = ActivationGraph(history)

    result = create_activation_graph(_store(), graph)

    assert result.ok
    assert [node.name for node in graph.word_nodes()] == ["parse", "token", "render"]
    parse = graph.word_list.get("parse")
    assert [child.name for child in parse.children] == ["A", "B", "C"]
    assert [node.name for node in graph.history_nodes()] == ["B"]
    assert [child.name for child in graph.history_nodes()[0].children] == ["parse", "token"]


def test_create_activation_graph_failure_resets_graph():
    graph = ActivationGraph()
    graph.link("old", "X")

    result = create_activation_graph(BrokenStore(), graph)

    assert not result.ok
    assert "disk I/O error" in result.message
    assert graph.is_empty()
    assert graph.word_nodes() == []


def test_create_similarity_matrix():
    matrix = SimilarityMatrix()

    result = create_similarity_matrix(_store(), matrix)

    assert result
    assert matrix.method_index == ["A", "B", "C"]
    assert matrix.cosine.shape == (3, 3)


def test_create_similarity_matrix_failure_resets_matrix():
    matrix = SimilarityMatrix()
    matrix.load(["x"], [[1.0]])

    result = create_similarity_matrix(BrokenStore(), matrix)

    assert not result.ok
    assert matrix.is_empty()


def test_graph_snapshot_jobs(tmp_path: Path):
    store = _store()
    source = ActivationGraph()
    create_activation_graph(store, source)
    path = tmp_path / "rs_pfis.sav"

    assert save_graph_snapshot_job(path, source).ok

    history = NavigationHistory()
    history.add_key("C")
    target = ActivationGraph(history)
    result = load_graph_snapshot_job(path, target, store)

    assert result.ok
    assert [node.name for node in target.word_nodes()] == ["parse", "token", "render"]
    assert [node.name for node in target.method_nodes()] == ["A", "B", "C"]
    assert [node.name for node in target.history_nodes()] == ["C"]


def test_load_corrupt_graph_snapshot_leaves_empty_graph(tmp_path: Path):
    path = tmp_path / "bad.sav"
    path.write_text("5\nWORD\tparse\n", encoding="utf-8")
    graph = ActivationGraph()
    graph.link("old", "X")

    result = load_graph_snapshot_job(path, graph)

    assert not result.ok
    assert "bad.sav" in result.message
    assert graph.is_empty()


def test_matrix_snapshot_jobs(tmp_path: Path):
    source = SimilarityMatrix()
    create_similarity_matrix(_store(), source)
    path = tmp_path / "matrix.sav"

    assert save_matrix_snapshot_job(path, source).ok

    target = SimilarityMatrix()
    assert load_matrix_snapshot_job(path, target).ok
    assert target.method_index == source.method_index
    assert (target.cosine == source.cosine).all()


def test_load_missing_matrix_snapshot(tmp_path: Path):
    matrix = SimilarityMatrix()
    matrix.load(["x"], [[1.0]])

    result = load_matrix_snapshot_job(tmp_path / "missing.sav", matrix)

    assert not result.ok
    assert matrix.is_empty()


def test_save_to_unwritable_path(tmp_path: Path):
    blocker = tmp_path / "file"
    blocker.write_text("", encoding="utf-8")
    graph = ActivationGraph()
    graph.link("parse", "A")

    result = save_graph_snapshot_job(blocker / "nested" / "rs_pfis.sav", graph)

    assert not result.ok


def test_load_binary_snapshots_fail_cleanly(tmp_path: Path):
    path = tmp_path / "binary.sav"
    path.write_bytes(b"1\nWORD\t\xff\xfe\n")
    graph = ActivationGraph()
    graph.link("old", "X")
    matrix = SimilarityMatrix()
    matrix.load(["x"], [[1.0]])

    graph_result = load_graph_snapshot_job(path, graph)
    matrix_result = load_matrix_snapshot_job(path, matrix)

    assert not graph_result.ok
    assert not matrix_result.ok
    assert "UTF-8" in graph_result.message
    assert graph.is_empty()
    assert matrix.is_empty()
