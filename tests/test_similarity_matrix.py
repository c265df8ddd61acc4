import numpy
import pytest

from scent_trail.core.similarity_matrix import SimilarityMatrix
from scent_trail.models.history import NavigationHistory

COSINE = [
    [0.0, 0.8, 0.2],
    [0.8, 0.0, 0.5],
    [0.2, 0.5, 0.0],
]


def _matrix(keys):
    history = NavigationHistory()
    for key in keys:
        history.add_key(key)
    matrix = SimilarityMatrix(history)
    matrix.set_method_index(["m1", "m2", "m3"])
    matrix.set_cosine_similarity_matrix(COSINE)
    return matrix


def test_top_one_follows_current_row():
    matrix = _matrix(["m1"])

    assert matrix.get_top_n_recommendations("m1", 1, 1) == ["m2"]


def test_current_method_is_excluded():
    matrix = _matrix(["m1"])

    picks = matrix.get_top_n_recommendations("m1", 5, 1)

    assert picks == ["m2", "m3"]


def test_combined_history_column_decays():
    matrix = _matrix(["m1", "m2"])

    combined = matrix.get_combined_history_column(0.5, 2)

    assert combined.tolist() == pytest.approx([0.8, 0.4, 0.6])


def test_combined_history_column_honors_window():
    matrix = _matrix(["m1", "m2", "m3"])

    combined = matrix.get_combined_history_column(0.5, 1)

    assert combined.tolist() == pytest.approx(COSINE[2])


def test_unknown_history_key_is_skipped():
    matrix = _matrix(["m1", "zz"])

    combined = matrix.get_combined_history_column(0.5, 2)

    assert combined.tolist() == pytest.approx(COSINE[0])


def test_empty_history_and_empty_matrix():
    matrix = _matrix([])
    assert matrix.get_combined_history_column(0.9, 10).tolist() == [0.0, 0.0, 0.0]
    assert matrix.get_top_n_recommendations("m1", 3, 10) == []

    empty = SimilarityMatrix()
    assert empty.is_empty()
    assert empty.get_top_n_recommendations("m1", 3, 10) == []


def test_index_lookup_and_shape_validation():
    matrix = _matrix([])
    assert matrix.index_of("m3") == 2
    assert matrix.index_of("missing") == -1
    assert matrix.row("missing") is None

    with pytest.raises(ValueError):
        matrix.set_cosine_similarity_matrix([[1.0, 0.0]])
    with pytest.raises(ValueError):
        matrix.load(["m1"], numpy.eye(2))


def test_reset():
    matrix = _matrix(["m1"])
    matrix.reset()

    assert matrix.is_empty()
    assert matrix.size == 0
