"""TF-IDF 向量与余弦相似度矩阵的构建。"""

from __future__ import annotations

import logging
from typing import Dict, List, Tuple

import numpy
from gensim.corpora import Dictionary
from gensim.similarities import MatrixSimilarity

from ..storage.base import CorpusStore

logger = logging.getLogger(__name__)


def build_weight_vectors(store: CorpusStore) -> Tuple[List[str], List[Dict[str, float]]]:
    """按方法登记顺序返回 (方法索引, 每个方法的 词 → TF-IDF 权重)。"""

    method_index: List[str] = []
    vectors: List[Dict[str, float]] = []
    for _method_id, key in store.all_methods_and_keys():
        method_index.append(key)
        vectors.append(store.weight_vector(key))
    return method_index, vectors


def build_cosine_matrix(vectors: List[Dict[str, float]]) -> numpy.ndarray:
    """两两余弦相似度，float32 方阵。

    - 向量先按 gensim 词典编号转成稀疏 BoW 形式，再交给 MatrixSimilarity；
    - 全零向量与任何向量（含自身）的相似度都记 0；
    - 结果按 (S + Sᵀ) / 2 对称化，消除浮点误差造成的不对称。
    """

    size = len(vectors)
    if size == 0:
        return numpy.zeros((0, 0), dtype=numpy.float32)

    dictionary = Dictionary([sorted(vector) for vector in vectors])
    if len(dictionary) == 0:
        return numpy.zeros((size, size), dtype=numpy.float32)

    corpus = [
        sorted(
            (dictionary.token2id[word], float(weight))
            for word, weight in vector.items()
            if weight != 0.0
        )
        for vector in vectors
    ]
    index = MatrixSimilarity(corpus, num_features=len(dictionary), dtype=numpy.float32)
    similarities = numpy.asarray(index[corpus], dtype=numpy.float32).reshape((size, size))

    # 全零向量归一化后仍为零，这里只需要清掉可能的 NaN
    similarities = numpy.nan_to_num(similarities, nan=0.0)
    symmetric = ((similarities + similarities.T) / 2).astype(numpy.float32)
    # float32 归一化误差会让自相似度略大于 1
    numpy.clip(symmetric, 0.0, 1.0, out=symmetric)
    logger.info("Built %dx%d cosine matrix over %d words", size, size, len(dictionary))
    return symmetric
