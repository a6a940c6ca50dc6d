from __future__ import annotations
from collections import Counter
import numpy as np
import scipy.sparse as sp
from sklearn.base import BaseEstimator, TransformerMixin
from sklearn.feature_extraction.text import CountVectorizer, TfidfTransformer
from sklearn.utils.validation import check_is_fitted

TOKEN_PATTERN = r"[^\W_]+"
CHAR_PREFIX = "char:"
WEIGHTINGS = ("tf", "tfidf")
NORMS = ("l2", None)


class ReviewVectorizer(TransformerMixin, BaseEstimator):
    """Bag-of-n-grams featurizer with a first-seen-order vocabulary.

    Documents are lowercased, optionally stripped of accents and split on
    non-alphanumeric boundaries; word n-grams in ``ngram_range`` become
    tokens. With ``char_ngram_range`` set, ``char_wb`` n-grams are added as
    well, named ``"char:<gram>"`` in the vocabulary. Word tokens take the
    first dimensions, character grams follow, each block in the order the
    tokens were first met during ``fit``. Tokens never seen at fit time are
    ignored by ``transform``.

    Counting and weighting are done by ``CountVectorizer`` with the fitted
    vocabulary fixed, followed by ``TfidfTransformer``.
    """

    def __init__(self, ngram_range=(1, 2), char_ngram_range=None, weighting="tf", norm="l2",
                 min_frequency=1, max_vocabulary_size=None, strip_accents=True):
        self.ngram_range = ngram_range
        self.char_ngram_range = char_ngram_range
        self.weighting = weighting
        self.norm = norm
        self.min_frequency = min_frequency
        self.max_vocabulary_size = max_vocabulary_size
        self.strip_accents = strip_accents

    def _word_counter(self, vocabulary=None) -> CountVectorizer:
        return CountVectorizer(
            lowercase=True, strip_accents="unicode" if self.strip_accents else None,
            token_pattern=TOKEN_PATTERN, ngram_range=tuple(self.ngram_range),
            vocabulary=vocabulary,
        )

    def _char_counter(self, vocabulary=None) -> CountVectorizer:
        return CountVectorizer(
            analyzer="char_wb", lowercase=True, token_pattern=None,
            strip_accents="unicode" if self.strip_accents else None,
            ngram_range=tuple(self.char_ngram_range), vocabulary=vocabulary,
        )

    def tokenize(self, text: str) -> list[str]:
        text = text or ""
        tokens = self._word_counter().build_analyzer()(text)
        if self.char_ngram_range is not None:
            tokens += [CHAR_PREFIX + g for g in self._char_counter().build_analyzer()(text)]
        return tokens

    def _check_params(self):
        if self.weighting not in WEIGHTINGS:
            raise ValueError(f"weighting must be one of {WEIGHTINGS}, got {self.weighting!r}")
        if self.norm not in NORMS:
            raise ValueError(f"norm must be one of {NORMS}, got {self.norm!r}")
        ranges = [self.ngram_range]
        if self.char_ngram_range is not None:
            ranges.append(self.char_ngram_range)
        for lo, hi in ranges:
            if lo < 1 or hi < lo:
                raise ValueError(f"invalid n-gram range {(lo, hi)!r}")
        if self.max_vocabulary_size is not None and self.max_vocabulary_size < 1:
            raise ValueError("max_vocabulary_size must be positive or None")

    def fit(self, raw_documents, y=None):
        self._check_params()
        raw_documents = _as_corpus(raw_documents)

        counts = Counter()
        first_seen = {}
        for doc in raw_documents:
            tokens = self.tokenize(doc)
            counts.update(tokens)
            for tok in tokens:
                first_seen.setdefault(tok, len(first_seen))

        kept = [t for t in first_seen if counts[t] >= self.min_frequency]
        if self.max_vocabulary_size is not None and len(kept) > self.max_vocabulary_size:
            # most frequent first, ties by first appearance
            ranked = sorted(kept, key=lambda t: (-counts[t], first_seen[t]))
            survivors = set(ranked[:self.max_vocabulary_size])
            kept = [t for t in kept if t in survivors]

        words = [t for t in kept if not t.startswith(CHAR_PREFIX)]
        grams = [t[len(CHAR_PREFIX):] for t in kept if t.startswith(CHAR_PREFIX)]
        self.vocabulary_ = {tok: i for i, tok in enumerate(words + [CHAR_PREFIX + g for g in grams])}

        self.counters_ = []
        if words:
            self.counters_.append(self._word_counter({t: i for i, t in enumerate(words)}))
        if grams:
            self.counters_.append(self._char_counter({g: i for i, g in enumerate(grams)}))
        counts_matrix = self._count(raw_documents, fit=True)

        self.weighter_ = None
        if self.vocabulary_:
            self.weighter_ = TfidfTransformer(
                norm=self.norm, use_idf=self.weighting == "tfidf", smooth_idf=True,
            ).fit(counts_matrix)
        return self

    def _count(self, docs, fit=False):
        if not self.counters_:
            return sp.csr_matrix((len(docs), 0), dtype=np.float64)
        blocks = [c.fit_transform(docs) if fit else c.transform(docs) for c in self.counters_]
        return sp.hstack(blocks, format="csr", dtype=np.float64)

    def transform(self, raw_documents):
        check_is_fitted(self, "vocabulary_")
        raw_documents = _as_corpus(raw_documents)
        X = self._count(raw_documents)
        if self.weighter_ is not None:
            X = self.weighter_.transform(X)
        return sp.csr_matrix(X, dtype=np.float64)

    def transform_one(self, text: str) -> np.ndarray:
        return self.transform([text]).toarray()[0]

    def get_feature_names_out(self, input_features=None):
        check_is_fitted(self, "vocabulary_")
        return np.array(list(self.vocabulary_), dtype=object)


def _as_corpus(raw_documents) -> list[str]:
    if isinstance(raw_documents, str):
        raise ValueError("Iterable over raw text documents expected, string object received.")
    return ["" if d is None else str(d) for d in raw_documents]
