from __future__ import annotations
import logging
import os
import pickle
import tempfile
from pathlib import Path
from dataclasses import dataclass
from sklearn.exceptions import NotFittedError
from sklearn.pipeline import Pipeline
from sklearn.utils.validation import check_is_fitted
import joblib

from .errors import InvalidArtifactError
from .features import ReviewVectorizer
from .sdca import SdcaLogisticRegression

log = logging.getLogger(__name__)


@dataclass
class ClassicConfig:
    ngram_range: tuple[int,int]=(1,2)
    char_ngram_range: tuple[int,int] | None=None  # (3,3) adds char_wb trigrams
    weighting: str="tf"
    norm: str | None="l2"
    min_frequency: int=1
    max_vocabulary_size: int | None=None
    strip_accents: bool=True
    l2_regularization: float=1e-2
    max_iter: int=500
    tol: float=1e-4
    seed: int=42

def build_pipeline(cfg: ClassicConfig) -> Pipeline:
    pipe = Pipeline([
        ("featurize", ReviewVectorizer(
            ngram_range=cfg.ngram_range, char_ngram_range=cfg.char_ngram_range, weighting=cfg.weighting, norm=cfg.norm,
            min_frequency=cfg.min_frequency, max_vocabulary_size=cfg.max_vocabulary_size,
            strip_accents=cfg.strip_accents
        )),
        ("clf", SdcaLogisticRegression(
            l2_regularization=cfg.l2_regularization, max_iter=cfg.max_iter,
            tol=cfg.tol, random_state=cfg.seed
        ))
    ])
    return pipe


@dataclass(frozen=True)
class ModelArtifact:
    """Fitted featurizer + classifier, plus the text policy they were fitted with."""
    model: Pipeline
    include_title: bool = False

    @property
    def vectorizer(self) -> ReviewVectorizer:
        return self.model.named_steps["featurize"]

    @property
    def classifier(self) -> SdcaLogisticRegression:
        return self.model.named_steps["clf"]

    def validate(self) -> "ModelArtifact":
        if not isinstance(self.model, Pipeline):
            raise InvalidArtifactError(f"expected a Pipeline, got {type(self.model).__name__}")
        steps = self.model.named_steps
        if not isinstance(steps.get("featurize"), ReviewVectorizer):
            raise InvalidArtifactError("artifact has no 'featurize' step")
        if not isinstance(steps.get("clf"), SdcaLogisticRegression):
            raise InvalidArtifactError("artifact has no 'clf' step")
        try:
            check_is_fitted(self.vectorizer, "vocabulary_")
            check_is_fitted(self.classifier, "coef_")
        except NotFittedError as exc:
            raise InvalidArtifactError(f"artifact is not fitted: {exc}") from exc
        vocab, weights = len(self.vectorizer.vocabulary_), len(self.classifier.coef_)
        if vocab != weights:
            raise InvalidArtifactError(
                f"vocabulary size {vocab} does not match weight vector length {weights}")
        return self


def save_model(artifact: ModelArtifact, path: str | Path):
    artifact.validate()
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    os.close(fd)
    try:
        joblib.dump(artifact, tmp)
        os.replace(tmp, path)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise
    log.info("model saved to %s", path)

def load_model(path: str | Path) -> ModelArtifact:
    try:
        obj = joblib.load(path)
    except FileNotFoundError:
        raise
    except (pickle.UnpicklingError, EOFError, ValueError, KeyError, IndexError,
            AttributeError, ImportError, TypeError, OSError) as exc:
        raise InvalidArtifactError(f"cannot read model from {path}: {exc}") from exc
    if not isinstance(obj, ModelArtifact):
        raise InvalidArtifactError(f"{path} holds a {type(obj).__name__}, not a model artifact")
    log.info("model loaded from %s", path)
    return obj.validate()
