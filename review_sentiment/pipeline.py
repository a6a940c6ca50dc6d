from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional, Sequence

import numpy as np

from .classic import ClassicConfig, ModelArtifact, build_pipeline, load_model, save_model
from .data_utils import ReviewCsvReader
from .entities import LabeledReview, Prediction, UnlabeledReview, review_text
from .errors import EmptyDatasetError

log = logging.getLogger(__name__)

DATA_DIR = Path("Data")


@dataclass
class PipelineConfig:
    model_path: Path = Path("model.joblib")
    train_path: Path = DATA_DIR / "train-reviews-micro.csv"
    test_path: Path = DATA_DIR / "test-reviews.csv"
    include_title: bool = False
    model: ClassicConfig = field(default_factory=ClassicConfig)


class TrainingPipeline:
    def __init__(self, config: Optional[PipelineConfig] = None):
        self.config = config or PipelineConfig()

    def train(self, dataset: Sequence[LabeledReview]) -> ModelArtifact:
        dataset = list(dataset)
        if not dataset:
            raise EmptyDatasetError("cannot train on an empty dataset")
        texts = [review_text(r, self.config.include_title) for r in dataset]
        labels = np.array([r.label for r in dataset], dtype=bool)

        log.info("training on %d reviews (%d positive)", len(dataset), int(labels.sum()))
        model = build_pipeline(self.config.model)
        model.fit(texts, labels)

        artifact = ModelArtifact(model=model, include_title=self.config.include_title).validate()
        clf = artifact.classifier
        log.info("trained: vocabulary=%d epochs=%d gap=%.2e",
                 len(artifact.vectorizer.vocabulary_), clf.n_iter_, clf.duality_gap_)
        return artifact


class InferencePipeline:
    """Scores reviews against a fitted artifact. Holds no state of its own."""

    def predict(self, artifact: ModelArtifact, item: UnlabeledReview) -> Prediction:
        artifact.validate()
        X = artifact.vectorizer.transform([review_text(item, artifact.include_title)])
        return artifact.classifier.predict_one(X)

    def predict_many(self, artifact: ModelArtifact, items: Iterable[UnlabeledReview]) -> list[Prediction]:
        artifact.validate()
        texts = [review_text(i, artifact.include_title) for i in items]
        if not texts:
            return []
        return artifact.classifier.predict_many(artifact.vectorizer.transform(texts))


class ModelState(Enum):
    NO_MODEL = "no_model"
    TRAINING = "training"
    LOADING = "loading"
    MODEL_READY = "model_ready"


class ModelSession:
    """Owns the one artifact of a process: loads it if persisted, trains and saves it otherwise."""

    def __init__(self, config: Optional[PipelineConfig] = None, reader: Optional[ReviewCsvReader] = None):
        self.config = config or PipelineConfig()
        self.reader = reader or ReviewCsvReader()
        self.state = ModelState.NO_MODEL
        self.artifact: Optional[ModelArtifact] = None
        self._inference = InferencePipeline()

    def ensure_ready(self) -> ModelArtifact:
        if self.state is ModelState.MODEL_READY:
            return self.artifact
        if self.state is not ModelState.NO_MODEL:
            raise RuntimeError(f"model preparation already in progress ({self.state.value})")

        path = Path(self.config.model_path)
        try:
            if path.is_file():
                self.state = ModelState.LOADING
                artifact = load_model(path)
            else:
                self.state = ModelState.TRAINING
                log.info("no model at %s, training from %s", path, self.config.train_path)
                dataset = self.reader.read_labeled(self.config.train_path)
                artifact = TrainingPipeline(self.config).train(dataset)
                save_model(artifact, path)
        except Exception:
            self.state = ModelState.NO_MODEL
            raise
        self.artifact = artifact
        self.state = ModelState.MODEL_READY
        return artifact

    def predict(self, item: UnlabeledReview) -> Prediction:
        return self._inference.predict(self.ensure_ready(), item)

    def predict_many(self, items: Iterable[UnlabeledReview]) -> list[Prediction]:
        return self._inference.predict_many(self.ensure_ready(), items)
