"""Pytest configuration and fixtures."""
from pathlib import Path

import pytest

from review_sentiment.entities import LabeledReview
from review_sentiment.pipeline import PipelineConfig, TrainingPipeline

DATA_DIR = Path(__file__).resolve().parent.parent / "Data"


@pytest.fixture
def micro_reviews():
    """The four-row dataset from the end-to-end scenario."""
    return [
        LabeledReview(True, "", "Great product"),
        LabeledReview(False, "", "Terrible service"),
        LabeledReview(True, "", "Loved it"),
        LabeledReview(False, "", "Awful experience"),
    ]


@pytest.fixture
def micro_artifact(micro_reviews):
    return TrainingPipeline(PipelineConfig()).train(micro_reviews)


@pytest.fixture
def data_dir():
    return DATA_DIR


@pytest.fixture
def write_csv(tmp_path):
    """Write CSV text to a temp file and return its path."""
    def _write(text, name="reviews.csv"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write
