from .classic import ClassicConfig, ModelArtifact, build_pipeline, load_model, save_model
from .entities import LabeledReview, Prediction, UnlabeledReview
from .errors import (EmptyDatasetError, IngestionError, InsufficientDataError,
                     InvalidArtifactError, SentimentError)
from .pipeline import InferencePipeline, ModelSession, ModelState, PipelineConfig, TrainingPipeline

__all__ = [
    "ClassicConfig", "ModelArtifact", "build_pipeline", "load_model", "save_model",
    "LabeledReview", "Prediction", "UnlabeledReview",
    "EmptyDatasetError", "IngestionError", "InsufficientDataError",
    "InvalidArtifactError", "SentimentError",
    "InferencePipeline", "ModelSession", "ModelState", "PipelineConfig", "TrainingPipeline",
]
