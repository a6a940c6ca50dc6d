from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class LabeledReview:
    label: bool
    title: str
    body: str


@dataclass(frozen=True)
class UnlabeledReview:
    title: str
    body: str


@dataclass(frozen=True)
class Prediction:
    predicted_label: bool
    probability: float
    score: float

    @property
    def sentiment(self) -> str:
        return "Positive" if self.predicted_label else "Negative"


def review_text(review: LabeledReview | UnlabeledReview, include_title: bool = False) -> str:
    """Text that gets featurized for a review: the body, optionally prefixed by the title."""
    if include_title and review.title:
        return f"{review.title} {review.body}"
    return review.body
