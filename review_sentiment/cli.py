import argparse
import logging
import sys
from pathlib import Path

from .data_utils import ReviewCsvReader
from .errors import SentimentError
from .pipeline import ModelSession, PipelineConfig

log = logging.getLogger("review_sentiment")


def format_prediction(review, prediction) -> str:
    return (f"Review: {review.body}\n"
            f"Predicted Sentiment: {prediction.sentiment}\n"
            f"Probability: {prediction.probability:.2f}\n"
            f"Score: {prediction.score:.2f}\n")


def build_parser() -> argparse.ArgumentParser:
    defaults = PipelineConfig()
    ap = argparse.ArgumentParser(description="Binary sentiment classifier for short reviews")
    ap.add_argument("--model", type=Path, default=defaults.model_path,
                    help="persisted model; trained and written here when absent")
    ap.add_argument("--train", type=Path, default=defaults.train_path, help="labeled training CSV")
    ap.add_argument("--test", type=Path, default=defaults.test_path, help="CSV of reviews to score")
    ap.add_argument("--include-title", action="store_true",
                    help="featurize title + body instead of body only (training only)")
    ap.add_argument("--verbose", action="store_true")
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s | %(levelname)-8s | %(message)s",
        datefmt="%H:%M:%S",
    )
    config = PipelineConfig(model_path=args.model, train_path=args.train,
                            test_path=args.test, include_title=args.include_title)
    reader = ReviewCsvReader()
    session = ModelSession(config, reader)
    try:
        session.ensure_ready()
        reviews = reader.read_unlabeled(config.test_path)
        predictions = session.predict_many(reviews)
    except (SentimentError, OSError) as exc:
        log.error("%s: %s", type(exc).__name__, exc)
        return 1

    for review, prediction in zip(reviews, predictions):
        print(format_prediction(review, prediction))
    return 0


if __name__ == "__main__":
    sys.exit(main())
