from __future__ import annotations
import logging
from pathlib import Path
import pandas as pd
from sklearn.model_selection import train_test_split

from .entities import LabeledReview, UnlabeledReview
from .errors import IngestionError

log = logging.getLogger(__name__)

# field name -> column position, in file order
REVIEW_COLUMNS = (("label", 0), ("title", 1), ("body", 2))

TRUE_LABELS = {"true", "1", "positive", "pos", "yes"}
FALSE_LABELS = {"false", "0", "negative", "neg", "no"}


def parse_label(value: str) -> bool:
    v = str(value).strip().lower()
    if v in TRUE_LABELS:
        return True
    if v in FALSE_LABELS:
        return False
    raise ValueError(f"unrecognised label {value!r}")


class ReviewCsvReader:
    """Reads delimited review files through an explicit column-to-field table."""

    def __init__(self, columns=REVIEW_COLUMNS, sep: str = ",", has_header: bool = True):
        self.columns = tuple(columns)
        self.sep = sep
        self.has_header = has_header
        fields = [f for f, _ in self.columns]
        if len(set(fields)) != len(fields):
            raise ValueError(f"duplicate field in column mapping {self.columns!r}")

    def _position(self, field: str) -> int:
        for name, pos in self.columns:
            if name == field:
                return pos
        raise IngestionError(f"column mapping has no '{field}' field")

    def _read_frame(self, path: str | Path) -> pd.DataFrame:
        try:
            df = pd.read_csv(
                path, sep=self.sep, header=0 if self.has_header else None,
                dtype=str, keep_default_na=False,
            )
        except FileNotFoundError as exc:
            raise IngestionError(f"review file not found: {path}") from exc
        except pd.errors.EmptyDataError as exc:
            raise IngestionError(f"review file is empty: {path}") from exc
        except pd.errors.ParserError as exc:
            raise IngestionError(f"malformed review file {path}: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise IngestionError(f"{path} is not valid UTF-8: {exc}") from exc
        width = df.shape[1]
        for name, pos in self.columns:
            if pos >= width:
                raise IngestionError(
                    f"{path}: field '{name}' mapped to column {pos} but rows have {width} columns")
        return df

    def _column(self, df: pd.DataFrame, field: str) -> list[str]:
        return df.iloc[:, self._position(field)].tolist()

    def read_labeled(self, path: str | Path) -> list[LabeledReview]:
        df = self._read_frame(path)
        labels = self._column(df, "label")
        titles = self._column(df, "title")
        bodies = self._column(df, "body")
        reviews = []
        for row, (label, title, body) in enumerate(zip(labels, titles, bodies), start=1):
            try:
                parsed = parse_label(label)
            except ValueError as exc:
                raise IngestionError(f"{path}: row {row}: {exc}") from exc
            reviews.append(LabeledReview(label=parsed, title=title, body=body))
        log.info("read %d labeled reviews from %s", len(reviews), path)
        return reviews

    def read_unlabeled(self, path: str | Path) -> list[UnlabeledReview]:
        df = self._read_frame(path)
        reviews = [UnlabeledReview(title=t, body=b)
                   for t, b in zip(self._column(df, "title"), self._column(df, "body"))]
        log.info("read %d reviews from %s", len(reviews), path)
        return reviews


def stratified_split(reviews: list[LabeledReview], test_size=0.2, seed=42):
    labels = [r.label for r in reviews]
    train, test = train_test_split(reviews, test_size=test_size, random_state=seed, stratify=labels)
    return list(train), list(test)
