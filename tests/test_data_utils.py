"""Tests for CSV ingestion."""
import pytest

from review_sentiment.data_utils import ReviewCsvReader, parse_label, stratified_split
from review_sentiment.entities import LabeledReview, UnlabeledReview
from review_sentiment.errors import IngestionError


class TestParseLabel:

    @pytest.mark.parametrize("raw", ["true", "True", "1", "positive", " yes "])
    def test_true_values(self, raw):
        assert parse_label(raw) is True

    @pytest.mark.parametrize("raw", ["false", "FALSE", "0", "negative", "no"])
    def test_false_values(self, raw):
        assert parse_label(raw) is False

    def test_unknown_value(self):
        with pytest.raises(ValueError):
            parse_label("maybe")


class TestReviewCsvReader:

    def test_reads_labeled_rows_in_order(self, write_csv):
        path = write_csv('Sent,Title,Review\ntrue,Nice,"Good, really good"\nfalse,,Bad\n')
        reviews = ReviewCsvReader().read_labeled(path)
        assert reviews == [
            LabeledReview(True, "Nice", "Good, really good"),
            LabeledReview(False, "", "Bad"),
        ]

    def test_reads_unlabeled_rows(self, write_csv):
        path = write_csv("Sent,Title,Review\ntrue,Nice,Good\nfalse,Meh,Bad\n")
        assert ReviewCsvReader().read_unlabeled(path) == [
            UnlabeledReview("Nice", "Good"),
            UnlabeledReview("Meh", "Bad"),
        ]

    def test_custom_column_mapping(self, write_csv):
        path = write_csv("body|label\nLovely|1\nAwful|0\n")
        reader = ReviewCsvReader(columns=(("body", 0), ("label", 1), ("title", 0)), sep="|")
        reviews = reader.read_labeled(path)
        assert [(r.label, r.body) for r in reviews] == [(True, "Lovely"), (False, "Awful")]

    def test_headerless_file(self, write_csv):
        path = write_csv("true,T,Great\n")
        reviews = ReviewCsvReader(has_header=False).read_labeled(path)
        assert reviews == [LabeledReview(True, "T", "Great")]

    def test_header_only_file_is_empty(self, write_csv):
        path = write_csv("Sent,Title,Review\n")
        assert ReviewCsvReader().read_labeled(path) == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(IngestionError):
            ReviewCsvReader().read_labeled(tmp_path / "nope.csv")

    def test_empty_file(self, write_csv):
        with pytest.raises(IngestionError):
            ReviewCsvReader().read_labeled(write_csv(""))

    def test_bad_label_names_the_row(self, write_csv):
        path = write_csv("Sent,Title,Review\ntrue,a,b\nsometimes,c,d\n")
        with pytest.raises(IngestionError, match="row 2"):
            ReviewCsvReader().read_labeled(path)

    def test_too_few_columns(self, write_csv):
        path = write_csv("Sent,Review\ntrue,Good\n")
        with pytest.raises(IngestionError):
            ReviewCsvReader().read_labeled(path)

    def test_non_utf8_file(self, tmp_path):
        path = tmp_path / "latin1.csv"
        path.write_bytes(b"Sent,Title,Review\ntrue,caf\xe9,Tr\xe8s bon\n")
        with pytest.raises(IngestionError, match="UTF-8"):
            ReviewCsvReader().read_labeled(path)

    def test_duplicate_field_mapping(self):
        with pytest.raises(ValueError):
            ReviewCsvReader(columns=(("body", 0), ("body", 1)))

    def test_shipped_sample_data(self, data_dir):
        train = ReviewCsvReader().read_labeled(data_dir / "train-reviews-micro.csv")
        test = ReviewCsvReader().read_unlabeled(data_dir / "test-reviews.csv")
        assert len(train) == 16
        assert {r.label for r in train} == {True, False}
        assert test[3].body == "Awful service, rude support and no refund"


def test_stratified_split_keeps_both_classes():
    reviews = [LabeledReview(i % 2 == 0, "", f"text {i}") for i in range(20)]
    train, test = stratified_split(reviews, test_size=0.2, seed=0)
    assert len(train) == 16 and len(test) == 4
    assert {r.label for r in test} == {True, False}
