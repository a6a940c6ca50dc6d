"""Tests for the command-line entry point."""
import re

from review_sentiment.cli import format_prediction, main
from review_sentiment.entities import Prediction, UnlabeledReview


def test_format_prediction():
    text = format_prediction(UnlabeledReview("t", "Nice one"), Prediction(True, 0.8765, 1.9623))
    assert text == ("Review: Nice one\n"
                    "Predicted Sentiment: Positive\n"
                    "Probability: 0.88\n"
                    "Score: 1.96\n")


def test_trains_then_prints_every_review(tmp_path, data_dir, capsys):
    model = tmp_path / "model.joblib"
    argv = ["--model", str(model),
            "--train", str(data_dir / "train-reviews-micro.csv"),
            "--test", str(data_dir / "test-reviews.csv")]
    assert main(argv) == 0
    assert model.is_file()

    out = capsys.readouterr().out
    blocks = [b for b in out.strip().split("\n\n") if b]
    assert len(blocks) == 4
    for block in blocks:
        lines = block.splitlines()
        assert lines[0].startswith("Review: ")
        assert lines[1] in ("Predicted Sentiment: Positive", "Predicted Sentiment: Negative")
        assert re.fullmatch(r"Probability: \d\.\d\d", lines[2])
        assert re.fullmatch(r"Score: -?\d+\.\d\d", lines[3])

    # second run loads the saved model and prints the same thing
    assert main(argv[:2] + ["--train", str(tmp_path / "gone.csv"), "--test", argv[5]]) == 0
    assert capsys.readouterr().out == out


def test_failure_exits_non_zero_without_output(tmp_path, capsys):
    argv = ["--model", str(tmp_path / "model.joblib"),
            "--train", str(tmp_path / "missing.csv"),
            "--test", str(tmp_path / "missing-test.csv")]
    assert main(argv) == 1
    assert capsys.readouterr().out == ""


def test_non_utf8_test_file_exits_non_zero(tmp_path, data_dir, capsys):
    test_file = tmp_path / "latin1.csv"
    test_file.write_bytes(b"Sent,Title,Review\ntrue,caf\xe9,Tr\xe8s bon\n")
    argv = ["--model", str(tmp_path / "model.joblib"),
            "--train", str(data_dir / "train-reviews-micro.csv"),
            "--test", str(test_file)]
    assert main(argv) == 1
    assert capsys.readouterr().out == ""


def test_model_path_that_is_a_directory_exits_non_zero(tmp_path, data_dir, capsys):
    model_dir = tmp_path / "model.joblib"
    model_dir.mkdir()
    argv = ["--model", str(model_dir),
            "--train", str(data_dir / "train-reviews-micro.csv"),
            "--test", str(data_dir / "test-reviews.csv")]
    assert main(argv) == 1
    assert capsys.readouterr().out == ""
