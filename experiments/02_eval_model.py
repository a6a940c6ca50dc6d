from pathlib import Path
import argparse
import pandas as pd
from review_sentiment.classic import load_model
from review_sentiment.data_utils import ReviewCsvReader
from review_sentiment.metrics import compute_metrics, save_json, plot_confusion
from review_sentiment.pipeline import InferencePipeline

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--csv", required=True, help="labeled reviews to score")
    ap.add_argument("--model", required=True, help=".joblib saved by 01_train_sdca or the CLI")
    ap.add_argument("--out", required=True)
    args = ap.parse_args()

    out = Path(args.out); out.mkdir(parents=True, exist_ok=True)

    reviews = ReviewCsvReader().read_labeled(args.csv)
    artifact = load_model(args.model)
    preds = InferencePipeline().predict_many(artifact, reviews)

    y_true = [r.label for r in reviews]
    y_pred = [p.predicted_label for p in preds]
    save_json(compute_metrics(y_true, y_pred, [p.probability for p in preds]), out / "eval_metrics.json")
    plot_confusion(y_true, y_pred, out / "eval_cm.png", title="EVAL")

    pd.DataFrame({
        "text": [r.body for r in reviews],
        "y_true": y_true,
        "y_pred": y_pred,
        "proba_pos": [p.probability for p in preds],
        "score": [p.score for p in preds],
    }).to_csv(out / "eval_predictions.csv", index=False)
    print("[OK] Evaluation written to", out)

if __name__ == "__main__":
    main()
