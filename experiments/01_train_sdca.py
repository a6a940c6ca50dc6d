from pathlib import Path
import argparse
from review_sentiment.classic import ClassicConfig, ModelArtifact, build_pipeline, save_model
from review_sentiment.data_utils import ReviewCsvReader, stratified_split
from review_sentiment.entities import review_text
from review_sentiment.errors import EmptyDatasetError
from review_sentiment.metrics import compute_metrics, save_json, plot_confusion

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--csv", required=True, help="labeled reviews, e.g. Data/train-reviews-micro.csv")
    ap.add_argument("--out", required=True, help="output dir, e.g. runs/sdca_baseline")
    ap.add_argument("--include-title", action="store_true")
    ap.add_argument("--test-size", type=float, default=0.25)
    # hiperparâmetros rápidos por CLI
    ap.add_argument("--ngram_min", type=int, default=1)
    ap.add_argument("--ngram_max", type=int, default=2)
    ap.add_argument("--weighting", choices=["tf", "tfidf"], default="tf")
    ap.add_argument("--max_vocab", type=int, default=None)
    ap.add_argument("--l2", type=float, default=1e-2)
    ap.add_argument("--seed", type=int, default=42)
    args = ap.parse_args()

    out = Path(args.out); out.mkdir(parents=True, exist_ok=True)

    # 1) dados e splits
    reviews = ReviewCsvReader().read_labeled(args.csv)
    if not reviews:
        raise EmptyDatasetError(f"no rows in {args.csv}")
    train, test = stratified_split(reviews, test_size=args.test_size, seed=args.seed)

    # 2) featurizer + SDCA
    cfg = ClassicConfig(ngram_range=(args.ngram_min, args.ngram_max), weighting=args.weighting,
                        max_vocabulary_size=args.max_vocab, l2_regularization=args.l2, seed=args.seed)
    model = build_pipeline(cfg)
    model.fit([review_text(r, args.include_title) for r in train], [r.label for r in train])

    # 3) avaliar
    for split_name, part in [("train", train), ("test", test)]:
        y_true = [r.label for r in part]
        texts = [review_text(r, args.include_title) for r in part]
        y_pred = model.predict(texts)
        y_prob = model.predict_proba(texts)[:, 1]
        save_json(compute_metrics(y_true, y_pred, y_prob), out / f"{split_name}_metrics.json")
        plot_confusion(y_true, y_pred, out / f"{split_name}_cm.png",
                       title=f"{split_name} — SDCA logistic regression")

    clf = model.named_steps["clf"]
    save_json({
        "epochs": clf.n_iter_,
        "duality_gap": clf.duality_gap_,
        "converged": clf.converged_,
        "vocabulary_size": len(model.named_steps["featurize"].vocabulary_),
        "params": {
            "ngram_range": [args.ngram_min, args.ngram_max],
            "weighting": args.weighting,
            "max_vocab": args.max_vocab,
            "l2": args.l2,
            "include_title": args.include_title,
        }
    }, out / "training_info.json")

    save_model(ModelArtifact(model=model, include_title=args.include_title), out / "model.joblib")
    print(f"[OK] treinado SDCA (gap={clf.duality_gap_:.1e}, epochs={clf.n_iter_}) → {out}")

if __name__ == "__main__":
    main()
