import argparse
import pandas as pd
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

ap = argparse.ArgumentParser()
ap.add_argument("--predictions", required=True, help="eval_predictions.csv from 02_eval_model")
ap.add_argument("--hist", default=None, help="optional path for a probability histogram")
args = ap.parse_args()

df = pd.read_csv(args.predictions)

fns = df[(df.y_true) & (~df.y_pred)].sort_values("proba_pos").head(3)
fps = df[(~df.y_true) & (df.y_pred)].sort_values("proba_pos", ascending=False).head(3)
print("FNs:\n", fns[["text","proba_pos","score"]], "\n")
print("FPs:\n", fps[["text","proba_pos","score"]])

if args.hist:
    plt.figure()
    df[df.y_true]["proba_pos"].hist(alpha=0.6, bins=20, label="Positive (true)")
    df[~df.y_true]["proba_pos"].hist(alpha=0.6, bins=20, label="Negative (true)")
    plt.axvline(0.5, linestyle="--")
    plt.title("Probability distribution — line = 0.5 decision threshold")
    plt.xlabel("proba_pos"); plt.ylabel("count"); plt.legend(); plt.tight_layout()
    plt.savefig(args.hist, dpi=150)
    print("saved", args.hist)
