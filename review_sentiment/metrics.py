from __future__ import annotations
from pathlib import Path
import json
import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from sklearn.metrics import (accuracy_score, brier_score_loss, classification_report,
                             confusion_matrix, f1_score, log_loss, roc_auc_score)

SENTIMENTS = [False, True]
SENTIMENT_NAMES = ["Negative", "Positive"]


def compute_metrics(y_true, y_pred, y_prob=None) -> dict:
    """Label metrics for a sentiment run; probability metrics too when ``y_prob`` is given.

    ``y_prob`` holds P(positive) per review. ROC AUC is left out when only one
    class is present, since it is undefined there.
    """
    y_true = np.asarray(y_true, dtype=bool)
    y_pred = np.asarray(y_pred, dtype=bool)
    tn, fp, fn, tp = confusion_matrix(y_true, y_pred, labels=SENTIMENTS).ravel()
    out = {
        "n": int(len(y_true)),
        "positive_rate": float(y_true.mean()) if len(y_true) else 0.0,
        "accuracy": accuracy_score(y_true, y_pred),
        "macro_f1": f1_score(y_true, y_pred, labels=SENTIMENTS, average="macro", zero_division=0),
        "confusion": {"tn": int(tn), "fp": int(fp), "fn": int(fn), "tp": int(tp)},
        "report": classification_report(
            y_true, y_pred, labels=SENTIMENTS, target_names=SENTIMENT_NAMES,
            output_dict=True, zero_division=0),
    }
    if y_prob is not None:
        y_prob = np.asarray(y_prob, dtype=np.float64)
        out["log_loss"] = log_loss(y_true, y_prob, labels=SENTIMENTS)
        out["brier"] = brier_score_loss(y_true, y_prob, pos_label=True)
        if len(np.unique(y_true)) == 2:
            out["roc_auc"] = roc_auc_score(y_true, y_prob)
    return out


def save_json(obj, path: str | Path):
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(obj, f, indent=2, ensure_ascii=False, default=float)


def plot_confusion(y_true, y_pred, out_path: str | Path, title="Confusion Matrix"):
    """Two-by-two Negative/Positive matrix with counts written in each cell."""
    cm = confusion_matrix(y_true, y_pred, labels=SENTIMENTS)
    fig, ax = plt.subplots(figsize=(4, 4))
    ax.imshow(cm, cmap="Blues")
    ax.set_xticks([0, 1], SENTIMENT_NAMES)
    ax.set_yticks([0, 1], SENTIMENT_NAMES)
    ax.set_xlabel("Predicted sentiment")
    ax.set_ylabel("True sentiment")
    ax.set_title(title)
    thresh = cm.max() / 2 if cm.size else 0
    for (i, j), count in np.ndenumerate(cm):
        ax.text(j, i, str(count), ha="center", va="center",
                color="white" if count > thresh else "black")
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(out_path, bbox_inches="tight")
    plt.close(fig)
    return cm
