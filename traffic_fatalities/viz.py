from __future__ import annotations
import logging, os
from typing import Optional, Tuple
import numpy as np
import pandas as pd
import matplotlib.pyplot as plt

from traffic_fatalities import metrics

log = logging.getLogger(__name__)

PlotResult = Tuple[plt.Figure, plt.Axes, Optional[str]]

def _ensure_dir(p: Optional[str]) -> None:
    if p:
        d = os.path.dirname(p)
        if d and not os.path.exists(d):
            os.makedirs(d, exist_ok=True)

def _finish(fig: plt.Figure, ax: plt.Axes, out_path, show: bool) -> PlotResult:
    fig.tight_layout()
    saved = None
    if out_path:
        out_path = str(out_path)
        _ensure_dir(out_path)
        fig.savefig(out_path, dpi=150)
        saved = out_path
        log.info("saved %s", out_path)
    if show:
        plt.show()
    else:
        plt.close(fig)
    return fig, ax, saved

def _nonempty(df: pd.DataFrame, what: str) -> None:
    if len(df) == 0:
        raise ValueError(f"nothing to plot for {what}: table is empty")


def plot_victim_type_bar(df: pd.DataFrame, out_path=None, show: bool = False) -> PlotResult:
    """Fatalities per victim type, least common first."""
    _nonempty(df, "victim types")
    counts = metrics.victim_type_counts(df)
    fig, ax = plt.subplots(figsize=(8, 4))
    ax.bar([str(c) for c in counts.index], counts.values)
    ax.set_title("Fatalities by victim type")
    ax.set_xlabel("Victim type")
    ax.set_ylabel("Fatalities")
    return _finish(fig, ax, out_path, show)

def plot_gender_bar(df: pd.DataFrame, out_path=None, show: bool = False) -> PlotResult:
    _nonempty(df, "gender")
    counts = metrics.gender_counts(df)
    fig, ax = plt.subplots(figsize=(6, 4))
    ax.bar(counts.index.astype(str), counts.values)
    ax.set_title("Fatalities by gender")
    ax.set_ylabel("Fatalities")
    return _finish(fig, ax, out_path, show)

def plot_age_histogram(df: pd.DataFrame, out_path=None, show: bool = False, *, bins: int = 20) -> PlotResult:
    ages = df["age"].dropna() if "age" in df.columns else pd.Series(dtype=float)
    _nonempty(ages, "age")
    fig, ax = plt.subplots(figsize=(7, 4))
    ax.hist(ages.to_numpy(), bins=bins, edgecolor="k")
    ax.set_title("Age of victims")
    ax.set_xlabel("Age")
    ax.set_ylabel("Fatalities")
    return _finish(fig, ax, out_path, show)

def plot_child_adult_pie(df: pd.DataFrame, out_path=None, show: bool = False) -> PlotResult:
    _nonempty(df, "child/adult")
    shares = metrics.child_adult_shares(df)
    fig, ax = plt.subplots(figsize=(5, 5))
    ax.pie(shares.values, labels=shares.index.astype(str), autopct="%1.0f%%")
    ax.set_title("Children vs adults")
    return _finish(fig, ax, out_path, show)

def plot_dow_hour_heatmap(df: pd.DataFrame, out_path=None, show: bool = False) -> PlotResult:
    """
    Heatmap for DoW x Hour over records with a timestamp.
    Expects enriched columns dow/hour.
    """
    _nonempty(df, "day/hour heatmap")
    vol = metrics.dow_hour_table(df)
    fig, ax = plt.subplots(figsize=(10, 4))
    im = ax.imshow(vol.values, aspect="auto")
    ax.set_title("Fatalities heatmap (DoW × Hour)")
    ax.set_ylabel("DoW (0=Mon)")
    ax.set_xlabel("Hour")
    ax.set_yticks(range(7))
    fig.colorbar(im, ax=ax)
    return _finish(fig, ax, out_path, show)

def plot_age_frequency_polygons(
    df: pd.DataFrame,
    out_path=None,
    show: bool = False,
    *,
    by: str = "gender_label",
    bin_width: int = 10,
) -> PlotResult:
    table = metrics.age_frequency_polygons(df, by=by, bin_width=bin_width)
    _nonempty(table, "age polygons")
    fig, ax = plt.subplots(figsize=(8, 4))
    for group in table.columns:
        ax.plot(table.index.to_numpy(), table[group].to_numpy(), marker="o", label=str(group))
    ax.set_title(f"Age distribution by {by}")
    ax.set_xlabel("Age (bin midpoint)")
    ax.set_ylabel("Fatalities")
    ax.legend()
    return _finish(fig, ax, out_path, show)

def plot_victim_type_proportions(
    df: pd.DataFrame,
    out_path=None,
    show: bool = False,
    *,
    by: str = "year",
) -> PlotResult:
    """Stacked share of each victim type per `by` value, stacked in category order."""
    props = metrics.victim_type_proportions(df, by=by)
    _nonempty(props, "victim type proportions")
    fig, ax = plt.subplots(figsize=(9, 4))
    x = [str(i) for i in props.index]
    bottom = np.zeros(len(props))
    for cat in props.columns:
        vals = props[cat].to_numpy(dtype=float)
        ax.bar(x, vals, bottom=bottom, label=str(cat))
        bottom += vals
    ax.set_ylim(0, 1)
    ax.set_title(f"Victim type share by {by}")
    ax.set_ylabel("Share of fatalities")
    ax.legend(title="Victim type", fontsize=8)
    return _finish(fig, ax, out_path, show)

def plot_charge_terms(
    df: pd.DataFrame,
    out_path=None,
    show: bool = False,
    *,
    min_df: int = 2,
    top_k: int = 15,
    terms: Optional[pd.DataFrame] = None,
) -> PlotResult:
    """Top charge keywords; pass `terms` to reuse an already computed table."""
    if terms is None:
        terms = metrics.charge_keywords(df, min_df=min_df, top_k=top_k)
    _nonempty(terms, "charge terms")
    fig, ax = plt.subplots(figsize=(7, 5))
    ax.barh(terms["term"].to_numpy()[::-1], terms["count"].to_numpy()[::-1])
    ax.set_title("Most common words in charges")
    ax.set_xlabel("Count")
    return _finish(fig, ax, out_path, show)
