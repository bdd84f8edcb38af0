import numpy as np
import pandas as pd
from sklearn.feature_extraction.text import CountVectorizer

from traffic_fatalities.data_prep import category_order


def _need(df: pd.DataFrame, cols) -> None:
    miss = set(cols) - set(df.columns)
    if miss:
        raise ValueError(f"table is missing columns: {sorted(miss)}")


def victim_type_counts(df: pd.DataFrame) -> pd.Series:
    # least common first, matching the dataset's category order
    _need(df, ["victim_type_category"])
    counts = df["victim_type_category"].value_counts(sort=False)
    return counts.reindex(list(category_order(df)), fill_value=0).rename("count")

def gender_counts(df: pd.DataFrame) -> pd.Series:
    _need(df, ["gender_label"])
    return df["gender_label"].value_counts().rename("count")

def child_adult_shares(df: pd.DataFrame) -> pd.Series:
    _need(df, ["child_adult"])
    s = df["child_adult"].fillna("").astype(str).str.strip().str.lower()
    s = s.where(s != "", "unknown")
    return s.value_counts(normalize=True).rename("share")

def yearly_counts(df: pd.DataFrame) -> pd.Series:
    _need(df, ["year"])
    return df["year"].dropna().astype(int).value_counts().sort_index().rename("count")

def dow_hour_table(df: pd.DataFrame) -> pd.DataFrame:
    # full 7x24 grid so empty slots show as zero in the heatmap
    _need(df, ["dow", "hour"])
    sub = df.dropna(subset=["dow", "hour"])
    vol = pd.crosstab(sub["dow"].astype(int), sub["hour"].astype(int))
    return vol.reindex(index=range(7), columns=range(24), fill_value=0)

def age_frequency_polygons(df: pd.DataFrame, by: str = "gender_label", bin_width: int = 10) -> pd.DataFrame:
    """
    Counts per age bin for each group in `by`.
    Index is the bin midpoint; one column per group. Missing ages are ignored.
    """
    _need(df, ["age", by])
    sub = df.dropna(subset=["age"])
    if sub.empty:
        return pd.DataFrame()
    left = (sub["age"] // bin_width * bin_width).astype(int)
    edges = range(0, int(left.max()) + bin_width, bin_width)
    table = pd.crosstab(left, sub[by]).reindex(edges, fill_value=0)
    table.index = table.index + bin_width / 2
    table.index.name = "age"
    table.columns.name = by
    return table

def victim_type_proportions(df: pd.DataFrame, by: str = "year") -> pd.DataFrame:
    # row-normalized shares; columns follow the category order for stacking
    _need(df, ["victim_type_category", by])
    sub = df.dropna(subset=[by])
    tab = pd.crosstab(sub[by], sub["victim_type_category"].astype(object), normalize="index")
    return tab.reindex(columns=list(category_order(df)), fill_value=0.0)

def charge_keywords(df: pd.DataFrame, min_df: int = 2, top_k: int = 20) -> pd.DataFrame:
    # top unigrams/bigrams of the charges text
    _need(df, ["charges"])
    docs = df["charges"].fillna("").astype(str).str.strip()
    docs = docs[docs != ""]
    empty = pd.DataFrame({"term": pd.Series(dtype=str), "count": pd.Series(dtype=int)})
    if docs.empty:
        return empty
    vec = CountVectorizer(ngram_range=(1, 2), min_df=min_df, stop_words="english")
    try:
        X = vec.fit_transform(docs)
    except ValueError:
        # every term pruned by min_df / stop words
        return empty
    vocab = vec.get_feature_names_out()
    counts = np.asarray(X.sum(0)).ravel()
    top = (pd.DataFrame({"term": vocab, "count": counts})
             .sort_values(["count", "term"], ascending=[False, True])
             .head(top_k)
             .reset_index(drop=True))
    return top

def completeness_summary(full: pd.DataFrame, complete: pd.DataFrame) -> dict:
    total = len(full)
    n = len(complete)
    return {
        "total": total,
        "complete": n,
        "missing_timestamp": total - n,
        "complete_rate": (n / total) if total else 0.0,
    }
