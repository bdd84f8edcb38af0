"""
Traffic fatalities walkthrough: load the CSV, normalize it, and write every
exploratory chart into the figures directory.

Usage:
    python run_walkthrough.py
"""
import logging
import os
from functools import partial
from typing import Dict

from traffic_fatalities import metrics, settings, viz
from traffic_fatalities.data_prep import SchemaError, enrich, load_records, normalize
from traffic_fatalities.setup_logging import setup_logging

log = logging.getLogger("run_walkthrough")


def run(data_file=settings.DATA_FILE, fig_dir=settings.FIG_DIR) -> Dict[str, str]:
    raw = load_records(data_file)
    full, complete = normalize(raw)

    summary = metrics.completeness_summary(full, complete)
    log.info(
        "%(complete)d of %(total)d records have a timestamp (%(missing_timestamp)d without)",
        summary,
    )

    full = enrich(full)
    complete = enrich(complete)

    def out(name: str) -> str:
        return os.path.join(str(fig_dir), f"{name}.png")

    saved = {}
    charts = [
        ("victim_type_bar", viz.plot_victim_type_bar, full),
        ("gender_bar", viz.plot_gender_bar, full),
        ("child_adult_pie", viz.plot_child_adult_pie, full),
        ("dow_hour_heatmap", viz.plot_dow_hour_heatmap, complete),
        ("victim_type_proportions", viz.plot_victim_type_proportions, complete),
    ]
    if full["age"].notna().any():
        charts += [
            ("age_histogram", viz.plot_age_histogram, full),
            ("age_frequency_polygons", viz.plot_age_frequency_polygons, full),
        ]
    else:
        log.warning("no ages recorded; skipping age charts")
    terms = metrics.charge_keywords(full, top_k=15)
    if not terms.empty:
        charts.append(("charge_terms", partial(viz.plot_charge_terms, terms=terms), full))
    else:
        log.warning("no charge terms found; skipping charge chart")

    for name, plot, table in charts:
        if len(table) == 0:
            log.warning("no rows for %s; skipped", name)
            continue
        _, _, path = plot(table, out_path=out(name))
        saved[name] = path
    return saved


def main() -> None:
    setup_logging(settings.LOG_LEVEL)
    try:
        saved = run(settings.DATA_FILE, settings.FIG_DIR)
    except SchemaError as e:
        log.error("bad input file: %s", e)
        raise
    except OSError as e:
        log.error("cannot read %s: %s", settings.DATA_FILE, e)
        raise
    log.info("wrote %d charts to %s", len(saved), settings.FIG_DIR)


if __name__ == "__main__":
    main()
