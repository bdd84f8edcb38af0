import logging
import os

import pytest

import run_walkthrough
from traffic_fatalities.data_prep import SchemaError


def test_run_writes_every_chart(sample_csv, tmp_path, caplog):
    fig_dir = tmp_path / "figures"
    with caplog.at_level(logging.INFO):
        saved = run_walkthrough.run(sample_csv, fig_dir)
    assert set(saved) == {
        "victim_type_bar", "gender_bar", "child_adult_pie", "dow_hour_heatmap",
        "victim_type_proportions", "age_histogram", "age_frequency_polygons", "charge_terms",
    }
    for path in saved.values():
        assert os.path.exists(path)
        assert os.path.dirname(path) == str(fig_dir)
    assert "3 of 5 records have a timestamp" in caplog.text


def test_run_skips_charge_chart_without_charges(tmp_path, caplog):
    p = tmp_path / "nocharges.csv"
    p.write_text(
        "date,time,victim_type,gender,age,child_adult,charges\n"
        "03/05/2016,11:45 PM,Driver,Male,30,Adult,\n"
        "03/06/2016,01:15 AM,Pedestrian,Female,12,Child,\n"
    )
    saved = run_walkthrough.run(p, tmp_path / "out")
    assert "charge_terms" not in saved
    assert "victim_type_bar" in saved
    assert "no charge terms" in caplog.text


def test_run_bad_schema(tmp_path):
    p = tmp_path / "bad.csv"
    p.write_text("date,time\n03/05/2016,11:45 PM\n")
    with pytest.raises(SchemaError):
        run_walkthrough.run(p, tmp_path / "out")


def test_main_reraises_missing_file(monkeypatch, tmp_path):
    monkeypatch.setattr(run_walkthrough, "setup_logging", lambda level: None)
    monkeypatch.setattr(run_walkthrough.settings, "DATA_FILE", tmp_path / "missing.csv")
    with pytest.raises(FileNotFoundError):
        run_walkthrough.main()


def test_run_computes_charge_keywords_once(sample_csv, tmp_path, monkeypatch):
    calls = []
    original = run_walkthrough.metrics.charge_keywords

    def counting(*args, **kwargs):
        calls.append(1)
        return original(*args, **kwargs)

    monkeypatch.setattr(run_walkthrough.metrics, "charge_keywords", counting)
    saved = run_walkthrough.run(sample_csv, tmp_path / "figures")
    assert "charge_terms" in saved
    assert len(calls) == 1
