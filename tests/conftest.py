# tests/conftest.py
import matplotlib
matplotlib.use("Agg")

import pytest

from traffic_fatalities.data_prep import enrich, normalize


# Five incidents: blank and single-space victim types, one row without a date,
# one impossible date, one missing age, gender in mixed case.
@pytest.fixture
def raw_rows():
    return [
        {"date": "03/05/2016", "time": "11:45 PM", "victim_type": "", "gender": "male",
         "age": 34, "child_adult": "Adult", "charges": "DUI manslaughter"},
        {"date": "", "time": "02:00 AM", "victim_type": "Pedestrian", "gender": "FEMALE",
         "age": 8, "child_adult": "Child", "charges": ""},
        {"date": "07/04/2017", "time": "02:15 PM", "victim_type": "Pedestrian", "gender": "Female",
         "age": 61, "child_adult": "Adult", "charges": "Leaving scene of crash"},
        {"date": "12/25/2017", "time": "08:00 AM", "victim_type": "Bicyclist", "gender": " male ",
         "age": None, "child_adult": "Adult", "charges": "DUI manslaughter; leaving scene"},
        {"date": "13/45/2017", "time": "10:00 AM", "victim_type": " ", "gender": "Male",
         "age": 45, "child_adult": "adult", "charges": ""},
    ]


@pytest.fixture
def tables(raw_rows):
    return normalize(raw_rows)


@pytest.fixture
def enriched_full(tables):
    return enrich(tables.full)


@pytest.fixture
def enriched_complete(tables):
    return enrich(tables.complete)


CSV_TEXT = (
    "Date,Time, Victim_Type ,GENDER,Age,Child_Adult,Charges,Location\n"
    '03/05/2016,11:45 PM,,male,34,Adult,DUI manslaughter,Main St\n'
    ',02:00 AM,Pedestrian,FEMALE,8,Child,,Oak Ave\n'
    '07/04/2017,02:15 PM,Pedestrian,Female,61,Adult,Leaving scene of crash,Main St\n'
    '12/25/2017,08:00 AM,Bicyclist," male ",,Adult,"DUI manslaughter, leaving scene",Elm St\n'
    '13/45/2017,10:00 AM," ",Male,45,adult,,Oak Ave\n'
)


@pytest.fixture
def sample_csv(tmp_path):
    p = tmp_path / "fatalities.csv"
    p.write_text(CSV_TEXT)
    return p
