import json

import pytest


def square(lon, lat, size=2.0):
    return [[
        [lon, lat], [lon + size, lat], [lon + size, lat + size], [lon, lat + size], [lon, lat],
    ]]


def feature(name, lon, lat, size=2.0, fid=None):
    props = {} if name is None else {"name": name}
    return {
        "type": "Feature",
        "id": fid or name,
        "properties": props,
        "geometry": {"type": "Polygon", "coordinates": square(lon, lat, size)},
    }


@pytest.fixture
def geo():
    return {
        "type": "FeatureCollection",
        "features": [
            feature("Texas", -106.0, 26.0, size=12.0),
            feature("Ohio", -84.0, 38.5, size=4.0),
            feature("Utah", -114.0, 37.0, size=5.0),
            feature("Puerto Rico", -67.0, 18.0, size=1.0),
        ],
    }


@pytest.fixture
def csv_path(tmp_path):
    path = tmp_path / "states_data.csv"
    path.write_text(
        "state,value\n"
        "Texas,76292\n"
        "Ohio,69680\n"
        "Utah,\n"
        " Vermont ,78024\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def geo_file(tmp_path, geo):
    path = tmp_path / "us-states-temp.json"
    path.write_text(json.dumps(geo), encoding="utf-8")
    return path
