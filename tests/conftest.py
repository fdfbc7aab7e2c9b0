import pytest
from core.steering import SteeringParameterSet
from inout import template

@pytest.fixture
def scenario_steering():
    return SteeringParameterSet({"DURATION": 25200, "TIME STEP": 60, "RAIN OR EVAPORATION": "YES"})

@pytest.fixture
def five_key_steering():
    return SteeringParameterSet(
        [("A", 1), ("B", 2.5), ("C", True), ("D", "text"), ("E", [1, 2, 3])],
        source_file="five.cas",
    )

@pytest.fixture
def cas_file(tmp_path):
    content = """/ TELEMAC-2D steering file
/---------------------------------------------------------------------
TITLE = 'Flood wave'
GEOMETRY FILE = 'geo.slf'
TIME STEP = 60
DURATION = 25200       / seven hours
TYPE OF ADVECTION = 1;5
TIDAL FLATS = YES
&FIN
"""
    path = tmp_path / "t2d.cas"
    path.write_text(content)
    return path

@pytest.fixture
def fresh_template_cache():
    template._load_template.cache_clear()
    yield
    template._load_template.cache_clear()

@pytest.fixture
def dummy_logger(caplog):
    caplog.set_level("DEBUG")
    return caplog
