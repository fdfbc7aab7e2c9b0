import pytest
from core.exceptions import SteeringError
from core.project import (
    BOUNDARY_CONDITIONS_FILE_KEY, GEOMETRY_FILE_KEY, attach_input_files,
    check_private_variables, prepare_steering_file,
)
from core.steering import SteeringParameterSet
from inout.cas_parser import read_steering_file
from inout.template import generate_template

def test_check_private_variables_reports_missing(dummy_logger):
    steering = SteeringParameterSet({"NAMES OF PRIVATE VARIABLES": ["RAIN", "INFILTRATION"]})
    missing = check_private_variables(steering, ["rain ", "DEPTH"])
    assert missing == ["INFILTRATION"]
    assert "INFILTRATION" in dummy_logger.text

def test_check_private_variables_single_name():
    steering = SteeringParameterSet({"NAMES OF PRIVATE VARIABLES": "RAIN"})
    assert check_private_variables(steering, ["RAIN"]) == []

def test_check_private_variables_without_declaration():
    assert check_private_variables(generate_template(), []) == []

def test_attach_input_files_keeps_positions(tmp_path):
    base = generate_template()
    result = attach_input_files(base, geometry_file=tmp_path / "mesh.slf", boundary_conditions_file="mesh.cli")
    assert list(result) == list(base)
    assert result[GEOMETRY_FILE_KEY] == str(tmp_path / "mesh.slf")
    assert result[BOUNDARY_CONDITIONS_FILE_KEY] == "mesh.cli"
    assert base[BOUNDARY_CONDITIONS_FILE_KEY] == "bnd.cli"

def test_attach_input_files_appends_when_absent():
    result = attach_input_files(SteeringParameterSet({"TIME STEP": 1}), boundary_conditions_file="bc.cli")
    assert list(result) == ["TIME STEP", BOUNDARY_CONDITIONS_FILE_KEY]

def test_prepare_steering_file(tmp_path):
    steering = generate_template().with_source_file(tmp_path / "t2d.cas")
    written = prepare_steering_file(steering)
    assert written == str(tmp_path / "t2d.cas")
    assert read_steering_file(written) == steering

def test_prepare_steering_file_needs_a_path():
    with pytest.raises(SteeringError):
        prepare_steering_file(generate_template())
