import pytest
from core import constructor
from core.constructor import (
    FileInput, InputKind, MappingInput, SteeringInput, TemplateInput,
    build_steering, classify_input, register_input_handler, steering,
)
from core.exceptions import SteeringTypeError
from core.steering import REMOVE, SteeringParameterSet
from inout.template import generate_template

def test_no_input_returns_template():
    result = steering()
    assert result == generate_template()
    assert result.source_file is None

def test_template_with_target_does_not_touch_filesystem(tmp_path):
    target = tmp_path / "new.cas"
    result = steering(target=target)
    assert result.source_file == str(target)
    assert not target.exists()

def test_path_input_parses_file(cas_file):
    result = steering(str(cas_file))
    assert result.source_file == str(cas_file)
    assert result["TITLE"] == "Flood wave"

def test_path_input_with_target_tracks_destination(cas_file, tmp_path):
    target = tmp_path / "copy.cas"
    result = steering(cas_file, target=target)
    assert result.source_file == str(target)
    assert result == steering(cas_file)

def test_mapping_input_is_wrapped():
    result = steering({"DURATION": 25200, "TIME STEP": 60})
    assert list(result) == ["DURATION", "TIME STEP"]
    assert result.source_file is None
    assert steering([("A", 1), ("B", 2)]) == {"A": 1, "B": 2}

def test_mapping_input_rejects_nested_values():
    with pytest.raises(TypeError):
        steering({"A": [[1, 2]]})

def test_existing_set_with_updates_is_merged():
    original = SteeringParameterSet({"A": 1, "B": 2, "C": 3}, source_file="x.cas")
    result = steering(original, updates={"B": REMOVE, "D": 4})
    assert list(result) == ["A", "C", "D"]
    assert result.source_file == "x.cas"
    assert list(original) == ["A", "B", "C"]

def test_existing_set_save_as():
    original = SteeringParameterSet({"A": 1}, source_file="x.cas")
    result = steering(original, target="y.cas")
    assert result == original and result is not original
    assert result.source_file == "y.cas"
    assert original.source_file == "x.cas"

def test_existing_set_without_target_is_copied():
    original = SteeringParameterSet({"A": 1}, source_file="x.cas")
    result = steering(original)
    assert result is not original
    assert result.source_file == "x.cas"

def test_updates_require_existing_set():
    with pytest.raises(SteeringTypeError):
        steering({"A": 1}, updates={"B": 2})

def test_unsupported_input_raises_type_error():
    with pytest.raises(TypeError):
        steering(42)

def test_classify_input_variants(cas_file):
    existing = SteeringParameterSet({"A": 1})
    assert isinstance(classify_input(), TemplateInput)
    assert isinstance(classify_input(cas_file), FileInput)
    assert isinstance(classify_input({"A": 1}), MappingInput)
    assert isinstance(classify_input(existing, updates={"B": 2}), SteeringInput)
    assert classify_input(existing).kind is InputKind.STEERING

def test_build_steering_with_explicit_variants(cas_file):
    assert build_steering(TemplateInput()) == generate_template()
    assert build_steering(FileInput(cas_file))["TIME STEP"] == 60
    assert build_steering(MappingInput({"A": 1}, target="a.cas")).source_file == "a.cas"
    base = SteeringParameterSet({"A": 1})
    assert build_steering(SteeringInput(base, updates={"A": 2}))["A"] == 2

def test_build_steering_rejects_unknown_source():
    with pytest.raises(SteeringTypeError):
        build_steering(object())

def test_steering_input_requires_a_set():
    with pytest.raises(SteeringTypeError):
        build_steering(SteeringInput({"A": 1}))

def test_register_input_handler(monkeypatch):
    monkeypatch.setitem(constructor._handler_registry, InputKind.MAPPING, constructor._handler_registry[InputKind.MAPPING])

    def upper_case_names(source):
        return SteeringParameterSet({k.upper(): v for k, v in source.items.items()})

    register_input_handler(InputKind.MAPPING, upper_case_names)
    assert list(steering({"time step": 1})) == ["TIME STEP"]

def test_register_input_handler_validates_arguments():
    with pytest.raises(SteeringTypeError):
        register_input_handler("mapping", lambda source: None)
    with pytest.raises(SteeringTypeError):
        register_input_handler(InputKind.MAPPING, "not callable")
