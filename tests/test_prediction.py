import itertools

import numpy as np
import pytest

import config as cfg
from prediction import (
    MSG_DAYS_LEFT_EXCEEDS_TOTAL,
    MSG_FULFILLED_EXCEEDS_TOTAL,
    MSG_INVALID_NUMBERS,
    MSG_NO_MODEL,
    CompletionModel,
    InputError,
    PredictionInput,
    generate_curve,
    parse_inputs,
    parse_model,
    predict_final,
    round_half_up,
)

ALL_MODELS = list(CompletionModel)


# ─── Shape functions ─────────────────────────────────────────────────

def test_shape_functions_on_scalars():
    assert CompletionModel.LINEAR.shape(0.25) == pytest.approx(0.25)
    assert CompletionModel.EXPONENTIAL.shape(0.25) == pytest.approx(0.125)
    assert CompletionModel.SQUARE_ROOT.shape(0.25) == pytest.approx(0.5)
    assert isinstance(CompletionModel.SQUARE_ROOT.shape(0.25), float)


def test_shape_functions_on_arrays():
    r = np.array([0.0, 0.25, 1.0])
    np.testing.assert_allclose(CompletionModel.EXPONENTIAL.shape(r), [0.0, 0.125, 1.0])
    np.testing.assert_allclose(CompletionModel.SQUARE_ROOT.shape(r), [0.0, 0.5, 1.0])


def test_model_labels_and_descriptions():
    assert CompletionModel.SQUARE_ROOT.value == "square root function"
    assert CompletionModel.SQUARE_ROOT.label == "Square Root"
    assert "deadline" in CompletionModel.EXPONENTIAL.description


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.5) == 1
    assert round_half_up(11.43) == 11


# ─── Projection Calculator ───────────────────────────────────────────

def test_linear_example(sample_input):
    proj = predict_final(sample_input, CompletionModel.LINEAR)
    assert proj.final == pytest.approx(5 + 3 / 14 * 30)
    assert proj.rounded_final == 11
    assert proj.is_capped is False


def test_exponential_capped_example():
    inp = PredictionInput(total_students=20, fulfilled_students=18,
                          days_left=10, total_days=10)
    proj = predict_final(inp, CompletionModel.EXPONENTIAL)
    assert proj.raw_final == pytest.approx(38)
    assert proj.is_capped is True
    assert proj.final == 20


@pytest.mark.parametrize("model", ALL_MODELS)
def test_no_days_left_keeps_current_count(model):
    inp = PredictionInput(total_students=25, fulfilled_students=12,
                          days_left=0, total_days=10)
    proj = predict_final(inp, model)
    assert proj.final == 12
    assert proj.is_capped is False


def _valid_inputs():
    for total, total_days in itertools.product([1, 7, 30], [1, 5, 14]):
        for fulfilled in sorted({0, total // 2, total}):
            for days_left in range(total_days + 1):
                yield PredictionInput(total, fulfilled, days_left, total_days)


@pytest.mark.parametrize("model", ALL_MODELS)
def test_projection_properties(model):
    for inp in _valid_inputs():
        proj = predict_final(inp, model)
        assert 0 <= proj.final <= inp.total_students
        assert proj.final >= inp.fulfilled_students
        expected_raw = (inp.fulfilled_students
                        + model.shape(inp.days_left / inp.total_days) * inp.total_students)
        assert proj.is_capped == (expected_raw > inp.total_students)


# ─── Curve Generator ─────────────────────────────────────────────────

def test_linear_example_curve(sample_input):
    proj = predict_final(sample_input, CompletionModel.LINEAR)
    curve = generate_curve(sample_input, CompletionModel.LINEAR, proj.final)

    assert len(curve) == 15
    assert curve.students.tolist() == [0, 0, 1, 1, 2, 2, 3, 3, 4, 4, 5, 5, 7, 9, 11]
    statuses = [status for _, _, status in curve.points()]
    assert statuses == ["Current"] * 12 + ["Predicted"] * 3


def test_curve_starting_on_day_zero():
    inp = PredictionInput(total_students=20, fulfilled_students=18,
                          days_left=10, total_days=10)
    proj = predict_final(inp, CompletionModel.EXPONENTIAL)
    curve = generate_curve(inp, CompletionModel.EXPONENTIAL, proj.final)

    assert curve.students[0] == 18
    assert curve.students[5] == 19
    assert curve.students[-1] == 20
    assert curve.historical.tolist() == [True] + [False] * 10


def test_curve_with_no_days_left_is_all_history():
    inp = PredictionInput(total_students=10, fulfilled_students=4,
                          days_left=0, total_days=4)
    proj = predict_final(inp, CompletionModel.SQUARE_ROOT)
    curve = generate_curve(inp, CompletionModel.SQUARE_ROOT, proj.final)

    assert curve.students.tolist() == [0, 1, 2, 3, 4]
    assert curve.historical.all()


@pytest.mark.parametrize("model", ALL_MODELS)
def test_curve_properties(model):
    for inp in _valid_inputs():
        proj = predict_final(inp, model)
        curve = generate_curve(inp, model, proj.final)

        assert curve.days.tolist() == list(range(inp.total_days + 1))
        assert (np.diff(curve.students) >= 0).all()
        assert curve.students.min() >= 0
        assert curve.students.max() <= inp.total_students
        assert curve.students[inp.days_passed] == inp.fulfilled_students
        assert curve.students[-1] == proj.rounded_final


# ─── Validation ──────────────────────────────────────────────────────

def test_parse_inputs(sample_form, sample_input):
    assert parse_inputs(sample_form) == sample_input


def test_parse_inputs_tolerates_separators_and_decimals():
    inp = parse_inputs({"students": " 1,200 ", "fulfilled": "12.7",
                        "days_left": "3", "total_days": "14"})
    assert inp.total_students == 1200
    assert inp.fulfilled_students == 12


@pytest.mark.parametrize("field,value", [
    ("students", ""),
    ("fulfilled", "abc"),
    ("days_left", "nan"),
    ("total_days", "inf"),
    ("fulfilled", "-1"),
    ("students", "0"),
    ("total_days", "0"),
    ("students", "3 0"),
    ("students", "100001"),
    ("students", "1e20"),
    ("total_days", "3651"),
    ("total_days", "1e13"),
])
def test_parse_inputs_rejects_bad_numbers(sample_form, field, value):
    sample_form[field] = value
    with pytest.raises(InputError, match=MSG_INVALID_NUMBERS):
        parse_inputs(sample_form)


def test_largest_class_and_duration_give_bounded_curve():
    inp = parse_inputs({"students": "100,000", "fulfilled": "5",
                        "days_left": "3650", "total_days": "3650"})
    assert inp.total_students == cfg.MAX_STUDENTS
    assert inp.total_days == cfg.MAX_TOTAL_DAYS

    proj = predict_final(inp, CompletionModel.SQUARE_ROOT)
    curve = generate_curve(inp, CompletionModel.SQUARE_ROOT, proj.final)
    assert len(curve) == cfg.MAX_TOTAL_DAYS + 1
    assert curve.students.min() >= 0
    assert curve.students[-1] == cfg.MAX_STUDENTS
    assert (np.diff(curve.students) >= 0).all()


def test_parse_inputs_rejects_missing_field(sample_form):
    del sample_form["days_left"]
    with pytest.raises(InputError) as exc:
        parse_inputs(sample_form)
    assert str(exc.value) == MSG_INVALID_NUMBERS


def test_fulfilled_cannot_exceed_total(sample_form):
    sample_form["fulfilled"] = "31"
    with pytest.raises(InputError) as exc:
        parse_inputs(sample_form)
    assert str(exc.value) == MSG_FULFILLED_EXCEEDS_TOTAL


def test_days_left_cannot_exceed_total_days(sample_form):
    sample_form["days_left"] = "15"
    with pytest.raises(InputError) as exc:
        parse_inputs(sample_form)
    assert str(exc.value) == MSG_DAYS_LEFT_EXCEEDS_TOTAL


def test_first_failing_check_wins(sample_form):
    sample_form["fulfilled"] = "31"
    sample_form["days_left"] = "15"
    with pytest.raises(InputError) as exc:
        parse_inputs(sample_form)
    assert str(exc.value) == MSG_FULFILLED_EXCEEDS_TOTAL


def test_input_error_is_value_error():
    with pytest.raises(ValueError):
        PredictionInput(total_students=5, fulfilled_students=6,
                        days_left=1, total_days=2)


def test_parse_model():
    assert parse_model("linearly") is CompletionModel.LINEAR
    assert parse_model("square root function") is CompletionModel.SQUARE_ROOT
    for bad in ("bogus", "", None):
        with pytest.raises(InputError) as exc:
            parse_model(bad)
        assert str(exc.value) == MSG_NO_MODEL
