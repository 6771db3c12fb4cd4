"""
Completion projection for a class assignment.

Given how many students have already handed in an assignment and how much
of the assignment window is left, project how many will have completed it
by the due date, and build the day-by-day completion curve that joins the
observed progress to the projection.

The projection is a point estimate: the chosen model's shape function is
applied to the days-left ratio and the result is taken as a fraction of the
*whole* class, then capped at class size.  The curve is evaluated over the
full day axis with numpy in one pass.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Mapping

import numpy as np

import config as cfg


# ─── Validation messages ──────────────────────────────────────────────

MSG_INVALID_NUMBERS = "Please fill out all fields with valid numbers."
MSG_FULFILLED_EXCEEDS_TOTAL = "Completed students cannot exceed total students."
MSG_DAYS_LEFT_EXCEEDS_TOTAL = "Days left cannot exceed total assignment duration."
MSG_NO_MODEL = "Please select a completion model."


class InputError(ValueError):
    """Invalid user input; the message is shown to the user as-is."""


# ─── Completion Models ────────────────────────────────────────────────

class CompletionModel(Enum):
    """Assumed temporal shape of submission behaviour."""

    LINEAR = "linearly"
    EXPONENTIAL = "exponentially"
    SQUARE_ROOT = "square root function"

    @property
    def label(self) -> str:
        return _MODEL_LABELS[self]

    @property
    def description(self) -> str:
        return _MODEL_DESCRIPTIONS[self]

    def shape(self, ratio):
        """Apply the model's shape function to a ratio in [0, 1].

        Accepts a scalar (returns float) or an array (returns ndarray).
        """
        r = np.asarray(ratio, dtype=float)
        if self is CompletionModel.LINEAR:
            out = r
        elif self is CompletionModel.EXPONENTIAL:
            out = np.power(r, cfg.EXPONENTIAL_POWER)
        else:
            out = np.sqrt(r)
        return out if out.ndim else float(out)


_MODEL_LABELS = {
    CompletionModel.LINEAR: "Linearly",
    CompletionModel.EXPONENTIAL: "Exponentially",
    CompletionModel.SQUARE_ROOT: "Square Root",
}

_MODEL_DESCRIPTIONS = {
    CompletionModel.LINEAR:
        "Students finish at a constant pace throughout the duration.",
    CompletionModel.EXPONENTIAL:
        "Most students rush to finish as the deadline approaches.",
    CompletionModel.SQUARE_ROOT:
        "High initial enthusiasm that tapers off over time.",
}


# ─── Data Classes ─────────────────────────────────────────────────────

@dataclass
class PredictionInput:
    """Current class statistics for one prediction."""

    total_students: int       # class size (1 .. MAX_STUDENTS)
    fulfilled_students: int   # already completed (0 .. total_students)
    days_left: int            # days until the due date (0 .. total_days)
    total_days: int           # full assignment duration (1 .. MAX_TOTAL_DAYS)

    def __post_init__(self) -> None:
        if (self.total_students < 1 or self.fulfilled_students < 0
                or self.days_left < 0 or self.total_days < 1
                or self.total_students > cfg.MAX_STUDENTS
                or self.total_days > cfg.MAX_TOTAL_DAYS):
            raise InputError(MSG_INVALID_NUMBERS)
        if self.fulfilled_students > self.total_students:
            raise InputError(MSG_FULFILLED_EXCEEDS_TOTAL)
        if self.days_left > self.total_days:
            raise InputError(MSG_DAYS_LEFT_EXCEEDS_TOTAL)

    @property
    def days_passed(self) -> int:
        return self.total_days - self.days_left


@dataclass
class Projection:
    """Projected completion count at the due date."""

    final: float        # min(total_students, raw_final)
    is_capped: bool     # raw_final exceeded class size
    raw_final: float

    @property
    def rounded_final(self) -> int:
        return int(round_half_up(self.final))


@dataclass
class CompletionCurve:
    """Day-indexed completion counts, one entry per day 0..total_days."""

    days: np.ndarray = field(repr=False)        # int, 0 .. total_days
    students: np.ndarray = field(repr=False)    # int, clamped and rounded
    historical: np.ndarray = field(repr=False)  # bool, day <= days_passed

    def __len__(self) -> int:
        return len(self.days)

    def points(self) -> Iterator[tuple[int, int, str]]:
        """Yield ``(day, students, status)`` with status Current/Predicted."""
        for day, count, past in zip(self.days.tolist(),
                                    self.students.tolist(),
                                    self.historical.tolist()):
            yield day, count, "Current" if past else "Predicted"


# ─── Helpers ──────────────────────────────────────────────────────────

def round_half_up(x):
    """Round to the nearest integer, halves away from zero for x >= 0."""
    return np.floor(np.asarray(x, dtype=float) + 0.5)


def _parse_count(raw: object) -> int:
    text = "" if raw is None else str(raw)
    text = text.strip().replace(",", "")
    if not text:
        raise InputError(MSG_INVALID_NUMBERS)
    try:
        val = float(text)
    except ValueError:
        raise InputError(MSG_INVALID_NUMBERS) from None
    if not math.isfinite(val):
        raise InputError(MSG_INVALID_NUMBERS)
    return int(val)


def parse_model(value: object) -> CompletionModel:
    """Look up a model by its form value."""
    try:
        return CompletionModel(value)
    except ValueError:
        raise InputError(MSG_NO_MODEL) from None


def parse_inputs(form: Mapping[str, object]) -> PredictionInput:
    """Parse the four form fields into a validated PredictionInput.

    Field names: ``students``, ``fulfilled``, ``days_left``, ``total_days``.
    Raises InputError with the message to show next to the form.
    """
    return PredictionInput(
        total_students=_parse_count(form.get("students")),
        fulfilled_students=_parse_count(form.get("fulfilled")),
        days_left=_parse_count(form.get("days_left")),
        total_days=_parse_count(form.get("total_days")),
    )


# ─── Projection Calculator ────────────────────────────────────────────

def predict_final(inp: PredictionInput, model: CompletionModel) -> Projection:
    """Project the number of students done by the due date."""
    ratio = inp.days_left / inp.total_days if inp.total_days else 0.0
    newly_fulfilled = model.shape(ratio) * inp.total_students
    raw_final = inp.fulfilled_students + newly_fulfilled

    return Projection(
        final=min(float(inp.total_students), raw_final),
        is_capped=raw_final > inp.total_students,
        raw_final=raw_final,
    )


# ─── Curve Generator ──────────────────────────────────────────────────

def generate_curve(
    inp: PredictionInput,
    model: CompletionModel,
    final: float,
) -> CompletionCurve:
    """Build the completion curve from day 0 to the due date.

    Up to today the observed count is interpolated linearly from zero.
    After today the remaining gap to ``final`` is filled according to the
    model's shape applied to the fraction of the remaining window elapsed.
    """
    days = np.arange(inp.total_days + 1)
    passed = inp.days_passed
    fulfilled = float(inp.fulfilled_students)
    historical = days <= passed

    if passed == 0:
        past = np.full(days.shape, fulfilled)
    else:
        past = days / passed * fulfilled

    # Clipped so historical days don't feed negative ratios to the shape
    ratio = np.clip((days - passed) / max(inp.days_left, 1), 0.0, 1.0)
    future = fulfilled + (final - fulfilled) * model.shape(ratio)

    students = np.where(historical, past, future)
    students = np.clip(students, 0, inp.total_students)

    return CompletionCurve(
        days=days,
        students=round_half_up(students).astype(int),
        historical=historical,
    )
