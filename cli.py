"""
CLI interface and shared display-data computation for the
Class Assignment Predictor.
"""

from __future__ import annotations

import sys
from typing import Any, Dict, List

import config as cfg
from prediction import (
    CompletionModel,
    InputError,
    PredictionInput,
    generate_curve,
    parse_inputs,
    parse_model,
    predict_final,
)
import report


# ═══════════════════════════════════════════════════════════════════
# Formatting helpers
# ═══════════════════════════════════════════════════════════════════

def pct(val: float, decimals: int = 1) -> str:
    return f"{val:.{decimals}f}%"


def students(n: int) -> str:
    """Format a head count as '1 student' / 'N students'."""
    return f"{n} {'student' if n == 1 else 'students'}"


# ═══════════════════════════════════════════════════════════════════
# Input collection (CLI)
# ═══════════════════════════════════════════════════════════════════

MODEL_ORDER = [
    CompletionModel.LINEAR,
    CompletionModel.EXPONENTIAL,
    CompletionModel.SQUARE_ROOT,
]


def _prompt_model() -> CompletionModel:
    print("  How does your class complete assignments?\n")
    for i, m in enumerate(MODEL_ORDER, start=1):
        print(f"    {i}) {m.label:<14} {m.description}")
    print()
    while True:
        raw = input(f"  Model (1-{len(MODEL_ORDER)}): ").strip().lower()
        if raw.isdigit() and 1 <= int(raw) <= len(MODEL_ORDER):
            return MODEL_ORDER[int(raw) - 1]
        for m in MODEL_ORDER:
            if raw == m.label.lower():
                return m
        try:
            return parse_model(raw)
        except InputError as exc:
            print(f"    {exc}")


def _prompt_choice(label: str, options: list[str], default: str) -> str:
    opts = "/".join(options)
    while True:
        raw = input(f"  {label} ({opts}) [{default}]: ").strip().lower()
        if not raw:
            return default
        if raw in options:
            return raw
        print(f"    Choose from: {opts}")


FIELD_PROMPTS = [
    ("students", "How many students are there?"),
    ("fulfilled", "How many have completed it?"),
    ("total_days", "Total days for assignment?"),
    ("days_left", "Days left until due date?"),
]


def collect_inputs() -> PredictionInput:
    """Prompt for the four class statistics until they validate."""
    print("\n  Class Statistics: enter the current numbers for your projection.\n")
    while True:
        form = {key: input(f"  {label} ").strip() for key, label in FIELD_PROMPTS}
        try:
            return parse_inputs(form)
        except InputError as exc:
            print(f"\n    {exc}\n")


# ═══════════════════════════════════════════════════════════════════
# Shared display-data computation (used by CLI, web app and report)
# ═══════════════════════════════════════════════════════════════════

def compute_display_data(
    inp: PredictionInput,
    model: CompletionModel,
) -> Dict[str, Any]:
    """Extract every metric needed for the result views."""
    proj = predict_final(inp, model)
    curve = generate_curve(inp, model, proj.final)
    rounded = proj.rounded_final
    noun = "student" if rounded == 1 else "students"

    return {
        # Inputs echo
        "total_students": inp.total_students,
        "fulfilled_students": inp.fulfilled_students,
        "days_left": inp.days_left,
        "total_days": inp.total_days,
        "days_passed": inp.days_passed,
        # Model
        "model": model.value,
        "model_label": model.label,
        "model_description": model.description,
        # Projection
        "final": proj.final,
        "raw_final": proj.raw_final,
        "rounded_final": rounded,
        "is_capped": proj.is_capped,
        "completion_pct": proj.final / inp.total_students * 100,
        "remaining_slots": max(0, inp.total_students - rounded),
        "student_noun": noun,
        "headline": f"{rounded} {noun} will have completed the task",
        "subline": f"by the assigned due date based on {model.value} completion.",
        # Curve
        "curve": curve,
    }


# ═══════════════════════════════════════════════════════════════════
# Box-drawing CLI output
# ═══════════════════════════════════════════════════════════════════

W = 78  # box width (characters)
H_BAR = "═"


def _box_top(title: str) -> str:
    inner = W - 2
    return (
        f"╔{H_BAR * inner}╗\n"
        f"║  {title:<{inner - 2}}║\n"
        f"╠{H_BAR * inner}╣"
    )


def _box_line(text: str = "") -> str:
    inner = W - 4
    if len(text) > inner:
        text = text[:inner]
    return f"║  {text:<{inner}}║"


def _box_row(label: str, value: str, lw: int = 38) -> str:
    return _box_line(f"{label:<{lw}}{value}")


def _box_bottom() -> str:
    return f"╚{H_BAR * (W - 2)}╝"


def _print_section(title: str, rows: List[str]) -> None:
    """Print a titled box with content rows."""
    print(_box_top(title))
    for r in rows:
        print(r)
    print(_box_bottom())
    print()


# ═══════════════════════════════════════════════════════════════════
# CLI Section Printers
# ═══════════════════════════════════════════════════════════════════

def _print_class(d: Dict[str, Any]) -> None:
    rows = [
        _box_row("Completion model", d["model_label"]),
        _box_line(f"  {d['model_description']}"),
        _box_line(),
        _box_row("Students in class", str(d["total_students"])),
        _box_row("Completed so far", str(d["fulfilled_students"])),
        _box_row("Assignment duration", f"{d['total_days']} days"),
        _box_row("Days left until due date", f"{d['days_left']} days"),
    ]
    _print_section("YOUR CLASS", rows)


def _print_projection(d: Dict[str, Any]) -> None:
    rows = [
        _box_line(d["headline"]),
        _box_line(d["subline"]),
        _box_line(),
        _box_row("Completion rate", pct(d["completion_pct"])),
        _box_row("Remaining slots", students(d["remaining_slots"])),
    ]
    if d["is_capped"]:
        rows.append(_box_line())
        rows.append(_box_line("FULL CAPACITY REACHED: the model projects more"))
        rows.append(_box_line(f"completions ({d['raw_final']:.1f}) than there are students."))
    _print_section("PROJECTION", rows)


def _print_curve(d: Dict[str, Any]) -> None:
    total = d["total_students"]
    bar_w = 40
    rows = [_box_line(f"{'Day':>4}  {'Done':>5}  {'':<{bar_w}}  Status"),
            _box_line("─" * (W - 6))]
    for day, count, status in d["curve"].points():
        filled = int(round(count / total * bar_w)) if total else 0
        bar = "█" * filled if status == "Current" else "░" * filled
        rows.append(_box_line(f"{day:>4}  {count:>5}  {bar:<{bar_w}}  {status}"))
    _print_section("PROJECTED COMPLETION CURVE", rows)


# ═══════════════════════════════════════════════════════════════════
# Main CLI entry point
# ═══════════════════════════════════════════════════════════════════

def run_cli() -> None:
    """Run the full CLI workflow."""
    # Ensure box-drawing characters render on Windows
    try:
        sys.stdout.reconfigure(encoding="utf-8")
    except (AttributeError, OSError):
        pass
    print()
    print("=" * W)
    print(f"  {cfg.APP_TITLE}")
    print("=" * W)
    print()

    while True:
        model = _prompt_model()
        inp = collect_inputs()
        d = compute_display_data(inp, model)

        print()
        _print_class(d)
        _print_projection(d)
        _print_curve(d)

        if _prompt_choice("Save PDF report?", ["yes", "no"], "no") == "yes":
            with open(cfg.PDF_FILENAME, "wb") as fh:
                fh.write(report.generate_pdf(d))
            print(f"  Saved to {cfg.PDF_FILENAME}\n")

        if _prompt_choice("Start new prediction?", ["yes", "no"], "no") != "yes":
            break
        print()


if __name__ == "__main__":
    run_cli()
