"""
Chart rendering and PDF report generation for the
Class Assignment Predictor.

Provides:
  - Base64-encoded chart images for web embedding (get_web_charts)
  - Two-page PDF report rendered in memory (generate_pdf)
"""

from __future__ import annotations

import base64
import io
from typing import Any, Dict, List

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages
from matplotlib.ticker import MaxNLocator

import config as cfg

# ═══════════════════════════════════════════════════════════════════
# Style constants
# ═══════════════════════════════════════════════════════════════════

BG = "#0a192f"
CARD = "#112240"
TEXT = "#ccd6f6"
TEXT2 = "#a8b2d1"
TEAL = "#64ffda"
EMERALD = "#34d399"
AMBER = "#fbbf24"
SLATE = "#8892b0"
BORDER = "#233554"

A4W, A4H = 8.27, 11.69
WEB_W, WEB_H = 10, 5


# ═══════════════════════════════════════════════════════════════════
# Style helpers
# ═══════════════════════════════════════════════════════════════════

def _style(fig, *axes):
    """Apply dark theme to figure and all axes."""
    fig.patch.set_facecolor(BG)
    for ax in axes:
        ax.set_facecolor(CARD)
        ax.tick_params(colors=SLATE, labelsize=8)
        ax.xaxis.label.set_color(SLATE)
        ax.yaxis.label.set_color(SLATE)
        ax.title.set_color(TEXT)
        for spine in ax.spines.values():
            spine.set_color(BORDER)
        ax.grid(True, axis="y", alpha=0.4, color=BORDER, linestyle="--")


def _legend(ax, loc="upper left"):
    ax.legend(loc=loc, fontsize=8, facecolor=CARD, edgecolor=BORDER, labelcolor=TEXT)


# ═══════════════════════════════════════════════════════════════════
# Completion curve chart
# ═══════════════════════════════════════════════════════════════════

def _chart_curve(d: Dict[str, Any], figsize=(WEB_W, WEB_H)) -> plt.Figure:
    """Area chart of observed and projected completions per day."""
    fig, ax = plt.subplots(figsize=figsize, constrained_layout=True)
    _style(fig, ax)

    curve = d["curve"]
    days, counts = curve.days, curve.students
    passed = d["days_passed"]
    total = d["total_students"]

    ax.fill_between(days, counts, color=TEAL, alpha=0.12)
    ax.plot(days[curve.historical], counts[curve.historical], color=TEAL,
            linewidth=2.5, label="Current", solid_capstyle="round")
    if d["days_left"] > 0:
        # Projected segment starts at today so the two lines join
        ax.plot(days[passed:], counts[passed:], color=TEAL, linewidth=2.5,
                linestyle="--", label="Predicted", dash_capstyle="round")

    ax.axvline(passed, color=SLATE, linewidth=1, linestyle=":")
    ax.annotate(
        "Today", xy=(passed, 0), fontsize=8, color=SLATE,
        xytext=(4, 6), textcoords="offset points",
    )

    ax.annotate(
        f"{int(counts[-1])}",
        xy=(days[-1], counts[-1]), fontsize=10, color=TEAL,
        fontweight="bold", ha="right",
        xytext=(-10, -18), textcoords="offset points",
        bbox=dict(boxstyle="round,pad=0.3", facecolor=BG,
                  edgecolor=TEAL, alpha=0.9),
    )

    if d["is_capped"]:
        ax.text(
            0.02, 0.97, "Full Capacity Reached",
            transform=ax.transAxes, fontsize=9, color=EMERALD,
            fontweight="bold", va="top",
            bbox=dict(boxstyle="round,pad=0.4", facecolor=BG,
                      edgecolor=EMERALD, alpha=0.92),
        )

    ax.set_xlim(0, max(days[-1], 1))
    ax.set_ylim(0, total)
    ax.xaxis.set_major_locator(MaxNLocator(integer=True))
    ax.yaxis.set_major_locator(MaxNLocator(integer=True))
    ax.set_xlabel("Days Passed")
    ax.set_ylabel("Students")
    ax.set_title("Projected Completion Curve", fontsize=13, pad=12)
    _legend(ax, loc="lower right")
    return fig


# ═══════════════════════════════════════════════════════════════════
# Page 1 — Summary (text only, dark background)
# ═══════════════════════════════════════════════════════════════════

def _page1_summary(d: Dict[str, Any]) -> plt.Figure:
    fig = plt.figure(figsize=(A4W, A4H))
    fig.patch.set_facecolor(BG)

    fig.text(0.50, 0.93, cfg.APP_TITLE,
             ha="center", fontsize=18, color=TEXT, fontweight="bold")
    fig.text(0.50, 0.91, "Projected completion report",
             ha="center", fontsize=11, color=TEXT2)

    y = 0.85
    fig.text(0.08, y, "Your Class", fontsize=13, color=TEXT, fontweight="bold")
    y -= 0.03
    params = [
        f"Students: {d['total_students']}  |  Completed: {d['fulfilled_students']}",
        f"Assignment duration: {d['total_days']} days  |  "
        f"Days left: {d['days_left']}",
        f"Completion model: {d['model_label']}",
        f"    {d['model_description']}",
    ]
    for p in params:
        fig.text(0.10, y, p, fontsize=10, color=TEXT2)
        y -= 0.026

    y -= 0.03
    fig.text(0.08, y, "Projection", fontsize=13, color=TEAL, fontweight="bold")
    y -= 0.035
    fig.text(0.10, y, d["headline"], fontsize=12, color=TEXT, fontweight="bold")
    y -= 0.026
    fig.text(0.10, y, d["subline"], fontsize=10, color=TEXT2)
    y -= 0.04

    lines = [
        f"Completion rate: {d['completion_pct']:.1f}%",
        f"Remaining slots: {d['remaining_slots']} Students",
    ]
    for line in lines:
        fig.text(0.10, y, line, fontsize=10.5, color=TEXT2)
        y -= 0.026

    if d["is_capped"]:
        y -= 0.02
        fig.text(0.10, y, "FULL CAPACITY REACHED", fontsize=11,
                 color=EMERALD, fontweight="bold")
        y -= 0.024
        fig.text(0.10, y,
                 f"The model projects {d['raw_final']:.1f} completions, "
                 f"capped at the class size of {d['total_students']}.",
                 fontsize=9.5, color=TEXT2)

    fig.text(0.50, 0.03,
             "Point estimate from a simple shape model, not a forecast "
             "of individual students.",
             ha="center", fontsize=8, color=SLATE, style="italic")
    return fig


# ═══════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════

def figure_to_base64(fig: plt.Figure) -> str:
    """Convert a matplotlib figure to a base64-encoded PNG string."""
    buf = io.BytesIO()
    fig.savefig(buf, format="png", facecolor=fig.get_facecolor(),
                dpi=150, bbox_inches="tight")
    buf.seek(0)
    b64 = base64.b64encode(buf.read()).decode()
    buf.close()
    return b64


def generate_pdf(d: Dict[str, Any]) -> bytes:
    """Render the PDF report and return its bytes."""
    pages = [
        _page1_summary(d),
        _chart_curve(d, figsize=(A4W, A4H * 0.45)),
    ]

    buf = io.BytesIO()
    with PdfPages(buf) as pdf:
        for fig in pages:
            pdf.savefig(fig, facecolor=fig.get_facecolor())
    for fig in pages:
        plt.close(fig)
    return buf.getvalue()


def get_web_charts(d: Dict[str, Any]) -> List[str]:
    """Return base64-encoded PNG chart images for web embedding.

    Returns 1 chart:
      [0] Projected Completion Curve
    """
    chart_figs = [
        _chart_curve(d, figsize=(WEB_W, WEB_H)),
    ]

    images = [figure_to_base64(f) for f in chart_figs]
    for f in chart_figs:
        plt.close(f)
    return images
