"""
Flask web application for the Class Assignment Predictor.

Single-file app using render_template_string.  Run via ``python main.py``
which starts the dev server on localhost:5000.

The three steps (model, class statistics, result) carry their state in
hidden form fields, so every request is self-contained.
"""

from __future__ import annotations

import io
from typing import Any, Dict, Optional

from flask import Flask, render_template_string, request, send_file, url_for

import config as cfg
from cli import MODEL_ORDER, compute_display_data, pct
from log import setup_logger
from prediction import (
    CompletionModel,
    InputError,
    parse_inputs,
    parse_model,
)
import report

logger = setup_logger(__name__)

app = Flask(__name__)

FIELDS = ("students", "fulfilled", "days_left", "total_days")


# ═══════════════════════════════════════════════════════════════════
# HTML Template
# ═══════════════════════════════════════════════════════════════════

HTML_TEMPLATE = r"""
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{{ title }}</title>
<style>
  *{margin:0;padding:0;box-sizing:border-box}

  :root{
    --bg-deep:#0a192f;
    --bg-card:#112240;
    --bg-input:#0f172a;
    --border:#233554;
    --text-primary:#ccd6f6;
    --text-secondary:#94a3b8;
    --text-muted:#64748b;
    --teal:#64ffda;
    --indigo:#6366f1;
    --emerald:#34d399;
    --amber:#fbbf24;
    --red:#ef4444;
    --radius-lg:24px;
    --radius-md:12px;
  }

  body{
    background:var(--bg-deep);color:#f1f5f9;
    font-family:system-ui,-apple-system,'Segoe UI',sans-serif;
    line-height:1.6;min-height:100vh;
    display:flex;flex-direction:column;align-items:center;justify-content:center;
    padding:1rem;
  }

  .shell{
    width:100%;max-width:42rem;background:var(--bg-card);
    border:1px solid var(--border);border-radius:var(--radius-lg);
    box-shadow:0 25px 50px -12px rgba(0,0,0,.5);overflow:hidden;
  }
  .shell-header{
    background:rgba(100,255,218,.1);border-bottom:1px solid var(--border);
    padding:1.5rem;display:flex;align-items:center;gap:1rem;
  }
  .shell-header svg{color:var(--teal)}
  .shell-header h1{
    font-size:1.25rem;font-weight:700;letter-spacing:-.01em;
    color:var(--text-primary);text-transform:uppercase;
  }
  .content{padding:2rem 2.5rem;min-height:400px;display:flex;flex-direction:column;gap:2rem}
  @media(max-width:640px){.content{padding:1.5rem}}

  h2{font-size:1.75rem;font-weight:700;margin-bottom:.5rem}
  .lead{color:var(--text-secondary)}
  .center{text-align:center}

  /* ── step 1: model cards ── */
  .models{display:grid;grid-template-columns:repeat(3,1fr);gap:1rem}
  @media(max-width:640px){.models{grid-template-columns:1fr}}
  .model-btn{
    display:flex;flex-direction:column;align-items:center;gap:.6rem;
    padding:1.5rem;background:rgba(51,65,85,.5);color:inherit;
    border:1px solid #475569;border-radius:1rem;cursor:pointer;
    font:inherit;transition:transform .2s,border-color .2s,background .2s;
  }
  .model-btn:hover{background:#334155;border-color:var(--indigo);transform:scale(1.05)}
  .model-icon{padding:1rem;border-radius:.75rem;color:#fff;display:flex}
  .model-icon.linearly{background:#3b82f6}
  .model-icon.exponentially{background:#a855f7}
  .model-icon.square{background:#10b981}
  .model-name{font-size:1.1rem;font-weight:600;text-transform:capitalize}
  .model-desc{font-size:.85rem;color:var(--text-secondary);text-align:center;line-height:1.5}

  /* ── step 2: form ── */
  .form-grid{display:grid;grid-template-columns:1fr 1fr;gap:1.5rem}
  @media(max-width:640px){.form-grid{grid-template-columns:1fr}}
  .form-group{display:flex;flex-direction:column;gap:.5rem}
  .form-group label{font-size:.875rem;font-weight:500;color:#cbd5e1}
  .form-group input{
    background:var(--bg-input);border:1px solid #334155;border-radius:var(--radius-md);
    color:#f1f5f9;padding:.75rem 1rem;font-size:1rem;font-family:inherit;
    transition:border-color .2s,box-shadow .2s;
  }
  .form-group input:focus{outline:none;border-color:transparent;box-shadow:0 0 0 2px var(--indigo)}
  .error{
    background:rgba(239,68,68,.1);border:1px solid rgba(239,68,68,.5);color:var(--red);
    padding:.75rem;border-radius:.5rem;font-size:.875rem;text-align:center;
  }

  /* ── buttons ── */
  .actions{display:flex;gap:1rem;margin-top:auto;padding-top:1rem}
  .btn{
    flex:1;display:inline-flex;align-items:center;justify-content:center;gap:.5rem;
    padding:.8rem 1.5rem;border:none;border-radius:var(--radius-md);
    font-size:1rem;font-weight:600;cursor:pointer;font-family:inherit;
    text-decoration:none;transition:background .2s,box-shadow .2s;
  }
  .btn-back{background:#334155;color:#f1f5f9}
  .btn-back:hover{background:#475569}
  .btn-primary{background:#4f46e5;color:#fff;box-shadow:0 10px 15px -3px rgba(99,102,241,.2)}
  .btn-primary:hover{background:var(--indigo)}
  .btn-reset{background:var(--teal);color:var(--bg-deep);font-weight:700;font-size:1.1rem;padding:1rem}
  .btn-reset:hover{background:rgba(100,255,218,.9)}
  .btn-ghost{background:transparent;color:var(--teal);border:1px solid var(--border)}
  .btn-ghost:hover{background:rgba(100,255,218,.06)}

  /* ── step 3: result ── */
  .badge-icon{
    display:inline-flex;padding:.75rem;border-radius:999px;margin-bottom:1rem;
    background:rgba(100,255,218,.2);color:var(--teal);
  }
  .badge-icon.capped{background:rgba(52,211,153,.2);color:var(--emerald)}
  .capacity{
    display:inline-block;margin-bottom:1rem;padding:.25rem .75rem;border-radius:999px;
    background:rgba(52,211,153,.1);color:var(--emerald);border:1px solid rgba(52,211,153,.3);
    font-size:.75rem;font-weight:700;text-transform:uppercase;letter-spacing:.1em;
  }
  .headline{font-size:1.75rem;font-weight:700;color:var(--text-primary);margin-bottom:.75rem}
  .subline{color:var(--text-secondary);font-size:1.1rem}
  .chart-card{background:rgba(10,25,47,.5);border:1px solid var(--border);border-radius:1rem;padding:1.5rem}
  .chart-title{
    font-size:.85rem;font-weight:600;color:var(--text-secondary);
    text-transform:uppercase;letter-spacing:.05em;margin-bottom:1rem;
  }
  .chart-img{width:100%;border-radius:.5rem}
  .stats{display:grid;grid-template-columns:1fr 1fr;gap:1rem}
  @media(max-width:640px){.stats{grid-template-columns:1fr}}
  .stat{
    background:var(--bg-card);border:1px solid var(--border);border-radius:var(--radius-md);
    padding:1rem;display:flex;gap:1rem;align-items:flex-start;
  }
  .stat-icon{padding:.5rem;border-radius:.5rem;display:flex;background:rgba(100,255,218,.1);color:var(--teal)}
  .stat-icon.amber{background:rgba(251,191,36,.1);color:var(--amber)}
  .stat-icon.emerald{background:rgba(52,211,153,.1);color:var(--emerald)}
  .stat-label{font-size:.875rem;font-weight:500;color:var(--text-secondary)}
  .stat-value{font-size:1.25rem;font-weight:700;color:var(--text-primary)}

  .footer{margin-top:2rem;color:var(--text-muted);font-size:.875rem}
</style>
</head>
<body>
<div class="shell">
  <div class="shell-header">
    <svg width="32" height="32" fill="none" viewBox="0 0 24 24" stroke="currentColor" stroke-width="2"><rect x="4" y="2" width="16" height="20" rx="2"/><path d="M8 6h8M8 10h.01M12 10h.01M16 10h.01M8 14h.01M12 14h.01M16 14h.01M8 18h.01M12 18h.01M16 18h.01"/></svg>
    <h1>{{ title }}</h1>
  </div>

  <div class="content">

{% if step == 1 %}
<!-- ═══ Step 1: model selection ═══ -->
<form method="post" action="{{ url_for('index') }}">
  <input type="hidden" name="step" value="1">
  {% for name in fields %}
  <input type="hidden" name="{{ name }}" value="{{ form.get(name, '') }}">
  {% endfor %}
  <div class="center" style="margin-bottom:2rem">
    <h2>How does your class complete assignments?</h2>
    <p class="lead">Select the model that best describes your students' work habits.</p>
  </div>
  {% if error %}<div class="error" style="margin-bottom:1.5rem">{{ error }}</div>{% endif %}
  <div class="models">
    {% for m in models %}
    <button type="submit" class="model-btn" name="model" value="{{ m.value }}">
      <span class="model-icon {{ m.value.split()[0] }}">
        <svg width="28" height="28" fill="none" viewBox="0 0 24 24" stroke="currentColor" stroke-width="2"><path stroke-linecap="round" stroke-linejoin="round" d="{{ icons[m.value] }}"/></svg>
      </span>
      <span class="model-name">{{ m.value }}</span>
      <span class="model-desc">{{ m.description }}</span>
    </button>
    {% endfor %}
  </div>
</form>

{% elif step == 2 %}
<!-- ═══ Step 2: class statistics ═══ -->
<form method="post" action="{{ url_for('index') }}" style="display:flex;flex-direction:column;gap:1.5rem;flex:1">
  <input type="hidden" name="step" value="2">
  <input type="hidden" name="model" value="{{ model.value }}">
  <div>
    <h2>Class Statistics</h2>
    <p class="lead">Enter the current numbers for your projection.</p>
  </div>
  <div class="form-grid">
    <div class="form-group">
      <label for="students">How many students are there?</label>
      <input id="students" type="number" name="students" min="1" value="{{ form.get('students', '') }}" placeholder="e.g. 30">
    </div>
    <div class="form-group">
      <label for="fulfilled">How many have completed it?</label>
      <input id="fulfilled" type="number" name="fulfilled" min="0" value="{{ form.get('fulfilled', '') }}" placeholder="e.g. 5">
    </div>
    <div class="form-group">
      <label for="total_days">Total days for assignment?</label>
      <input id="total_days" type="number" name="total_days" min="1" value="{{ form.get('total_days', '') }}" placeholder="e.g. 14">
    </div>
    <div class="form-group">
      <label for="days_left">Days left until due date?</label>
      <input id="days_left" type="number" name="days_left" min="0" value="{{ form.get('days_left', '') }}" placeholder="e.g. 3">
    </div>
  </div>
  {% if error %}<div class="error">{{ error }}</div>{% endif %}
  <div class="actions">
    <button type="submit" class="btn btn-back" name="action" value="back" formnovalidate>&larr; Back</button>
    <button type="submit" class="btn btn-primary" name="action" value="calculate">Calculate &rarr;</button>
  </div>
</form>

{% else %}
<!-- ═══ Step 3: result ═══ -->
<div class="center">
  <div class="badge-icon {{ 'capped' if d.is_capped }}">
    <svg width="32" height="32" fill="none" viewBox="0 0 24 24" stroke="currentColor" stroke-width="2"><path stroke-linecap="round" stroke-linejoin="round" d="M9 12l2 2 4-4m6 2a9 9 0 11-18 0 9 9 0 0118 0z"/></svg>
  </div>
  {% if d.is_capped %}
  <div><span class="capacity">Full Capacity Reached</span></div>
  {% endif %}
  <h2 class="headline">{{ d.headline }}</h2>
  <p class="subline">{{ d.subline }}</p>
</div>

<div class="chart-card">
  <div class="chart-title">Projected Completion Curve</div>
  <img class="chart-img" src="data:image/png;base64,{{ charts[0] }}" alt="Projected Completion Curve">
</div>

<div class="stats">
  <div class="stat">
    <div class="stat-icon">
      <svg width="20" height="20" fill="none" viewBox="0 0 24 24" stroke="currentColor" stroke-width="2"><circle cx="12" cy="12" r="10"/><path d="M12 16v-4M12 8h.01"/></svg>
    </div>
    <div>
      <p class="stat-label">Completion Rate</p>
      <p class="stat-value">{{ pct(d.completion_pct) }}</p>
    </div>
  </div>
  <div class="stat">
    <div class="stat-icon {{ 'emerald' if d.is_capped else 'amber' }}">
      <svg width="20" height="20" fill="none" viewBox="0 0 24 24" stroke="currentColor" stroke-width="2"><circle cx="12" cy="12" r="10"/><path d="M12 8v4M12 16h.01"/></svg>
    </div>
    <div>
      <p class="stat-label">Remaining Slots</p>
      <p class="stat-value">{{ d.remaining_slots }} Students</p>
    </div>
  </div>
</div>

<a class="btn btn-ghost" href="{{ report_url }}">Download PDF Report</a>
<a class="btn btn-reset" href="{{ url_for('index') }}">&#8635; Start New Prediction</a>
{% endif %}

  </div>
</div>

<div class="footer">Predicting classroom performance with mathematics</div>
</body>
</html>
"""

MODEL_ICONS = {
    CompletionModel.LINEAR.value: "M3 17l6-6 4 4 8-8M14 7h7v7",
    CompletionModel.EXPONENTIAL.value: "M13 10V3L4 14h7v7l9-11h-7z",
    CompletionModel.SQUARE_ROOT.value: "M22 12h-4l-3 9L9 3l-3 9H2",
}


def _render(
    step: int,
    form: Dict[str, Any],
    model: Optional[CompletionModel] = None,
    error: Optional[str] = None,
    d: Optional[Dict[str, Any]] = None,
    charts: Optional[list] = None,
    report_url: str = "",
) -> str:
    return render_template_string(
        HTML_TEMPLATE,
        title=cfg.APP_TITLE,
        step=step,
        form=form,
        fields=FIELDS,
        models=MODEL_ORDER,
        icons=MODEL_ICONS,
        model=model,
        error=error,
        d=d,
        charts=charts or [],
        report_url=report_url,
        pct=pct,
    )


# ═══════════════════════════════════════════════════════════════════
# Routes
# ═══════════════════════════════════════════════════════════════════

@app.route("/", methods=["GET", "POST"])
def index():
    if request.method == "GET":
        return _render(step=1, form={})

    form = {name: request.form.get(name, "").strip() for name in FIELDS}
    step = request.form.get("step", "1")
    action = request.form.get("action", "calculate")

    if step == "2" and action == "back":
        return _render(step=1, form=form)

    try:
        model = parse_model(request.form.get("model"))
    except InputError as exc:
        logger.warning("Rejected model selection: %s", exc)
        return _render(step=1, form=form, error=str(exc))

    # Step 1 only picks the model
    if step != "2":
        return _render(step=2, form=form, model=model)

    try:
        inp = parse_inputs(form)
    except InputError as exc:
        logger.warning("Rejected class statistics %s: %s", form, exc)
        return _render(step=2, form=form, model=model, error=str(exc))

    d = compute_display_data(inp, model)
    logger.info(
        "Prediction (%s): %s -> final=%.2f capped=%s",
        model.value, inp, d["final"], d["is_capped"],
    )

    chart_images = report.get_web_charts(d)
    report_url = url_for("download_pdf", model=model.value, **form)

    return _render(
        step=3,
        form=form,
        model=model,
        d=d,
        charts=chart_images,
        report_url=report_url,
    )


@app.route("/report.pdf")
def download_pdf():
    try:
        model = parse_model(request.args.get("model"))
        inp = parse_inputs(request.args)
    except InputError as exc:
        logger.warning("Rejected report request: %s", exc)
        return str(exc), 400

    d = compute_display_data(inp, model)
    return send_file(
        io.BytesIO(report.generate_pdf(d)),
        mimetype="application/pdf",
        as_attachment=True,
        download_name=cfg.PDF_FILENAME,
    )


# ═══════════════════════════════════════════════════════════════════
# Entry point
# ═══════════════════════════════════════════════════════════════════

def run_web(debug: bool = True) -> None:
    """Start the Flask development server and open browser."""
    import webbrowser
    import threading

    url = f"http://localhost:{cfg.WEB_PORT}"
    logger.info("Starting web app at %s", url)
    threading.Timer(1.0, lambda: webbrowser.open(url)).start()
    app.run(host=cfg.WEB_HOST, port=cfg.WEB_PORT, debug=debug)


if __name__ == "__main__":
    run_web()
