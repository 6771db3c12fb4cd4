"""
Constants for the Class Assignment Predictor.

Model shape parameters, web server settings, logging and report defaults.
"""

# ── Completion models ────────────────────────────────────────────────
EXPONENTIAL_POWER = 1.5     # f(r) = r ** 1.5 for the exponential model

# ── Input limits ─────────────────────────────────────────────────────
MAX_STUDENTS = 100_000      # class size
MAX_TOTAL_DAYS = 3_650      # one curve point per day

# ── Web app ──────────────────────────────────────────────────────────
WEB_HOST = "127.0.0.1"
WEB_PORT = 5000
APP_TITLE = "Class Assignment Predictor"

# ── Logging ──────────────────────────────────────────────────────────
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_LEVEL = "INFO"

# ── Reports ──────────────────────────────────────────────────────────
PDF_FILENAME = "assignment_prediction.pdf"
