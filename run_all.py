# ================================================================
# PIPELINE ORCHESTRATOR
# ================================================================
# Runs every step of the revenue metrics pipeline in order:
#   1. Payments Store export → clean payments snapshot
#   2. Users Store export    → clean users snapshot
#   3. Cohort revenue metrics for the dashboard
#
# 🔹 Each step runs as a subprocess with the same interpreter.
# 🔹 The first failing step stops the run; later steps never see
#    partial inputs and the previous "latest" output stays in place.
# 🔹 A status summary is written to data/OUTPUT/YYYY-MM/pipeline_status.txt
# ================================================================

import os
import sys
import time
import logging
import subprocess
from datetime import datetime

from pipeline_config import load_config, setup_logging

# ------------------- STEPS (ORDERED) -------------------
STEPS = [
    "data_pipeline.payments.transform_payments",
    "data_pipeline.users.transform_users",
    "metrics_pipeline",
]


def run_step(module_name):
    """Run a pipeline module and return (status, elapsed seconds)."""
    logging.info(f" Starting {module_name} ...")
    start_time = time.time()

    try:
        result = subprocess.run(
            [sys.executable, "-m", module_name],  # Ensures we use the same interpreter
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace"
        )
    except OSError as e:
        elapsed = round(time.time() - start_time, 2)
        logging.exception(f"✖ {module_name} - ERROR: {e} ({elapsed}s)")
        return "ERROR", elapsed

    elapsed = round(time.time() - start_time, 2)
    if result.returncode == 0:
        logging.info(f"✔ {module_name} - SUCCESS ({elapsed}s)")
        return "SUCCESS", elapsed

    logging.error(f"✖ {module_name} - FAILED ({elapsed}s)")
    if result.stderr:
        logging.error(result.stderr)
    return "FAILED", elapsed


def save_summary(status_summary, output_dir):
    """Save a summary of all steps' statuses to OUTPUT/YYYY-MM/."""
    current_month = datetime.now().strftime("%Y-%m")
    month_dir = os.path.join(output_dir, current_month)
    os.makedirs(month_dir, exist_ok=True)
    summary_file = os.path.join(month_dir, "pipeline_status.txt")

    with open(summary_file, "w", encoding="utf-8") as f:
        f.write("PIPELINE STATUS SUMMARY\n")
        f.write("=======================\n")
        for step, status, elapsed in status_summary:
            f.write(f"{step}: {status} ({elapsed}s)\n")

    logging.info(f"Summary saved at {summary_file}")
    return summary_file


def run_all(config, steps=STEPS):
    """Run all steps, stopping at the first failure. Returns True on success."""
    logging.info("Starting Full Pipeline Execution")
    status_summary = []

    for step in steps:
        status, elapsed = run_step(step)
        status_summary.append((step, status, elapsed))
        if status != "SUCCESS":
            for skipped in steps[len(status_summary):]:
                status_summary.append((skipped, "SKIPPED", 0.0))
            break

    save_summary(status_summary, config.output_dir)

    ok = all(status == "SUCCESS" for _, status, _ in status_summary)
    if ok:
        logging.info("✅ Pipeline run completed.")
    else:
        logging.error("❌ Pipeline run aborted; no new output was published.")
    return ok


# ------------------- MAIN -------------------
if __name__ == "__main__":
    config = load_config()
    setup_logging(config)
    if not run_all(config):
        sys.exit(1)
