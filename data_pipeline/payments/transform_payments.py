# ================================================================
# 📌 PAYMENTS STORE TRANSFORM SCRIPT
# ================================================================
# Turns the raw Payments Store export into the clean payments
# snapshot read by metrics_pipeline.py.
#
# 🔹 INPUT:
#     - data/INPUT/payments_store/raw/payments_raw.csv (or .json)
#
# 🔹 OUTPUT:
#     - data/INPUT/payments_store/clean/payments_clean.parquet
#     - data/INPUT/payments_store/clean/payments_clean.csv
#
# 🔹 Features:
#     - Keeps only the payment event columns
#     - Coerces dates and amounts to proper dtypes
#     - No row filtering: data quality is owned by the Payments Store
# ================================================================

import sys
import logging

import pandas as pd

from data_pipeline.io_utils import read_raw_export, save_clean_snapshot, validate_columns
from pipeline_config import load_config, setup_logging

PAYMENT_COLUMNS = ["user_id", "payment_date", "revenue_amount_usd"]


def clean_payments(df):
    """Select the payment event columns and coerce their types."""
    validate_columns(df, PAYMENT_COLUMNS, "Payments")
    df = df[PAYMENT_COLUMNS].copy()

    # Timestamps from the store may carry an offset; normalise to naive UTC
    df["payment_date"] = (
        pd.to_datetime(df["payment_date"], errors="coerce", utc=True, format="mixed")
        .dt.tz_localize(None)
    )
    df["revenue_amount_usd"] = pd.to_numeric(df["revenue_amount_usd"], errors="coerce")

    return df.reset_index(drop=True)


def transform_payments(raw_path, clean_path):
    logging.info(f"📥 Loading raw payments from {raw_path}")
    df_raw = read_raw_export(raw_path)

    if df_raw.empty:
        logging.warning("⚠️ Payments export is empty.")

    df = clean_payments(df_raw)
    save_clean_snapshot(df, clean_path)
    logging.info(f"✅ Total payment records cleaned: {len(df)}")
    return df


def main():
    config = load_config()
    setup_logging(config)
    logging.info("🚩 Starting transform_payments()")
    try:
        transform_payments(config.payments_raw_path, config.payments_clean_path)
    except Exception as e:
        logging.error(f"❌ Failed to transform payments data: {e}", exc_info=True)
        sys.exit(1)


# ============================================
# 🟢 ENTRY POINT
# ============================================

if __name__ == "__main__":
    main()
