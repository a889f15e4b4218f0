# ================================================================
# 📌 USERS STORE TRANSFORM SCRIPT
# ================================================================
# Turns the raw Users Store export into the clean user dimension
# snapshot (one row per user with its segment attributes).
#
# 🔹 INPUT:
#     - data/INPUT/users_store/raw/users_raw.csv (or .json)
#
# 🔹 OUTPUT:
#     - data/INPUT/users_store/clean/users_clean.parquet
#     - data/INPUT/users_store/clean/users_clean.csv
#
# 🔹 Features:
#     - language / age may be missing; they are kept as nulls
#       and end up in the "unknown segment" bucket downstream
# ================================================================

import sys
import logging

from data_pipeline.io_utils import read_raw_export, save_clean_snapshot, validate_columns
from pipeline_config import load_config, setup_logging

USER_COLUMNS = ["user_id", "language", "age"]


def clean_users(df):
    """Select the user dimension columns."""
    validate_columns(df, USER_COLUMNS, "Users")
    df = df[USER_COLUMNS].copy()

    # Blank strings from CSV exports mean "unknown"
    df["language"] = df["language"].mask(df["language"] == "")

    return df.reset_index(drop=True)


def transform_users(raw_path, clean_path):
    logging.info(f"📥 Loading raw users from {raw_path}")
    df_raw = read_raw_export(raw_path)

    if df_raw.empty:
        logging.warning("⚠️ Users export is empty.")

    df = clean_users(df_raw)
    save_clean_snapshot(df, clean_path)
    logging.info(f"✅ Total user records cleaned: {len(df)}")
    return df


def main():
    config = load_config()
    setup_logging(config)
    logging.info("🚩 Starting transform_users()")
    try:
        transform_users(config.users_raw_path, config.users_clean_path)
    except Exception as e:
        logging.error(f"❌ Failed to transform users data: {e}", exc_info=True)
        sys.exit(1)


# ============================================
# 🟢 ENTRY POINT
# ============================================

if __name__ == "__main__":
    main()
