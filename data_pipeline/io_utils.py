import os
import json
import logging

import pandas as pd


def validate_columns(df, required, df_name):
    """Ensure that required columns exist in the DataFrame."""
    missing = [col for col in required if col not in df.columns]
    if missing:
        raise ValueError(f"{df_name} is missing columns: {missing}")


def read_raw_export(path):
    """
    Read a raw store export into a DataFrame.

    CSV files are read as-is. JSON files may either be a list of records
    or an object with the records under 'entries' (the store's paginated
    export format).
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Raw export not found: {path}")

    if path.endswith(".json"):
        with open(path, "r", encoding="utf-8") as f:
            raw_data = json.load(f)
        entries = raw_data.get("entries", []) if isinstance(raw_data, dict) else raw_data
        return pd.DataFrame(entries)

    return pd.read_csv(path)


def load_table(path):
    """Load a clean snapshot table, Parquet or CSV depending on the extension."""
    if not os.path.exists(path):
        raise FileNotFoundError(f"Input table not found: {path}")
    if path.endswith(".parquet"):
        return pd.read_parquet(path, engine="pyarrow")
    return pd.read_csv(path)


def save_parquet(df, path):
    """Save a DataFrame to Parquet through a temporary file so readers never see a partial file."""
    tmp_path = path + ".tmp"
    df.to_parquet(tmp_path, index=False, engine="pyarrow")
    os.replace(tmp_path, path)


def save_csv(df, path, index=False):
    tmp_path = path + ".tmp"
    df.to_csv(tmp_path, index=index)
    os.replace(tmp_path, path)


def save_clean_snapshot(df, clean_path):
    """
    Save a cleaned table next to its CSV twin.

    clean_path is the Parquet target; a CSV with the same base name is
    written alongside it for manual inspection.
    """
    output_dir = os.path.dirname(clean_path)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)

    base, _ = os.path.splitext(clean_path)
    parquet_path = base + ".parquet"
    csv_path = base + ".csv"

    save_parquet(df, parquet_path)
    logging.info(f"✅ Saved Parquet to {parquet_path}")
    save_csv(df, csv_path)
    logging.info(f"✅ Saved CSV to {csv_path}")
    return parquet_path, csv_path
