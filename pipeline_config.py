# ================================================================
# 🔧 PIPELINE CONFIGURATION
# ================================================================
# Central place for paths and logging settings shared by the
# transform scripts, the metrics pipeline and run_all.py.
#
# 🔹 Values come from (highest priority first):
#     1. Environment variables (GitHub Actions secrets, scheduler env)
#     2. A local .env file (development)
#     3. The defaults below
# ================================================================

import os
import logging
from dataclasses import dataclass

from dotenv import load_dotenv

# ============================================
# 📁 DEFAULTS
# ============================================

DEFAULT_PAYMENTS_RAW_PATH = "data/INPUT/payments_store/raw/payments_raw.csv"
DEFAULT_USERS_RAW_PATH = "data/INPUT/users_store/raw/users_raw.csv"
DEFAULT_PAYMENTS_CLEAN_PATH = "data/INPUT/payments_store/clean/payments_clean.parquet"
DEFAULT_USERS_CLEAN_PATH = "data/INPUT/users_store/clean/users_clean.parquet"
DEFAULT_OUTPUT_DIR = "data/OUTPUT"
DEFAULT_LOG_PATH = "logs/pipeline.log"
DEFAULT_LOG_LEVEL = "INFO"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


@dataclass
class PipelineConfig:
    payments_raw_path: str = DEFAULT_PAYMENTS_RAW_PATH
    users_raw_path: str = DEFAULT_USERS_RAW_PATH
    payments_clean_path: str = DEFAULT_PAYMENTS_CLEAN_PATH
    users_clean_path: str = DEFAULT_USERS_CLEAN_PATH
    output_dir: str = DEFAULT_OUTPUT_DIR
    log_path: str = DEFAULT_LOG_PATH
    log_level: str = DEFAULT_LOG_LEVEL


# ============================================
# 🔐 LOAD CONFIG
# ============================================

def load_config(env_file=".env") -> PipelineConfig:
    """Build a PipelineConfig from the environment, reading .env if it exists."""
    # Load .env file if it exists (local development)
    if env_file and os.path.exists(env_file):
        load_dotenv(env_file)

    log_level = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ValueError(f"Invalid LOG_LEVEL '{log_level}'. Use DEBUG, INFO, WARNING or ERROR.")

    return PipelineConfig(
        payments_raw_path=os.getenv("PAYMENTS_RAW_PATH", DEFAULT_PAYMENTS_RAW_PATH),
        users_raw_path=os.getenv("USERS_RAW_PATH", DEFAULT_USERS_RAW_PATH),
        payments_clean_path=os.getenv("PAYMENTS_CLEAN_PATH", DEFAULT_PAYMENTS_CLEAN_PATH),
        users_clean_path=os.getenv("USERS_CLEAN_PATH", DEFAULT_USERS_CLEAN_PATH),
        output_dir=os.getenv("OUTPUT_DIR", DEFAULT_OUTPUT_DIR),
        log_path=os.getenv("LOG_PATH", DEFAULT_LOG_PATH),
        log_level=log_level,
    )


# ============================================
# 🪵 LOGGING SETUP
# ============================================

def setup_logging(config: PipelineConfig) -> None:
    """Log to the pipeline log file and to the console."""
    log_dir = os.path.dirname(config.log_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    logging.basicConfig(
        level=config.log_level,
        format=LOG_FORMAT,
        handlers=[
            logging.FileHandler(config.log_path, encoding="utf-8"),
            logging.StreamHandler()
        ],
        force=True
    )
