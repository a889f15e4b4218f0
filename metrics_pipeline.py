import os
import sys
import logging
import argparse
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP

import pandas as pd

from data_pipeline.io_utils import load_table, save_csv, save_parquet, validate_columns
from pipeline_config import load_config, setup_logging

# ------------------- Constants -------------------
# Average number of seconds in a month (365.25 days / 12)
SECONDS_PER_MONTH = 2629800

PAYMENT_COLUMNS = ['user_id', 'payment_date', 'revenue_amount_usd']
USER_COLUMNS = ['user_id', 'language', 'age']

SEGMENT_KEYS = ['language', 'age']
COHORT_KEYS = ['payment_month', 'language', 'age']

OUTPUT_COLUMNS = [
    'payment_month', 'churn_month', 'language', 'age',
    'paid_users', 'paid_users_prev', 'mrr', 'mrr_prev',
    'churn_user', 'churn_revenue', 'churn_rate', 'revenue_churn_rate',
    'new_paid_users', 'total_new_mrr', 'expansion_mrr', 'contraction_mrr',
    'net_mrr', 'avg_ltv', 'avg_lifetime', 'arppu'
]

MONEY_AND_RATIO_COLUMNS = [
    'mrr', 'mrr_prev', 'churn_revenue', 'churn_rate', 'revenue_churn_rate',
    'total_new_mrr', 'expansion_mrr', 'contraction_mrr', 'net_mrr',
    'avg_ltv', 'avg_lifetime', 'arppu'
]

COUNT_COLUMNS = ['paid_users', 'paid_users_prev', 'churn_user', 'new_paid_users']


# ------------------- Debug Utility -------------------
def debug(message):
    logging.debug(message)


# ------------------- Helper Functions -------------------
def truncate_to_month(date_col):
    """Truncate a date column to the first instant of its calendar month."""
    return pd.to_datetime(date_col, format='mixed').dt.to_period('M').dt.to_timestamp()


def add_months(month_col, months=1):
    """Shift a month-start column by a whole number of calendar months."""
    return (pd.to_datetime(month_col, format='mixed').dt.to_period('M') + months).dt.to_timestamp()


def ensure_month_format(date_col):
    """Convert a date column to YYYY-MM format string."""
    return pd.to_datetime(date_col, errors='coerce', format='mixed').dt.to_period('M').astype(str)


def round_half_up(col, decimals=2):
    """
    Round like SQL numeric round(): halves go away from zero.

    Series.round() rounds the binary float half to even, so 0.565 would
    come out as 0.56. Going through the shortest decimal repr of each value
    gives 0.57.
    """
    quantum = Decimal(1).scaleb(-decimals)
    rounded = col.astype('float64').map(
        lambda x: float(Decimal(repr(x)).quantize(quantum, rounding=ROUND_HALF_UP)) if pd.notna(x) else x
    )
    return rounded.astype('float64')


def safe_divide(numerator, denominator):
    """Divide two columns, returning NaN wherever the denominator is 0 or missing."""
    denominator = denominator.astype('float64')
    return numerator.astype('float64') / denominator.where(denominator != 0)


# --------------------------------------------------------------------------
#                   SUMMARY OF METRIC CREATION PROCESS:
# --------------------------------------------------------------------------
#   payments + users
#       └── 1. Base join (first / last payment month per user)
#           ├── 2. User monthly revenue (next paid month)
#           │     ├── 4. Churn block ── 5. Churn lag
#           │     └── 6. Expansion / contraction MRR
#           ├── 3. Monthly user activity (new users, new MRR)
#           └── 7. User LTV ── 8. LTV & lifetime averages
#                   └── 9. Final metrics (joins 3-8, ratios, rounding)
#
#   Every cohort-level table is keyed by (payment_month, language, age).
#   A missing language / age is a key value of its own ("unknown segment"),
#   so every groupby below uses dropna=False.
# --------------------------------------------------------------------------

# --------------------------------------------------------------------------
# 1. Base Join (first_payment_month, last_payment_month)
#    ───────────────────────────────────────────────────
#
# * Formula:
#     first_payment_month = month(min(payment_date)) over the user's payments
#     last_payment_month  = month(max(payment_date)) over the user's payments
#
# * Source Table(s) and Columns:
#     - df_payments: 'user_id', 'payment_date', 'revenue_amount_usd'
#     - df_users:    'user_id', 'language', 'age'
#
# * Calculation Steps:
#     1. Left join payments to users on 'user_id'
#     2. Truncate 'payment_date' to 'payment_month'
#     3. Per user window min / max of 'payment_date', truncated to month
#
# * Assumptions / Filters:
#     - No filtering: every payment row is kept exactly once
#     - Payments from users missing in the Users Store keep null language / age
#     - The Users Store has one row per user (a duplicate user aborts the run)
#
# * Flowchart:
#     df_payments
#         └── Left join df_users on 'user_id'
#             └── payment_month
#                 └── first / last payment month per user
# --------------------------------------------------------------------------
def calculate_base_join(df_payments, df_users):
    """
    Join payment events to the user dimension and derive per-user cohort months.

    Parameters:
        df_payments (pd.DataFrame): Payments Store snapshot
        df_users (pd.DataFrame): Users Store snapshot

    Returns:
        pd.DataFrame: One row per payment with:
            - 'user_id', 'payment_date', 'payment_month', 'revenue_amount_usd'
            - 'language', 'age'
            - 'first_payment_date', 'first_payment_month', 'last_payment_month'
    """
    validate_columns(df_payments, PAYMENT_COLUMNS, "Payments")
    validate_columns(df_users, USER_COLUMNS, "Users")

    # ----------------------------------------------------------------------
    # STEP 1: Left join payments to the user dimension
    # ----------------------------------------------------------------------
    # validate='many_to_one' raises if a user_id repeats in the Users Store,
    # which would otherwise duplicate that user's payments.
    df = pd.merge(
        df_payments[PAYMENT_COLUMNS],
        df_users[USER_COLUMNS],
        on='user_id',
        how='left',
        validate='many_to_one'
    )

    # ----------------------------------------------------------------------
    # STEP 2: Calendar month of each payment
    # ----------------------------------------------------------------------
    df['payment_date'] = pd.to_datetime(df['payment_date'], format='mixed')
    df['payment_month'] = truncate_to_month(df['payment_date'])

    # ----------------------------------------------------------------------
    # STEP 3: First / last payment month over the user's full history
    # ----------------------------------------------------------------------
    by_user = df.groupby('user_id')['payment_date']
    df['first_payment_date'] = by_user.transform('min')
    df['first_payment_month'] = truncate_to_month(df['first_payment_date'])
    df['last_payment_month'] = truncate_to_month(by_user.transform('max'))

    debug(f"Base join -> {df.shape[0]} payments, {df['user_id'].nunique()} users")
    return df


# --------------------------------------------------------------------------
# 2. User Monthly Revenue (total_revenue, next_paid_month)
#    ─────────────────────────────────────────────────────
#
# * Formula:
#     total_revenue   = sum(revenue_amount_usd) per user and month
#     next_paid_month = next month (ascending) in which the same user paid
#
# * Calculation Steps:
#     1. Group base rows by (user_id, payment_month, language, age)
#     2. Sort by user and month, look one row ahead within the user
#
# * Notes for Verification:
#     - next_paid_month is the next *paid* month, not payment_month + 1.
#       A user paying in Jan and Apr has next_paid_month = Apr for Jan.
#     - The user's last paid month has next_paid_month = NaT
# --------------------------------------------------------------------------
def calculate_user_monthly_revenue(df_base):
    # ----------------------------------------------------------------------
    # STEP 1: One row per user and month
    # ----------------------------------------------------------------------
    df = (
        df_base
        .groupby(['user_id', 'payment_month', 'language', 'age'], dropna=False, as_index=False)
        ['revenue_amount_usd'].sum()
        .rename(columns={'revenue_amount_usd': 'total_revenue'})
    )

    # ----------------------------------------------------------------------
    # STEP 2: Calendar month after this one and the user's next paid month
    # ----------------------------------------------------------------------
    df = df.sort_values(['user_id', 'payment_month'], kind='mergesort').reset_index(drop=True)
    df['next_calendar_month'] = add_months(df['payment_month'])
    df['next_paid_month'] = df.groupby('user_id')['payment_month'].shift(-1)

    return df


# --------------------------------------------------------------------------
# 3. Monthly User Activity (is_new_user, new_mrr)
#    ────────────────────────────────────────────
#
# * Formula:
#     is_new_user  = payment_month == first_payment_month
#     new_mrr      = revenue_amount_usd if is_new_user else 0
#     prev_revenue = revenue of the user's previous payment row
#
# * Source Table(s) and Columns:
#     - Base join output (payment granularity, not monthly aggregated)
#
# * Notes for Verification:
#     - prev_revenue is kept for reconciliation only; the final
#       table does not use it
#     - Payments within the same month are ordered by payment_date
# --------------------------------------------------------------------------
def calculate_monthly_user_activity(df_base):
    df = df_base.sort_values(['user_id', 'payment_month', 'payment_date'], kind='mergesort').copy()

    df['prev_revenue'] = df.groupby('user_id')['revenue_amount_usd'].shift(1)
    df['is_new_user'] = df['payment_month'] == df['first_payment_month']
    df['new_mrr'] = df['revenue_amount_usd'].where(df['is_new_user'], 0.0)

    return df[[
        'user_id', 'payment_month', 'revenue_amount_usd', 'prev_revenue',
        'is_new_user', 'new_mrr', 'language', 'age'
    ]].reset_index(drop=True)


def calculate_new_paid_users(df_activity):
    """Distinct first-time payers and their revenue per cohort period."""
    df = df_activity.assign(
        new_user_id=df_activity['user_id'].where(df_activity['is_new_user'])
    )
    return df.groupby(COHORT_KEYS, dropna=False, as_index=False).agg(
        new_paid_users=('new_user_id', 'nunique'),
        total_new_mrr=('new_mrr', 'sum')
    )


# --------------------------------------------------------------------------
# 4. Churn Block (paid_users, mrr, churn_user, churn_revenue)
#    ────────────────────────────────────────────────────────
#
# * Formula:
#     paid_users    = count(distinct user_id)
#     mrr           = sum(total_revenue)
#     churn_user    = count of user-months where
#                       next_paid_month is NaT OR next_paid_month != payment_month + 1
#     churn_revenue = sum(total_revenue) of those same user-months
#
# * Source Table(s) and Columns:
#     - User monthly revenue: 'total_revenue', 'next_calendar_month', 'next_paid_month'
#
# * Assumptions / Filters:
#     - Gap detection: skipping one or more months counts as churn in the
#       last month before the gap, even if the user comes back later
#     - A user's final paid month is always a churn month
#     - churn_revenue is the churning month's own revenue (0 when nobody churns)
#
# * Flowchart:
#     df_user_monthly
#         └── is_churned per user-month
#             └── Group by (payment_month, language, age)
# --------------------------------------------------------------------------
def calculate_churn_block(df_user_monthly):
    """
    Aggregate paid users, MRR and churn per cohort period.

    Parameters:
        df_user_monthly (pd.DataFrame): Output of calculate_user_monthly_revenue

    Returns:
        pd.DataFrame: One row per (payment_month, language, age) with
            'paid_users', 'mrr', 'churn_user', 'churn_revenue'
    """
    # ----------------------------------------------------------------------
    # STEP 1: Flag churned user-months
    # ----------------------------------------------------------------------
    # NaT never compares equal, so users without a next paid month are churned.
    is_churned = ~(df_user_monthly['next_paid_month'] == df_user_monthly['next_calendar_month'])
    df = df_user_monthly.assign(
        is_churned=is_churned,
        churned_revenue=df_user_monthly['total_revenue'].where(is_churned, 0.0)
    )

    # ----------------------------------------------------------------------
    # STEP 2: Aggregate per cohort period
    # ----------------------------------------------------------------------
    df_out = df.groupby(COHORT_KEYS, dropna=False, as_index=False).agg(
        paid_users=('user_id', 'nunique'),
        mrr=('total_revenue', 'sum'),
        churn_user=('is_churned', 'sum'),
        churn_revenue=('churned_revenue', 'sum')
    )
    df_out['churn_user'] = df_out['churn_user'].astype('int64')

    debug(f"Churn block -> {df_out.shape[0]} cohort periods")
    return df_out


# --------------------------------------------------------------------------
# 5. Churn Lag (paid_users_prev, mrr_prev, churn_month)
#    ──────────────────────────────────────────────────
#
# * Formula:
#     paid_users_prev = paid_users of the previous period in the same segment
#     mrr_prev        = mrr of the previous period in the same segment
#     churn_month     = payment_month + 1 month
#
# * Notes for Verification:
#     - "Previous period" is the previous row of the segment ordered by
#       month, so a segment with no payments in Mar compares Apr with Feb
#     - The earliest period of each segment has NaN for both *_prev columns
# --------------------------------------------------------------------------
def calculate_churn_lag(df_churn_block):
    df = df_churn_block.sort_values(
        ['language', 'age', 'payment_month'], kind='mergesort', na_position='last'
    ).copy()

    by_segment = df.groupby(SEGMENT_KEYS, dropna=False)
    df['paid_users_prev'] = by_segment['paid_users'].shift(1)
    df['mrr_prev'] = by_segment['mrr'].shift(1)
    df['churn_month'] = add_months(df['payment_month'])

    return df.reset_index(drop=True)


# --------------------------------------------------------------------------
# 6. Expansion & Contraction MRR
#    ───────────────────────────
#
# * Formula:
#     delta           = total_revenue - previous total_revenue of the same user
#     expansion_mrr   = sum(delta) where delta > 0
#     contraction_mrr = sum(delta) where delta < 0   (stays negative)
#
# * Calculation Steps:
#     1. Sort user monthly revenue by user and month
#     2. Previous paid month's revenue per user (not necessarily month - 1)
#     3. Split deltas into positive / negative parts
#     4. Group by (payment_month, language, age) and sum
#
# * Assumptions / Filters:
#     - A user's first paid month has no previous row and contributes 0;
#       that revenue is counted as new MRR instead
#
# * Flowchart:
#     df_user_monthly
#         └── prev_monthly_revenue per user
#             └── delta → expansion / contraction
#                 └── Group and sum
# --------------------------------------------------------------------------
def calculate_expansion_contraction(df_user_monthly):
    # ----------------------------------------------------------------------
    # STEP 1: Previous paid month's revenue for the same user
    # ----------------------------------------------------------------------
    df = df_user_monthly.sort_values(['user_id', 'payment_month'], kind='mergesort').copy()
    df['prev_monthly_revenue'] = df.groupby('user_id')['total_revenue'].shift(1)

    # ----------------------------------------------------------------------
    # STEP 2: Split the month-over-month change
    # ----------------------------------------------------------------------
    # NaN deltas (first paid month) fail both comparisons and become 0.
    delta = df['total_revenue'] - df['prev_monthly_revenue']
    df['expansion_delta'] = delta.where(delta > 0, 0.0)
    df['contraction_delta'] = delta.where(delta < 0, 0.0)

    # ----------------------------------------------------------------------
    # STEP 3: Aggregate per cohort period
    # ----------------------------------------------------------------------
    return df.groupby(COHORT_KEYS, dropna=False, as_index=False).agg(
        expansion_mrr=('expansion_delta', 'sum'),
        contraction_mrr=('contraction_delta', 'sum')
    )


# --------------------------------------------------------------------------
# 7. User LTV (ltv, lifetime)
#    ────────────────────────
#
# * Formula:
#     ltv      = sum(revenue_amount_usd) over the user's full history
#     lifetime = seconds(last_payment_month - first_payment_month) / SECONDS_PER_MONTH
#
# * Notes for Verification:
#     - A user active in a single month has lifetime 0
#     - Jan → Feb is 31 days, so lifetime ≈ 1.02 rather than exactly 1
# --------------------------------------------------------------------------
def calculate_user_ltv(df_base):
    df = (
        df_base
        .groupby(
            ['user_id', 'language', 'age', 'first_payment_month', 'last_payment_month'],
            dropna=False, as_index=False
        )['revenue_amount_usd'].sum()
        .rename(columns={'revenue_amount_usd': 'ltv'})
    )
    elapsed = df['last_payment_month'] - df['first_payment_month']
    df['lifetime'] = elapsed.dt.total_seconds() / SECONDS_PER_MONTH
    return df


# --------------------------------------------------------------------------
# 8. LTV & Lifetime Averages (avg_ltv, avg_lifetime)
#    ───────────────────────────────────────────────
#
# * Formula:
#     avg_ltv      = mean(ltv) of distinct users paying in the period
#     avg_lifetime = mean(lifetime) of the same users
#
# * Assumptions / Filters:
#     - Each user is counted once per period no matter how many payments
#       they made in it
#     - A user active in N months contributes their (whole-history) LTV to
#       N periods, so avg_ltv reads as "lifetime value of users active now"
# --------------------------------------------------------------------------
def calculate_ltv_lifetime(df_base, df_user_ltv):
    df = df_base[['user_id'] + COHORT_KEYS].drop_duplicates()
    df = pd.merge(df, df_user_ltv[['user_id', 'ltv', 'lifetime']], on='user_id', how='left')

    return df.groupby(COHORT_KEYS, dropna=False, as_index=False).agg(
        avg_ltv=('ltv', 'mean'),
        avg_lifetime=('lifetime', 'mean')
    )


# --------------------------------------------------------------------------
# 9. Final Metrics (churn_rate, revenue_churn_rate, arppu, net_mrr)
#    ──────────────────────────────────────────────────────────────
#
# * Formula:
#     churn_rate         = churn_user / paid_users_prev
#     revenue_churn_rate = churn_revenue / mrr_prev
#     arppu              = mrr / paid_users
#     net_mrr            = total_new_mrr + expansion_mrr - churn_revenue - contraction_mrr
#
# * Source Table(s) and Columns:
#     - Churn lag (base table)
#     - New paid users, expansion / contraction, LTV & lifetime averages
#
# * Calculation Steps:
#     1. Left join every auxiliary table to the churn lag on the cohort keys
#     2. Ratios with NaN for a zero or missing denominator
#     3. net_mrr at full precision
#
# * Assumptions / Filters:
#     - Left joins: a missing auxiliary value stays NaN, the row is kept
#     - contraction_mrr is negative, so subtracting it adds the amount back;
#       net_mrr follows the formula above as written
#     - No rounding here; format_final_metrics rounds half away from zero
#       (SQL numeric round), not half to even like Series.round()
#
# * Flowchart:
#     df_churn_lag
#         ├── left join df_new_users
#         ├── left join df_expansion_contraction
#         └── left join df_ltv_lifetime
#             └── ratios + net_mrr
# --------------------------------------------------------------------------
def calculate_final_metrics(df_churn_lag, df_new_users, df_expansion_contraction, df_ltv_lifetime):
    """
    Assemble the cohort period table with derived ratios at full precision.

    Parameters:
        df_churn_lag (pd.DataFrame): Output of calculate_churn_lag
        df_new_users (pd.DataFrame): Output of calculate_new_paid_users
        df_expansion_contraction (pd.DataFrame): Output of calculate_expansion_contraction
        df_ltv_lifetime (pd.DataFrame): Output of calculate_ltv_lifetime

    Returns:
        pd.DataFrame: One row per (payment_month, language, age)
    """
    # ----------------------------------------------------------------------
    # STEP 1: Join the auxiliary metrics onto the churn lag block
    # ----------------------------------------------------------------------
    df = df_churn_lag
    for df_aux in [df_new_users, df_expansion_contraction, df_ltv_lifetime]:
        df = pd.merge(df, df_aux, on=COHORT_KEYS, how='left')

    # ----------------------------------------------------------------------
    # STEP 2: Null-safe ratios
    # ----------------------------------------------------------------------
    df['churn_rate'] = safe_divide(df['churn_user'], df['paid_users_prev'])
    df['revenue_churn_rate'] = safe_divide(df['churn_revenue'], df['mrr_prev'])
    df['arppu'] = safe_divide(df['mrr'], df['paid_users'])

    # ----------------------------------------------------------------------
    # STEP 3: Net MRR movement
    # ----------------------------------------------------------------------
    df['net_mrr'] = (
        df['total_new_mrr'] + df['expansion_mrr'] - df['churn_revenue'] - df['contraction_mrr']
    )

    return df


def format_final_metrics(df):
    """
    Presentation step for the dashboard.

    Rounds money and ratio columns to 2 decimals (half away from zero),
    keeps user counts and integer ages as
    (nullable) integers, formats months as YYYY-MM and orders rows by
    cohort keys and columns by the output schema.
    """
    df = df.sort_values(COHORT_KEYS, kind='mergesort', na_position='last').copy()

    # + 0.0 turns -0.0 from rounding tiny negatives into 0.0
    df[MONEY_AND_RATIO_COLUMNS] = df[MONEY_AND_RATIO_COLUMNS].apply(round_half_up) + 0.0
    for col in COUNT_COLUMNS:
        df[col] = df[col].astype('Int64')

    # Unknown users turn an integer age column into float on the left join
    age = df['age']
    if pd.api.types.is_float_dtype(age) and (age.dropna() % 1 == 0).all():
        df['age'] = age.astype('Int64')

    df['payment_month'] = ensure_month_format(df['payment_month'])
    df['churn_month'] = ensure_month_format(df['churn_month'])

    return df[OUTPUT_COLUMNS].reset_index(drop=True)


# ------------------- Metrics Run -------------------
def run_metrics(df_payments, df_users):
    """Compute the dashboard table from a payments / users snapshot."""
    df_base = calculate_base_join(df_payments, df_users)                           # 1
    df_user_monthly = calculate_user_monthly_revenue(df_base)                      # 2
    df_activity = calculate_monthly_user_activity(df_base)                         # 3
    df_new_users = calculate_new_paid_users(df_activity)                           # 3
    df_churn_block = calculate_churn_block(df_user_monthly)                        # 4
    df_churn_lag = calculate_churn_lag(df_churn_block)                             # 5
    df_expansion_contraction = calculate_expansion_contraction(df_user_monthly)    # 6
    df_user_ltv = calculate_user_ltv(df_base)                                      # 7
    df_ltv_lifetime = calculate_ltv_lifetime(df_base, df_user_ltv)                 # 8

    df_final = calculate_final_metrics(                                            # 9
        df_churn_lag, df_new_users, df_expansion_contraction, df_ltv_lifetime
    )
    return format_final_metrics(df_final)


# ------------------- Main Pipeline -------------------
def save_outputs(df_final, output_dir, run_month=None):
    """
    Save the monthly versioned outputs plus the static "latest" files.

    Returns:
        dict: name → path of every written file
    """
    run_month = run_month or datetime.now().strftime("%Y-%m")
    month_dir = os.path.join(output_dir, run_month)
    os.makedirs(month_dir, exist_ok=True)

    paths = {
        'csv': os.path.join(month_dir, f"revenue_metrics_{run_month}.csv"),
        'parquet': os.path.join(month_dir, f"revenue_metrics_{run_month}.parquet"),
        'summary': os.path.join(month_dir, f"summary_stats_{run_month}.csv"),
        'latest_csv': os.path.join(output_dir, "revenue_metrics_latest.csv"),
        'latest_parquet': os.path.join(output_dir, "revenue_metrics_latest.parquet"),
    }

    # Monthly files
    save_csv(df_final, paths['csv'])
    save_parquet(df_final, paths['parquet'])
    debug(f"Metrics saved at {paths['csv']} and {paths['parquet']}")

    # Summary stats
    if df_final.empty:
        logging.warning("⚠️ No cohort periods produced; skipping summary stats.")
        del paths['summary']
    else:
        summary_stats = df_final.describe().round(2)
        save_csv(summary_stats, paths['summary'], index=True)
        debug(f"Summary saved at {paths['summary']}")

    # Static "latest" version for the dashboard
    save_csv(df_final, paths['latest_csv'])
    save_parquet(df_final, paths['latest_parquet'])
    debug(f"Static latest metrics saved at {paths['latest_csv']} and {paths['latest_parquet']}")

    return paths


def run_pipeline(config, preview=False):
    logging.info("🚀 Starting revenue metrics pipeline")

    debug("Loading input datasets...")
    df_payments = load_table(config.payments_clean_path)
    df_users = load_table(config.users_clean_path)
    debug(f"Loaded datasets -> Payments: {df_payments.shape}, Users: {df_users.shape}")

    # Nothing is written until the full table exists
    df_final = run_metrics(df_payments, df_users)
    logging.info(f"Computed {len(df_final)} cohort period rows")

    if preview:
        print(df_final.head(20).to_string(index=False))

    paths = save_outputs(df_final, config.output_dir)
    logging.info("✅ Revenue metrics pipeline completed.")
    return df_final, paths


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Compute cohort revenue metrics for the dashboard.")
    parser.add_argument("--payments", type=str, help="Clean payments snapshot (.parquet or .csv)")
    parser.add_argument("--users", type=str, help="Clean users snapshot (.parquet or .csv)")
    parser.add_argument("--output-dir", type=str, help="Directory for the output tables")
    parser.add_argument("--preview", action="store_true", help="Print the first rows of the result")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    config = load_config()
    if args.payments:
        config.payments_clean_path = args.payments
    if args.users:
        config.users_clean_path = args.users
    if args.output_dir:
        config.output_dir = args.output_dir

    setup_logging(config)
    try:
        run_pipeline(config, preview=args.preview)
    except Exception as e:
        logging.error(f"❌ Revenue metrics pipeline failed: {e}", exc_info=True)
        sys.exit(1)


# ------------------- Entry Point -------------------
if __name__ == "__main__":
    main()
