"""
Configuration Module
Project: Motor Insurance Renewal Analysis
Purpose: Paths, column names, recoding rules and model settings in one place
"""

from pathlib import Path

# Project root = folder containing src/
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Data
DATA_DIR = PROJECT_ROOT / "data"
DEFAULT_DATA_FILE = "policies.xlsx"

# Outputs (plots and text summaries for the report)
DOCS_DIR = PROJECT_ROOT / "docs"
PLOTS_DIR = DOCS_DIR / "plots"
METRICS_SUMMARY_FILE = DOCS_DIR / "metrics_summary.txt"

# Target label
TARGET_COL = "renewed"
TARGET_LABELS = ["No", "Yes"]
POSITIVE_LABEL = "Yes"

# Columns the spreadsheet must provide (after name normalization)
REQUIRED_COLUMNS = [
    "renewed",
    "gender",
    "marital_status",
    "payment_method",
    "acquisition_channel",
    "age",
    "car_value",
    "annual_mileage",
    "years_of_no_claims_bonus",
    "price",
    "actual_change_in_price_vs_last_year",
    "percent_change_in_price_vs_last_year",
    "grouped_change_in_price",
]

# Categorical explanatory variables (tested against renewed with chi-squared)
CATEGORICAL_COLS = ["gender", "marital_status", "payment_method", "acquisition_channel"]

# Continuous explanatory variables (tested against renewed with Welch's t-test)
CONTINUOUS_COLS = [
    "age",
    "car_value",
    "annual_mileage",
    "years_of_no_claims_bonus",
    "price",
    "actual_change_in_price_vs_last_year",
    "percent_change_in_price_vs_last_year",
]

# Price plus the seven other continuous variables
CORRELATION_COLS = [
    "price",
    "actual_change_in_price_vs_last_year",
    "percent_change_in_price_vs_last_year",
    "grouped_change_in_price",
    "age",
    "car_value",
    "annual_mileage",
    "years_of_no_claims_bonus",
]

# The seven variables every model consumes
MODEL_FEATURES = [
    "age",
    "car_value",
    "annual_mileage",
    "years_of_no_claims_bonus",
    "payment_method",
    "price",
    "percent_change_in_price_vs_last_year",
]

# Recoding rules
INVALID_GENDER = "C"
GENDER_CODES = {"M": "Male", "F": "Female", "Male": "Male", "Female": "Female"}
GENDER_LABELS = ["Male", "Female"]
MARRIED_CODES = {"M", "Married", 1, "1"}
MARITAL_LABELS = ["Not Married", "Married"]
RENEWED_CODES = {0: "No", 1: "Yes", "0": "No", "1": "Yes", "No": "No", "Yes": "Yes"}

# Randomness and splits
SEED = 42
TRAIN_FRACTION = 0.8
STRATIFIED_TRAIN_FRACTION = 0.75

# Statistical tests
ALPHA = 0.05
MIN_EXPECTED_COUNT = 5

# Random forest
RF_N_ESTIMATORS = 1000
RF_MAX_FEATURES = 2

# Gradient boosting search (10-fold CV on ROC AUC)
CV_FOLDS = 10
XGB_N_ITER = 30
XGB_PARAM_DISTRIBUTIONS = {
    "n_estimators": [100, 250, 500, 750, 1000],
    "max_depth": [2, 3, 4, 6, 8, 10],
    "min_child_weight": [1, 2, 5, 10, 20, 40],
    "gamma": [0.0, 0.001, 0.01, 0.1, 1.0, 5.0],
    "subsample": [0.5, 0.6, 0.7, 0.8, 0.9, 1.0],
    "feature_count": [1, 2, 3, 4, 5, 6, 7],
    "learning_rate": [0.005, 0.01, 0.03, 0.05, 0.1, 0.2, 0.3],
}

# Evaluation
PROBABILITY_THRESHOLD = 0.5
