import matplotlib
matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

from renewal_analysis.preprocessing import DataPreprocessor

RAW_HEADERS = {
    "renewed": "Renewed",
    "gender": "Gender",
    "marital_status": "Marital Status",
    "payment_method": "Payment Method",
    "acquisition_channel": "Acquisition Channel",
    "age": "Age",
    "car_value": "Car Value",
    "annual_mileage": "Annual Mileage",
    "years_of_no_claims_bonus": "Years of No Claims Bonus",
    "price": "Price",
    "actual_change_in_price_vs_last_year": "Actual Change in Price vs Last Year",
    "percent_change_in_price_vs_last_year": "Percent Change in Price vs Last Year",
    "grouped_change_in_price": "Grouped Change in Price",
}


def make_raw_policies(n=400, seed=7):
    """Raw policy sheet with the same coding as the source spreadsheet.

    Renewal gets less likely as the price and its change vs last year go up.
    Rows 5, 17, 42 have no price and row 9 carries the invalid gender code 'C'.
    """
    rng = np.random.default_rng(seed)
    price = rng.uniform(150, 900, n).round(2)
    pct_change = rng.normal(0.03, 0.08, n).round(4)
    last_year = price / (1 + pct_change)
    logit = 1.2 - 8.0 * pct_change - 0.005 * (price - 500)
    renewed = (rng.uniform(size=n) < 1 / (1 + np.exp(-logit))).astype(int)

    data = pd.DataFrame({
        "renewed": renewed,
        "gender": rng.choice(["M", "F"], n),
        "marital_status": rng.choice(["M", "S", "D", "W"], n),
        "payment_method": rng.choice(["Monthly", "Annual", "Direct Debit"], n),
        "acquisition_channel": rng.choice(["Inbound", "Outbound", "Online"], n),
        "age": rng.integers(18, 85, n),
        "car_value": rng.uniform(1000, 40000, n).round(0),
        "annual_mileage": rng.uniform(2000, 25000, n).round(0),
        "years_of_no_claims_bonus": rng.integers(0, 10, n),
        "price": price,
        "actual_change_in_price_vs_last_year": (price - last_year).round(2),
        "percent_change_in_price_vs_last_year": pct_change,
        "grouped_change_in_price": np.digitize(pct_change, [-0.05, 0.0, 0.05, 0.1]),
    })
    data.loc[[5, 17, 42], "price"] = np.nan
    data.loc[9, "gender"] = "C"
    return data


@pytest.fixture
def raw_policies():
    return make_raw_policies()


@pytest.fixture
def clean_policies(raw_policies):
    return DataPreprocessor().clean(raw_policies)


@pytest.fixture
def policy_xlsx(tmp_path, raw_policies):
    """The raw sheet written as .xlsx with human-style headers."""
    path = tmp_path / "policies.xlsx"
    raw_policies.rename(columns=RAW_HEADERS).to_excel(path, index=False, engine="openpyxl")
    return path


@pytest.fixture
def threshold_policies():
    """100 policies where renewed is Yes exactly when price < 500."""
    rng = np.random.default_rng(11)
    n = 100
    # Prices keep clear of the threshold so both sides are well separated
    price = np.where(rng.uniform(size=n) < 0.5, rng.uniform(100, 450, n), rng.uniform(550, 900, n))
    return pd.DataFrame({
        "age": rng.integers(18, 85, n),
        "car_value": rng.uniform(2, 20, n),
        "annual_mileage": rng.uniform(2, 20, n),
        "years_of_no_claims_bonus": rng.integers(0, 10, n),
        "payment_method": pd.Categorical(rng.choice(["Monthly", "Annual"], n)),
        "price": price,
        "percent_change_in_price_vs_last_year": rng.normal(0.0, 0.05, n),
        "renewed": pd.Categorical(np.where(price < 500, "Yes", "No"), categories=["No", "Yes"]),
    })
