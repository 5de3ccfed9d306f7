import numpy as np
import pandas as pd
import pytest

from renewal_analysis.preprocessing import DataPreprocessor


def test_clean_removes_null_price_and_invalid_gender(raw_policies, clean_policies):
    assert len(clean_policies) == len(raw_policies) - 4
    assert clean_policies["price"].notnull().all()
    assert set(clean_policies["gender"].unique()) <= {"Male", "Female"}
    assert clean_policies["gender"].notnull().all()


def test_clean_recodes_label_sets(clean_policies):
    assert list(clean_policies["renewed"].cat.categories) == ["No", "Yes"]
    assert clean_policies["renewed"].notnull().all()
    assert list(clean_policies["marital_status"].cat.categories) == ["Not Married", "Married"]
    assert list(clean_policies["gender"].cat.categories) == ["Male", "Female"]
    assert isinstance(clean_policies["payment_method"].dtype, pd.CategoricalDtype)
    assert isinstance(clean_policies["acquisition_channel"].dtype, pd.CategoricalDtype)


def test_marital_status_collapses_to_married_or_not(raw_policies, clean_policies):
    kept = raw_policies.loc[raw_policies["price"].notnull() & (raw_policies["gender"] != "C")]
    expected = np.where(kept["marital_status"] == "M", "Married", "Not Married")
    assert (clean_policies["marital_status"].astype(str).to_numpy() == expected).all()


def test_renewed_maps_zero_one_to_no_yes(raw_policies, clean_policies):
    kept = raw_policies.loc[raw_policies["price"].notnull() & (raw_policies["gender"] != "C")]
    expected = np.where(kept["renewed"] == 1, "Yes", "No")
    assert (clean_policies["renewed"].astype(str).to_numpy() == expected).all()


def test_numeric_columns_are_not_transformed(raw_policies, clean_policies):
    kept = raw_policies.loc[raw_policies["price"].notnull() & (raw_policies["gender"] != "C")]
    for col in ["price", "car_value", "annual_mileage", "percent_change_in_price_vs_last_year"]:
        np.testing.assert_array_equal(clean_policies[col].to_numpy(), kept[col].to_numpy())


def test_clean_does_not_mutate_input(raw_policies):
    before = raw_policies.copy()
    DataPreprocessor().clean(raw_policies)
    pd.testing.assert_frame_equal(raw_policies, before)


def test_clean_resets_index(clean_policies):
    assert isinstance(clean_policies.index, pd.RangeIndex)
    assert clean_policies.index[0] == 0
    assert clean_policies.index[-1] == len(clean_policies) - 1


def test_rows_with_missing_label_are_dropped(raw_policies):
    raw = raw_policies.copy()
    raw["renewed"] = raw["renewed"].astype(float)
    raw.loc[0, "renewed"] = np.nan

    clean = DataPreprocessor().clean(raw)

    assert len(clean) == len(raw_policies) - 5
    assert clean["renewed"].notnull().all()


def test_unknown_renewed_code_raises(raw_policies):
    raw = raw_policies.copy()
    raw["renewed"] = raw["renewed"].astype(object)
    raw.loc[0, "renewed"] = "maybe"
    with pytest.raises(ValueError, match="Unrecognised renewed"):
        DataPreprocessor().clean(raw)


def test_already_labelled_values_are_accepted(raw_policies):
    raw = raw_policies.copy()
    raw["renewed"] = np.where(raw["renewed"] == 1, "Yes", "No")
    raw["gender"] = raw["gender"].map({"M": "Male", "F": "Female", "C": "C"})

    clean = DataPreprocessor().clean(raw)

    assert set(clean["gender"].unique()) == {"Male", "Female"}
    assert set(clean["renewed"].unique()) == {"No", "Yes"}


def test_rows_with_nulls_in_other_required_columns_are_dropped(raw_policies, capsys):
    raw = raw_policies.copy()
    raw.loc[[0, 1, 2], "age"] = np.nan
    raw.loc[3, "payment_method"] = None
    raw.loc[4, "percent_change_in_price_vs_last_year"] = np.nan

    clean = DataPreprocessor().clean(raw)

    assert len(clean) == len(raw_policies) - 4 - 5
    assert not clean.isnull().any().any()
    out = capsys.readouterr().out
    assert "age is null: 3 rows" in out
    assert "payment_method is null: 1 rows" in out
