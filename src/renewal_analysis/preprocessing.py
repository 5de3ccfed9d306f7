"""
Data Preprocessing Module
Project: Motor Insurance Renewal Analysis
Purpose: Drop unusable policy rows and recode categorical columns into labelled categories
"""

import pandas as pd

from . import config


class DataPreprocessor:
    """Class to handle data cleaning and recoding"""

    def __init__(self, target_column=config.TARGET_COL):
        """Initialize DataPreprocessor"""
        self.target_column = target_column

    def drop_invalid_rows(self, data):
        """
        Remove rows that cannot be used for the analysis

        - price is null (3 rows in the full sheet)
        - gender carries the placeholder code 'C' (1 row in the full sheet)
        - any other required column (the renewal outcome included) is missing

        Args:
            data (pd.DataFrame): Raw policy table
        Returns:
            pd.DataFrame: Copy of the table without the invalid rows
        """
        print("\nDropping invalid rows")

        null_price = data['price'].isnull()
        invalid_gender = data['gender'] == config.INVALID_GENDER

        print(f"  price is null: {int(null_price.sum())} rows")
        print(f"  gender == '{config.INVALID_GENDER}': {int(invalid_gender.sum())} rows")

        required = dict.fromkeys([self.target_column] + config.REQUIRED_COLUMNS)
        others = [col for col in required if col in data.columns and col != 'price']
        null_other = data[others].isnull().any(axis=1)
        for col in others:
            n_null = int(data[col].isnull().sum())
            if n_null:
                print(f"  {col} is null: {n_null} rows")

        keep = ~(null_price | invalid_gender | null_other)
        processed_data = data.loc[keep].copy()
        print(f"Rows remaining: {len(processed_data)} (removed {len(data) - len(processed_data)})")

        return processed_data

    def recode_categories(self, data):
        """
        Recode categorical columns into fixed label sets

        - renewed: 0/1 -> No/Yes
        - marital_status: raw code collapsed to Not Married/Married
        - gender: M/F -> Male/Female
        - payment_method, acquisition_channel: kept as plain categoricals

        Numeric columns are left untouched (no scaling).

        Args:
            data (pd.DataFrame): Table with invalid rows already removed
        Returns:
            pd.DataFrame: Recoded copy of the table
        """
        print("\nRecoding categorical columns")
        processed_data = data.copy()

        renewed = processed_data[self.target_column].map(config.RENEWED_CODES)
        unknown = renewed.isnull() & processed_data[self.target_column].notnull()
        if unknown.any():
            raise ValueError(
                f"Unrecognised {self.target_column} codes: "
                f"{sorted(processed_data.loc[unknown, self.target_column].astype(str).unique())}"
            )
        processed_data[self.target_column] = pd.Categorical(renewed, categories=config.TARGET_LABELS)
        print(f"  {self.target_column}: {processed_data[self.target_column].value_counts().to_dict()}")

        # Anything that is not one of the married codes (single, divorced, widowed...)
        # counts as not married
        marital = processed_data['marital_status']
        is_married = marital.isin(config.MARRIED_CODES)
        collapsed = is_married.map({True: "Married", False: "Not Married"}).where(marital.notnull())
        processed_data['marital_status'] = pd.Categorical(collapsed, categories=config.MARITAL_LABELS)
        print(f"  marital_status: {processed_data['marital_status'].value_counts().to_dict()}")

        gender = processed_data['gender'].map(config.GENDER_CODES)
        processed_data['gender'] = pd.Categorical(gender, categories=config.GENDER_LABELS)
        print(f"  gender: {processed_data['gender'].value_counts().to_dict()}")

        for col in ['payment_method', 'acquisition_channel']:
            processed_data[col] = processed_data[col].astype('category')
            print(f"  {col}: {len(processed_data[col].cat.categories)} levels")

        return processed_data

    def clean(self, data):
        """
        Full cleaning step: drop invalid rows, then recode
        Args:
            data (pd.DataFrame): Raw policy table (not modified)
        Returns:
            pd.DataFrame: Clean table with a fresh 0..n-1 index
        """
        print("\n=== CLEANING POLICY DATA ===")
        processed_data = self.drop_invalid_rows(data)
        processed_data = self.recode_categories(processed_data)

        # Rows with a gender code outside M/F/C cannot be labelled either
        unlabelled = processed_data['gender'].isnull()
        if unlabelled.any():
            print(f"  gender outside Male/Female after recoding: dropped {int(unlabelled.sum())} rows")
            processed_data = processed_data.loc[~unlabelled]

        return processed_data.reset_index(drop=True)

    def get_preprocessing_summary(self, original_data, processed_data):
        """
        Generate a summary of preprocessing steps
        Args:
            original_data (pd.DataFrame): Original dataset
            processed_data (pd.DataFrame): Processed dataset
        """
        print("\n=== PREPROCESSING SUMMARY ===")
        print(f"Original shape: {original_data.shape}")
        print(f"Final shape: {processed_data.shape}")
        print(f"Rows removed: {original_data.shape[0] - processed_data.shape[0]}")

        print("\nData types summary:")
        print("Original:")
        for dtype, count in original_data.dtypes.astype(str).value_counts().items():
            print(f"  {dtype}: {count}")

        print("Final:")
        for dtype, count in processed_data.dtypes.astype(str).value_counts().items():
            print(f"  {dtype}: {count}")
