"""
Data Loader Module
Project: Motor Insurance Renewal Analysis
Purpose: Load and inspect the policy renewal spreadsheet
"""

import re
from pathlib import Path

import numpy as np
import pandas as pd

from . import config


class DataLoadError(Exception):
    """Raised when the policy spreadsheet cannot be read into a usable table."""


def normalize_column_names(columns):
    """
    Convert raw spreadsheet headers to lowercase, underscore-separated names

    'Years of No Claims Bonus' -> 'years_of_no_claims_bonus'
    'Percent Change in Price vs Last Year' -> 'percent_change_in_price_vs_last_year'
    """
    normalized = []
    for col in columns:
        name = re.sub(r"[^0-9a-z]+", "_", str(col).strip().lower())
        normalized.append(name.strip("_"))
    return normalized


class DataLoader:
    """Class to handle data loading and basic inspection"""

    READERS = {
        ".xlsx": lambda path: pd.read_excel(path, engine="openpyxl"),
        ".csv": pd.read_csv,
    }

    def __init__(self, data_dir=config.DATA_DIR):
        """
        Initialize DataLoader
        Args:
            data_dir (str or Path): Directory that relative file names resolve against
        """
        self.data_dir = Path(data_dir)
        self.data = None

    def list_data_files(self):
        """List the spreadsheets the loader can read from the data directory"""
        print("Files in data directory:")
        if not self.data_dir.exists():
            print("  Data directory not found!")
            return []
        files = sorted(path for path in self.data_dir.iterdir()
                       if path.is_file() and path.suffix.lower() in self.READERS)
        for file in files:
            print(f"  - {file.name} ({file.stat().st_size / 1024:.1f} KB)")
        return files

    def resolve_path(self, filename=None):
        """Absolute paths are used as-is; anything else is looked up in data_dir."""
        path = Path(filename or config.DEFAULT_DATA_FILE)
        if not path.is_absolute():
            path = self.data_dir / path
        return path

    def load_policy_data(self, filename=None):
        """
        Load the policy spreadsheet and normalize its column names
        Args:
            filename (str or Path): Spreadsheet name or path (.xlsx or .csv)
        Returns:
            pd.DataFrame: One row per policy record
        Raises:
            DataLoadError: File missing, unreadable, or without the expected columns
        """
        file_path = self.resolve_path(filename)

        if not file_path.exists():
            raise DataLoadError(f"Data file not found: {file_path}")

        reader = self.READERS.get(file_path.suffix.lower())
        if reader is None:
            raise DataLoadError(f"Unsupported file type '{file_path.suffix}' for {file_path.name}")

        try:
            data = reader(file_path)
        except Exception as exc:
            raise DataLoadError(f"Failed to read {file_path.name}: {exc}") from exc

        data.columns = normalize_column_names(data.columns)

        missing = [col for col in config.REQUIRED_COLUMNS if col not in data.columns]
        if missing:
            raise DataLoadError(f"{file_path.name} is missing required columns: {missing}")

        self.data = data
        print(f"[INFO] Loaded policy data from {file_path} (shape={data.shape})")
        return data

    def get_basic_info(self, data=None):
        """
        Display basic information about the dataset
        Args:
            data (pd.DataFrame): Dataset to analyze (uses the loaded data if None)
        """
        if data is None:
            data = self.data

        if data is None:
            print("No data available. Please load data first.")
            return

        print("\n=== DATASET BASIC INFORMATION ===")
        print(f"Dataset shape: {data.shape}")
        print(f"Number of rows: {data.shape[0]:,}")
        print(f"Number of columns: {data.shape[1]}")

        print("\n=== COLUMN INFORMATION ===")
        for i, (col, dtype) in enumerate(zip(data.columns, data.dtypes)):
            print(f"{i+1:2d}. {col:<40} - {dtype}")

        print("\n=== FIRST 5 ROWS ===")
        print(data.head())

    def check_data_quality(self, data=None):
        """
        Check data quality (missing values, invalid gender codes, duplicates)
        Args:
            data (pd.DataFrame): Dataset to check (uses the loaded data if None)
        Returns:
            dict: Counts reported in the printout
        """
        if data is None:
            data = self.data

        if data is None:
            print("No data available. Please load data first.")
            return {}

        print("\n=== DATA QUALITY ASSESSMENT ===")

        print("\n1. Missing Values Analysis:")
        missing_data = data.isnull().sum()
        missing_percent = (missing_data / len(data)) * 100

        missing_df = pd.DataFrame({
            'Column': missing_data.index,
            'Missing Count': missing_data.values,
            'Missing %': missing_percent.values
        })
        missing_df = missing_df[missing_df['Missing Count'] > 0].sort_values('Missing Count', ascending=False)

        if len(missing_df) > 0:
            print(missing_df.to_string(index=False))
        else:
            print("No missing values found!")

        # The sheet uses 'C' as a placeholder gender code that has no meaning
        invalid_gender = int((data['gender'] == config.INVALID_GENDER).sum()) if 'gender' in data else 0
        print(f"\n2. Invalid gender code '{config.INVALID_GENDER}': {invalid_gender} rows")

        duplicates = int(data.duplicated().sum())
        print(f"\n3. Duplicate Rows: {duplicates}")
        if duplicates > 0:
            print(f"   ({duplicates/len(data)*100:.2f}% of total data)")

        print("\n4. Data Types Summary:")
        for dtype, count in data.dtypes.value_counts().items():
            print(f"   {dtype}: {count} columns")

        memory_usage = data.memory_usage(deep=True).sum() / 1024**2
        print(f"\n5. Memory Usage: {memory_usage:.2f} MB")

        return {
            'missing': {col: int(n) for col, n in missing_data.items() if n > 0},
            'invalid_gender': invalid_gender,
            'duplicates': duplicates,
        }

    def get_column_summary(self, data=None):
        """
        Summary statistics for numerical columns and level counts for the rest
        Args:
            data (pd.DataFrame): Dataset to analyze (uses the loaded data if None)
        """
        if data is None:
            data = self.data

        if data is None:
            print("No data available. Please load data first.")
            return

        numerical_cols = data.select_dtypes(include=[np.number]).columns
        if len(numerical_cols) > 0:
            print("\n=== NUMERICAL COLUMNS SUMMARY ===")
            print(data[numerical_cols].describe().round(2))

        other_cols = data.columns.difference(numerical_cols, sort=False)
        if len(other_cols) > 0:
            print("\n=== CATEGORICAL COLUMNS SUMMARY ===")
            for col in other_cols:
                print(f"\n{col}:")
                print(f"  Unique values: {data[col].nunique()}")
                print(data[col].value_counts(dropna=False).head().to_string())
