"""
Data cleaning and preprocessing for Titanic dataset
Produces the cleaned frame and the held-out test split used for lift comparison
"""

import logging
from pathlib import Path

import numpy as np
import pandas as pd
from sklearn.model_selection import train_test_split

import config
from utils import (
    CATEGORICAL_FEATURES, DROP_COLUMNS, PCLASS_LABELS, RAW_COLUMNS, TARGET,
    extract_title, missing_columns, normalize_columns,
)

logger = logging.getLogger(__name__)


def clean_titanic_data(input_path=None, output_path=None):
    """
    Clean and preprocess Titanic training data

    Args:
        input_path (str): Path to raw Kaggle train.csv, defaults to config.DATA_PATH
        output_path (str): Optional path to pickle the cleaned data to

    Returns:
        pd.DataFrame: Cleaned training data

    Raises:
        FileNotFoundError: input_path does not exist
        ValueError: the file lacks required columns
    """
    input_path = input_path or config.DATA_PATH

    # Load data
    train = pd.read_csv(input_path)
    logger.info(f"📥 Raw data loaded from {input_path}: {train.shape}")

    # Clean column names
    train = normalize_columns(train)

    missing = missing_columns(train, RAW_COLUMNS)
    if missing:
        raise ValueError(f"{input_path} is missing columns: {', '.join(missing)}")

    train[TARGET] = train[TARGET].astype(int)

    # Passenger class as ordered labels
    train['pclass'] = train['pclass'].map(PCLASS_LABELS)

    train['title'] = train['name'].apply(extract_title)
    train['family_size'] = train['sibsp'] + train['parch'] + 1

    # Plain object columns with NaN for missing, the imputers expect that
    for col in CATEGORICAL_FEATURES:
        train[col] = train[col].astype(object).where(train[col].notna(), np.nan)

    # Remove unnecessary columns
    train_clean = train.drop(columns=DROP_COLUMNS)

    if output_path:
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        train_clean.to_pickle(output_path)
        logger.info(f"💾 Cleaned data saved to {output_path}")

    logger.info(f"Shape: {train_clean.shape}")
    logger.info(f"Columns: {list(train_clean.columns)}")

    return train_clean


def split_train_test(df, test_size=None, random_state=None):
    """
    Stratified split into training data and the held-out scoring population

    Both parts keep the original row index so scores stay aligned with labels.

    Args:
        df: Cleaned dataframe with a survived column
        test_size: Fraction (or count) for the test split, defaults to config.TEST_SIZE
        random_state: Seed, defaults to config.RANDOM_STATE

    Returns:
        Tuple of (train_df, test_df)
    """
    test_size = config.TEST_SIZE if test_size is None else test_size
    random_state = config.RANDOM_STATE if random_state is None else random_state

    train_df, test_df = train_test_split(
        df,
        test_size=test_size,
        random_state=random_state,
        stratify=df[TARGET],
    )
    logger.info(f"✂️ Split {len(df)} rows into {len(train_df)} train / {len(test_df)} test")
    return train_df, test_df


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Clean the data
    cleaned_data = clean_titanic_data(output_path='data/train_clean.pkl')

    print("\nSurvival counts:")
    print(cleaned_data[TARGET].value_counts())

    print("\nFirst few rows:")
    print(cleaned_data.head())
