"""
Shared utilities for the Titanic lift comparison
Contains column definitions and title normalisation
"""

import re

import pandas as pd

TARGET = 'survived'
ID_COLUMN = 'passengerid'

NUMERIC_FEATURES = ['age', 'fare', 'sibsp', 'parch', 'family_size']
CATEGORICAL_FEATURES = ['pclass', 'sex', 'embarked', 'title']
FEATURES = NUMERIC_FEATURES + CATEGORICAL_FEATURES

RAW_COLUMNS = [
    ID_COLUMN, TARGET, 'pclass', 'name', 'sex', 'age',
    'sibsp', 'parch', 'ticket', 'fare', 'cabin', 'embarked'
]
DROP_COLUMNS = ['name', 'ticket', 'cabin']

PCLASS_LABELS = {1: '1st', 2: '2nd', 3: '3rd'}

# Titles frequent enough to keep as their own category, everything else is 'Other'
TITLE_GROUPS = {
    'Mr': 'Mr', 'Mrs': 'Mrs', 'Miss': 'Miss', 'Master': 'Master',
    'Mme': 'Mrs', 'Ms': 'Miss', 'Mlle': 'Miss',
}
TITLE_PATTERN = re.compile(r',\s*(.*?)\s*\.')


def extract_title(name):
    """
    Extract the title from a passenger name

    Args:
        name: Name formatted as 'Surname, Title. Given names'

    Returns:
        str: Title grouped into the main categories, 'Other' for rare ones,
        None when the name has no title
    """
    if not isinstance(name, str):
        return None
    match = TITLE_PATTERN.search(name)
    if match:
        title = match.group(1).strip()
        return TITLE_GROUPS.get(title, 'Other')
    return None


def normalize_columns(df):
    """Lower-case column names and replace spaces with underscores"""
    df = df.copy()
    df.columns = df.columns.str.lower().str.replace(' ', '_')
    return df


def missing_columns(df, required):
    """Columns from required not present in df, in order"""
    return [col for col in required if col not in df.columns]


def feature_frame(df):
    """Model input columns of a cleaned dataframe"""
    missing = missing_columns(df, FEATURES)
    if missing:
        raise ValueError(f"Missing feature columns: {', '.join(missing)}")
    return pd.DataFrame(df[FEATURES])
