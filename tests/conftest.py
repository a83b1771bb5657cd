"""Pytest fixtures: synthetic passenger data in the Kaggle train.csv layout."""

from pathlib import Path

import numpy as np
import pandas as pd
import pytest

TITLES = {
    'male': ['Mr', 'Mr', 'Mr', 'Master', 'Dr', 'Rev'],
    'female': ['Mrs', 'Miss', 'Miss', 'Mrs', 'Mlle', 'Lady'],
}


def make_raw_titanic(n=200, seed=7):
    """Kaggle-style frame where survival depends on sex and class."""
    rng = np.random.default_rng(seed)
    sex = rng.choice(['male', 'female'], size=n, p=[0.6, 0.4])
    pclass = rng.choice([1, 2, 3], size=n, p=[0.25, 0.25, 0.5])
    age = rng.uniform(1, 70, size=n).round(1)
    age[rng.random(n) < 0.15] = np.nan
    sibsp = rng.integers(0, 3, size=n)
    parch = rng.integers(0, 3, size=n)
    fare = (rng.gamma(2.0, 10.0, size=n) * (4 - pclass)).round(2)
    embarked = rng.choice(['S', 'C', 'Q'], size=n, p=[0.7, 0.2, 0.1]).astype(object)
    embarked[:2] = np.nan

    p_survive = np.where(sex == 'female', 0.75, 0.2) + (3 - pclass) * 0.05
    survived = (rng.random(n) < p_survive).astype(int)

    names = [
        f"Surname{i}, {TITLES[s][rng.integers(len(TITLES[s]))]}. Given{i}"
        for i, s in enumerate(sex)
    ]

    return pd.DataFrame({
        'PassengerId': np.arange(1, n + 1),
        'Survived': survived,
        'Pclass': pclass,
        'Name': names,
        'Sex': sex,
        'Age': age,
        'SibSp': sibsp,
        'Parch': parch,
        'Ticket': [f"T{i:05d}" for i in range(n)],
        'Fare': fare,
        'Cabin': np.nan,
        'Embarked': embarked,
    })


@pytest.fixture
def raw_titanic():
    return make_raw_titanic()


@pytest.fixture
def titanic_csv(tmp_path: Path, raw_titanic: pd.DataFrame) -> Path:
    path = tmp_path / "train.csv"
    raw_titanic.to_csv(path, index=False)
    return path


@pytest.fixture
def cleaned_titanic(titanic_csv: Path) -> pd.DataFrame:
    from data_cleaning import clean_titanic_data

    return clean_titanic_data(titanic_csv)
