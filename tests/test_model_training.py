import numpy as np
import pandas as pd
import pytest

from data_cleaning import split_train_test
from model_training import (
    DEFAULT_MODELS, MODEL_REGISTRY, build_model, evaluate_models,
    load_models, score_models, train_models,
)
from utils import TARGET


@pytest.fixture
def split(cleaned_titanic):
    return split_train_test(cleaned_titanic, test_size=0.3, random_state=0)


def test_default_models_are_registered():
    assert set(DEFAULT_MODELS) <= set(MODEL_REGISTRY)
    assert 'gradient_boosting' not in DEFAULT_MODELS
    assert 'neural_network' not in DEFAULT_MODELS


def test_build_model_unknown_name():
    with pytest.raises(KeyError):
        build_model('xgboost')


def test_train_models_unknown_name(split):
    train_df, _ = split
    with pytest.raises(KeyError):
        train_models(train_df, model_names=['logistic_regression', 'svm'], cv_folds=0)


def test_train_and_score_default_models(split):
    train_df, test_df = split
    models = train_models(train_df, random_state=0, cv_folds=0)

    assert list(models) == list(DEFAULT_MODELS)

    scores = score_models(models, test_df)
    assert list(scores.columns) == list(DEFAULT_MODELS)
    assert scores.index.equals(test_df.index)
    assert ((scores >= 0) & (scores <= 1)).all().all()


@pytest.mark.parametrize("name", ['gradient_boosting', 'neural_network'])
def test_optional_models_train(split, name):
    train_df, test_df = split
    models = train_models(train_df, model_names=[name], random_state=0, cv_folds=0)
    scores = score_models(models, test_df)
    assert scores[name].between(0, 1).all()


def test_train_models_with_cross_validation(split):
    train_df, _ = split
    models = train_models(train_df, model_names=['naive_bayes'], cv_folds=3)
    assert 'naive_bayes' in models


def test_train_models_saves_and_loads(split, tmp_path):
    train_df, test_df = split
    names = ['logistic_regression', 'decision_tree']
    models = train_models(train_df, model_names=names, random_state=0, cv_folds=0, model_dir=tmp_path)

    for name in names:
        assert (tmp_path / f"{name}.pkl").exists()

    loaded = load_models(tmp_path, names)
    pd.testing.assert_frame_equal(score_models(loaded, test_df), score_models(models, test_df))


def test_models_beat_the_baseline(split):
    train_df, test_df = split
    models = train_models(train_df, model_names=['logistic_regression'], random_state=0, cv_folds=0)
    evaluation = evaluate_models(test_df[TARGET], score_models(models, test_df))

    row = evaluation.iloc[0]
    assert row['model_name'] == 'logistic_regression'
    assert row['roc_auc'] > 0.6
    assert 0 <= row['accuracy'] <= 1
    assert row['top_decile_capture'] > 0.05


def test_evaluate_models_single_class():
    scores = pd.DataFrame({'m': [0.9, 0.2, 0.4]})
    evaluation = evaluate_models([0, 0, 0], scores)

    assert np.isnan(evaluation.loc[0, 'roc_auc'])
    assert evaluation.loc[0, 'top_decile_capture'] == 0.0
    assert evaluation.loc[0, 'accuracy'] == pytest.approx(2 / 3)
