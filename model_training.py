"""
Model fitting and scoring for the Titanic lift comparison
Every classifier is an off-the-shelf scikit-learn estimator behind the same preprocessing
"""

import logging
from pathlib import Path

import joblib
import numpy as np
import pandas as pd
from sklearn.compose import ColumnTransformer
from sklearn.ensemble import GradientBoostingClassifier, RandomForestClassifier
from sklearn.impute import KNNImputer, SimpleImputer
from sklearn.linear_model import LogisticRegression
from sklearn.metrics import accuracy_score, roc_auc_score
from sklearn.model_selection import cross_val_score
from sklearn.naive_bayes import GaussianNB
from sklearn.neural_network import MLPClassifier
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import OrdinalEncoder, StandardScaler
from sklearn.tree import DecisionTreeClassifier

import config
from lift import calculate_lift
from utils import CATEGORICAL_FEATURES, NUMERIC_FEATURES, TARGET, feature_frame

logger = logging.getLogger(__name__)

# MLflow tracking is optional
try:
    import mlflow
    import mlflow.sklearn
    MLFLOW_AVAILABLE = True
except ImportError:
    MLFLOW_AVAILABLE = False

MODEL_REGISTRY = {
    'logistic_regression': lambda seed: LogisticRegression(max_iter=1000),
    'decision_tree': lambda seed: DecisionTreeClassifier(max_depth=5, random_state=seed),
    'random_forest': lambda seed: RandomForestClassifier(n_estimators=50, random_state=seed, n_jobs=-1),
    'naive_bayes': lambda seed: GaussianNB(),
    'gradient_boosting': lambda seed: GradientBoostingClassifier(random_state=seed),
    'neural_network': lambda seed: MLPClassifier(hidden_layer_sizes=(16, 8), max_iter=2000, random_state=seed),
}

# gradient_boosting and neural_network only run when asked for
DEFAULT_MODELS = ('logistic_regression', 'decision_tree', 'random_forest', 'naive_bayes')


def create_preprocessing_pipeline():
    """
    Create a preprocessing pipeline using ColumnTransformer.
    """
    # Numeric preprocessing: KNN imputation + scaling
    numeric_transformer = Pipeline(steps=[
        ('imputer', KNNImputer(n_neighbors=5)),
        ('scaler', StandardScaler())
    ])

    # Categorical preprocessing: handle missing values + encoding
    categorical_transformer = Pipeline(steps=[
        ('imputer', SimpleImputer(strategy='most_frequent')),
        ('encoder', OrdinalEncoder(handle_unknown='use_encoded_value', unknown_value=-1))
    ])

    return ColumnTransformer(
        transformers=[
            ('num', numeric_transformer, NUMERIC_FEATURES),
            ('cat', categorical_transformer, CATEGORICAL_FEATURES)
        ],
        remainder='drop'
    )


def build_model(name, random_state=None):
    """
    Preprocessing + classifier pipeline for a registered model name

    Raises:
        KeyError: name is not in MODEL_REGISTRY
    """
    if name not in MODEL_REGISTRY:
        raise KeyError(f"Unknown model '{name}', choose from {sorted(MODEL_REGISTRY)}")
    random_state = config.RANDOM_STATE if random_state is None else random_state

    return Pipeline([
        ('preprocessor', create_preprocessing_pipeline()),
        ('classifier', MODEL_REGISTRY[name](random_state))
    ])


def train_models(train_df, model_names=DEFAULT_MODELS, random_state=None,
                 cv_folds=None, model_dir=None):
    """
    Fit every requested model on the training split.

    Args:
        train_df: Cleaned training rows including the survived column
        model_names: Registered model names, fitted in this order
        random_state: Seed passed to the estimators, defaults to config.RANDOM_STATE
        cv_folds: Folds for cross-validated accuracy, skipped below 2. Defaults to config.CV_FOLDS
        model_dir: When set, each fitted pipeline is saved there as <name>.pkl

    Returns:
        dict: model name -> fitted Pipeline
    """
    unknown = [name for name in model_names if name not in MODEL_REGISTRY]
    if unknown:
        raise KeyError(f"Unknown models {unknown}, choose from {sorted(MODEL_REGISTRY)}")

    cv_folds = config.CV_FOLDS if cv_folds is None else cv_folds
    use_mlflow = MLFLOW_AVAILABLE and config.USE_MLFLOW

    if use_mlflow:
        mlflow.set_tracking_uri(config.MLFLOW_TRACKING_URI)
        mlflow.set_experiment(config.MLFLOW_EXPERIMENT)
        logger.info("🔬 MLflow tracking enabled")

    X = feature_frame(train_df)
    y = train_df[TARGET].astype(int)

    models = {}
    for name in model_names:
        pipeline = build_model(name, random_state)
        logger.info(f"🏋️ Training {name} on {len(X)} rows")

        if use_mlflow:
            mlflow.start_run(run_name=name)
        try:
            pipeline.fit(X, y)
            metrics = {'train_accuracy': pipeline.score(X, y)}

            if cv_folds >= 2:
                cv_scores = cross_val_score(pipeline, X, y, cv=cv_folds, scoring='accuracy')
                metrics['cv_accuracy_mean'] = cv_scores.mean()
                metrics['cv_accuracy_std'] = cv_scores.std()
                logger.info(
                    f"{name} cross-validation accuracy: "
                    f"{cv_scores.mean():.3f} (+/- {cv_scores.std() * 2:.3f})"
                )
            logger.info(f"{name} training accuracy: {metrics['train_accuracy']:.3f}")

            if model_dir:
                model_path = Path(model_dir) / f"{name}.pkl"
                model_path.parent.mkdir(parents=True, exist_ok=True)
                joblib.dump(pipeline, model_path)
                logger.info(f"💾 Model saved to {model_path}")

            if use_mlflow:
                mlflow.log_params({
                    "model_type": type(pipeline.named_steps['classifier']).__name__,
                    "n_samples": len(X),
                    "n_features": X.shape[1],
                    "random_state": config.RANDOM_STATE if random_state is None else random_state,
                })
                mlflow.log_metrics(metrics)
                mlflow.sklearn.log_model(pipeline, "model")
        finally:
            if use_mlflow:
                mlflow.end_run()

        models[name] = pipeline

    return models


def load_models(model_dir, model_names=DEFAULT_MODELS):
    """Load pipelines previously saved by train_models"""
    return {name: joblib.load(Path(model_dir) / f"{name}.pkl") for name in model_names}


def score_models(models, test_df):
    """
    Positive-class probability of every model for the test rows

    Returns:
        pd.DataFrame: one column per model, indexed like test_df
    """
    X = feature_frame(test_df)
    scores = {}
    for name, model in models.items():
        positive = list(model.classes_).index(1)
        scores[name] = model.predict_proba(X)[:, positive]
        logger.info(f"🔮 Scored {len(X)} rows with {name}")
    return pd.DataFrame(scores, index=test_df.index)


def evaluate_models(labels, scores):
    """
    Summary metrics per model on the held-out population

    Args:
        labels: Ground truth aligned with the rows of scores
        scores: DataFrame from score_models

    Returns:
        pd.DataFrame: model_name, roc_auc, accuracy, top_decile_capture
    """
    labels = np.asarray(labels).astype(int)
    rows = []
    for name in scores.columns:
        model_scores = scores[name].to_numpy()
        if len(np.unique(labels)) > 1:
            roc_auc = roc_auc_score(labels, model_scores)
        else:
            roc_auc = np.nan
        lift_table = calculate_lift(labels, model_scores, model_name=name, zero_positive_policy='zero')
        rows.append({
            'model_name': name,
            'roc_auc': roc_auc,
            'accuracy': accuracy_score(labels, (model_scores >= 0.5).astype(int)),
            'top_decile_capture': lift_table['cumulative_capture_fraction'].iloc[0],
        })
    return pd.DataFrame(rows, columns=['model_name', 'roc_auc', 'accuracy', 'top_decile_capture'])


if __name__ == "__main__":
    from data_cleaning import clean_titanic_data, split_train_test

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    train_df, test_df = split_train_test(clean_titanic_data())
    fitted = train_models(train_df, model_dir=config.MODEL_DIR)
    print(evaluate_models(test_df[TARGET], score_models(fitted, test_df)))
