#!/usr/bin/env python3
"""
Complete pipeline runner for the Titanic lift comparison
Cleans the data, trains the models, scores the held-out split and writes the lift table
"""

import argparse
import logging
import sys
from pathlib import Path

import pandas as pd

import config
from data_cleaning import clean_titanic_data, split_train_test
from lift import ZERO_POSITIVE_POLICIES, compare_lift, lift_table_wide
from model_training import DEFAULT_MODELS, MODEL_REGISTRY, evaluate_models, score_models, train_models
from utils import TARGET

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Compare Titanic survival models with a decile lift table")
    parser.add_argument("--data", default=config.DATA_PATH,
                        help="Path to the raw Kaggle train.csv")
    parser.add_argument("--models", default=",".join(DEFAULT_MODELS),
                        help="Comma separated model names to compare")
    parser.add_argument("--all-models", action="store_true",
                        help="Also train gradient_boosting and neural_network")
    parser.add_argument("--test-size", type=float, default=config.TEST_SIZE,
                        help="Fraction of rows held out for scoring")
    parser.add_argument("--seed", type=int, default=config.RANDOM_STATE,
                        help="Random seed for the split and the estimators")
    parser.add_argument("--cv-folds", type=int, default=config.CV_FOLDS,
                        help="Cross-validation folds on the training split (0 to skip)")
    parser.add_argument("--model-dir", default=config.MODEL_DIR,
                        help="Directory to save fitted models in")
    parser.add_argument("--output", default=config.LIFT_OUTPUT_PATH,
                        help="CSV file for the lift table")
    parser.add_argument("--zero-positive-policy", choices=ZERO_POSITIVE_POLICIES,
                        default=config.LIFT_ZERO_POSITIVE_POLICY,
                        help="What to do when the test split has no survivors")
    return parser.parse_args(argv)


def run(args):
    """
    Run the pipeline for parsed arguments

    Returns:
        Tuple of (long lift table, evaluation table, failures)
    """
    if args.all_models:
        model_names = list(MODEL_REGISTRY)
    else:
        model_names = [name.strip() for name in args.models.split(",") if name.strip()]

    cleaned = clean_titanic_data(args.data)
    train_df, test_df = split_train_test(cleaned, test_size=args.test_size, random_state=args.seed)

    models = train_models(
        train_df,
        model_names=model_names,
        random_state=args.seed,
        cv_folds=args.cv_folds,
        model_dir=args.model_dir,
    )

    scores = score_models(models, test_df)
    labels = test_df[TARGET].to_numpy()

    table, failures = compare_lift(labels, scores, zero_positive_policy=args.zero_positive_policy)
    evaluation = evaluate_models(labels, scores)

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    table.to_csv(output_path, index=False)
    logger.info(f"📊 Lift table saved to {output_path}")

    return table, evaluation, failures


def main(argv=None):
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    args = parse_args(argv)

    logger.info("🚢 Titanic lift comparison")
    try:
        table, evaluation, failures = run(args)
    except FileNotFoundError as e:
        logger.error(f"❌ Data file not found: {e}")
        return 1
    except (KeyError, ValueError) as e:
        logger.error(f"❌ {e}")
        return 1

    with pd.option_context('display.float_format', '{:.3f}'.format):
        logger.info(f"Cumulative capture by decile:\n{lift_table_wide(table)}")
        logger.info(f"Model evaluation:\n{evaluation.to_string(index=False)}")

    if failures:
        logger.warning(f"⚠️ Lift failed for: {', '.join(failures)}")
        if len(failures) == len(evaluation):
            return 1

    logger.info("✅ Pipeline completed successfully!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
