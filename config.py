"""
Runtime configuration for the Titanic lift comparison
Values come from the environment (optionally a .env file), CLI flags override them
"""

import os

from dotenv import load_dotenv

load_dotenv()

DATA_PATH = os.environ.get('TITANIC_DATA_PATH', 'data/train.csv')
TEST_SIZE = float(os.environ.get('TITANIC_TEST_SIZE', '0.3'))
RANDOM_STATE = int(os.environ.get('TITANIC_RANDOM_STATE', '42'))
CV_FOLDS = int(os.environ.get('TITANIC_CV_FOLDS', '5'))

MODEL_DIR = os.environ.get('MODEL_DIR')
LIFT_OUTPUT_PATH = os.environ.get('LIFT_OUTPUT_PATH', 'output/lift_table.csv')

# 'zero' or 'raise', see lift.calculate_lift
LIFT_ZERO_POSITIVE_POLICY = os.environ.get('LIFT_ZERO_POSITIVE_POLICY', 'zero')

USE_MLFLOW = os.environ.get('USE_MLFLOW', 'false').lower() in ['true', '1', 'yes']
MLFLOW_TRACKING_URI = os.environ.get('MLFLOW_TRACKING_URI', 'sqlite:///mlflow.db')
MLFLOW_EXPERIMENT = os.environ.get('MLFLOW_EXPERIMENT', 'titanic-lift')
