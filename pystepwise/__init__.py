"""
pystepwise: stepwise linear model selection with honest evaluation.

Greedy add/drop search over the predictors of a linear model under a
penalised criterion, judged out of sample by repeated train/test splits
and in sample by the bootstrap.

Submodules:
    regression: OLS fitting by pivoted QR
    selection: Stepwise search (forward, backward, both)
    evaluation: Random train/test splits and prediction error
    montecarlo: Bootstrap resampling and confidence intervals
"""

__version__ = "0.1.0"

from pystepwise.core.datasource import DataSource
from pystepwise.regression import ModelSpec, fit, fit_spec
from pystepwise.selection import step, select
from pystepwise.evaluation import train_test_split, rmspe, prediction_error, holdout
from pystepwise.montecarlo import boot, boot_ci, boot_coefficients
from pystepwise import regression
from pystepwise import selection
from pystepwise import evaluation
from pystepwise import montecarlo

__all__ = [
    "__version__",
    "DataSource",
    "ModelSpec",
    "fit",
    "fit_spec",
    "step",
    "select",
    "train_test_split",
    "rmspe",
    "prediction_error",
    "holdout",
    "boot",
    "boot_ci",
    "boot_coefficients",
    "regression",
    "selection",
    "evaluation",
    "montecarlo",
]
