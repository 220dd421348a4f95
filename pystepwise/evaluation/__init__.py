"""
Out-of-sample evaluation by random train/test splitting.

Usage:
    from pystepwise.evaluation import train_test_split, prediction_error, holdout

    train, test = train_test_split(ds, 0.5, seed=42)
    model = fit_spec(train, spec)
    prediction_error(model, test)        # RMSPE on the held-out rows

    # Averaged over many splits
    res = holdout(ds, {'small': small, 'full': full}, n_splits=500, seed=1)
    res.rmspe
"""

from pystepwise.evaluation._split import train_test_split, rmspe, prediction_error
from pystepwise.evaluation.design import HoldoutDesign
from pystepwise.evaluation.solution import HoldoutSolution
from pystepwise.evaluation.solvers import holdout

__all__ = [
    "train_test_split",
    "rmspe",
    "prediction_error",
    "holdout",
    "HoldoutDesign",
    "HoldoutSolution",
]
