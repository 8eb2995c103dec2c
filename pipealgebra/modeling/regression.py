"""Regression learners (``rfr``, ``ridge``)."""

from sklearn.ensemble import RandomForestRegressor
from sklearn.linear_model import Ridge

from .sklearn_wrapper import SklearnApplier, SklearnCalculator


# --- Ridge ---
class RidgeRegressionCalculator(SklearnCalculator):
    def __init__(self):
        super().__init__(
            model_class=Ridge,
            default_params={"alpha": 1.0},
            problem_type="regression",
        )


class RidgeRegressionApplier(SklearnApplier):
    pass


# --- Random Forest Regressor ---
class RandomForestRegressorCalculator(SklearnCalculator):
    def __init__(self):
        super().__init__(
            model_class=RandomForestRegressor,
            default_params={"n_estimators": 50, "min_samples_leaf": 2, "random_state": 42},
            problem_type="regression",
        )


class RandomForestRegressorApplier(SklearnApplier):
    pass
