from sklearn.decomposition import PCA, FactorAnalysis, FastICA

from .sklearn_wrapper import SklearnTransformerCalculator, SklearnTransformerApplier


# --- PCA ---
class PCACalculator(SklearnTransformerCalculator):
    def __init__(self):
        super().__init__(
            transformer_class=PCA,
            default_params={"n_components": None, "random_state": 42},
        )


class PCAApplier(SklearnTransformerApplier):
    pass


# --- Fast ICA ---
class FastICACalculator(SklearnTransformerCalculator):
    def __init__(self):
        super().__init__(
            transformer_class=FastICA,
            default_params={"whiten": "unit-variance", "max_iter": 500, "random_state": 42},
        )


class FastICAApplier(SklearnTransformerApplier):
    pass


# --- Factor Analysis ---
class FactorAnalysisCalculator(SklearnTransformerCalculator):
    def __init__(self):
        super().__init__(
            transformer_class=FactorAnalysis,
            default_params={"random_state": 42},
        )


class FactorAnalysisApplier(SklearnTransformerApplier):
    pass
