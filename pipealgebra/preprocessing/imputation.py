from sklearn.impute import SimpleImputer

from .sklearn_wrapper import SklearnTransformerCalculator, SklearnTransformerApplier


# --- Simple Imputer ---
class SimpleImputerCalculator(SklearnTransformerCalculator):
    def __init__(self):
        super().__init__(
            transformer_class=SimpleImputer,
            default_params={"strategy": "median", "keep_empty_features": True},
        )


class SimpleImputerApplier(SklearnTransformerApplier):
    pass
