from sklearn.preprocessing import MinMaxScaler, RobustScaler, StandardScaler

from .sklearn_wrapper import SklearnTransformerCalculator, SklearnTransformerApplier


# --- Standard Scaler ---
class StandardScalerCalculator(SklearnTransformerCalculator):
    def __init__(self):
        super().__init__(
            transformer_class=StandardScaler,
            default_params={"with_mean": True, "with_std": True},
        )


class StandardScalerApplier(SklearnTransformerApplier):
    pass


# --- MinMax Scaler ---
class MinMaxScalerCalculator(SklearnTransformerCalculator):
    def __init__(self):
        super().__init__(
            transformer_class=MinMaxScaler,
            default_params={"feature_range": (0, 1)},
        )


class MinMaxScalerApplier(SklearnTransformerApplier):
    pass


# --- Robust Scaler ---
class RobustScalerCalculator(SklearnTransformerCalculator):
    def __init__(self):
        super().__init__(
            transformer_class=RobustScaler,
            default_params={"with_centering": True, "with_scaling": True},
        )


class RobustScalerApplier(SklearnTransformerApplier):
    pass
