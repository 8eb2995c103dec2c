from .base import BaseApplier, BaseCalculator, StatefulTransformer
from .sklearn_wrapper import SklearnTransformerApplier, SklearnTransformerCalculator, sklearn_transformer
