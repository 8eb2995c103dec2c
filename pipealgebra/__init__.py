"""Pipeline algebra: compose ML pipelines from ``|>`` / ``+`` expressions."""

from .config import Settings, configure_logging, get_settings
from .exceptions import (
    AllFoldsFailedError,
    ExpressionSyntaxError,
    NotFittedError,
    PipelineAlgebraError,
    ShapeMismatchError,
    UnknownComponentError,
    UnknownMetricError,
)
from .expression import ExpressionCompiler, compile_expression, parse_expression
from .modeling import (
    BaggingEnsemble,
    BestLearner,
    CrossValidator,
    SelectionPolicy,
    StackEnsemble,
    StatefulEstimator,
    VoteEnsemble,
    cross_validate,
    sklearn_learner,
)
from .modeling.evaluation import CrossValidationResult, ScoreRecord, get_metric, register_metric
from .nodes import Node, Parallel, Sequential
from .pipeline import ExpressionPipeline, PipelineExecutor
from .preprocessing import StatefulTransformer, sklearn_transformer
from .registry import ComponentRegistry, default_registry

__version__ = "0.1.0"
