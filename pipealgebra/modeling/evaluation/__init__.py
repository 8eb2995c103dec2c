from .metrics import Metric, available_metrics, get_metric, register_metric
from .schemas import CrossValidationResult, CrossValidationSummary, ScoreRecord
