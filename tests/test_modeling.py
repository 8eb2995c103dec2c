"""Unit tests for learner nodes and scoring metrics."""

import numpy as np
import pandas as pd
import pytest
from sklearn.datasets import make_regression
from sklearn.ensemble import ExtraTreesClassifier

from pipealgebra.exceptions import UnknownMetricError
from pipealgebra.modeling import StatefulEstimator, sklearn_learner
from pipealgebra.modeling.evaluation import available_metrics, get_metric, register_metric


@pytest.fixture
def regression_data():
    X, y = make_regression(n_samples=120, n_features=4, n_informative=3, noise=0.1, random_state=42)
    return pd.DataFrame(X, columns=[f"f{i}" for i in range(4)]), pd.Series(y, name="target")


# ===========================================================================
# LEARNERS
# ===========================================================================

class TestClassifiers:
    @pytest.mark.parametrize("name", ["rf", "ada", "gb", "lr", "svc", "knn", "dt", "nb"])
    def test_fit_predict(self, registry, numeric_data, name):
        X, y = numeric_data
        node = registry.create(name)
        out = node.fit(X.iloc[:120], y.iloc[:120]).transform(X.iloc[120:])
        assert list(out.columns) == [name]
        assert len(out) == 30
        assert set(out[name].unique()) <= {0, 1}

    def test_string_labels(self, registry, string_label_data):
        X, y = string_label_data
        out = registry.create("lr").fit_transform(X, y)
        assert set(out["lr"].unique()) <= {"no", "yes"}

    def test_problem_type(self, registry):
        assert registry.get("rf").problem_type == "classification"
        assert registry.get("ridge").problem_type == "regression"

    def test_config_overrides_defaults(self, numeric_data):
        from pipealgebra.modeling.classification import (
            RandomForestClassifierApplier,
            RandomForestClassifierCalculator,
        )

        node = StatefulEstimator(
            "small_rf", RandomForestClassifierCalculator(), RandomForestClassifierApplier(),
            config={"params": {"n_estimators": 5}},
        )
        node.fit(*numeric_data)
        assert node.model.n_estimators == 5


class TestProbabilityOutput:
    def test_one_column_per_class(self, numeric_data):
        from pipealgebra.modeling.classification import (
            RandomForestClassifierApplier,
            RandomForestClassifierCalculator,
        )

        X, y = numeric_data
        node = StatefulEstimator(
            "rf", RandomForestClassifierCalculator(), RandomForestClassifierApplier(), output="proba",
        )
        out = node.fit_transform(X, y)
        assert list(out.columns) == ["rf_0", "rf_1"]
        np.testing.assert_allclose(out.sum(axis=1).to_numpy(), 1.0)

    def test_predict_returns_labels(self, numeric_data):
        from pipealgebra.modeling.classification import (
            RandomForestClassifierApplier,
            RandomForestClassifierCalculator,
        )

        X, y = numeric_data
        node = StatefulEstimator(
            "rf", RandomForestClassifierCalculator(), RandomForestClassifierApplier(), output="proba",
        ).fit(X, y)
        labels = node.predict(X[list(reversed(X.columns))])
        assert labels.name == "rf"
        assert labels.index.equals(X.index)
        assert set(labels.unique()) <= {0, 1}

    def test_falls_back_to_predict(self, regression_data):
        from pipealgebra.modeling.regression import RidgeRegressionApplier, RidgeRegressionCalculator

        X, y = regression_data
        node = StatefulEstimator("ridge", RidgeRegressionCalculator(), RidgeRegressionApplier(), output="proba")
        out = node.fit_transform(X, y)
        assert list(out.columns) == ["ridge"]

    def test_invalid_output(self):
        from pipealgebra.modeling.regression import RidgeRegressionApplier, RidgeRegressionCalculator

        with pytest.raises(ValueError):
            StatefulEstimator("ridge", RidgeRegressionCalculator(), RidgeRegressionApplier(), output="scores")


class TestRegressors:
    @pytest.mark.parametrize("name", ["rfr", "ridge"])
    def test_fit_predict(self, registry, regression_data, name):
        X, y = regression_data
        out = registry.create(name).fit(X, y).transform(X)
        assert list(out.columns) == [name]
        assert get_metric("r2")(y, out[name]) > 0.5


class TestSklearnLearnerFactory:
    def test_wraps_any_estimator(self, numeric_data):
        X, y = numeric_data
        node = sklearn_learner("et", ExtraTreesClassifier, {"n_estimators": 10, "random_state": 0})
        out = node.fit_transform(X, y)
        assert list(out.columns) == ["et"]
        assert node.model.n_estimators == 10

    def test_clone_shares_config_not_model(self, numeric_data):
        X, y = numeric_data
        node = sklearn_learner("et", ExtraTreesClassifier, {"n_estimators": 10}).fit(X, y)
        copy = node.clone()
        assert copy.model is None
        assert copy.structure == node.structure


# ===========================================================================
# METRICS
# ===========================================================================

class TestMetrics:
    def test_registry_contents(self):
        names = available_metrics()
        for name in ["accuracy", "balanced_accuracy", "cohen_kappa", "jaccard", "matthews_corrcoef",
                     "hamming_loss", "zero_one_loss", "f1", "precision", "recall"]:
            assert name in names

    def test_aliases(self):
        assert get_metric("accuracy_score").name == "accuracy"
        assert get_metric("mcc").name == "matthews_corrcoef"
        assert get_metric("rmse").name == "root_mean_squared_error"

    def test_accuracy(self):
        assert get_metric("accuracy")([0, 1, 1, 0], [0, 1, 0, 0]) == pytest.approx(0.75)

    def test_loss_direction(self):
        loss = get_metric("hamming_loss")
        assert loss.greater_is_better is False
        assert loss.is_better(0.1, 0.2)
        assert not loss.is_better(0.2, 0.2)
        assert get_metric("f1").is_better(0.9, 0.8)

    def test_string_labels_in_object_arrays(self):
        y_true = np.array(["a", "b", "a"], dtype=object)
        y_pred = pd.Series(["a", "b", "b"])
        assert get_metric("f1")(y_true, y_pred) == pytest.approx(2 / 3)

    def test_integer_labels_in_object_arrays(self):
        y_pred = np.array([0, 1, 1], dtype=object)
        assert get_metric("accuracy")([0, 1, 0], y_pred) == pytest.approx(2 / 3)

    def test_rmse(self):
        assert get_metric("rmse")([0.0, 0.0], [3.0, 4.0]) == pytest.approx(np.sqrt(12.5))

    def test_unknown_metric(self):
        with pytest.raises(UnknownMetricError) as exc_info:
            get_metric("nope")
        assert "accuracy" in exc_info.value.detail["available"]

    def test_register_metric(self):
        metric = register_metric("always_one", lambda t, p: 1.0)
        assert get_metric("always_one") is metric
        assert metric([0], [1]) == 1.0
