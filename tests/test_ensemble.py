"""Tests for vote, stack, best-of and bagging ensembles."""

import numpy as np
import pandas as pd
import pandas.testing as pdt
import pytest
from sklearn.dummy import DummyClassifier
from sklearn.linear_model import LogisticRegression

from pipealgebra.exceptions import ShapeMismatchError
from pipealgebra.expression import compile_expression
from pipealgebra.modeling import (
    BaggingEnsemble,
    BestLearner,
    SelectionPolicy,
    StackEnsemble,
    VoteEnsemble,
    majority_vote,
    sklearn_learner,
)


def dummy(name="dummy"):
    return sklearn_learner(name, DummyClassifier, {"strategy": "most_frequent"})


class TestMajorityVote:
    def test_majority_wins(self):
        preds = pd.DataFrame({"a": [1, 0, 1], "b": [1, 1, 0], "c": [0, 1, 0]})
        assert majority_vote(preds).tolist() == [1, 1, 0]

    def test_ties_go_to_earliest_child(self):
        preds = pd.DataFrame({"a": ["x", "y"], "b": ["y", "z"], "c": ["z", "x"]})
        assert majority_vote(preds).tolist() == ["x", "y"]

    def test_keeps_numeric_dtype(self):
        preds = pd.DataFrame({"a": [1, 0], "b": [1, 0]})
        assert pd.api.types.is_integer_dtype(majority_vote(preds))


class TestVoteEnsemble:
    def test_single_output_column(self, registry, numeric_data):
        X, y = numeric_data
        vote = VoteEnsemble([registry.create("rf"), registry.create("lr"), registry.create("knn")])
        out = vote.fit_transform(X, y)
        assert list(out.columns) == ["vote"]
        assert len(out) == len(X)

    def test_needs_two_learners(self, registry):
        with pytest.raises(ValueError):
            VoteEnsemble([registry.create("rf")])

    def test_identical_children_vote_like_one(self, registry, numeric_data):
        X, y = numeric_data
        vote = VoteEnsemble([registry.create("lr"), registry.create("lr")])
        single = registry.create("lr")
        np.testing.assert_array_equal(
            vote.fit_transform(X, y)["vote"].to_numpy(),
            single.fit_transform(X, y)["lr"].to_numpy(),
        )

    def test_vote_of_votes_has_flat_vote_shape(self, registry, numeric_data):
        X, y = numeric_data
        inner_a = VoteEnsemble([registry.create("rf"), registry.create("lr"), registry.create("knn")], name="va")
        inner_b = VoteEnsemble([registry.create("dt"), registry.create("nb"), registry.create("svc")], name="vb")
        nested = VoteEnsemble([inner_a, inner_b, registry.create("gb")])
        flat = VoteEnsemble([registry.create(n) for n in ["rf", "lr", "knn", "dt", "nb", "svc", "gb"]])

        nested_out = nested.fit_transform(X, y)
        flat_out = flat.fit_transform(X, y)
        assert nested_out.shape == flat_out.shape == (len(X), 1)

    def test_nests_inside_expressions(self, registry, mixed_data):
        X, y = mixed_data
        registry.register("vote", VoteEnsemble([registry.create("rf"), registry.create("lr"), registry.create("nb")]))
        node = compile_expression("(catf |> ohe) + (numf |> stdsc) |> vote", registry)
        out = node.fit_transform(X, y)
        assert list(out.columns) == ["vote"]

    def test_probability_learners_vote_with_labels(self, numeric_data):
        X, y = numeric_data
        vote = VoteEnsemble([
            sklearn_learner("a", LogisticRegression, output="proba"),
            sklearn_learner("b", LogisticRegression, {"C": 0.01}, output="proba"),
        ])
        out = vote.fit_transform(X, y)
        assert set(out["vote"].unique()) <= {0, 1}

    def test_multi_column_child_is_rejected(self, registry, numeric_data):
        X, y = numeric_data
        vote = VoteEnsemble([compile_expression("numf |> stdsc", registry), registry.create("lr")])
        vote.fit(X, y)
        with pytest.raises(ShapeMismatchError):
            vote.transform(X)

    def test_clone(self, registry, numeric_data):
        X, y = numeric_data
        vote = VoteEnsemble([registry.create("rf"), registry.create("lr")]).fit(X, y)
        copy = vote.clone()
        assert not copy.is_fitted
        assert copy.structure == vote.structure


class TestStackEnsemble:
    def test_fit_transform(self, registry, numeric_data):
        X, y = numeric_data
        stack = StackEnsemble([registry.create("lr"), registry.create("knn"), registry.create("dt")])
        out = stack.fit_transform(X, y)
        assert list(out.columns) == ["stack"]
        assert set(out["stack"].unique()) <= {0, 1}
        assert stack.is_fitted

    def test_string_labels_are_encoded_for_the_stacker(self, registry, string_label_data):
        X, y = string_label_data
        stack = StackEnsemble([registry.create("lr"), registry.create("nb")])
        out = stack.fit_transform(X, y)
        assert stack.label_codes_ == {"no": 0, "yes": 1}
        assert set(out["stack"].unique()) <= {"no", "yes"}

    def test_keep_original_features(self, registry, numeric_data):
        X, y = numeric_data
        stacker = registry.create("lr")
        stack = StackEnsemble(
            [registry.create("rf"), registry.create("nb")],
            stacker=stacker,
            keep_original_features=True,
        )
        stack.fit(X, y)
        assert stacker.input_columns_ == list(X.columns) + ["stack_rf", "stack_nb"]

    def test_stacker_training_proportion(self, registry, numeric_data):
        X, y = numeric_data
        stacker = registry.create("lr")
        stack = StackEnsemble(
            [registry.create("rf"), registry.create("nb")],
            stacker=stacker,
            stacker_training_proportion=0.5,
        )
        stack.fit(X, y)
        assert stacker.model.n_features_in_ == 2
        assert stack.children[0].model.n_features_in_ == X.shape[1]

    def test_requires_target(self, registry, numeric_data):
        X, _ = numeric_data
        with pytest.raises(ShapeMismatchError):
            StackEnsemble([registry.create("rf"), registry.create("nb")]).fit(X)

    def test_probability_learners_feed_labels_to_stacker(self, registry, numeric_data):
        X, y = numeric_data
        stacker = registry.create("lr")
        stack = StackEnsemble(
            [sklearn_learner("a", LogisticRegression, output="proba"), registry.create("nb")],
            stacker=stacker,
        )
        out = stack.fit_transform(X, y)
        assert stacker.input_columns_ == ["a", "nb"]
        assert set(out["stack"].unique()) <= {0, 1}

    def test_clone_keeps_settings(self, registry):
        stack = StackEnsemble([registry.create("rf"), registry.create("nb")], keep_original_features=True)
        copy = stack.clone()
        assert copy.keep_original_features is True
        assert copy.stacker is not stack.stacker


class TestBestLearner:
    def test_picks_the_better_candidate(self, registry, numeric_data):
        X, y = numeric_data
        best = BestLearner([dummy(), registry.create("rf")])
        best.fit(X, y)
        assert best.best_.name == "rf"
        assert best.best_index_ == 1
        assert [name for name, _ in best.scores_] == ["dummy", "rf"]
        assert best.scores_[1][1] > best.scores_[0][1]

    def test_respects_metric_direction(self, registry, numeric_data):
        X, y = numeric_data
        best = BestLearner([dummy(), registry.create("rf")], policy=SelectionPolicy(metric="zero_one_loss"))
        best.fit(X, y)
        assert best.best_.name == "rf"

    def test_ties_go_to_first_candidate(self, numeric_data):
        X, y = numeric_data
        best = BestLearner([dummy("first"), dummy("second")])
        best.fit(X, y)
        assert best.best_.name == "first"

    def test_cv_selection(self, registry, numeric_data):
        X, y = numeric_data
        policy = SelectionPolicy(strategy="cv", n_folds=3, metric="accuracy")
        best = BestLearner([dummy(), registry.create("lr")], policy=policy)
        out = best.fit_transform(X, y)
        assert best.best_.name == "lr"
        assert list(out.columns) == ["best"]

    def test_winner_is_refit_on_all_rows(self, registry, numeric_data):
        X, y = numeric_data
        best = BestLearner([dummy(), registry.create("lr")]).fit(X, y)
        assert best.best_.input_columns_ == list(X.columns)
        pdt.assert_series_equal(
            best.transform(X)["best"],
            registry.create("lr").fit(X, y).transform(X)["lr"].rename("best"),
        )

    def test_unknown_strategy(self, registry, numeric_data):
        X, y = numeric_data
        best = BestLearner([dummy(), registry.create("lr")], policy=SelectionPolicy(strategy="magic"))
        with pytest.raises(ValueError):
            best.fit(X, y)


class TestBaggingEnsemble:
    def test_classification(self, registry, numeric_data):
        X, y = numeric_data
        bag = BaggingEnsemble(registry.create("dt"), n_estimators=5, random_state=0)
        out = bag.fit_transform(X, y)
        assert list(out.columns) == ["bagging"]
        assert len(bag.children) == 5
        assert set(out["bagging"].unique()) <= {0, 1}

    def test_probability_learner_is_bagged_by_label(self, numeric_data):
        X, y = numeric_data
        bag = BaggingEnsemble(sklearn_learner("lr", LogisticRegression, output="proba"), n_estimators=3, random_state=0)
        out = bag.fit_transform(X, y)
        assert set(out["bagging"].unique()) <= {0, 1}

    def test_regression_averages(self, registry):
        rng = np.random.RandomState(0)
        X = pd.DataFrame({"a": rng.normal(size=80), "b": rng.normal(size=80)})
        y = 3 * X["a"] - X["b"]
        bag = BaggingEnsemble(registry.create("ridge"), n_estimators=4, task="regression", random_state=0)
        out = bag.fit_transform(X, y)
        members = pd.concat([child.transform(X).iloc[:, 0] for child in bag.children], axis=1)
        np.testing.assert_allclose(out["bagging"].to_numpy(), members.mean(axis=1).to_numpy())

    def test_deterministic_with_random_state(self, registry, numeric_data):
        X, y = numeric_data
        first = BaggingEnsemble(registry.create("dt"), n_estimators=3, random_state=7).fit_transform(X, y)
        second = BaggingEnsemble(registry.create("dt"), n_estimators=3, random_state=7).fit_transform(X, y)
        pdt.assert_frame_equal(first, second)

    def test_max_samples(self, registry, numeric_data):
        X, y = numeric_data
        bag = BaggingEnsemble(registry.create("dt"), n_estimators=2, max_samples=0.5, random_state=0).fit(X, y)
        assert all(child.model.tree_.n_node_samples[0] == 75 for child in bag.children)

    @pytest.mark.parametrize("kwargs", [{"max_samples": 0.0}, {"max_samples": 1.5}, {"task": "ranking"}, {"n_estimators": 1}])
    def test_invalid_arguments(self, registry, kwargs):
        with pytest.raises(ValueError):
            BaggingEnsemble(registry.create("dt"), **kwargs)
