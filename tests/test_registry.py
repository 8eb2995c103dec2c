"""Tests for the component registry."""

import pytest

from pipealgebra.exceptions import UnknownComponentError
from pipealgebra.modeling import VoteEnsemble
from pipealgebra.registry import ComponentRegistry, default_registry


class TestDefaultRegistry:
    def test_builtin_components(self):
        registry = default_registry()
        for name in ["catf", "numf", "catnum", "ohe", "pca", "ica", "fa", "stdsc", "minmax",
                     "robust", "imputer", "noop", "rf", "ada", "gb", "lr", "svc", "knn",
                     "dt", "nb", "rfr", "ridge"]:
            assert name in registry

    def test_each_call_is_independent(self):
        first = default_registry()
        first.unregister("rf")
        assert "rf" in default_registry()

    def test_describe(self):
        info = default_registry().describe("rf")[0]
        assert info.kind == "StatefulEstimator"
        assert info.category == "classification"


class TestComponentRegistry:
    def test_create_returns_renamed_clone(self):
        registry = default_registry()
        registry.register("forest", registry.get("rf"))
        node = registry.create("forest")
        assert node.name == "forest"
        assert node is not registry.get("forest")
        assert registry.get("forest").name == "rf"

    def test_register_rejects_invalid_names(self):
        registry = ComponentRegistry()
        with pytest.raises(ValueError):
            registry.register("1bad", default_registry().get("rf"))
        with pytest.raises(ValueError):
            registry.register("has-dash", default_registry().get("rf"))

    def test_register_rejects_non_nodes(self):
        with pytest.raises(TypeError):
            ComponentRegistry().register("thing", object())

    def test_register_without_overwrite(self):
        registry = default_registry()
        with pytest.raises(ValueError):
            registry.register("rf", registry.get("lr"), overwrite=False)

    def test_unknown_lookup(self):
        with pytest.raises(UnknownComponentError):
            ComponentRegistry().get("missing")

    def test_copy_is_isolated(self):
        registry = default_registry()
        other = registry.copy()
        other.unregister("rf")
        assert "rf" in registry
        assert "rf" not in other

    def test_register_ensemble(self):
        registry = default_registry()
        registry.register("vote", VoteEnsemble([registry.create("rf"), registry.create("lr")]))
        node = registry.create("vote")
        assert node.name == "vote"
        assert [c.name for c in node.children] == ["rf", "lr"]
