"""
core.exceptions 單元測試
驗證例外繼承關係與訊息內容。
"""

import pytest

from model_matchers.core.exceptions import (
    AdapterError,
    ConfigError,
    DeprecatedMacroError,
    MissingSubjectError,
    ModelMatchersError,
    PersistenceRequiredError,
    UnknownAttributeError,
    UnsupportedOptionError,
)


@pytest.mark.unit
class TestExceptionHierarchy:

    @pytest.mark.parametrize("exc_class, parent", [
        (ConfigError, ModelMatchersError),
        (UnsupportedOptionError, ConfigError),
        (MissingSubjectError, ConfigError),
        (UnknownAttributeError, ConfigError),
        (AdapterError, ModelMatchersError),
        (PersistenceRequiredError, AdapterError),
        (DeprecatedMacroError, ModelMatchersError),
    ])
    def test_inheritance(self, exc_class, parent):
        assert issubclass(exc_class, parent)

    def test_catch_base(self):
        with pytest.raises(ModelMatchersError):
            raise UnsupportedOptionError(["x"])

    def test_matcher_failure_is_not_framework_error(self):
        assert not issubclass(AssertionError, ModelMatchersError)


@pytest.mark.unit
class TestExceptionMessages:

    def test_unsupported_option_sorted_keys(self):
        e = UnsupportedOptionError(["zeta", "alpha"], ("through",))
        assert e.keys == ["alpha", "zeta"]
        assert "alpha, zeta" in str(e)
        assert "through" in str(e)
        assert e.context["allowed"] == ["through"]

    def test_missing_subject_where(self):
        e = MissingSubjectError("tests/test_x.py::test_a")
        assert "described_type" in str(e)
        assert "tests/test_x.py::test_a" in str(e)

    def test_persistence_keeps_original(self):
        original = ValueError("boom")
        e = PersistenceRequiredError("User", original)
        assert e.original is original
        assert "User" in str(e)
        assert "ValueError: boom" in str(e)

    def test_deprecated_macro(self):
        e = DeprecatedMacroError("should_have_index", "should_have_db_index")
        assert "should_have_db_index" in str(e)
        assert e.context == {"macro": "should_have_index", "replacement": "should_have_db_index"}

    def test_unknown_attribute(self):
        e = UnknownAttributeError("User", "emial")
        assert str(e).startswith("User 沒有名為 emial 的屬性")
        assert e.context == {"model": "User", "attribute": "emial"}
