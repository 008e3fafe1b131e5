"""
core.macros 單元測試
驗證 macro 產生的測試函式名稱、option 檢查、棄用處理，以及產生的測試實際執行結果。
"""

import pytest

from model_matchers.adapters.django_adapter import DjangoAdapter
from model_matchers.config.config import Config
from model_matchers.core.event_bus import event_bus
from model_matchers.core.exceptions import (
    ConfigError,
    DeprecatedMacroError,
    UnknownAttributeError,
    UnsupportedOptionError,
)
from model_matchers.core.macros import (
    should_allow_mass_assignment_of,
    should_belong_to,
    should_have_db_column,
    should_have_db_columns,
    should_have_db_index,
    should_have_index,
    should_have_indices,
    should_have_many,
    should_have_named_scope,
    should_not_allow_mass_assignment_of,
)
from zoo.models import User


def _tests(cls):
    return sorted(name for name in vars(cls) if name.startswith("test_"))


@pytest.mark.unit
class TestGeneratedNames:

    def test_one_test_per_target(self):
        class Sample:
            should_allow_mass_assignment_of("name", "email")

        assert _tests(Sample) == [
            "test_should_allow_mass_assignment_of_email",
            "test_should_allow_mass_assignment_of_name",
        ]

    def test_negated_name(self):
        class Sample:
            should_not_allow_mass_assignment_of("admin")

        assert _tests(Sample) == ["test_should_not_allow_mass_assignment_of_admin"]

    def test_options_in_name(self):
        class Sample:
            should_have_many("dogs", through="ownerships")
            should_belong_to("company", dependent="set_null")

        assert _tests(Sample) == [
            "test_should_belong_to_company_dependent_set_null",
            "test_should_have_many_dogs_through_ownerships",
        ]

    def test_duplicate_names_get_suffix(self):
        class Sample:
            should_have_db_columns("email")
            should_have_db_column("email")

        assert _tests(Sample) == [
            "test_should_have_db_column_named_email",
            "test_should_have_db_column_named_email_2",
        ]

    def test_function_metadata(self):
        class Sample:
            should_have_many("dogs")

        test = Sample.test_should_have_many_dogs
        assert test.__doc__ == "should have many dogs"
        assert test.__qualname__.endswith("Sample.test_should_have_many_dogs")
        assert test.__module__ == __name__
        assert [mark.name for mark in test.pytestmark] == ["model_matchers"]

    def test_registered_event(self):
        received = []
        handler = lambda e: received.append(e.data["test"])
        event_bus.on("macro.registered", handler)
        try:
            class Sample:
                should_have_db_index("email")
        finally:
            event_bus.off("macro.registered", handler)
        assert received == ["test_should_have_a_index_on_columns_email"]


@pytest.mark.unit
class TestMacroOptions:

    def test_option_dict(self):
        class Sample:
            should_have_many("dogs", {"through": "ownerships"})

        assert _tests(Sample) == ["test_should_have_many_dogs_through_ownerships"]

    def test_unknown_option(self):
        with pytest.raises(UnsupportedOptionError, match="throught"):
            class Sample:
                should_have_many("dogs", throught="ownerships")

    def test_option_on_macro_without_options(self):
        with pytest.raises(UnsupportedOptionError):
            class Sample:
                should_allow_mass_assignment_of("name", dependent="cascade")

    def test_dict_and_keywords(self):
        with pytest.raises(ConfigError):
            class Sample:
                should_have_many("dogs", {"through": "ownerships"}, dependent="cascade")

    def test_column_options(self):
        class Sample:
            should_have_db_column("email", type="string", limit=255)

        assert _tests(Sample) == ["test_should_have_db_column_named_email_of_type_string_of_limit_255"]

    def test_index_composite(self):
        class Sample:
            should_have_db_index(["commentable_type", "commentable_id"], unique=False)

        assert _tests(Sample) == [
            "test_should_have_a_non_unique_index_on_columns_commentable_type_and_commentable_id"
        ]

    def test_named_scope_keywords(self):
        class Sample:
            should_have_named_scope("visible", conditions={"visible": True})

        assert _tests(Sample) == [
            "test_should_have_a_named_scope_for_visible_finding_conditions_visible_true"
        ]

    def test_named_scope_bad_finder_option(self):
        with pytest.raises(UnsupportedOptionError):
            class Sample:
                should_have_named_scope("visible", where="visible = 1")

    def test_named_scope_options_twice(self):
        with pytest.raises(ConfigError):
            class Sample:
                should_have_named_scope("visible", {"limit": 1}, conditions={"visible": True})


@pytest.mark.unit
class TestDeprecatedMacros:

    def test_should_have_index_warns(self):
        with pytest.deprecated_call(match="should_have_db_index"):
            class Sample:
                should_have_index("email")

        assert _tests(Sample) == ["test_should_have_a_index_on_columns_email"]

    def test_should_have_indices_warns(self):
        with pytest.deprecated_call(match="should_have_db_indices"):
            class Sample:
                should_have_indices("email", "ssn", unique=True)

        assert len(_tests(Sample)) == 2

    def test_deprecated_event(self):
        received = []
        handler = lambda e: received.append(e.data)
        event_bus.on("macro.deprecated", handler)
        try:
            with pytest.deprecated_call():
                class Sample:
                    should_have_index("email")
        finally:
            event_bus.off("macro.deprecated", handler)
        assert received == [{"macro": "should_have_index", "replacement": "should_have_db_index"}]

    def test_strict_mode_raises(self, monkeypatch):
        monkeypatch.setattr(Config, "STRICT_DEPRECATIONS", True)
        with pytest.raises(DeprecatedMacroError):
            class Sample:
                should_have_index("email")


@pytest.mark.db
class TestGeneratedTestsRun:
    """直接呼叫產生的測試函式"""

    def test_accepting_test_passes(self):
        class Sample:
            should_have_many("dogs", through="ownerships")

        Sample().test_should_have_many_dogs_through_ownerships(User(), DjangoAdapter())

    def test_accepting_test_fails(self):
        class Sample:
            should_have_many("dogs", through="friendships")

        with pytest.raises(AssertionError, match="預期 User should have many dogs through friendships"):
            Sample().test_should_have_many_dogs_through_friendships(User(), DjangoAdapter())

    def test_rejecting_test(self):
        class Sample:
            should_not_allow_mass_assignment_of("admin", "name")

        Sample().test_should_not_allow_mass_assignment_of_admin(User(), DjangoAdapter())
        with pytest.raises(AssertionError, match="should not allow mass assignment of name"):
            Sample().test_should_not_allow_mass_assignment_of_name(User(), DjangoAdapter())

    def test_rejecting_test_with_misspelled_attribute(self):
        """拼錯的屬性不能讓否定的測試默默通過"""
        class Sample:
            should_not_allow_mass_assignment_of("emial")

        with pytest.raises(UnknownAttributeError, match="emial"):
            Sample().test_should_not_allow_mass_assignment_of_emial(User(), DjangoAdapter())

    def test_uses_given_adapter(self):
        class Sample:
            should_have_db_column("email", limit=255)

        adapter = DjangoAdapter(reflect_schema=False)
        Sample().test_should_have_db_column_named_email_of_limit_255(User(), adapter)
