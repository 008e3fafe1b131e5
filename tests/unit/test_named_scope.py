"""
core.matchers.named_scope 單元測試
scope 產生的 SQL 必須與 finder options 組出的 SQL 相同。
"""

import pytest

from model_matchers.core.assertions import assert_accepts, assert_rejects
from model_matchers.core.exceptions import UnsupportedOptionError
from model_matchers.core.matchers import have_named_scope
from zoo.models import User


def recent_five(model):
    return model.objects.recent(5)


@pytest.mark.unit
class TestNamedScopeBuilder:

    def test_description(self):
        assert have_named_scope("visible").description() == "have a named scope for visible"

    def test_description_with_options(self):
        matcher = have_named_scope("visible").finding({"conditions": {"visible": True}})
        assert matcher.description() == "have a named scope for visible finding conditions={'visible': True}"

    def test_callable_name(self):
        assert have_named_scope(recent_five).name == "recent_five"
        assert have_named_scope(recent_five, name="recent(5)").name == "recent(5)"

    def test_unknown_finder_option(self):
        with pytest.raises(UnsupportedOptionError):
            have_named_scope("visible").finding({"where": "visible = 1"})


@pytest.mark.db
class TestNamedScopeMatching:

    def test_manager_method(self):
        assert_accepts(have_named_scope("visible"), User)

    def test_conditions(self):
        assert_accepts(have_named_scope("visible").finding({"conditions": {"visible": True}}), User)

    def test_different_conditions(self):
        matcher = have_named_scope("visible").finding({"conditions": {"visible": False}})
        assert not matcher.matches(User)
        assert "SQL 不同" in matcher.missing

    def test_order_and_limit(self):
        matcher = have_named_scope(recent_five, name="recent(5)").finding({"order": "-created_at", "limit": 5})
        assert_accepts(matcher, User)

    def test_wrong_limit(self):
        matcher = have_named_scope(recent_five).finding({"order": "-created_at", "limit": 10})
        assert_rejects(matcher, User)

    def test_callable_finding(self):
        matcher = have_named_scope("visible").finding(lambda m: m.objects.filter(visible=True))
        assert_accepts(matcher, User)

    def test_missing_scope(self):
        matcher = have_named_scope("archived")
        assert not matcher.matches(User)
        assert matcher.missing == "User 沒有名為 archived 的 scope"

    def test_not_a_queryset(self):
        matcher = have_named_scope("default_email")
        assert not matcher.matches(User)
        assert "不是 QuerySet" in matcher.missing

    def test_empty_result(self):
        matcher = have_named_scope(lambda m: m.objects.none(), name="none").finding(
            {"conditions": {"pk__in": []}}
        )
        assert_accepts(matcher, User)
