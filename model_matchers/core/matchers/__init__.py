"""
matchers — 每種 ORM 概念一個 matcher

用法：
    from model_matchers.core.matchers import have_many, have_db_column
"""

from model_matchers.core.matchers.association import (
    AssociationMatcher,
    belong_to,
    have_and_belong_to_many,
    have_many,
    have_one,
)
from model_matchers.core.matchers.base import Matcher
from model_matchers.core.matchers.column import ColumnMatcher, have_db_column
from model_matchers.core.matchers.index import IndexMatcher, have_db_index
from model_matchers.core.matchers.mass_assignment import (
    MassAssignmentMatcher,
    allow_mass_assignment_of,
)
from model_matchers.core.matchers.named_scope import NamedScopeMatcher, have_named_scope
from model_matchers.core.matchers.readonly import (
    ReadonlyAttributeMatcher,
    have_readonly_attribute,
)
from model_matchers.core.matchers.respond_to import (
    RespondToMatcher,
    have_class_method,
    have_instance_method,
)

__all__ = [
    "Matcher",
    "AssociationMatcher",
    "ColumnMatcher",
    "IndexMatcher",
    "MassAssignmentMatcher",
    "NamedScopeMatcher",
    "ReadonlyAttributeMatcher",
    "RespondToMatcher",
    "allow_mass_assignment_of",
    "belong_to",
    "have_and_belong_to_many",
    "have_class_method",
    "have_db_column",
    "have_db_index",
    "have_instance_method",
    "have_many",
    "have_named_scope",
    "have_one",
    "have_readonly_attribute",
]
