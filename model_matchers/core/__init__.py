"""
core — matcher、斷言與 macro

統一匯出所有核心元件，方便外部 import。

用法：
    from model_matchers.core import assert_accepts, have_many, should_have_many
    from model_matchers.core import event_bus
    from model_matchers.core import UnsupportedOptionError
"""

from model_matchers.core.assertions import assert_accepts, assert_rejects, soft_assert
from model_matchers.core.event_bus import event_bus
from model_matchers.core.exceptions import (
    AdapterError,
    ConfigError,
    DeprecatedMacroError,
    MissingSubjectError,
    UnknownAttributeError,
    ModelMatchersError,
    PersistenceRequiredError,
    UnsupportedOptionError,
)
from model_matchers.core.helpers import pretty_error_messages
from model_matchers.core.macros import (
    should_allow_mass_assignment_of,
    should_belong_to,
    should_have_and_belong_to_many,
    should_have_class_methods,
    should_have_db_column,
    should_have_db_columns,
    should_have_db_index,
    should_have_db_indices,
    should_have_index,
    should_have_indices,
    should_have_instance_methods,
    should_have_many,
    should_have_named_scope,
    should_have_one,
    should_have_readonly_attributes,
    should_not_allow_mass_assignment_of,
)
from model_matchers.core.matchers import (
    Matcher,
    allow_mass_assignment_of,
    belong_to,
    have_and_belong_to_many,
    have_class_method,
    have_db_column,
    have_db_index,
    have_instance_method,
    have_many,
    have_named_scope,
    have_one,
    have_readonly_attribute,
)
from model_matchers.core.options import extract_options

__all__ = [
    # Assertions / helpers
    "assert_accepts",
    "assert_rejects",
    "soft_assert",
    "pretty_error_messages",
    "extract_options",
    # Matchers
    "Matcher",
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
    # Macros
    "should_allow_mass_assignment_of",
    "should_not_allow_mass_assignment_of",
    "should_have_readonly_attributes",
    "should_have_many",
    "should_have_one",
    "should_have_and_belong_to_many",
    "should_belong_to",
    "should_have_class_methods",
    "should_have_instance_methods",
    "should_have_db_columns",
    "should_have_db_column",
    "should_have_db_indices",
    "should_have_db_index",
    "should_have_index",
    "should_have_indices",
    "should_have_named_scope",
    # Infrastructure
    "event_bus",
    # Exceptions
    "ModelMatchersError",
    "ConfigError",
    "UnsupportedOptionError",
    "MissingSubjectError",
    "UnknownAttributeError",
    "AdapterError",
    "PersistenceRequiredError",
    "DeprecatedMacroError",
]
