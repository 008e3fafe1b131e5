"""
model_matchers — Django model 的宣告式 pytest 斷言

    from model_matchers import *

    class TestUser:
        described_type = User

        should_have_many("dogs", through="ownerships")
        should_have_db_column("email", type="string", limit=255)
        should_not_allow_mass_assignment_of("is_admin")
"""

from model_matchers.core import *  # noqa: F401,F403
from model_matchers.core import __all__

__version__ = "0.1.0"
