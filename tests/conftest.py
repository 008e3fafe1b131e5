"""
測試環境

- Django 設定：in-memory SQLite + 測試用 zoo app
- migrate --run-syncdb 建立所有資料表（含 index / unique constraint）
"""

import django
from django.conf import settings


def pytest_configure(config):
    if not settings.configured:
        settings.configure(
            DATABASES={
                "default": {
                    "ENGINE": "django.db.backends.sqlite3",
                    "NAME": ":memory:",
                }
            },
            INSTALLED_APPS=[
                "django.contrib.contenttypes",
                "zoo",
            ],
            DEFAULT_AUTO_FIELD="django.db.models.AutoField",
            USE_TZ=False,
        )
        django.setup()

    from django.core.management import call_command
    call_command("migrate", run_syncdb=True, verbosity=0)
