"""
pytest 全域設定

載入 model_matchers plugin（subject / model_adapter fixtures、評估摘要）。
Django 設定與測試用 app 在 tests/conftest.py。
"""

pytest_plugins = ["model_matchers.plugin"]
