import os

import pytest


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    # keep VARCALC_* settings from the developer's shell or .env out of the tests
    for key in list(os.environ):
        if key.startswith("VARCALC_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("VARCALC_HISTORY_FILE", str(tmp_path / "history"))


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    outcome = yield
    report = outcome.get_result()
    if report.when == "call":
        print(f"TEST: {item.name} - {'PASSED' if report.passed else 'FAILED'}")
