"""
Smoke test runner for the Alliance Portal REST API.
Exposes the runner and its helpers so tests can import from `portal_smoke`.
"""
from .models import PASS, FAIL, TestResult
from .config import default_config, load_config
from .system_tester import SystemTester, success_rate, verdict, main, main_cli

__all__ = [
    "PASS",
    "FAIL",
    "TestResult",
    "default_config",
    "load_config",
    "SystemTester",
    "success_rate",
    "verdict",
    "main",
    "main_cli",
]
