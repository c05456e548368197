"""
system_tester.py
- Runs a fixed sequence of smoke checks against the Alliance Portal API using requests
- Records one PASS/FAIL result per check, in execution order
- Falls back through the configured login candidates until one succeeds
- Prints a summary with success rate and a coarse verdict
"""

import argparse
import json
import sys
from typing import Any, Dict, List, Optional

import requests

from .config import coerce_timeout, default_config, load_config, load_env, merge_config
from .models import FAIL, PASS, TestResult
from .reporting import build_report, generate_html_report, write_json_report
from .utils import describe_error, extract_json, jsonpath_first


NO_TOKEN_MESSAGE = "No auth token available"

VERDICT_WORKING_WELL = "System is working well! Frontend-Backend integration is successful."
VERDICT_SOME_ISSUES = "System has some issues but core functionality works."
VERDICT_MAJOR_ISSUES = "System has major issues that need to be addressed."

# thresholds assume the fixed sequence of 8 checks
WORKING_WELL_MIN_PASSED = 6
SOME_ISSUES_MIN_PASSED = 4

_RULE = "=" * 50


def success_rate(passed: int, total: int) -> float:
    """Percentage of passed checks, rounded to one decimal place (0.0 when nothing ran)."""
    if total <= 0:
        return 0.0
    return round(passed / total * 100, 1)


def verdict(passed: int) -> str:
    if passed >= WORKING_WELL_MIN_PASSED:
        return VERDICT_WORKING_WELL
    if passed >= SOME_ISSUES_MIN_PASSED:
        return VERDICT_SOME_ISSUES
    return VERDICT_MAJOR_ISSUES


class SystemTester:
    """
    Holds the session state for one smoke-test run: an optional bearer token and
    the ordered list of recorded results. Create a new instance to start over.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None,
                 session: Optional[requests.Session] = None, verbose: bool = False):
        # partial configs keep the built-in defaults for anything they omit
        self.config = merge_config(default_config(), config or {})
        self.base_url = str(self.config["base_url"]).rstrip("/")
        self.api_url = f"{self.base_url}/api"
        self.timeout = coerce_timeout(self.config.get("timeout"))
        # only a session created here is closed by close()
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.verbose = verbose
        self.auth_token: Optional[str] = None
        self.results: List[TestResult] = []

        print("Alliance Portal System Test Started")
        print(_RULE)

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        """Send one request; non-2xx responses raise requests.HTTPError."""
        kwargs.setdefault("timeout", self.timeout)
        resp = self.session.request(method, url, **kwargs)
        resp.raise_for_status()
        return resp

    def _auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.auth_token}"}

    def add_result(self, result: TestResult) -> None:
        self.results.append(result)
        marker = "[PASS]" if result.passed else "[FAIL]"
        line = f"{marker} {result.method} {result.endpoint} - {result.message}"
        if self.verbose and result.status_code is not None:
            line += f" (HTTP {result.status_code})"
        print(line)
        if isinstance(result.data, (dict, list)):
            print(f"   Data: {json.dumps(result.data, default=str)[:100]}...")

    # 1. health check
    def run_health_check(self) -> None:
        endpoint = "/health"
        try:
            resp = self._request("GET", f"{self.base_url}{endpoint}")
        except requests.RequestException as e:
            status_code, _ = describe_error(e, prefer_body=False)
            self.add_result(TestResult(endpoint, "GET", FAIL, f"Health check failed: {e}", status_code))
            return
        body = extract_json(resp)
        health = jsonpath_first(body, "$.status")
        self.add_result(TestResult(endpoint, "GET", PASS, f"Health check successful ({health})",
                                   resp.status_code, body))

    # 2. CORS preflight
    def run_cors_preflight(self) -> None:
        endpoint = "/api/ideas"
        headers = {
            "Origin": self.config.get("origin"),
            "Access-Control-Request-Method": "GET",
            "Access-Control-Request-Headers": "Content-Type",
        }
        try:
            resp = self._request("OPTIONS", f"{self.api_url}/ideas", headers=headers)
        except requests.RequestException as e:
            status_code, _ = describe_error(e, prefer_body=False)
            self.add_result(TestResult(endpoint, "OPTIONS", FAIL, f"CORS preflight failed: {e}", status_code))
            return
        # only transport success is checked; absent headers are recorded as None
        cors_headers = {
            name: resp.headers.get(name)
            for name in ("access-control-allow-origin",
                         "access-control-allow-methods",
                         "access-control-allow-headers")
        }
        self.add_result(TestResult(endpoint, "OPTIONS", PASS, "CORS preflight successful",
                                   resp.status_code, cors_headers))

    # 3. registration; commonly fails when the user already exists
    def run_registration(self) -> None:
        endpoint = "/api/auth/register"
        identity = self.config.get("registration") or {}
        body = {key: identity.get(key) for key in ("name", "email", "password", "role")}
        try:
            resp = self._request("POST", f"{self.api_url}/auth/register", json=body)
        except requests.RequestException as e:
            status_code, message = describe_error(e)
            self.add_result(TestResult(endpoint, "POST", FAIL,
                                       f"Registration failed (might already exist): {message}", status_code))
            return
        self.auth_token = jsonpath_first(extract_json(resp), "$.data.token")
        self.add_result(TestResult(endpoint, "POST", PASS, "Registration successful",
                                   resp.status_code, {"has_token": bool(self.auth_token)}))

    # 4. login, trying each candidate until one succeeds
    def run_login(self) -> None:
        endpoint = "/api/auth/login"
        candidates = self.config.get("login_candidates") or []
        last_error: Optional[requests.RequestException] = None
        for candidate in candidates:
            credentials = {"email": candidate.get("email"), "password": candidate.get("password")}
            try:
                resp = self._request("POST", f"{self.api_url}/auth/login", json=credentials)
            except requests.RequestException as e:
                last_error = e
                continue
            body = extract_json(resp)
            self.auth_token = jsonpath_first(body, "$.data.token")
            label = candidate.get("label") or candidate.get("email")
            self.add_result(TestResult(endpoint, "POST", PASS, f"Login successful with {label}",
                                       resp.status_code,
                                       {"has_token": bool(self.auth_token),
                                        "user": jsonpath_first(body, "$.data.user.email")}))
            return

        if last_error is None:
            self.add_result(TestResult(endpoint, "POST", FAIL, "Login failed: no credentials configured"))
            return
        status_code, message = describe_error(last_error)
        self.add_result(TestResult(endpoint, "POST", FAIL, f"Login failed: {message}", status_code))

    def _run_authenticated_get(self, path: str, label: str, is_list: bool = True) -> None:
        endpoint = f"/api{path}"
        if not self.auth_token:
            self.add_result(TestResult(endpoint, "GET", FAIL, NO_TOKEN_MESSAGE))
            return
        try:
            resp = self._request("GET", f"{self.api_url}{path}", headers=self._auth_headers())
        except requests.RequestException as e:
            status_code, message = describe_error(e)
            self.add_result(TestResult(endpoint, "GET", FAIL, f"Get {label} failed: {message}", status_code))
            return
        payload = jsonpath_first(extract_json(resp), "$.data")
        if not is_list:
            self.add_result(TestResult(endpoint, "GET", PASS, f"{label.capitalize()} retrieved successfully",
                                       resp.status_code, payload))
            return
        count = len(payload) if isinstance(payload, list) else None
        self.add_result(TestResult(endpoint, "GET", PASS, f"Retrieved {count or 0} {label}",
                                   resp.status_code, {"count": count}))

    # 5-8. authenticated reads
    def run_get_cases(self) -> None:
        self._run_authenticated_get("/cases", "cases")

    def run_get_ideas(self) -> None:
        self._run_authenticated_get("/ideas", "ideas")

    def run_get_survey_templates(self) -> None:
        self._run_authenticated_get("/surveys/templates", "survey templates")

    def run_get_dashboard_analytics(self) -> None:
        self._run_authenticated_get("/analytics/dashboard", "dashboard analytics", is_list=False)

    def run_all(self) -> List[TestResult]:
        print("Starting comprehensive system tests...\n")
        self.run_health_check()
        self.run_cors_preflight()
        self.run_registration()
        self.run_login()
        self.run_get_cases()
        self.run_get_ideas()
        self.run_get_survey_templates()
        self.run_get_dashboard_analytics()
        self.print_summary()
        return self.results

    def summary(self) -> Dict[str, Any]:
        passed = sum(1 for r in self.results if r.status == PASS)
        failed = sum(1 for r in self.results if r.status == FAIL)
        total = len(self.results)
        return {
            "total": total,
            "passed": passed,
            "failed": failed,
            "success_rate": success_rate(passed, total),
            "verdict": verdict(passed),
        }

    def print_summary(self) -> None:
        stats = self.summary()
        print("\n" + _RULE)
        print("TEST SUMMARY")
        print(_RULE)
        print(f"Total Tests: {stats['total']}")
        print(f"Passed: {stats['passed']}")
        print(f"Failed: {stats['failed']}")
        print(f"Success Rate: {stats['success_rate']:.1f}%")

        if stats["failed"]:
            print("\nFailed Tests:")
            for r in self.results:
                if r.status == FAIL:
                    print(f"   - {r.method} {r.endpoint}: {r.message}")

        print("\nTest Results:")
        print(stats["verdict"])

        creds = self.config.get("seed_credentials") or []
        if creds:
            print("\nSeed Data Test Credentials:")
            for c in creds:
                print(f"   {c.get('role')}: {c.get('email')} / {c.get('password')}")


def main(config_path: Optional[str] = None, env_file: Optional[str] = None,
         report_json: Optional[str] = None, report_html: Optional[str] = None,
         verbose: bool = False) -> SystemTester:
    """Load .env and config, run every check, and write the optional reports."""
    load_env(env_file)
    cfg = load_config(config_path)
    with SystemTester(cfg, verbose=verbose) as tester:
        tester.run_all()

    if report_json or report_html:
        report = build_report(tester)
        if report_json:
            try:
                write_json_report(report, report_json)
                print(f"Wrote JSON report to {report_json}")
            except OSError as e:
                print(f"Failed to write report to {report_json}: {e}")
        if report_html:
            try:
                generate_html_report(report, report_html)
                print(f"Wrote HTML report to {report_html}")
            except OSError as e:
                print(f"Failed to write report to {report_html}: {e}")
    return tester


def main_cli(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Smoke test for the Alliance Portal REST API.")
    parser.add_argument("--config", "-c", help="Path to YAML config overriding the defaults", default=None)
    parser.add_argument("--env-file", help="Path to .env file loaded before the config", default=None)
    parser.add_argument("--report_json", help="Write detailed JSON report to this file (optional)", default=None)
    parser.add_argument("--report_html", help="Write detailed HTML report to this file (optional)", default=None)
    parser.add_argument("--verbose", "-v", action="store_true", help="Print HTTP status codes per check")
    args = parser.parse_args(argv)

    try:
        main(config_path=args.config, env_file=args.env_file,
             report_json=args.report_json, report_html=args.report_html,
             verbose=args.verbose)
    except Exception as exc:
        print(f"\nTest failed: {exc}")
        sys.exit(1)
    print("\nTest completed")
    sys.exit(0)
