import pytest
import requests

from portal_smoke import default_config
from portal_smoke import utils

BASE = "http://localhost:3001"
API = f"{BASE}/api"


class FakeSession:
    """
    Stand-in for requests.Session: routes (METHOD, url) to queued responses or
    exceptions and records every call. The last queued outcome is reused.
    """

    def __init__(self):
        self.routes = {}
        self.calls = []
        self.closed = False

    def set(self, method, url, *outcomes):
        self.routes[(method.upper(), url)] = list(outcomes)

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        queue = self.routes.get((method.upper(), url))
        if not queue:
            raise requests.ConnectionError(f"connection refused: {method} {url}")
        outcome = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def calls_to(self, method, url):
        return [c for c in self.calls if c["method"] == method and c["url"] == url]

    def close(self):
        self.closed = True


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def config():
    return default_config()


@pytest.fixture
def healthy_session(session):
    """A session where every check against the portal succeeds."""
    rj = utils.make_response_json
    session.set("GET", f"{BASE}/health", rj({"status": "ok"}))
    session.set("OPTIONS", f"{API}/ideas", rj({}, status=204, headers={
        "Access-Control-Allow-Origin": "http://localhost:5173",
        "Access-Control-Allow-Methods": "GET,POST",
        "Access-Control-Allow-Headers": "Content-Type,Authorization",
    }))
    session.set("POST", f"{API}/auth/register", rj({"data": {"token": "reg-token"}}, status=201))
    session.set("POST", f"{API}/auth/login",
                rj({"data": {"token": "login-token", "user": {"email": "admin@testportal.com"}}}))
    session.set("GET", f"{API}/cases", rj({"data": [{"id": 1}, {"id": 2}]}))
    session.set("GET", f"{API}/ideas", rj({"data": [{"id": 1}]}))
    session.set("GET", f"{API}/surveys/templates", rj({"data": []}))
    session.set("GET", f"{API}/analytics/dashboard", rj({"data": {"cases": 2, "ideas": 1}}))
    return session
