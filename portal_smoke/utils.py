"""
Small utility helpers used by tests and the system tester.
"""

from typing import Any, Dict, Optional, Tuple
import json

import requests
from requests.structures import CaseInsensitiveDict
from jsonpath_ng import parse as jsonpath_parse


def extract_json(response: requests.Response) -> Any:
    """Safely parse response JSON; return None if invalid."""
    try:
        return response.json()
    except ValueError:
        return None


def jsonpath_first(body: Any, path: str, default: Any = None) -> Any:
    """Return the first value matched by JSONPath in body, or default."""
    if body is None:
        return default
    matches = [m.value for m in jsonpath_parse(path).find(body)]
    if not matches:
        return default
    return matches[0]


def describe_error(exc: Exception, prefer_body: bool = True) -> Tuple[Optional[int], str]:
    """
    Turn a request error into (status_code, message).
    status_code is None when no response was received. When prefer_body is set and
    the response JSON carries an 'error' field, that becomes the message.
    """
    response = getattr(exc, "response", None)
    if response is None:
        return None, str(exc)
    message = str(exc)
    if prefer_body:
        remote = jsonpath_first(extract_json(response), "$.error")
        if remote:
            message = str(remote)
    return response.status_code, message


def make_response_json(obj: Any, status: int = 200, headers: Dict[str, str] = None) -> requests.Response:
    """
    Convenience for building a requests.Response with JSON body for tests.
    """
    resp = requests.Response()
    resp.status_code = status
    body = json.dumps(obj)
    resp._content = body.encode("utf-8")
    hdrs = CaseInsensitiveDict(headers or {})
    hdrs.setdefault("Content-Type", "application/json")
    resp.headers = hdrs
    resp.encoding = "utf-8"
    return resp
