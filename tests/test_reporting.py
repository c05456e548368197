import json

from portal_smoke import FAIL, PASS, SystemTester, TestResult
from portal_smoke import reporting


def _finished_tester(config, session):
    tester = SystemTester(config, session=session)
    tester.add_result(TestResult("/health", "GET", PASS, "Health check successful (ok)", 200, {"status": "ok"}))
    tester.add_result(TestResult("/api/cases", "GET", FAIL, "No auth token available"))
    return tester


def test_build_report(config, session):
    report = reporting.build_report(_finished_tester(config, session))
    assert report["base_url"] == "http://localhost:3001"
    assert report["summary"]["total"] == 2
    assert report["summary"]["success_rate"] == 50.0
    assert report["results"][1] == {
        "endpoint": "/api/cases",
        "method": "GET",
        "status": "FAIL",
        "message": "No auth token available",
        "status_code": None,
        "data": None,
    }


def test_write_json_report(tmp_path, config, session):
    out = tmp_path / "report.json"
    reporting.write_json_report(reporting.build_report(_finished_tester(config, session)), str(out))
    loaded = json.loads(out.read_text(encoding="utf-8"))
    assert loaded["results"][0]["data"] == {"status": "ok"}


def test_generate_html_report(tmp_path, config, session):
    tester = _finished_tester(config, session)
    tester.add_result(TestResult("/api/ideas", "GET", FAIL, "Get ideas failed: <script>x</script>", 500))
    out = tmp_path / "report.html"
    reporting.generate_html_report(reporting.build_report(tester), str(out))

    html = out.read_text(encoding="utf-8")
    assert "Alliance Portal Smoke Test Report" in html
    assert "GET /api/cases" in html
    assert "33.3%" in html
    assert "<script>x</script>" not in html
    assert tester.summary()["verdict"] in html
