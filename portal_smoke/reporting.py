from jinja2 import Template
import json
from typing import Any, Dict

HTML_TMPL = r"""
<!doctype html>
<html>
<head>
  <meta charset="utf-8"/>
  <title>Alliance Portal Smoke Test Report</title>
  <style>
    body{font-family:Arial,Helvetica,sans-serif;margin:16px;color:#222}
    .summary{margin-bottom:20px;padding:12px;background:#f2f8ff;border:1px solid #cfe0ff}
    table{border-collapse:collapse;width:100%}
    th,td{border:1px solid #ddd;padding:6px 8px;text-align:left;vertical-align:top}
    th{background:#eef6ff}
    .ok{color:green;font-weight:600}
    .fail{color:red;font-weight:700}
    pre{background:#f7f7f7;padding:8px;border-radius:4px;overflow:auto;margin:0}
    .meta{font-size:12px;color:#666}
  </style>
</head>
<body>
  <h1>Alliance Portal Smoke Test Report</h1>
  <div class="summary">
    <div class="meta">Target: {{ report.base_url }}</div>
    <div>Total checks: {{ report.summary.total }}</div>
    <div>Passed {{ report.summary.passed }}  Failed {{ report.summary.failed }}
      ({{ "%.1f"|format(report.summary.success_rate) }}%)</div>
    <div><strong>{{ report.summary.verdict }}</strong></div>
  </div>

  <table>
    <tr><th>#</th><th>Check</th><th>Result</th><th>HTTP</th><th>Message</th><th>Data</th></tr>
    {% for r in report.results %}
    <tr>
      <td>{{ loop.index }}</td>
      <td>{{ r.method }} {{ r.endpoint }}</td>
      <td><span class="{{ 'ok' if r.status == 'PASS' else 'fail' }}">{{ r.status }}</span></td>
      <td>{{ r.status_code if r.status_code is not none else "-" }}</td>
      <td>{{ r.message }}</td>
      <td>{% if r.data is not none %}<pre>{{ r.data|tojson(indent=2) }}</pre>{% endif %}</td>
    </tr>
    {% endfor %}
  </table>
</body>
</html>
"""


def build_report(tester) -> Dict[str, Any]:
    """
    Snapshot a finished SystemTester run:
      {
        "base_url": ...,
        "summary": {total, passed, failed, success_rate, verdict},
        "results": [ {endpoint, method, status, message, status_code, data} ]
      }
    """
    return {
        "base_url": tester.base_url,
        "summary": tester.summary(),
        "results": [r.to_dict() for r in tester.results],
    }


def write_json_report(report: Dict[str, Any], out_path: str):
    with open(out_path, "w", encoding="utf-8") as fh:
        json.dump(report, fh, indent=2, ensure_ascii=False, default=str)


def generate_html_report(report: Dict[str, Any], out_path: str):
    """Render report (as returned by build_report) to an HTML file at out_path."""
    tmpl = Template(HTML_TMPL, autoescape=True)
    html = tmpl.render(report=report)
    with open(out_path, "w", encoding="utf-8") as fh:
        fh.write(html)
