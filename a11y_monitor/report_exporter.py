"""
JSON and HTML export of accessibility reports
"""

import json
from pathlib import Path
from typing import List
from jinja2 import Template
import logging

from a11y_monitor.models import AccessibilityReport, ViolationTrend

logger = logging.getLogger(__name__)

REPORT_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Accessibility Report - {{ title }}</title>
    <style>
        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            line-height: 1.6;
            color: #333;
            background: #f5f5f5;
            padding: 20px;
        }
        .container {
            max-width: 1100px;
            margin: 0 auto;
            background: white;
            padding: 30px;
            box-shadow: 0 2px 10px rgba(0,0,0,0.1);
        }
        h1 {
            color: #2c3e50;
            border-bottom: 3px solid #3498db;
            padding-bottom: 10px;
        }
        .score-cards {
            display: grid;
            grid-template-columns: repeat(auto-fit, minmax(180px, 1fr));
            gap: 15px;
            margin: 20px 0;
        }
        .card {
            background: #ecf0f1;
            border-radius: 8px;
            padding: 15px;
            text-align: center;
        }
        .card .value {
            font-size: 28px;
            font-weight: bold;
        }
        table {
            width: 100%;
            border-collapse: collapse;
            margin: 15px 0 30px;
        }
        th, td {
            border: 1px solid #ddd;
            padding: 8px;
            text-align: left;
        }
        th {
            background: #34495e;
            color: white;
        }
        .status-failing { color: #c0392b; font-weight: bold; }
        .status-warning { color: #d35400; font-weight: bold; }
        .status-passing { color: #27ae60; font-weight: bold; }
    </style>
</head>
<body>
<div class="container">
    <h1>Accessibility Report - {{ title }}</h1>
    <p>Report {{ report.id }} generated from scan at {{ report.timestamp }}</p>

    <div class="score-cards">
        <div class="card"><div class="value">{{ summary.overallScore }}</div>Overall score</div>
        <div class="card"><div class="value">{{ summary.complianceLevel }}</div>Compliance level</div>
        <div class="card"><div class="value">{{ summary.trendDirection }}</div>Trend</div>
        <div class="card"><div class="value">{{ metrics.totalViolations }}</div>Violations</div>
    </div>

    <h2>Violations by severity</h2>
    <table>
        <tr><th>Critical</th><th>Serious</th><th>Moderate</th><th>Minor</th></tr>
        <tr>
            <td>{{ metrics.violationsByLevel.critical }}</td>
            <td>{{ metrics.violationsByLevel.serious }}</td>
            <td>{{ metrics.violationsByLevel.moderate }}</td>
            <td>{{ metrics.violationsByLevel.minor }}</td>
        </tr>
    </table>

    <h2>WCAG compliance</h2>
    <table>
        <tr><th>Level A</th><th>Level AA</th><th>Level AAA</th><th>Test coverage</th></tr>
        <tr>
            <td>{{ "%.1f"|format(metrics.wcagCompliance.levelA) }}%</td>
            <td>{{ "%.1f"|format(metrics.wcagCompliance.levelAA) }}%</td>
            <td>{{ "%.1f"|format(metrics.wcagCompliance.levelAAA) }}%</td>
            <td>{{ metrics.testCoverage.testedComponents }} / {{ metrics.testCoverage.totalComponents }}
                ({{ "%.1f"|format(metrics.testCoverage.coveragePercentage) }}%)</td>
        </tr>
    </table>

    {% if summary.keyIssues %}
    <h2>Key issues</h2>
    <ul>
        {% for issue in summary.keyIssues %}<li>{{ issue }}</li>{% endfor %}
    </ul>
    {% endif %}

    {% if summary.recommendations %}
    <h2>Recommendations</h2>
    <ul>
        {% for item in summary.recommendations %}<li>{{ item }}</li>{% endfor %}
    </ul>
    {% endif %}

    <h2>Components</h2>
    <table>
        <tr><th>Component</th><th>Violations</th><th>WCAG score</th><th>Status</th><th>Delta</th></tr>
        {% for component in metrics.componentMetrics %}
        <tr>
            <td>{{ component.componentName }}</td>
            <td>{{ component.violationCount }}</td>
            <td>{{ component.wcagScore }}</td>
            <td class="status-{{ component.status }}">{{ component.status }}</td>
            <td>{{ "%+d"|format(component.trends.violationDelta) }}</td>
        </tr>
        {% endfor %}
    </table>

    {% if trends %}
    <h2>Violation trend</h2>
    <table>
        <tr><th>Date</th><th>Critical</th><th>Serious</th><th>Moderate</th><th>Minor</th><th>Total</th></tr>
        {% for point in trends %}
        <tr>
            <td>{{ point.date }}</td><td>{{ point.critical }}</td><td>{{ point.serious }}</td>
            <td>{{ point.moderate }}</td><td>{{ point.minor }}</td><td>{{ point.total }}</td>
        </tr>
        {% endfor %}
    </table>
    {% endif %}

    {% if report.violations %}
    <h2>Violations</h2>
    <table>
        <tr><th>Rule</th><th>Impact</th><th>Description</th><th>Nodes</th></tr>
        {% for violation in report.violations %}
        <tr>
            <td>{% if violation.helpUrl %}<a href="{{ violation.helpUrl }}">{{ violation.id }}</a>{% else %}{{ violation.id }}{% endif %}</td>
            <td>{{ violation.impact }}</td>
            <td>{{ violation.help or violation.description }}</td>
            <td>{{ violation.nodes|length }}</td>
        </tr>
        {% endfor %}
    </table>
    {% endif %}
</div>
</body>
</html>
"""


class ReportExporter:
    """Writes accessibility reports to disk"""

    def __init__(self, output_dir: str):
        """
        Initialize report exporter

        Args:
            output_dir: Directory to save reports
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def render_html(self, report: AccessibilityReport, trends: List[ViolationTrend] = None,
                    title: str = "Application") -> str:
        """Render a report as a standalone HTML page"""
        data = report.to_dict()
        template = Template(REPORT_TEMPLATE, autoescape=True)
        return template.render(
            title=title,
            report=data,
            summary=data['summary'],
            metrics=data['metrics'],
            trends=[point.to_dict() for point in trends or []]
        )

    def save_json(self, report: AccessibilityReport) -> Path:
        """Save report as <id>.json and return the path"""
        filepath = self.output_dir / f"{report.id}.json"
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(report.to_dict(), f, indent=2, ensure_ascii=False)

        logger.info(f"Saved report JSON to {filepath}")
        return filepath

    def save_html(self, report: AccessibilityReport, trends: List[ViolationTrend] = None,
                  title: str = "Application") -> Path:
        """Save report as <id>.html and return the path"""
        html_content = self.render_html(report, trends, title)
        filepath = self.output_dir / f"{report.id}.html"
        with open(filepath, 'w', encoding='utf-8') as f:
            f.write(html_content)

        logger.info(f"Generated HTML report: {filepath}")
        return filepath
