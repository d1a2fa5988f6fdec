"""Tests for the JSON discovery report."""

from __future__ import annotations

import dataclasses
import json

import pytest

from bulb_discovery.discovery.announcement import parse_attribute_lines
from bulb_discovery.reporting import JsonReporter

from conftest import BULB_ATTRIBUTES


@pytest.fixture
def devices() -> dict:
    first = parse_attribute_lines(BULB_ATTRIBUTES)
    second = dataclasses.replace(first, id="0x0000000000000001", name="desk")
    return {first.id: first, second.id: second}


class TestJsonReporter:
    """Tests for JsonReporter."""

    def test_generate(self, devices):
        report = JsonReporter().generate(devices, duration_ms=1200, probes_sent=3)

        assert report["status"] == "completed"
        assert report["summary"] == {"devices": 2, "probes_sent": 3, "duration_ms": 1200}
        assert [d["id"] for d in report["devices"]] == sorted(devices)
        assert report["error"] is None

    def test_generate_with_error(self):
        report = JsonReporter().generate({}, error="probe task failed")

        assert report["status"] == "failed"
        assert report["devices"] == []

    def test_save(self, devices, tmp_path):
        reporter = JsonReporter()
        report = reporter.generate(devices)

        path = reporter.save(report, tmp_path / "nested" / "report.json")

        assert json.loads(path.read_text(encoding="utf-8")) == report

    def test_to_json_string(self, devices):
        reporter = JsonReporter()
        report = reporter.generate(devices)

        assert "\n" in reporter.to_json_string(report)
        assert "\n" not in reporter.to_json_string(report, pretty=False)

    def test_flow_output(self, devices):
        reporter = JsonReporter()
        output = reporter.generate_flow_output(
            reporter.generate(devices, probes_sent=2), report_path="out.json"
        )

        assert output["success"] is True
        assert output["command"] == "discover"
        assert output["data"]["device_count"] == 2
        assert output["data"]["report_path"] == "out.json"
        assert output["message"] == "Discovered 2 devices"

    def test_flow_output_failure(self):
        reporter = JsonReporter()
        output = reporter.generate_flow_output(reporter.generate({}, error="boom"))

        assert output["success"] is False
        assert output["message"] == "Discovery failed: boom"
        assert "report_path" not in output["data"]
