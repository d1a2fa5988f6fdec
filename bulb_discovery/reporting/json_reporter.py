"""JSON report generator for discovery runs.

Generates structured JSON reports from a registry snapshot.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, Optional

from ..discovery.announcement import DeviceRecord


class JsonReporter:
    """Generates JSON reports of discovered bulbs."""

    def generate(
        self,
        devices: Mapping[str, DeviceRecord],
        duration_ms: int = 0,
        probes_sent: int = 0,
        error: Optional[str] = None,
    ) -> dict[str, Any]:
        """Generate a JSON report from a discovery run.

        Args:
            devices: Registry snapshot (device id -> record).
            duration_ms: Run duration in milliseconds.
            probes_sent: Number of probes transmitted.
            error: Overall error message if the run failed.

        Returns:
            Report dictionary ready for JSON serialization.
        """
        return {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "status": "completed" if error is None else "failed",
            "summary": {
                "devices": len(devices),
                "probes_sent": probes_sent,
                "duration_ms": duration_ms,
            },
            "devices": [
                devices[device_id].to_dict() for device_id in sorted(devices)
            ],
            "error": error,
        }

    def save(self, report: dict[str, Any], path: Path) -> Path:
        """Write the device report as indented JSON, creating parent directories."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json_string(report) + "\n", encoding="utf-8")
        return path

    def to_json_string(self, report: dict[str, Any], pretty: bool = True) -> str:
        """Serialize a report; compact output is one line for piping."""
        return json.dumps(report, indent=2 if pretty else None, ensure_ascii=False)

    def generate_flow_output(
        self,
        report: dict[str, Any],
        report_path: Optional[str] = None,
    ) -> dict[str, Any]:
        """Generate the CLI JSON envelope.

        {
            "success": bool,
            "command": "discover",
            "data": { ... },
            "message": str
        }

        Args:
            report: Discovery report dictionary.
            report_path: Path where report was saved.

        Returns:
            Envelope dictionary.
        """
        summary = report["summary"]
        success = report["status"] == "completed"

        data: dict[str, Any] = {
            "devices": report["devices"],
            "device_count": summary["devices"],
            "probes_sent": summary["probes_sent"],
            "duration_ms": summary["duration_ms"],
        }

        if report_path:
            data["report_path"] = report_path

        if not success:
            message = f"Discovery failed: {report['error']}"
        elif summary["devices"] == 1:
            message = "Discovered 1 device"
        else:
            message = f"Discovered {summary['devices']} devices"

        return {
            "success": success,
            "command": "discover",
            "data": data,
            "message": message,
        }
