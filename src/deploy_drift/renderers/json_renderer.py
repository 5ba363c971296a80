"""JSON renderer for CI pipelines and export.

Collects every rendered result and writes a single JSON document to stdout
on render_summary, preserving semantic styling for clients to interpret.
"""

import json
import sys
from collections.abc import Mapping
from dataclasses import fields, is_dataclass
from pathlib import Path
from typing import Any, TextIO

from ..protocol import OutputDescriptor
from .base import BaseRenderer


class JSONRenderer(BaseRenderer):
    """Renders output to JSON format."""

    def __init__(self, stream: TextIO | None = None, **kwargs):
        super().__init__(**kwargs)
        self.stream = stream
        self.results: dict[str, dict[str, Any]] = {}

    def render(self, descriptor: OutputDescriptor, result: Any, result_id: str) -> None:
        """
        Collect results for JSON export.

        Args:
            descriptor: Output descriptor
            result: Raw result
            result_id: Key of this result in the output document
        """
        self.collect_findings(result)

        data: dict[str, Any] = {
            "title": descriptor.title,
            "category": descriptor.category,
            "rows": [
                {
                    "label": row.label,
                    "value": self._serialize_value(row.value),
                    "style_class": row.style_class,
                    "severity": row.severity,
                    "section_type": row.section_type,
                    "section_name": row.section_name,
                    "verbosity": row.verbosity.value,
                    "icon": row.icon,
                    "indent": row.indent,
                }
                for row in descriptor.rows
            ],
        }

        if hasattr(result, "to_dict"):
            data["raw"] = result.to_dict()
        else:
            data["raw"] = self._serialize_value(result)

        self.results[result_id] = data

    def render_summary(self) -> None:
        """Output JSON to stdout."""
        output = {
            "results": self.results,
            "summary": {
                "total_errors": len(self.all_errors),
                "total_warnings": len(self.all_warnings),
                "errors": [{"component": comp, "message": msg} for comp, msg in self.all_errors],
                "warnings": [{"component": comp, "message": msg} for comp, msg in self.all_warnings],
            },
        }

        stream = self.stream or sys.stdout
        json.dump(output, stream, indent=2, default=str)
        stream.write("\n")

    @staticmethod
    def _serialize_value(value: Any) -> Any:
        """
        Serialize value to JSON-compatible format.

        Args:
            value: Value to serialize

        Returns:
            JSON-serializable value
        """
        if value is None or isinstance(value, (str, int, float, bool)):
            return value

        if isinstance(value, Path):
            return str(value)

        if isinstance(value, (list, tuple)):
            return [JSONRenderer._serialize_value(v) for v in value]

        if isinstance(value, Mapping):
            return {str(k): JSONRenderer._serialize_value(v) for k, v in value.items()}

        if is_dataclass(value) and not isinstance(value, type):
            return {
                f.name: JSONRenderer._serialize_value(getattr(value, f.name))
                for f in fields(value)
            }

        return str(value)
