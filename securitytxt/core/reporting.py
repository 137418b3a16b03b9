from __future__ import annotations
import json
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List

from .models import LineResult


class Reporter:
    def __init__(self, out_dir: Path) -> None:
        self.out_dir = out_dir

    def summarize(self, results: List[LineResult]) -> List[Dict[str, Any]]:
        by_file: Dict[str, Counter] = {}
        for r in results:
            by_file.setdefault(r.file_location, Counter())[r.kind] += 1
        return [
            {
                "file": name,
                "fields": counts["field"],
                "comments": counts["comment"],
                "errors": counts["error"],
            }
            for name, counts in sorted(by_file.items())
        ]

    def write_all(self, results: List[LineResult]) -> Dict[str, int]:
        self.out_dir.mkdir(parents=True, exist_ok=True)

        data = [r.__dict__ for r in results]
        (self.out_dir / "results.json").write_text(json.dumps(data, indent=2))

        lines = ["# Parsed Lines", ""]
        for r in results:
            lines.append(f"- **file**: {r.file_location}  ")
            lines.append(f"  **line**: {r.line_num}  ")
            lines.append(f"  **kind**: {r.kind}  ")
            if r.name is not None:
                lines.append(f"  **name**: `{r.name}`  ")
            if r.error is not None:
                lines.append(f"  **error**: {r.error}  ")
            lines.append(f"  **text**: `{r.text.strip()}`  ")
            lines.append("")
        (self.out_dir / "results.md").write_text("\n".join(lines))

        # write an index.json and a summary.md
        index = self.summarize(results)
        (self.out_dir / "index.json").write_text(json.dumps(index, indent=2))
        lines = ["# Parse Summary", ""]
        for item in index:
            lines.append(f"## {item['file']}")
            for k, v in item.items():
                if k == "file":
                    continue
                lines.append(f"- {k}: {v}")
            lines.append("")
        (self.out_dir / "summary.md").write_text("\n".join(lines))

        return {
            "lines": len(results),
            "errors": sum(1 for r in results if r.kind == "error"),
            "artifacts": 4,
        }
