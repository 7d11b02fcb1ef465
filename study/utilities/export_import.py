"""
Export and Import functionality for study plans.
"""
import csv
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from study.domain.Plan import Plan
from study.logic.parsing import PlanInputError, parse_plan_json

logger = logging.getLogger(__name__)


def _slug(text: str) -> str:
    return "".join(c.lower() if c.isalnum() else "_" for c in text).strip("_") or "plan"


class DataExporter:
    """Export study plans as canonical JSON or as a flat CSV of tasks."""

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    def _default_path(self, plan: Plan, suffix: str) -> Path:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        return self.data_dir / f"{_slug(plan.exam_name)}_export_{timestamp}.{suffix}"

    def export_plan(self, plan: Plan, output_path: Optional[Path] = None) -> Path:
        """Write the plan in its canonical wire format."""
        output_path = Path(output_path) if output_path else self._default_path(plan, "json")
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(plan.to_dict(), f, indent=2, ensure_ascii=False)
        logger.info(f"Exported plan '{plan.exam_name}' ({len(plan.daily_tasks)} tasks) to {output_path}")
        return output_path

    def export_tasks_csv(self, plan: Plan, output_path: Optional[Path] = None) -> Path:
        """Export every task (flat list) to CSV for spreadsheet use."""
        output_path = Path(output_path) if output_path else self._default_path(plan, "csv")
        output_path.parent.mkdir(parents=True, exist_ok=True)
        week_numbers = {w.id: w.week_number for w in plan.weekly_goals}

        with open(output_path, 'w', newline='', encoding='utf-8') as csvfile:
            fieldnames = ['id', 'name', 'date', 'completed', 'week']
            writer = csv.DictWriter(csvfile, fieldnames=fieldnames)
            writer.writeheader()
            for task in plan.daily_tasks:
                writer.writerow({
                    'id': task.id,
                    'name': task.name,
                    'date': task.date,
                    'completed': 'yes' if task.completed else 'no',
                    'week': week_numbers.get(task.weekly_goal_id, ''),
                })

        logger.info(f"Exported tasks to CSV: {output_path}")
        return output_path


class DataImporter:
    """Import study plans from uploaded plan documents."""

    def import_plan(self, input_path: Path) -> Plan:
        """
        Read a plan document from disk and normalize it.

        Raises ParseError / ValidationError (see study.logic.parsing) for bad content
        and OSError when the file cannot be read.
        """
        with open(input_path, 'r', encoding='utf-8') as f:
            content = f.read()
        plan = parse_plan_json(content)
        logger.info(f"Imported plan '{plan.exam_name}' from {input_path}")
        return plan


# CLI interface
if __name__ == "__main__":
    import argparse
    from study.infra.paths import DATA_DIR

    parser = argparse.ArgumentParser(description='Normalize a study plan document and export it')
    parser.add_argument('file', help='Plan document (JSON) to read')
    parser.add_argument('--format', choices=['json', 'csv'], default='json', help='Export format')
    parser.add_argument('--out', help='Output file path')

    args = parser.parse_args()

    try:
        plan = DataImporter().import_plan(Path(args.file))
    except PlanInputError as e:
        print(f"✗ Import failed: {e.reason}")
        raise SystemExit(1)

    exporter = DataExporter(DATA_DIR)
    out = Path(args.out) if args.out else None
    result = exporter.export_tasks_csv(plan, out) if args.format == 'csv' else exporter.export_plan(plan, out)
    print(f"✓ Exported to: {result}")
