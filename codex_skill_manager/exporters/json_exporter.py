"""JSON Exporter - structured export of scanned skills and groups"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from .. import __version__
from ..models import LocalSkillGroup, ScanResult, Skill


class JSONExporter:
    """Export scan results and skill groups as structured JSON"""

    def __init__(self, pretty: bool = True):
        self.pretty = pretty

    def export_scan_result(self, result: ScanResult) -> str:
        """Export full scan result to JSON"""
        data = {
            "version": __version__,
            "generated_at": datetime.now().isoformat(),
            "summary": {
                "total_skills": result.total_count,
                "by_source": result.count_by_source(),
            },
            "skills": [self._serialize_skill(s) for s in result.skills],
            "errors": result.errors,
        }

        return self._to_json(data)

    def export_groups(
        self,
        groups: List[LocalSkillGroup],
        annotate: Optional[Callable[[Skill], Dict[str, Any]]] = None,
    ) -> str:
        """Export grouped skills; `annotate` may add per-skill fields."""
        items = []
        for group in groups:
            item = {
                "id": group.id,
                "installed_platforms": sorted(p.storage_key for p in group.installed_platforms),
                "delete_ids": group.delete_ids,
                "skill": self._serialize_skill(group.skill),
            }
            if annotate:
                item.update(annotate(group.skill))
            items.append(item)

        data = {
            "version": __version__,
            "generated_at": datetime.now().isoformat(),
            "count": len(items),
            "groups": items,
        }
        return self._to_json(data)

    def export_to_file(self, result: ScanResult, output_path: Path):
        """Export to a JSON file"""
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(self.export_scan_result(result))

    def _serialize_skill(self, skill: Skill) -> Dict[str, Any]:
        """Serialize a skill to a dictionary"""
        data = {
            "id": skill.id,
            "name": skill.name,
            "display_name": skill.display_name,
            "description": skill.description,
            "source": skill.source_key,
            "folder_path": str(skill.folder_path),
            "manifest_path": str(skill.manifest_path),
            "stats": {
                "references": skill.stats.references,
                "assets": skill.stats.assets,
                "scripts": skill.stats.scripts,
                "templates": skill.stats.templates,
            },
        }

        if skill.platform is not None:
            data["platform"] = skill.platform.storage_key

        if skill.custom_path is not None:
            data["custom_path"] = str(skill.custom_path.path)

        if skill.references:
            data["references"] = [
                {"name": ref.name, "path": str(ref.path)} for ref in skill.references
            ]

        return data

    def _to_json(self, data: Dict[str, Any]) -> str:
        """Convert to JSON string"""
        if self.pretty:
            return json.dumps(data, indent=2, default=str)
        return json.dumps(data, default=str)
