"""
draftkit.export.descriptors - Auxiliary draft descriptor files.

The editor only lists a draft folder as a project when these files sit
next to draft_info.json:

- draft_agency_config.json: media eligible for proxy conversion
- draft_virtual_store.json: material index for the asset browser
- draft_meta_info.json: schema version and display name
- template.tmp: marker file
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable

AGENCY_CONFIG_FILENAME = "draft_agency_config.json"
VIRTUAL_STORE_FILENAME = "draft_virtual_store.json"
META_INFO_FILENAME = "draft_meta_info.json"
TEMPLATE_FILENAME = "template.tmp"
TEMPLATE_CONTENT = "{}"

VIRTUAL_STORE_BUCKETS = ("videos", "audios", "texts")

AGENCY_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg", ".wav", ".mp3"})


def _store_item(material_id: str = "", display_name: str = "") -> dict[str, Any]:
    return {
        "creation_time": 0,
        "display_name": display_name,
        "filter_type": 0,
        "id": material_id,
        "import_time": 0,
        "sort_sub_type": 0,
        "sort_type": 0,
    }


def build_agency_config(copied_media: Iterable[Path]) -> dict[str, Any]:
    """List copied audio and image files for the editor's converter.

    Captions are not convertible media and are left out.
    """
    entries = [
        {"source_path": str(path), "use_converter": True}
        for path in copied_media
        if path.suffix.lower() in AGENCY_EXTENSIONS
    ]
    return {
        # key spelling is the editor's
        "marterials": entries,
        "use_converter": False,
        "video_resolution": 720,
    }


def collect_material_ids(document: dict[str, Any]) -> list[str]:
    """Material ids of a draft document in video, audio, text order."""
    materials = document.get("materials")
    if not isinstance(materials, dict):
        return []

    ids = []
    for bucket in VIRTUAL_STORE_BUCKETS:
        for material in materials.get(bucket) or []:
            material_id = material.get("id") if isinstance(material, dict) else None
            if isinstance(material_id, str):
                ids.append(material_id)
    return ids


def build_virtual_store(document: dict[str, Any], display_name: str = "素材") -> dict[str, Any]:
    """Index every material of ``document`` for the asset browser.

    A document without materials yields the empty index shape.
    """
    ids = collect_material_ids(document)
    values = [_store_item()]
    values.extend(_store_item(material_id, display_name) for material_id in ids)
    return {
        "draft_materials": ids,
        "draft_virtual_store": [
            {"type": 0, "value": values},
            {"type": 1, "value": []},
        ],
    }


def build_meta_info(name: str, version: str = "1.0") -> dict[str, str]:
    return {"version": version, "name": name}
