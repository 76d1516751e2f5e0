"""
draftkit.export - Draft document export.

Renders a Project to the editor's draft_info.json document and builds
the descriptor files the editor needs to recognize a draft folder.
"""

from __future__ import annotations
