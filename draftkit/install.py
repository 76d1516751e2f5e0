"""
draftkit.install - Installation into the editor's draft store.

Creates a project folder under the editor's private draft directory,
copies media into it, writes the rewritten draft document and the
descriptor files. Only locating the store and creating the folder are
fatal; every later step is best effort and reported as warnings. There
is no rollback.
"""

from __future__ import annotations

import copy
import os
import sys
import uuid
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

from draftkit.exceptions import InstallError, PartialCopyError, TargetNotFoundError
from draftkit.export.descriptors import (
    AGENCY_CONFIG_FILENAME,
    META_INFO_FILENAME,
    TEMPLATE_CONTENT,
    TEMPLATE_FILENAME,
    VIRTUAL_STORE_FILENAME,
    build_agency_config,
    build_meta_info,
    build_virtual_store,
)
from draftkit.export.draft import rewrite_material_paths, write_document
from draftkit.io import copy_file, write_json, write_text
from draftkit.logging import logger

DRAFT_INFO_FILENAME = "draft_info.json"
DRAFT_STORE_SUFFIX = Path("User Data") / "Projects" / "com.lveditor.draft"
EDITOR_APP_DIRS = ("JianyingPro", "CapCut")


def default_draft_roots() -> list[Path]:
    """Platform-specific places the editor keeps its drafts."""
    if sys.platform == "darwin":
        base = Path.home() / "Movies"
    elif sys.platform == "win32":
        local = os.environ.get("LOCALAPPDATA")
        if not local:
            return []
        base = Path(local)
    else:
        return []
    return [base / app / DRAFT_STORE_SUFFIX for app in EDITOR_APP_DIRS]


def find_draft_root(candidates: Iterable[Path] | None = None) -> Path:
    """Return the first existing draft store directory.

    Args:
        candidates: Directories to try; platform defaults if None or empty

    Raises:
        TargetNotFoundError: If none of the candidates exists
    """
    candidates = list(candidates or []) or default_draft_roots()
    for candidate in candidates:
        if candidate.is_dir():
            return candidate
    tried = ", ".join(str(c) for c in candidates) or "(no candidates for this platform)"
    raise TargetNotFoundError(f"Editor draft folder not found. Tried: {tried}")


@dataclass
class InstallResult:
    """Outcome of one installation."""

    project_dir: Path
    project_name: str
    document_path: Path | None = None
    copied: dict[str, str] = field(default_factory=dict)
    failures: list[dict[str, Any]] = field(default_factory=list)
    unmapped_paths: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def partial_copy_error(self) -> PartialCopyError | None:
        if not self.failures:
            return None
        return PartialCopyError(self.failures)

    @property
    def ok(self) -> bool:
        return not self.failures and not self.warnings


class DraftInstaller:
    """Installs draft documents into one draft store directory."""

    def __init__(self, draft_root: Path, max_workers: int = 4) -> None:
        self.draft_root = draft_root
        self.max_workers = max_workers

    def project_dir_for(self, name: str) -> Path:
        return self.draft_root / name

    def create_project_dir(self, name: str | None) -> tuple[str, Path]:
        """Create the project folder.

        An explicit name reuses an existing folder so repeated installs
        overwrite it; a generated name always gets a new folder.

        Raises:
            InstallError: If the folder cannot be created
        """
        explicit = name is not None
        project_name = name if explicit else str(uuid.uuid4())
        project_dir = self.project_dir_for(project_name)
        if explicit and (
            not project_name.strip()
            or project_name in (".", "..")
            or Path(project_name).name != project_name
            or project_dir.resolve().parent != self.draft_root.resolve()
        ):
            raise InstallError(f"Invalid project name: {project_name!r}")

        try:
            project_dir.mkdir(parents=False, exist_ok=explicit)
        except OSError as e:
            raise InstallError(f"Cannot create project folder {project_dir}: {e}") from e
        return project_name, project_dir

    def copy_media(self, media_files: list[Path], project_dir: Path) -> tuple[dict[str, str], list[dict[str, Any]]]:
        """Copy media into ``project_dir`` in parallel.

        Returns:
            (source → destination map of successful copies, failure records)
        """
        copied: dict[str, str] = {}
        failures: list[dict[str, Any]] = []
        if not media_files:
            return copied, failures

        workers = max(1, min(self.max_workers, len(media_files)))
        ex = ThreadPoolExecutor(max_workers=workers)
        futures = {ex.submit(copy_file, src, project_dir / src.name): src for src in media_files}
        try:
            for future in as_completed(futures):
                src = futures[future]
                try:
                    dst = future.result()
                except OSError as e:
                    logger.warning("Failed to copy %s: %s", src, e)
                    failures.append({"source": str(src), "error": str(e)})
                    continue
                copied[str(src)] = str(dst)
        except KeyboardInterrupt:
            for f in futures:
                f.cancel()
            ex.shutdown(wait=False, cancel_futures=True)
            raise
        ex.shutdown(wait=True)

        order = {str(p): i for i, p in enumerate(media_files)}
        copied = dict(sorted(copied.items(), key=lambda kv: order[kv[0]]))
        failures.sort(key=lambda f: order[f["source"]])
        return copied, failures

    def _best_effort(self, result: InstallResult, label: str, write) -> None:
        try:
            write()
        except OSError as e:
            message = f"Failed to write {label}: {e}"
            logger.warning(message)
            result.warnings.append(message)

    def install(
        self,
        document: dict[str, Any],
        media_files: list[Path],
        name: str | None = None,
        display_name: str = "Generated Project",
        meta_version: str = "1.0",
    ) -> InstallResult:
        """Install a draft document and its media as a new editor project.

        Args:
            document: Serialized draft document (not modified)
            media_files: Audio, image and caption files to copy
            name: Stable folder name; a fresh id is used if None
            display_name: Name stored in the meta descriptor
            meta_version: Schema version stored in the meta descriptor

        Returns:
            InstallResult describing what was written

        Raises:
            InstallError: If the project folder cannot be created
        """
        project_name, project_dir = self.create_project_dir(name)
        result = InstallResult(project_dir=project_dir, project_name=project_name)
        logger.debug("Installing draft %s into %s", project_name, project_dir)

        result.copied, result.failures = self.copy_media(media_files, project_dir)
        if result.failures:
            result.warnings.append(str(result.partial_copy_error))

        installed = copy.deepcopy(document)
        installed["name"] = installed.get("name") or project_name
        result.unmapped_paths = rewrite_material_paths(installed, result.copied)
        for path in result.unmapped_paths:
            result.warnings.append(f"Material still points at original location: {path}")

        document_path = project_dir / DRAFT_INFO_FILENAME
        self._best_effort(result, DRAFT_INFO_FILENAME, lambda: write_document(installed, document_path))
        if document_path.exists():
            result.document_path = document_path

        copied_paths = [Path(p) for p in result.copied.values()]
        self._best_effort(
            result,
            AGENCY_CONFIG_FILENAME,
            lambda: write_json(project_dir / AGENCY_CONFIG_FILENAME, build_agency_config(copied_paths), indent=None),
        )
        self._best_effort(
            result,
            VIRTUAL_STORE_FILENAME,
            lambda: write_json(project_dir / VIRTUAL_STORE_FILENAME, build_virtual_store(installed), indent=None),
        )
        self._best_effort(
            result,
            META_INFO_FILENAME,
            lambda: write_json(
                project_dir / META_INFO_FILENAME,
                build_meta_info(display_name, meta_version),
                indent=None,
            ),
        )
        self._best_effort(
            result,
            TEMPLATE_FILENAME,
            lambda: write_text(project_dir / TEMPLATE_FILENAME, TEMPLATE_CONTENT),
        )

        return result
