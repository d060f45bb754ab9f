from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Iterable, Iterator, List, Optional

from .catalog import catalog_language
from .config import DEFAULT_CONFIG, ScanConfig
from .console import RichLogger
from .metadata import is_platform_manifest
from .models import FileKind, ModuleFile, ModuleInput

MANIFEST_NAME = "manifest.mf"
POM_NAME = "pom.xml"
PLATFORM_SOURCE_ROOT = "src"
MAVEN_SOURCE_ROOT = "src/main/java"


def relative_identity(root: Path, path: Path) -> str:
    try:
        rel = path.resolve().relative_to(root.resolve())
    except ValueError:
        return path.resolve().as_posix()
    return rel.as_posix()


def module_input_for(repo_root: Path, module_dir: Path) -> Optional[ModuleInput]:
    manifest = module_dir / MANIFEST_NAME
    if is_platform_manifest(manifest):
        return ModuleInput(
            identity=relative_identity(repo_root, module_dir),
            root=str(module_dir),
            source_root=str(module_dir / PLATFORM_SOURCE_ROOT),
            manifest=str(manifest),
        )
    if (module_dir / POM_NAME).is_file():
        return ModuleInput(
            identity=relative_identity(repo_root, module_dir),
            root=str(module_dir),
            source_root=str(module_dir / MAVEN_SOURCE_ROOT),
        )
    return None


def discover_modules(
    repo_root: Path,
    top_dirs: Iterable[str],
    logger: RichLogger,
    module_filter: Optional[str] = None,
) -> List[ModuleInput]:
    modules: dict[str, ModuleInput] = {}
    for top in top_dirs:
        top = top.strip()
        if not top:
            continue
        top_dir = (repo_root / top).resolve()
        if not top_dir.is_dir():
            logger.warn(f"Skipping missing top directory: {top_dir}")
            continue
        candidates = [top_dir] + sorted(p for p in top_dir.iterdir() if p.is_dir())
        for candidate in candidates:
            if module_filter and module_filter not in candidate.name:
                continue
            try:
                module = module_input_for(repo_root, candidate)
            except OSError as exc:
                logger.warn(f"Skipping unreadable module directory: {candidate} ({exc})")
                continue
            if module is not None:
                modules.setdefault(module.identity, module)
    return [modules[k] for k in sorted(modules)]


def classify_file(name: str, config: ScanConfig = DEFAULT_CONFIG) -> Optional[FileKind]:
    if name == config.primary_catalog_name:
        return FileKind.PRIMARY_CATALOG
    if name.endswith(config.catalog_suffix):
        if catalog_language(name, config.catalog_suffix):
            return FileKind.TRANSLATED_CATALOG
        if config.scan_secondary_catalogs:
            return FileKind.SECONDARY_CATALOG
        return None
    if Path(name).suffix in config.source_suffixes:
        return FileKind.SOURCE
    return None


def iter_module_files(
    source_root: Path,
    logger: RichLogger,
    config: ScanConfig = DEFAULT_CONFIG,
) -> Iterator[ModuleFile]:
    if not source_root.is_dir():
        logger.debug(f"No source root: {source_root}")
        return
    for p in sorted(source_root.rglob("*")):
        try:
            if p.is_dir() or p.is_symlink():
                continue
            kind = classify_file(p.name, config)
            if kind is None:
                continue
            package = PurePosixPath(p.relative_to(source_root).as_posix()).parent.as_posix()
            yield ModuleFile(package="" if package == "." else package, path=str(p), kind=kind)
        except OSError as e:
            logger.warn(f"Skipping unreadable path: {p} ({e})")


def collect_module_files(module: ModuleInput, logger: RichLogger, config: ScanConfig = DEFAULT_CONFIG) -> ModuleInput:
    module.files = list(iter_module_files(Path(module.source_root), logger, config))
    logger.debug(f"{module.identity}: {len(module.files)} files")
    return module
