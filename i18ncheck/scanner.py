from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn, TimeElapsedColumn

from .catalog import Catalog
from .config import DEFAULT_CONFIG, ScanConfig
from .console import RichLogger
from .discovery import collect_module_files
from .extractors import SourceModel
from .metadata import ModuleMetadata, load_layer, load_module_metadata
from .models import FileKind, FindingKind, ModuleInput
from .results import ResultStore, ScanResults
from .translation import GeneratedCatalog, TranslationTable, export_catalog_rows, render_translated_catalog

READ_ERRORS = (OSError, UnicodeDecodeError, ValueError)


class PackageScanner:
    def __init__(self, package: str, directory: str, config: ScanConfig = DEFAULT_CONFIG):
        self.package = package
        self.directory = directory
        self.config = config
        self.primary: Optional[Catalog] = None
        self.secondary: List[Catalog] = []
        self.translated: List[Catalog] = []
        self.sources: Dict[str, SourceModel] = {}

    def add_file(self, kind: FileKind, path: str) -> None:
        if kind is FileKind.PRIMARY_CATALOG:
            if self.primary is not None:
                raise ValueError(f"More than one primary catalog in package: {self.directory}")
            self.primary = Catalog(path, kind, self.config)
        elif kind is FileKind.SECONDARY_CATALOG:
            self.secondary.append(Catalog(path, kind, self.config))
        elif kind is FileKind.TRANSLATED_CATALOG:
            self.translated.append(Catalog(path, kind, self.config))
        elif kind is FileKind.SOURCE:
            self.sources[Path(path).name] = SourceModel(path, self.config)

    def _parse_catalog(self, catalog: Catalog, results: ScanResults, logger: RichLogger) -> bool:
        try:
            catalog.parse(logger)
        except READ_ERRORS as exc:
            results.add(FindingKind.UNREADABLE_FILE, catalog.path, 1, f"Cannot read resource bundle: {exc}")
            return False
        return True

    def parse_files(self, results: ScanResults, logger: RichLogger) -> None:
        if self.primary is not None and not self._parse_catalog(self.primary, results, logger):
            self.primary = None
        self.secondary = [c for c in self.secondary if self._parse_catalog(c, results, logger)]
        self.translated = [c for c in self.translated if self._parse_catalog(c, results, logger)]
        for name in sorted(self.sources):
            source = self.sources[name]
            try:
                source.parse()
            except READ_ERRORS as exc:
                results.add(FindingKind.UNREADABLE_FILE, source.path, 1, f"Cannot read source: {exc}")
                del self.sources[name]

    def verify(self) -> None:
        for name in sorted(self.sources):
            source = self.sources[name]
            source.verify(self.primary)
            for other in self.secondary:
                source.verify(other)

    def mark_used(self, key: str) -> bool:
        if self.primary is None:
            return False
        return self.primary.mark_used(key)

    def report(self, results: ScanResults) -> None:
        for name in sorted(self.sources):
            self.sources[name].report(results)
        if self.primary is not None:
            self.primary.report(results)
        for other in sorted(self.secondary, key=lambda c: c.path):
            other.report(results)
        for translated in sorted(self.translated, key=lambda c: c.path):
            translated.report(results)

    def find_translation(self, language: str) -> Optional[Catalog]:
        stem = Path(self.config.primary_catalog_name).stem
        for catalog in self.translated:
            if catalog.language == language and Path(catalog.path).name.startswith(stem + "_"):
                return catalog
        return None

    def translation_path(self, language: str) -> str:
        existing = self.find_translation(language)
        if existing is not None:
            return existing.path
        stem = Path(self.config.primary_catalog_name).stem
        return str(Path(self.directory) / f"{stem}_{language}{self.config.catalog_suffix}")

    def export_rows(self, language: str, module: str) -> List[List[str]]:
        if self.primary is None:
            return []
        return export_catalog_rows(self.primary, self.find_translation(language), module, self.package)

    def generate_translation(
        self, language: str, header: Sequence[str], translations: Dict[str, str], module: str
    ) -> GeneratedCatalog:
        lines = render_translated_catalog(header, translations, self.config.escape_non_ascii)
        return GeneratedCatalog(module=module, package=self.package, path=self.translation_path(language), lines=lines)


class ModuleScanner:
    def __init__(self, module: ModuleInput, logger: RichLogger, config: ScanConfig = DEFAULT_CONFIG):
        self.module = module
        self.identity = module.identity
        self.logger = logger
        self.config = config
        self.results = ScanResults(module.identity)
        self.packages: Dict[str, PackageScanner] = {}
        for f in module.files:
            self._package(f.package).add_file(f.kind, f.path)

    def _package(self, package: str) -> PackageScanner:
        ps = self.packages.get(package)
        if ps is None:
            directory = Path(self.module.source_root) / package if package else Path(self.module.source_root)
            ps = PackageScanner(package, str(directory), self.config)
            self.packages[package] = ps
        return ps

    def ordered_packages(self) -> List[PackageScanner]:
        return [self.packages[p] for p in sorted(self.packages)]

    def scan(self) -> ScanResults:
        for ps in self.ordered_packages():
            ps.parse_files(self.results, self.logger)
            ps.verify()
        metadata = self._load_metadata()
        if metadata is not None and metadata.is_platform_module:
            self.verify_module_catalog(metadata)
            self.verify_layer(metadata)
        # Unused keys are reported only after all usage has been marked.
        for ps in self.ordered_packages():
            ps.report(self.results)
        return self.results

    def _load_metadata(self) -> Optional[ModuleMetadata]:
        if not self.module.manifest:
            return None
        try:
            return load_module_metadata(self.module.manifest)
        except READ_ERRORS as exc:
            self.results.add(FindingKind.UNREADABLE_FILE, self.module.manifest, 1, f"Cannot read manifest: {exc}")
            return None

    def verify_module_catalog(self, metadata: ModuleMetadata) -> None:
        package = metadata.module_catalog_package
        if package is None:
            return
        ps = self.packages.get(package)
        if ps is None or ps.primary is None:
            self.results.add(
                FindingKind.MODULE_MANIFEST_BUNDLE,
                self.module.manifest or self.module.root,
                1,
                "Missing resource bundle specified in module manifest",
            )
            return
        for key in self.config.module_bundle_mandatory_keys:
            if not ps.primary.mark_used(key):
                self.results.add(
                    FindingKind.MODULE_MANIFEST_BUNDLE,
                    ps.primary.path,
                    1,
                    f"Missing {key} NetBeans module bundle",
                )
        for key in self.config.module_bundle_optional_keys:
            ps.primary.mark_used(key)

    def verify_layer(self, metadata: ModuleMetadata) -> None:
        if not metadata.layer_file:
            return
        layer_path = Path(self.module.source_root) / metadata.layer_file
        if not layer_path.is_file():
            self.results.add(
                FindingKind.MODULE_LAYER_DEFINITION,
                str(layer_path),
                1,
                f"Missing layer file specified in manifest {metadata.layer_file}",
            )
            return
        try:
            references = load_layer(layer_path, self.logger)
        except READ_ERRORS as exc:
            self.results.add(FindingKind.UNREADABLE_FILE, str(layer_path), 1, f"Cannot read layer: {exc}")
            return
        for ref in references:
            ps = self.packages.get(ref.package)
            if ps is None:
                # Layers may point at bundles of other modules.
                continue
            if not ps.mark_used(ref.key):
                self.results.add(
                    FindingKind.MODULE_LAYER_DEFINITION,
                    str(layer_path),
                    1,
                    f"Missing resource bundle key {ref.key} specified in layer file: {ref.info}",
                )

    @property
    def problems_count(self) -> int:
        return self.results.problems_count

    def export_rows(self, language: str) -> List[List[str]]:
        rows: List[List[str]] = []
        for ps in self.ordered_packages():
            rows.extend(ps.export_rows(language, self.identity))
        return rows

    def generate_translations(
        self, language: str, header: Sequence[str], table: TranslationTable
    ) -> List[GeneratedCatalog]:
        generated: List[GeneratedCatalog] = []
        for package, translations in sorted(table.for_module(self.identity).items()):
            ps = self.packages.get(package)
            if ps is None:
                self.logger.warn(f"{self.identity}: no package {package!r} for imported translations")
                continue
            if translations:
                generated.append(ps.generate_translation(language, header, translations, self.identity))
        return generated


def scan_module(module: ModuleInput, logger: RichLogger, config: ScanConfig = DEFAULT_CONFIG) -> ModuleScanner:
    if not module.files:
        collect_module_files(module, logger, config)
    scanner = ModuleScanner(module, logger, config)
    scanner.scan()
    return scanner


def _failed_results(module: ModuleInput, exc: BaseException) -> ScanResults:
    results = ScanResults(module.identity)
    results.add(FindingKind.UNREADABLE_FILE, module.root, 1, f"Module scan failed: {exc}")
    return results


def scan_modules(
    modules: Sequence[ModuleInput],
    logger: RichLogger,
    config: ScanConfig = DEFAULT_CONFIG,
    threads: int = 1,
    console: Optional[Console] = None,
    show_progress: bool = True,
) -> Tuple[ResultStore, List[ModuleScanner]]:
    store = ResultStore()
    scanners: Dict[str, ModuleScanner] = {}
    if not modules:
        return store, []

    progress = Progress(
        SpinnerColumn(),
        TextColumn("[bold]Scanning modules"),
        BarColumn(bar_width=None),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console or logger.console,
        disable=not show_progress,
    )

    with progress:
        task_id = progress.add_task("scan", total=len(modules))
        with ThreadPoolExecutor(max_workers=max(1, threads)) as executor:
            future_map = {executor.submit(scan_module, module, logger, config): module for module in modules}
            for future in as_completed(future_map):
                module = future_map[future]
                try:
                    scanner = future.result()
                except Exception as exc:
                    logger.warn(f"Failed to scan {module.identity}: {exc}")
                    store.add(_failed_results(module, exc))
                else:
                    store.add(scanner.results)
                    scanners[module.identity] = scanner
                    logger.debug(f"Scanned {module.identity}: problems={scanner.problems_count}")
                progress.advance(task_id)

    return store, [scanners[k] for k in sorted(scanners)]
