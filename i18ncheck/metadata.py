"""Module metadata: manifest attributes and layer bundle references."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from .console import RichLogger
from .input_sources import read_bytes, read_text_lines

PLATFORM_MODULE_ATTR = "OpenIDE-Module"
LOCALIZING_BUNDLE_ATTR = "OpenIDE-Module-Localizing-Bundle"
LAYER_ATTR = "OpenIDE-Module-Layer"
BUNDLE_VALUE_ATTR = "bundlevalue"


@dataclass(frozen=True)
class ModuleMetadata:
    module_catalog_package: Optional[str]
    layer_file: Optional[str]
    is_platform_module: bool


@dataclass(frozen=True)
class LayerReference:
    package: str
    key: str
    info: str


def parse_manifest(lines: List[str]) -> Dict[str, str]:
    attrs: Dict[str, str] = {}
    last: Optional[str] = None
    for line in lines:
        if line.startswith(" ") and last is not None:
            attrs[last] += line[1:]
            continue
        if ":" not in line:
            last = None
            continue
        name, value = line.split(":", 1)
        last = name.strip()
        attrs[last] = value.strip()
    return attrs


def read_manifest(path: str | Path) -> Dict[str, str]:
    return parse_manifest(read_text_lines(path))


def is_platform_manifest(path: Path) -> bool:
    if not path.is_file():
        return False
    return PLATFORM_MODULE_ATTR in read_manifest(path)


def metadata_from_manifest(attrs: Dict[str, str]) -> ModuleMetadata:
    package = None
    bundle = attrs.get(LOCALIZING_BUNDLE_ATTR)
    if bundle:
        bundle = bundle.strip().replace("\\", "/")
        package = bundle.rsplit("/", 1)[0] if "/" in bundle else ""
    layer = attrs.get(LAYER_ATTR) or None
    return ModuleMetadata(
        module_catalog_package=package,
        layer_file=layer.strip() if layer else None,
        is_platform_module=PLATFORM_MODULE_ATTR in attrs,
    )


def load_module_metadata(manifest_path: str | Path) -> ModuleMetadata:
    return metadata_from_manifest(read_manifest(manifest_path))


def _walk(elem: ET.Element, names: List[str]) -> Iterator[tuple[ET.Element, List[str]]]:
    name = elem.get("name")
    path = names + [name] if name else names
    yield elem, path
    for child in elem:
        yield from _walk(child, path)


def parse_layer(text: str | bytes, logger: Optional[RichLogger] = None, source: str = "layer") -> List[LayerReference]:
    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        if logger is not None:
            logger.error(f"Failed to parse layer {source}: {exc}")
        return []

    refs: List[LayerReference] = []
    for elem, names in _walk(root, []):
        value = elem.get(BUNDLE_VALUE_ATTR)
        if value is None:
            continue
        if "#" not in value:
            if logger is not None:
                logger.warn(f"Skipping malformed bundlevalue in {source}: {value}")
            continue
        bundle, key = value.split("#", 1)
        bundle_path = bundle.replace(".", "/")
        package = bundle_path.rsplit("/", 1)[0] if "/" in bundle_path else ""
        info = "/" + "/".join(names + [BUNDLE_VALUE_ATTR])
        refs.append(LayerReference(package=package, key=key, info=info))
    return refs


def load_layer(path: str | Path, logger: Optional[RichLogger] = None) -> List[LayerReference]:
    return parse_layer(read_bytes(path), logger=logger, source=str(path))
