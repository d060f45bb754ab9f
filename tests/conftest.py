from __future__ import annotations

import io
from pathlib import Path

import pytest
from rich.console import Console

from i18ncheck.console import RichLogger


def write(path: Path, *lines: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def logger() -> RichLogger:
    return RichLogger(Console(file=io.StringIO(), width=120))


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    """Two modules: a platform module with manifest and layer, and a maven module."""
    root = tmp_path / "repo"

    mod_a = root / "modA"
    write(
        mod_a / "manifest.mf",
        "Manifest-Version: 1.0",
        "OpenIDE-Module: org.foo",
        "OpenIDE-Module-Localizing-Bundle: org/foo/Bundle.properties",
        "OpenIDE-Module-Layer: org/foo/layer.xml",
    )
    pkg_a = mod_a / "src" / "org" / "foo"
    write(
        pkg_a / "Bundle.properties",
        "OpenIDE-Module-Name=Foo",
        "Menu_Action=Action",
        "Key_correct=Correct",
        "Key_unused=Unused",
    )
    write(
        pkg_a / "Hello.java",
        "package org.foo;",
        "",
        "import org.openide.util.NbBundle;",
        "",
        "public class Hello {",
        '    private final String title = NbBundle.getMessage(Hello.class, "Key_correct");',
        '    private final String missing = NbBundle.getMessage(Hello.class, "Key_missing");',
        '    private final String plain = "Plain text";',
        '    private final String id = "internal.id"; // NOI18N',
        "}",
    )
    write(
        pkg_a / "layer.xml",
        '<?xml version="1.0" encoding="UTF-8"?>',
        "<filesystem>",
        '  <folder name="Menu">',
        '    <file name="Action.instance">',
        '      <attr name="displayName" bundlevalue="org.foo.Bundle#Menu_Action"/>',
        '      <attr name="tooltip" bundlevalue="org.foo.Bundle#Missing_Layer_Key"/>',
        '      <attr name="shared" bundlevalue="org.bar.Bundle#Elsewhere"/>',
        "    </file>",
        "  </folder>",
        "</filesystem>",
    )

    mod_b = root / "modB"
    write(mod_b / "pom.xml", "<project/>")
    pkg_b = mod_b / "src" / "main" / "java" / "com" / "x"
    write(pkg_b / "Bundle.properties", "Greeting=Hello")
    write(pkg_b / "Bundle_ja.properties", "Greeting=\\u3053\\u3093")
    write(
        pkg_b / "Main.java",
        "package com.x;",
        "class Main {",
        '    String g = NbBundle.getMessage(Main.class, "Greeting");',
        "}",
    )

    write(root / "notes" / "README.txt", "not a module")
    return root.resolve()
