import os

import pytest

from slugswap.scanner import ScanPolicy

RUNNING_AS_ROOT = hasattr(os, "geteuid") and os.geteuid() == 0


@pytest.fixture
def policy():
    return ScanPolicy.load_default()


@pytest.fixture
def plugin_tree(tmp_path):
    """
    Creates a small plugin checkout:
    - a.php, b.txt mention the old slug
    - node_modules/c.js mentions it too but must never be touched
    - notes.md does not mention it
    """
    root = tmp_path / "my-plugin"
    root.mkdir()
    (root / "a.php").write_text("<?php // oldslug main file\n")
    (root / "b.txt").write_text("Plugin: oldslug\nText Domain: oldslug\n")
    (root / "notes.md").write_text("nothing to see here\n")

    vendored = root / "node_modules"
    vendored.mkdir()
    (vendored / "c.js").write_text("module.exports = 'oldslug';\n")
    return root


def snapshot(root):
    """Map every file below root to its bytes."""
    return {
        p.relative_to(root): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }
