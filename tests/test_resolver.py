"""
Tests for Tool Resolution — interpreters, npm/npx next to node, pueue
"""

import pytest

from shnote.errors import ToolNotFound
from shnote.services.resolver import ToolResolver
from tests.factories import fake_which


def touch(path):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("")
    return path


class TestResolve:

    def test_configured_absolute_path(self, tmp_path):
        python = touch(tmp_path / "py" / "python3")
        resolver = ToolResolver(which=fake_which({}), windows=False)
        assert resolver.python(str(python)) == str(python)

    def test_missing_absolute_path_falls_back(self, tmp_path):
        resolver = ToolResolver(which=fake_which({"python3": "/usr/bin/python3"}), windows=False)
        assert resolver.python(str(tmp_path / "gone")) == "/usr/bin/python3"

    def test_configured_name_through_path(self):
        resolver = ToolResolver(which=fake_which({"python3.12": "/opt/bin/python3.12"}), windows=False)
        assert resolver.python("python3.12") == "/opt/bin/python3.12"

    def test_python_fallback_order(self):
        resolver = ToolResolver(which=fake_which({"python": "/bin/python"}), windows=False)
        assert resolver.python(None) == "/bin/python"

    def test_not_found(self):
        resolver = ToolResolver(which=fake_which({}), windows=False)
        with pytest.raises(ToolNotFound) as exc:
            resolver.node("node")
        assert exc.value.name == "node"
        assert exc.value.exit_code == 127


class TestSiblings:

    def test_npm_next_to_node(self, tmp_path):
        node = touch(tmp_path / "nvm" / "bin" / "node")
        npm = touch(tmp_path / "nvm" / "bin" / "npm")
        resolver = ToolResolver(which=fake_which({"npm": "/usr/bin/npm"}), windows=False)
        assert resolver.node_sibling("npm", str(node)) == str(npm)

    def test_npm_from_path(self):
        resolver = ToolResolver(which=fake_which({"node": "/nowhere/node", "npx": "/usr/bin/npx"}),
                                windows=False)
        assert resolver.node_sibling("npx") == "/usr/bin/npx"

    def test_windows_cmd_shim(self, tmp_path):
        node = touch(tmp_path / "nodejs" / "node.exe")
        npm = touch(tmp_path / "nodejs" / "npm.cmd")
        resolver = ToolResolver(which=fake_which({}), windows=True)
        assert resolver.node_sibling("npm", str(node)) == str(npm)

    def test_installed_pueue_first(self, tmp_path):
        pueue = touch(tmp_path / "bin" / "pueue")
        resolver = ToolResolver(which=fake_which({"pueue": "/usr/bin/pueue"}), windows=False)
        assert resolver.in_dir_or_path("pueue", tmp_path / "bin") == str(pueue)

    def test_pueue_from_path(self, tmp_path):
        resolver = ToolResolver(which=fake_which({"pueue": "/usr/bin/pueue"}), windows=False)
        assert resolver.in_dir_or_path("pueue", tmp_path / "bin") == "/usr/bin/pueue"
