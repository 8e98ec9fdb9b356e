"""
Tests for InfoCommand — version, paths, components
"""

from shnote import __version__
from shnote.commands.info import InfoCommand, install_path


class TestInfo:

    def test_output(self, shnote_factory):
        assert shnote_factory.create_command(InfoCommand).info() == 0
        output = shnote_factory.output()
        assert output.startswith(f"shnote {__version__} (")
        assert str(shnote_factory.shnote_dir / "config.yaml") in output
        assert "pueue   not installed" in output

    def test_installed_component(self, shnote_factory):
        bin_dir = shnote_factory.shnote_dir / "bin"
        bin_dir.mkdir(parents=True)
        (bin_dir / "pueued").write_text("")
        shnote_factory.create_command(InfoCommand).info()
        assert f"pueued  installed  {bin_dir / 'pueued'}" in shnote_factory.output()

    def test_install_path_is_package(self):
        assert (install_path() / "cli.py").is_file()
