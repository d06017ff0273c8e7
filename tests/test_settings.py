"""
Settings tests

Tests defaults, environment overrides and the beamerdown.yaml source.
"""

from beamerdown.config.settings import AppSettings


class TestSettings:
    """Configuration sources"""

    def test_defaults(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        settings = AppSettings()
        assert settings.code_marker == "%!"
        assert settings.list_indent_step == 2
        assert "doi" in settings.bib_drop_fields
        assert settings.bib_misc_fields == ["urldate", "url"]

    def test_image_name(self, settings):
        assert settings.imageName_make(3) == "image3"

    def test_environment_override(self, monkeypatch, tmp_path):
        """BEAMERDOWN_ variables override defaults"""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("BEAMERDOWN_HIGHLIGHT_COLOR", "orange!40")
        monkeypatch.setenv("BEAMERDOWN_BIB_DROP_FIELDS", '["doi", "isbn"]')
        settings = AppSettings()
        assert settings.highlight_color == "orange!40"
        assert settings.bib_drop_fields == ["doi", "isbn"]

    def test_yaml_file(self, monkeypatch, tmp_path):
        """beamerdown.yaml in the working directory is read"""
        monkeypatch.chdir(tmp_path)
        (tmp_path / "beamerdown.yaml").write_text("image_prefix: fig\nfilter_timeout: 5\n")
        settings = AppSettings()
        assert settings.image_prefix == "fig"
        assert settings.filter_timeout == 5.0
        assert settings.imageName_make(1) == "fig1"

    def test_environment_wins_over_yaml(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "beamerdown.yaml").write_text("image_prefix: fig\n")
        monkeypatch.setenv("BEAMERDOWN_IMAGE_PREFIX", "plot")
        assert AppSettings().image_prefix == "plot"
