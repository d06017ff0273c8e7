"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use BEAMERDOWN_ prefix (e.g., BEAMERDOWN_FILTER_TIMEOUT=120).

Settings can also be loaded from a .env file or a beamerdown.yaml file in
the working directory.
"""

from typing import List, Tuple, Type

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use BEAMERDOWN_ prefix.

    Examples:
        BEAMERDOWN_CODE_MARKER=%!
        BEAMERDOWN_HIGHLIGHT_COLOR=orange!30
        BEAMERDOWN_BIB_DROP_FIELDS='["doi", "isbn"]'
    """

    model_config = SettingsConfigDict(
        env_prefix="BEAMERDOWN_",
        env_file=".env",
        env_file_encoding="utf-8",
        yaml_file="beamerdown.yaml",
        case_sensitive=False,
    )

    # Source documents
    document_extension: str = Field(
        default=".tex",
        description="Extension of document sources (anything else handed to bibclean is a .bib file)",
    )

    # Code expander
    code_marker: str = Field(
        default="%!",
        description="Line prefix introducing an embedded script directive",
    )

    code_replace_flag: str = Field(
        default="=",
        description="Flag after the marker that substitutes the script result for the line",
    )

    # List expander
    list_indent_step: int = Field(
        default=2,
        description="Columns of indentation per list nesting level",
    )

    list_close_vspace: str = Field(
        default="0.5em",
        description="Vertical space inserted after a list block closes",
    )

    poster_list_leftmargin: str = Field(
        default="1em",
        description="Left margin of the narrow poster-mode list",
    )

    poster_list_compact: bool = Field(
        default=True,
        description="Zero \\itemsep and \\parsep in poster-mode lists",
    )

    # Frame expander
    frame_indent: str = Field(
        default="  ",
        description="Prefix applied to content lines inside an open frame",
    )

    filter_timeout: float = Field(
        default=60.0,
        description="Seconds an external filter may run before the expansion aborts",
    )

    filter_default_command: str = Field(
        default="printf '\\\\includegraphics[width=\\\\linewidth]{%s}\\n' {image}",
        description="Shell command for a filter marker that names no command",
    )

    image_prefix: str = Field(
        default="image",
        description="Stem of the auto-numbered image names handed to filters",
    )

    contents_title: str = Field(
        default="Outline",
        description="Frame title of the contents builder when none is given",
    )

    image_width: str = Field(
        default="0.8\\textwidth",
        description="Default \\includegraphics width of the image builder",
    )

    # Style expander
    highlight_color: str = Field(
        default="yellow!30",
        description="xcolor colour of highlight boxes",
    )

    highlight_space: str = Field(
        default="2pt",
        description="Vertical space before and after a bare highlight span",
    )

    highlight_space_repeat: str = Field(
        default="0pt",
        description="Trailing space of the second and later bare spans on one line",
    )

    poster_highlight_space_before: str = Field(
        default="-2pt",
        description="Leading space of bare highlight spans in poster mode",
    )

    # Bibliography normalizer
    bib_drop_fields: List[str] = Field(
        default=[
            "howpublished",
            "shorttitle",
            "isbn",
            "abstract",
            "doi",
            "issn",
            "number",
            "note",
            "language",
            "edition",
        ],
        description="BibTeX fields always removed",
    )

    bib_misc_fields: List[str] = Field(
        default=["urldate", "url"],
        description="BibTeX fields kept only inside @misc records",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        """Environment wins over .env, which wins over beamerdown.yaml"""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    def imageName_make(self, index: int) -> str:
        """
        Generate the image name handed to the index-th filter block.

        Example:
            >>> settings = AppSettings()
            >>> settings.imageName_make(3)
            'image3'
        """
        return f"{self.image_prefix}{index}"


# Singleton instance - import this in your code
appsettings = AppSettings()
