"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use INDENTDEDENT_ prefix (e.g., INDENTDEDENT_KEEP_WHITESPACE=true).

Settings can also be loaded from a .env file in the working directory.
The transform engine never reads these implicitly: the CLI hands them to
IndentDedentStream.from_settings(), and library callers do the same.
"""

from typing import List, Tuple

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use INDENTDEDENT_ prefix.

    Examples:
        INDENTDEDENT_INDENT_CHAR={
        INDENTDEDENT_DEDENT_CHAR=}
        INDENTDEDENT_SINGLE_LINE_ESCAPES=#;
        INDENTDEDENT_PAIRED_ESCAPES=(),[]
    """

    model_config = SettingsConfigDict(
        env_prefix="INDENTDEDENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Marker configuration
    indent_char: str = Field(
        default=">",
        description="Character emitted for each increase in indentation",
    )

    dedent_char: str = Field(
        default="<",
        description="Character emitted for each closed indentation level",
    )

    newline_char: str = Field(
        default="\n",
        description="Character ending a line; the next line's indentation is checked",
    )

    # Indentation configuration
    whitespace_chars: str = Field(
        default=" \t",
        description="Characters that make up indentation, compared literally",
    )

    keep_whitespace: bool = Field(
        default=False,
        description="Emit the original indentation after the markers instead of dropping it",
    )

    # Escape configuration
    single_line_escapes: str = Field(
        default="",
        description="Each character opens an escape running to the end of its line",
    )

    paired_escapes: str = Field(
        default="",
        description="Comma-separated open/close character pairs, e.g. '(),[]'",
    )

    @field_validator("indent_char", "dedent_char", "newline_char")
    @classmethod
    def singleChar_check(cls, value: str) -> str:
        if len(value) != 1:
            raise ValueError(f"must be a single character, got {value!r}")
        return value

    @field_validator("whitespace_chars")
    @classmethod
    def whitespace_check(cls, value: str) -> str:
        if not value:
            raise ValueError("at least one whitespace character is required")
        return value

    @field_validator("paired_escapes")
    @classmethod
    def pairedEscapes_check(cls, value: str) -> str:
        for pair in _pairs_split(value):
            if len(pair) != 2:
                raise ValueError(f"escape pair must be two characters, got {pair!r}")
        return value

    def pairedEscapes_parse(self) -> List[Tuple[str, str]]:
        """
        Split paired_escapes into (open, close) tuples.

        Returns:
            List of (open, close) character pairs

        Example:
            >>> settings = AppSettings(paired_escapes="(),[]")
            >>> settings.pairedEscapes_parse()
            [('(', ')'), ('[', ']')]
        """
        return [(pair[0], pair[1]) for pair in _pairs_split(self.paired_escapes)]


def _pairs_split(value: str) -> List[str]:
    # a pair may itself be ",x" or "x,", so only split on separators between pairs
    pairs = []
    position = 0
    while position < len(value):
        pairs.append(value[position:position + 2])
        position += 2
        if position < len(value) and value[position] == ",":
            position += 1
    return pairs


# Singleton instance - import this in your code
appsettings = AppSettings()
