"""Configuration management for notebook-fill."""

import tempfile
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from notebook_fill.directives import PlotOptions


def _default_temp_dir() -> Path:
    return Path(tempfile.gettempdir()) / "notebook_fill_figures"


class NotebookFillConfig(BaseSettings):
    """Runner configuration loaded from environment variables.

    Environment variables should be prefixed with NOTEBOOK_FILL_
    Example: NOTEBOOK_FILL_PLOT_FORMAT=svg

    Attributes:
        temp_dir: Reserved scratch directory figures are rendered into
        strip_directives: Remove %plot lines before the code is evaluated
        plot_format: Default image format for embedded figures
        plot_resolution: Default rendering resolution (dpi)
        plot_width: Default display width in pixels
        plot_height: Default display height in pixels
        error_template: Template used to report evaluation failures
        matplotlib_backend: Backend selected when a kernel starts
        log_level: Level used by the command-line interface
    """

    temp_dir: Path = Field(
        default_factory=_default_temp_dir,
        description="Reserved scratch directory for rendered figures",
    )
    strip_directives: bool = Field(
        default=False,
        description="Strip %plot directive lines before evaluation",
    )

    # Plot defaults, kept as strings until a figure is embedded
    plot_format: str = Field(default="png", description="Default image format")
    plot_resolution: str = Field(default="150", description="Default resolution (dpi)")
    plot_width: str = Field(default="640", description="Default width in pixels")
    plot_height: str = Field(default="480", description="Default height in pixels")

    error_template: str = Field(
        default="error: {message}\n",
        description="Format of the text reported for a failed evaluation",
    )
    matplotlib_backend: str = Field(
        default="agg",
        description="matplotlib backend used while running notebooks",
    )
    log_level: str = Field(default="WARNING", description="CLI logging level")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="NOTEBOOK_FILL_",
        case_sensitive=False,
        extra="ignore",
    )

    def plot_options(self) -> PlotOptions:
        """Build the default PlotOptions for a cell run."""
        return PlotOptions(
            format=self.plot_format,
            resolution=self.plot_resolution,
            width=self.plot_width,
            height=self.plot_height,
        )


# Global config instance (lazy-loaded)
_config: NotebookFillConfig | None = None


def get_config() -> NotebookFillConfig:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = NotebookFillConfig()
    return _config


def reset_config() -> None:
    """Reset the global configuration (useful for testing)."""
    global _config
    _config = None
