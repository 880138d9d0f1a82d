"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use TAGPRESS_ prefix (e.g., TAGPRESS_PORT=9000).

Settings can also be loaded from a .env file in the project root.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use TAGPRESS_ prefix.

    Examples:
        TAGPRESS_ROOT_DIR=site
        TAGPRESS_INCLUDE_MAX_DEPTH=0
        TAGPRESS_BUILD_TIMEOUT=600
    """

    model_config = SettingsConfigDict(
        env_prefix="TAGPRESS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Serving configuration
    root_dir: str = Field(
        default="./root_http",
        description="Root directory holding the documents to serve or compile",
    )

    config_file: str = Field(
        default="routes.xml",
        description="XML route configuration file",
    )

    host: str = Field(
        default="0.0.0.0",
        description="Interface the server binds to",
    )

    port: int = Field(
        default=8080,
        description="Port the server listens on",
    )

    template_extension: str = Field(
        default=".html",
        description="Extension of document files (file-based routing and compile scan)",
    )

    index_document: str = Field(
        default="index",
        description="Document name served for the bare '/' path",
    )

    # Engine configuration
    include_max_depth: int = Field(
        default=64,
        description="Maximum include nesting before an inline error marker is emitted (0 disables the guard)",
    )

    # Compilation configuration
    output_name: str = Field(
        default="tagpress-compiled",
        description="Default name of the compiled executable",
    )

    build_timeout: Optional[float] = Field(
        default=None,
        description="Seconds to wait for the external build before giving up (None waits forever)",
    )

    # Watcher configuration
    watch_interval: float = Field(
        default=1.0,
        description="Seconds between filesystem polls when watching the root directory",
    )

    debug_mode: bool = Field(
        default=False,
        description="Return tracebacks for unhandled server errors",
    )

    def document_forPath(self, url_path: str) -> str:
        """
        Map a request URL path to the document served by file-based routing.

        Args:
            url_path: Path component of the request URL

        Returns:
            Template identifier (e.g., "about.html")

        Example:
            >>> settings = AppSettings()
            >>> settings.document_forPath("/")
            'index.html'
            >>> settings.document_forPath("/blog/post")
            'blog/post.html'
        """
        if url_path in ("", "/"):
            url_path = "/" + self.index_document
        return url_path.lstrip("/") + self.template_extension


# Singleton instance - import this in your code
appsettings = AppSettings()
