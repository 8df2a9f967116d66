"""Settings for documentation generation, loaded from ``vapordoc.toml``."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import tomllib
from pydantic import BaseModel, ConfigDict, Field, field_validator

CONFIG_FILENAME = "vapordoc.toml"

ENDPOINT_MARKER = "APIRoutingEndpoint"
HANDLER_SIGNATURE = "run(context:parameters:query:body:)"
RETURN_TYPE_PREFIX = "EventLoopFuture<"
RETURN_TYPE_SUFFIX = ">"
IGNORED_RETURN_TYPES = ("String", "Int", "HTTPStatus")

DuplicateTypes = Literal["last", "first", "error"]


class _ConfigModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class InfoConfig(_ConfigModel):
    """Document ``info`` block."""

    title: str = Field(default="My API", description="API title")
    version: str = Field(default="1.0", description="API version")
    description: str = Field(
        default="My API Document", description="API description"
    )


class ServerConfig(_ConfigModel):
    url: str = Field(description="Server base URL")
    description: str | None = Field(default=None, description="Server label")


class DocsConfig(_ConfigModel):
    """Configuration for vapordoc artifact generation."""

    output_dir: str = Field(
        default=".vapordoc",
        description="Output directory for generated artifacts",
    )
    inputs: list[str] = Field(
        default_factory=lambda: ["Sources"],
        description="Directories (relative to the root) scanned for Swift sources",
    )
    include: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to include (empty = all Swift files)",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to exclude",
    )
    nested_gitignore: bool = Field(
        default=False,
        description=(
            "Enable nested .gitignore composition (default: false for root-only)"
        ),
    )
    sourcekitten: str = Field(
        default="sourcekitten",
        description="SourceKitten executable used when no structure sidecar exists",
    )
    endpoint_marker: str = Field(
        default=ENDPOINT_MARKER,
        description="Protocol whose conformers are documented as endpoints",
    )
    handler_signature: str = Field(
        default=HANDLER_SIGNATURE,
        description="Full name of the static handler method on each endpoint",
    )
    return_type_prefix: str = Field(
        default=RETURN_TYPE_PREFIX,
        description="Async wrapper prefix stripped from handler return types",
    )
    return_type_suffix: str = Field(
        default=RETURN_TYPE_SUFFIX,
        description="Async wrapper suffix stripped from handler return types",
    )
    ignored_return_types: list[str] = Field(
        default_factory=lambda: list(IGNORED_RETURN_TYPES),
        description="Return types that produce no response schema",
    )
    duplicate_types: DuplicateTypes = Field(
        default="last",
        description="Policy when two files declare the same type name",
    )
    info: InfoConfig = Field(default_factory=InfoConfig)
    servers: list[ServerConfig] = Field(default_factory=list)
    security_schemes: dict[str, dict[str, Any]] = Field(
        default_factory=dict,
        description="Security scheme definitions copied into components",
    )
    context_security: dict[str, str] = Field(
        default_factory=dict,
        description="Context type name -> security scheme name",
    )

    @field_validator("inputs")
    @classmethod
    def validate_inputs(cls, v: list[str]) -> list[str]:
        if not v:
            msg = "inputs must list at least one directory"
            raise ValueError(msg)
        return v

    def security_for_context(self, context_type: str) -> str | None:
        """Map a handler context type to its security scheme, if any."""
        return self.context_security.get(context_type)


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def resolve_output_dir(root: Path, output_dir: str) -> Path:
    """Resolve a config-provided output_dir safely within the repo root.

    The config output_dir must be a non-empty relative path that remains
    within the repository root after resolution. Absolute paths and paths
    that escape the root are rejected.
    """
    if not output_dir:
        msg = "output_dir must be a non-empty relative path"
        raise ConfigError(msg)

    if output_dir.startswith("~"):
        msg = "output_dir must be a relative path within the repo root"
        raise ConfigError(msg)

    output_path = Path(output_dir)
    if output_path.is_absolute():
        msg = "output_dir must be a relative path within the repo root"
        raise ConfigError(msg)

    try:
        resolved_root = root.resolve()
        resolved_output = (resolved_root / output_path).resolve()
    except OSError as exc:
        msg = f"Failed to resolve output_dir '{output_dir}': {exc}"
        raise ConfigError(msg) from exc

    try:
        resolved_output.relative_to(resolved_root)
    except ValueError as exc:
        msg = f"output_dir '{output_dir}' escapes the repository root"
        raise ConfigError(msg) from exc

    return resolved_output


def resolve_input_dirs(root: Path, inputs: list[str]) -> list[Path]:
    """Resolve configured input directories relative to the root."""
    resolved: list[Path] = []
    for entry in inputs:
        path = Path(entry).expanduser()
        if not path.is_absolute():
            path = root / path
        resolved.append(path.resolve())
    return resolved


def load_config(root: Path) -> DocsConfig:
    """Load configuration from vapordoc.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return DocsConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        config = DocsConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e

    undefined = sorted(
        set(config.context_security.values()) - set(config.security_schemes)
    )
    if undefined:
        msg = (
            f"Invalid config in {config_path}: context_security refers to "
            f"undefined security schemes: {', '.join(undefined)}"
        )
        raise ConfigError(msg)

    return config
