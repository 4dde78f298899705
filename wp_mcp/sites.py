"""Site configuration resolver: environment lists first, JSON file second."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

logger = logging.getLogger(__name__)

NAME_VAR = "WP_NAME"
URL_VAR = "WP_URL_OVERRIDE"
USER_VAR = "WP_USER_OVERRIDE"
PASS_VAR = "WP_PASS_OVERRIDE"
SITES_PATH_VAR = "WP_SITES_PATH"

DELIMITER = ";"
ESCAPED_DELIMITER = "\\;"
# Private-use code point, never produced by the escape syntax.
_PLACEHOLDER = "\uE000"


class ConfigError(ValueError):
    """Raised when the site configuration cannot be loaded."""


@dataclass(frozen=True, slots=True)
class SiteConfig:
    """One configured WordPress site."""

    alias: str
    url: str
    username: str
    secret: str


@dataclass(frozen=True, slots=True)
class SiteResolution:
    """Resolver output: the site mapping plus any skipped-entry diagnostics."""

    sites: dict[str, SiteConfig]
    source: str
    warnings: tuple[str, ...] = field(default_factory=tuple)


def parse_delimited_list(raw: str | None) -> list[str]:
    r"""
    Split a semicolon-delimited value list.

    ``\;`` stands for a literal semicolon. Pieces are trimmed and empty
    pieces are discarded.
    """
    if not raw:
        return []
    protected = raw.replace(ESCAPED_DELIMITER, _PLACEHOLDER)
    values = []
    for piece in protected.split(DELIMITER):
        cleaned = piece.replace(_PLACEHOLDER, DELIMITER).strip()
        if cleaned:
            values.append(cleaned)
    return values


def format_delimited_list(values: list[str]) -> str:
    """Inverse of :func:`parse_delimited_list`."""
    return DELIMITER.join(value.replace(DELIMITER, ESCAPED_DELIMITER) for value in values)


def _build_site(alias: str, url: str, username: str, secret: str) -> SiteConfig:
    return SiteConfig(
        alias=alias.strip().lower(),
        url=url.strip().removesuffix("/"),
        username=username.strip(),
        secret=secret.strip(),
    )


def _resolve_from_environment(environ: Mapping[str, str]) -> dict[str, SiteConfig] | None:
    names = parse_delimited_list(environ.get(NAME_VAR))
    urls = parse_delimited_list(environ.get(URL_VAR))
    users = parse_delimited_list(environ.get(USER_VAR))
    passes = parse_delimited_list(environ.get(PASS_VAR))

    counts = (len(names), len(urls), len(users), len(passes))
    if sum(counts) == 0:
        return None
    if len(set(counts)) != 1:
        raise ConfigError(
            "All environment variables must have matching number of values "
            f"({NAME_VAR}={counts[0]}, {URL_VAR}={counts[1]}, "
            f"{USER_VAR}={counts[2]}, {PASS_VAR}={counts[3]})"
        )

    sites: dict[str, SiteConfig] = {}
    for name, url, user, secret in zip(names, urls, users, passes):
        site = _build_site(name, url, user, secret)
        sites[site.alias] = site
    return sites


def parse_site_entry(alias: str, entry: Any) -> SiteConfig | str:
    """Parse one file entry, returning a diagnostic string when it is unusable."""
    if not isinstance(entry, dict):
        return f"Invalid configuration for site {alias}: entry must be an object"

    missing = [
        key
        for key in ("URL", "USER", "PASS")
        if not isinstance(entry.get(key), str) or not entry[key].strip()
    ]
    if missing:
        return (
            f"Invalid configuration for site {alias}: "
            f"missing required fields ({', '.join(missing)})"
        )
    return _build_site(alias, entry["URL"], entry["USER"], entry["PASS"])


def _resolve_from_file(environ: Mapping[str, str]) -> tuple[dict[str, SiteConfig], list[str]]:
    config_path = (environ.get(SITES_PATH_VAR) or "").strip()
    if not config_path:
        raise ConfigError(f"{SITES_PATH_VAR} environment variable is required")

    try:
        raw = json.loads(Path(config_path).read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found at: {config_path}") from exc
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Failed to load config: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError("Failed to load config: top-level value must be an object")

    sites: dict[str, SiteConfig] = {}
    warnings: list[str] = []
    for alias, entry in raw.items():
        parsed = parse_site_entry(alias, entry)
        if isinstance(parsed, str):
            logger.warning(parsed, extra={"alias": alias, "path": config_path})
            warnings.append(parsed)
            continue
        sites[parsed.alias] = parsed
    return sites, warnings


def resolve_sites(environ: Mapping[str, str]) -> SiteResolution:
    """Build the alias -> SiteConfig mapping from the environment or the sites file."""
    env_sites = _resolve_from_environment(environ)
    if env_sites is not None:
        logger.debug("Loaded sites from environment", extra={"count": len(env_sites)})
        return SiteResolution(sites=env_sites, source="environment")

    file_sites, warnings = _resolve_from_file(environ)
    logger.debug(
        "Loaded sites from file",
        extra={"count": len(file_sites), "skipped": len(warnings)},
    )
    return SiteResolution(sites=file_sites, source="file", warnings=tuple(warnings))
