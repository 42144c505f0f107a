"""
LatestUpdate Profiles

Maps a requested Windows version (and build, for Windows 10) to the support
content endpoint, article filter and catalog search pattern used by the pipeline
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Optional, Union


# ============================================================
# SUPPORT CONTENT ENDPOINTS
# ============================================================

SUPPORT_CONTENT_BASE = "https://support.microsoft.com/app/content/api/content/asset/en-us"

START_ENDPOINTS: Dict[str, str] = {
    "Windows10": f"{SUPPORT_CONTENT_BASE}/4000816",
    "Windows8": f"{SUPPORT_CONTENT_BASE}/4009470",
    "Windows7": f"{SUPPORT_CONTENT_BASE}/4009469",
}

VERSION_IDS = tuple(START_ENDPOINTS)


# ============================================================
# SEARCH DEFAULTS
# ============================================================

# Windows 10 build -> release id used in catalog titles
WINDOWS10_BUILDS: Dict[str, str] = {
    "17134": "1803",
    "16299": "1709",
    "15063": "1703",
    "14393": "1607",
    "10586": "1511",
    "10240": "1507",
}

DEFAULT_WINDOWS10_BUILD = "17134"

ROLLUP_FILTER_LABEL = "Monthly Rollup"
ROLLUP_SEARCH = "Security Monthly Quality Rollup.*x64"

CATALOG_ARCHITECTURES = ("x64", "x86", "arm64")

ARCHITECTURE_ALIASES: Dict[str, str] = {
    "amd64": "x64",
    "32-bit": "x86",
}


# ============================================================
# MODELS
# ============================================================

# Resolved per-invocation profile
@dataclass(frozen=True)
class VersionProfile:
    version_id: str
    start_endpoint_url: str
    article_filter_label: str
    default_search_pattern: str


def normalise_architecture(value: str) -> str:
# Maps loose architecture names onto catalog title labels

    arch = (value or "").strip().lower()
    arch = ARCHITECTURE_ALIASES.get(arch, arch)
    if arch not in CATALOG_ARCHITECTURES:
        raise ValueError(
            f"Unsupported architecture: {value!r} (expected one of {', '.join(CATALOG_ARCHITECTURES)})"
        )
    return arch


@dataclass(frozen=True)
class Windows10Config:
    build: str = DEFAULT_WINDOWS10_BUILD
    search: Optional[str] = None
    architecture: str = "x64"

    version_id = "Windows10"

    def __post_init__(self) -> None:
        if self.build not in WINDOWS10_BUILDS:
            raise ValueError(
                f"Unsupported Windows 10 build: {self.build!r} "
                f"(expected one of {', '.join(WINDOWS10_BUILDS)})"
            )
        if self.search is not None:
            if not self.search.strip():
                raise ValueError("Search pattern must not be empty.")
            try:
                re.compile(self.search)
            except re.error as exc:
                raise ValueError(f"Invalid search pattern {self.search!r}: {exc}") from exc
        object.__setattr__(self, "architecture", normalise_architecture(self.architecture))
        if self.search is not None and self.architecture != "x64":
            raise ValueError("An explicit search pattern already fixes the architecture; drop one of them.")


@dataclass(frozen=True)
class Windows8Config:
    architecture: str = "x64"

    version_id = "Windows8"

    def __post_init__(self) -> None:
        object.__setattr__(self, "architecture", normalise_architecture(self.architecture))


@dataclass(frozen=True)
class Windows7Config:
    architecture: str = "x64"

    version_id = "Windows7"

    def __post_init__(self) -> None:
        object.__setattr__(self, "architecture", normalise_architecture(self.architecture))


VersionConfig = Union[Windows10Config, Windows8Config, Windows7Config]


# ============================================================
# PROFILE RESOLUTION
# ============================================================

def with_architecture(pattern: str, architecture: str) -> str:
# Swaps the trailing x64 token of a default pattern for the requested architecture

    if architecture == "x64":
        return pattern
    return re.sub(r"x64$", architecture, pattern)


def windows10_search(build: str) -> str:
    release = WINDOWS10_BUILDS[build]
    # 1507 titles never carried the release id
    if release == "1507":
        return "Cumulative.*x64"
    return f"Cumulative.*{release}.*x64"


def resolve_profile(config: VersionConfig) -> VersionProfile:
    """
    Builds the profile for a validated version config.

    The Windows 10 update history is keyed by build number, so the build doubles
    as the article filter. Windows 8.1 and 7 both publish a single monthly rollup
    article per month.
    """

    if isinstance(config, Windows10Config):
        if config.search is not None:
            search = config.search
        else:
            search = with_architecture(windows10_search(config.build), config.architecture)
        return VersionProfile(
            version_id=config.version_id,
            start_endpoint_url=START_ENDPOINTS[config.version_id],
            article_filter_label=config.build,
            default_search_pattern=search,
        )

    if isinstance(config, (Windows8Config, Windows7Config)):
        return VersionProfile(
            version_id=config.version_id,
            start_endpoint_url=START_ENDPOINTS[config.version_id],
            article_filter_label=ROLLUP_FILTER_LABEL,
            default_search_pattern=with_architecture(ROLLUP_SEARCH, config.architecture),
        )

    raise ValueError(f"Unsupported version config: {config!r}")


def config_for(
    version_id: str,
    build: Optional[str] = None,
    search: Optional[str] = None,
    architecture: str = "x64",
) -> VersionConfig:
# Builds the tagged config from loose CLI values

    if version_id == "Windows10":
        return Windows10Config(
            build=build or DEFAULT_WINDOWS10_BUILD,
            search=search,
            architecture=architecture,
        )

    if version_id not in START_ENDPOINTS:
        raise ValueError(
            f"Unsupported version: {version_id!r} (expected one of {', '.join(VERSION_IDS)})"
        )

    if build is not None or search is not None:
        raise ValueError(f"{version_id} does not accept a build or search override.")

    if version_id == "Windows8":
        return Windows8Config(architecture=architecture)
    return Windows7Config(architecture=architecture)
