"""Tests for version profile resolution."""

import pytest

from latestupdate_profiles import (
    START_ENDPOINTS,
    VERSION_IDS,
    WINDOWS10_BUILDS,
    Windows7Config,
    Windows8Config,
    Windows10Config,
    config_for,
    resolve_profile,
)


@pytest.mark.parametrize("version_id", VERSION_IDS)
def test_every_version_has_endpoint_and_search(version_id):
    profile = resolve_profile(config_for(version_id))

    assert profile.version_id == version_id
    assert profile.start_endpoint_url == START_ENDPOINTS[version_id]
    assert profile.start_endpoint_url
    assert profile.default_search_pattern
    assert profile.article_filter_label


@pytest.mark.parametrize("build", sorted(WINDOWS10_BUILDS))
def test_windows10_build_is_the_article_filter(build):
    profile = resolve_profile(Windows10Config(build=build))

    assert profile.article_filter_label == build
    assert profile.default_search_pattern.startswith("Cumulative")
    assert profile.default_search_pattern.endswith("x64")


def test_windows10_release_in_default_search():
    assert resolve_profile(Windows10Config(build="16299")).default_search_pattern == "Cumulative.*1709.*x64"


def test_search_override_is_used_verbatim():
    profile = resolve_profile(Windows10Config(search="Cumulative.*ARM64"))

    assert profile.default_search_pattern == "Cumulative.*ARM64"


def test_architecture_replaces_trailing_token():
    assert resolve_profile(Windows7Config(architecture="32-bit")).default_search_pattern == (
        "Security Monthly Quality Rollup.*x86"
    )
    assert resolve_profile(Windows10Config(architecture="ARM64")).default_search_pattern == (
        "Cumulative.*1803.*arm64"
    )


def test_rollup_families_filter_on_monthly_rollup():
    assert resolve_profile(Windows8Config()).article_filter_label == "Monthly Rollup"
    assert resolve_profile(Windows7Config()).article_filter_label == "Monthly Rollup"


def test_unknown_build_rejected():
    with pytest.raises(ValueError):
        Windows10Config(build="99999")


def test_search_with_non_default_architecture_rejected():
    with pytest.raises(ValueError):
        Windows10Config(search="Cumulative.*x64", architecture="x86")
    with pytest.raises(ValueError):
        config_for("Windows10", search="Cumulative", architecture="arm64")


def test_invalid_search_rejected():
    with pytest.raises(ValueError):
        Windows10Config(search="Cumulative.*(")


def test_unknown_architecture_rejected():
    with pytest.raises(ValueError):
        Windows8Config(architecture="ia64")


def test_unknown_version_rejected():
    with pytest.raises(ValueError):
        config_for("Windows95")


def test_build_rejected_for_rollup_family():
    with pytest.raises(ValueError):
        config_for("Windows7", build="17134")
