"""Unit tests for the `sources` configuration section and adapter building."""

from unittest.mock import Mock

import pytest

from atscrawler.source_extractor import SourceConfig, build_adapters, parse_sources_section
from atscrawler.source_extractor.adapters import AshbyAdapter, GreenhouseAdapter, LeverAdapter
from atscrawler.source_extractor.http import HttpClient


class TestParseSourcesSection:
    """Tests for parse_sources_section()."""

    def test_parses_entries_in_order(self):
        section = {
            "greenhouse": {"adapter": "greenhouse", "employers": ["stripe", " gitlab "]},
            "lever": {"adapter": "Lever", "enabled": False, "employers": ["plaid"]},
        }

        sources = parse_sources_section(section)

        assert sources == (
            SourceConfig(name="greenhouse", adapter="greenhouse", employers=("stripe", "gitlab")),
            SourceConfig(name="lever", adapter="lever", enabled=False, employers=("plaid",)),
        )

    def test_adapter_defaults_to_source_name(self):
        sources = parse_sources_section({"ashby": {"employers": ["ramp"]}})
        assert sources[0].adapter == "ashby"

    def test_missing_employers_means_empty_tuple(self):
        sources = parse_sources_section({"lever": {"adapter": "lever"}})
        assert sources[0].employers == ()

    @pytest.mark.parametrize("section", [None, {}])
    def test_empty_section_means_no_sources(self, section):
        assert parse_sources_section(section) == ()

    def test_unknown_adapter_rejected(self):
        with pytest.raises(ValueError, match="unknown adapter 'workday'"):
            parse_sources_section({"big_corp": {"adapter": "workday", "employers": ["x"]}})

    def test_employers_must_be_a_list(self):
        with pytest.raises(ValueError, match="must be a list"):
            parse_sources_section({"lever": {"adapter": "lever", "employers": "plaid"}})

    def test_entry_must_be_a_mapping(self):
        with pytest.raises(ValueError, match="Invalid source configuration"):
            parse_sources_section({"lever": ["plaid"]})

    def test_section_must_be_a_mapping(self):
        with pytest.raises(ValueError, match="must be a mapping"):
            parse_sources_section(["lever"])


class TestBuildAdapters:
    """Tests for build_adapters()."""

    def test_builds_enabled_sources_with_shared_http(self):
        http = Mock(spec=HttpClient)
        sources = (
            SourceConfig(name="gh", adapter="greenhouse", employers=("stripe",)),
            SourceConfig(name="lv", adapter="lever", enabled=False, employers=("plaid",)),
            SourceConfig(name="ab", adapter="ashby", employers=("ramp", "linear")),
        )

        adapters = build_adapters(sources, http=http)

        assert [type(a) for a in adapters] == [GreenhouseAdapter, AshbyAdapter]
        assert all(a.http is http for a in adapters)
        assert adapters[1].employers == ("ramp", "linear")

    def test_adapters_labelled_with_configured_source_name(self):
        sources = (
            SourceConfig(name="greenhouse_us", adapter="greenhouse", employers=("stripe",)),
            SourceConfig(name="greenhouse_eu", adapter="greenhouse", employers=("n26",)),
        )

        adapters = build_adapters(sources, http=Mock(spec=HttpClient))

        assert [a.label for a in adapters] == ["greenhouse_us", "greenhouse_eu"]
        assert {a.source_name for a in adapters} == {"Greenhouse"}

    def test_no_sources_builds_nothing(self):
        assert build_adapters((), http=Mock(spec=HttpClient)) == []

    def test_default_http_client_created(self):
        adapters = build_adapters((SourceConfig(name="lv", adapter="lever", employers=("plaid",)),))
        assert isinstance(adapters[0], LeverAdapter)
        assert isinstance(adapters[0].http, HttpClient)


# ============================================================================
# Mark all tests as unit tests
# ============================================================================

pytestmark = pytest.mark.unit
