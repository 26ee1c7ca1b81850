from __future__ import annotations

import logging

import pytest

from homepage_discovery.domain.discovery import DEFAULT_GROUP, SkipReason, extract_entity
from tests.helpers.discovery import make_workload


def test_extract_reads_all_annotations() -> None:
    workload = make_workload(
        "grafana",
        href="https://grafana.example.com",
        display_name="Grafana",
        group="Monitoring",
        description="Dashboards",
        icon="grafana.png",
        weight="10",
    )

    extraction = extract_entity(workload)

    entity = extraction.entity
    assert entity is not None
    assert extraction.skip is None
    assert extraction.workload == "default/grafana"
    assert entity.name == "Grafana"
    assert entity.href == "https://grafana.example.com"
    assert entity.group_name == "Monitoring"
    assert entity.description == "Dashboards"
    assert entity.icon == "grafana.png"
    assert entity.weight == 10


def test_extract_defaults_name_and_group() -> None:
    extraction = extract_entity(make_workload("api", href="/api"))

    assert extraction.entity is not None
    assert extraction.entity.name == "api"
    assert extraction.entity.group_name == DEFAULT_GROUP == "Discovered"
    assert extraction.entity.description is None
    assert extraction.entity.icon is None


@pytest.mark.parametrize("enabled", [None, "false", "True", "yes", ""])
def test_extract_requires_enabled_exactly_true(enabled: str | None) -> None:
    extraction = extract_entity(make_workload(enabled=enabled, href="/web"))

    assert extraction.entity is None
    assert extraction.skip is None


def test_extract_skips_enabled_workload_without_href(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO):
        extraction = extract_entity(make_workload("web", href=""))

    assert extraction.entity is None
    assert extraction.skip is SkipReason.MISSING_HREF
    assert "Skipping service default/web: no href annotation" in caplog.text


def test_extract_ignores_unparsable_weight(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        extraction = extract_entity(make_workload(href="/web", weight="heavy"))

    assert extraction.entity is not None
    assert extraction.entity.weight is None
    assert "non-integer weight" in caplog.text


def test_entity_entry_omits_empty_optional_fields() -> None:
    extraction = extract_entity(make_workload("web", href="/web", icon="web.svg"))

    assert extraction.entity is not None
    assert extraction.entity.to_entry() == {"web": {"href": "/web", "icon": "web.svg"}}
