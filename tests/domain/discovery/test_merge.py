from __future__ import annotations

import pytest
import yaml

from homepage_discovery.domain.discovery import (
    DiscoveredEntity,
    MalformedDocumentError,
    merge_blocks,
    merge_document,
)
from homepage_discovery.domain.discovery.serialization import dump_yaml, load_yaml

FOREIGN = """\
- Foreign:
  - Router:
      href: http://192.168.1.1
      description: Home router
      widget:
        type: unifi
        fields: [uptime, wan]
- Media:
  - Plex:
      href: http://plex.local
"""


def _entity(name: str, href: str, group: str = "A", **fields: str) -> DiscoveredEntity:
    return DiscoveredEntity(name=name, href=href, group_name=group, **fields)


def test_owned_group_is_replaced() -> None:
    previous = dump_yaml([{"A": [{"x": {"href": "/x"}}]}])

    result = merge_document(previous, {"A": (_entity("y", "/y"),)}, {"A"})

    assert yaml.safe_load(result.text) == [{"A": [{"y": {"href": "/y"}}]}]
    assert result.changed


def test_merge_is_idempotent() -> None:
    groups = {"A": (_entity("a", "/a"), _entity("b", "/b"))}
    first = merge_document(FOREIGN, groups, {"A"})

    second = merge_document(first.text, groups, {"A"})

    assert first.changed
    assert second.text == first.text
    assert not second.changed


def test_unowned_groups_round_trip_in_order() -> None:
    result = merge_document(FOREIGN, {"A": (_entity("a", "/a"),)}, {"A"})

    merged = yaml.safe_load(result.text)
    assert merged[:2] == yaml.safe_load(FOREIGN)
    assert merged[2] == {"A": [{"a": {"href": "/a"}}]}


def test_unowned_group_with_same_name_as_discovered_is_kept_when_not_owned() -> None:
    previous = [{"Foreign": [{"manual": {"href": "/manual"}}]}]

    merged = merge_blocks(previous, {}, set())

    assert merged == previous
    assert merged[0] is previous[0]


def test_owned_groups_move_behind_foreign_groups() -> None:
    previous = [
        {"A": [{"old": {"href": "/old"}}]},
        {"Foreign": [{"manual": {"href": "/manual"}}]},
    ]

    merged = merge_blocks(previous, {"A": (_entity("new", "/new"),)}, {"A"})

    assert [next(iter(block)) for block in merged] == ["Foreign", "A"]


def test_vacated_owned_group_disappears() -> None:
    previous = dump_yaml([{"A": [{"x": {"href": "/x"}}]}, {"B": [{"y": {"href": "/y"}}]}])

    result = merge_document(previous, {"B": (_entity("y", "/y", group="B"),)}, {"A", "B"})

    assert yaml.safe_load(result.text) == [{"B": [{"y": {"href": "/y"}}]}]


def test_empty_group_is_omitted() -> None:
    result = merge_document("", {"A": ()}, {"A"})

    assert yaml.safe_load(result.text) == []


def test_entries_follow_group_order_and_field_schema() -> None:
    groups = {
        "A": (
            _entity("a", "/a", description="first", icon="a.png"),
            _entity("b", "/b"),
        )
    }

    result = merge_document("", groups, {"A"})

    assert yaml.safe_load(result.text) == [
        {
            "A": [
                {"a": {"description": "first", "href": "/a", "icon": "a.png"}},
                {"b": {"href": "/b"}},
            ]
        }
    ]


def test_multi_key_block_keeps_only_unowned_keys() -> None:
    previous = [{"A": [{"x": {"href": "/x"}}], "Foreign": [{"f": {"href": "/f"}}]}]

    merged = merge_blocks(previous, {}, {"A"})

    assert merged == [{"Foreign": [{"f": {"href": "/f"}}]}]


@pytest.mark.parametrize(
    "text",
    [
        "services: []\n",
        "- just a string\n",
        "- A: not-a-list\n",
        "- A: [\n",
    ],
)
def test_malformed_previous_document_raises(text: str) -> None:
    with pytest.raises(MalformedDocumentError) as exc:
        merge_document(text, {"A": (_entity("a", "/a"),)}, {"A"})

    assert exc.value.document == "services.yaml"


def test_null_group_value_is_accepted() -> None:
    result = merge_document("- Foreign:\n", {}, set())

    assert yaml.safe_load(result.text) == [{"Foreign": None}]


def test_unowned_scalars_keep_their_yaml_1_2_meaning() -> None:
    previous = """\
- Foreign:
  - Router:
      href: http://r
      description: on
      widget:
        port: 010
        enabled: yes
        mode: off
"""

    result = merge_document(previous, {"A": (_entity("a", "/a"),)}, {"A"})

    assert result.text.startswith(
        """\
- Foreign:
  - Router:
      href: http://r
      description: 'on'
      widget:
        port: 10
        enabled: 'yes'
        mode: 'off'
"""
    )
    assert load_yaml(result.text, document="services.yaml")[0] == {
        "Foreign": [
            {
                "Router": {
                    "href": "http://r",
                    "description": "on",
                    "widget": {"port": 10, "enabled": "yes", "mode": "off"},
                }
            }
        ]
    }


def test_strings_that_read_as_numbers_are_quoted() -> None:
    assert dump_yaml({"a": "1e3", "b": "0o17", "c": "010", "d": 10}) == (
        "a: '1e3'\nb: '0o17'\nc: '010'\nd: 10\n"
    )
