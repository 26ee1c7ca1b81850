"""YAML reading and writing for the dashboard documents."""

from __future__ import annotations

import re
from typing import Any, Final

import yaml

from .errors import MalformedDocumentError

SERVICES_DOCUMENT: Final[str] = "services.yaml"
SETTINGS_DOCUMENT: Final[str] = "settings.yaml"

_DUMP_WIDTH: Final[int] = 4096

_YAML11_ONLY_TAGS: Final = frozenset(
    {
        "tag:yaml.org,2002:bool",
        "tag:yaml.org,2002:int",
        "tag:yaml.org,2002:float",
        "tag:yaml.org,2002:timestamp",
        "tag:yaml.org,2002:value",
    }
)


class CoreSchemaLoader(yaml.SafeLoader):
    """Safe loader resolving plain scalars by the YAML 1.2 core schema.

    The dashboard reads its files as YAML 1.2, where ``on``/``yes`` are strings and
    ``010`` is decimal ten. PyYAML's default YAML 1.1 resolvers would rewrite such
    values in groups we only pass through.
    """


class CoreSchemaDumper(yaml.SafeDumper):
    """Safe dumper that quotes strings a YAML 1.1 or 1.2 reader would not read as strings."""


def _add_core_resolvers(cls: type[yaml.SafeLoader] | type[yaml.SafeDumper]) -> None:
    cls.add_implicit_resolver(
        "tag:yaml.org,2002:bool",
        re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
        list("tTfF"),
    )
    cls.add_implicit_resolver(
        "tag:yaml.org,2002:int",
        re.compile(r"^(?:[-+]?[0-9]+|0o[0-7]+|0x[0-9a-fA-F]+)$"),
        list("-+0123456789"),
    )
    cls.add_implicit_resolver(
        "tag:yaml.org,2002:float",
        re.compile(
            r"^(?:[-+]?(?:\.[0-9]+|[0-9]+(?:\.[0-9]*)?)(?:[eE][-+]?[0-9]+)?"
            r"|[-+]?\.(?:inf|Inf|INF)|\.(?:nan|NaN|NAN))$"
        ),
        list("-+0123456789."),
    )


CoreSchemaLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in _YAML11_ONLY_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
CoreSchemaDumper.yaml_implicit_resolvers = {
    first: list(resolvers)
    for first, resolvers in yaml.SafeDumper.yaml_implicit_resolvers.items()
}
_add_core_resolvers(CoreSchemaLoader)
_add_core_resolvers(CoreSchemaDumper)


def _construct_core_int(loader: CoreSchemaLoader, node: yaml.ScalarNode) -> int:
    value = str(loader.construct_scalar(node))
    if value.startswith("0o"):
        return int(value[2:], 8)
    if value.startswith("0x"):
        return int(value[2:], 16)
    return int(value, 10)


CoreSchemaLoader.add_constructor("tag:yaml.org,2002:int", _construct_core_int)


def load_yaml(text: str, *, document: str) -> Any:
    try:
        return yaml.load(text, Loader=CoreSchemaLoader) if text.strip() else None  # noqa: S506
    except yaml.YAMLError as exc:
        raise MalformedDocumentError(f"invalid YAML ({exc})", document=document) from exc


def dump_yaml(data: object) -> str:
    """Serialize in insertion order and block style so unchanged data dumps identically."""

    return yaml.dump(
        data,
        Dumper=CoreSchemaDumper,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        width=_DUMP_WIDTH,
    )


def parse_services_document(text: str) -> list[dict[Any, Any]]:
    """Parse ``services.yaml`` into its sequence of group blocks.

    Only the block level is validated; the entries of each group are left as
    loaded so groups owned by someone else round-trip untouched.
    """

    data = load_yaml(text, document=SERVICES_DOCUMENT)
    if data is None:
        return []
    if not isinstance(data, list):
        raise MalformedDocumentError(
            f"expected a sequence of groups, got {type(data).__name__}",
            document=SERVICES_DOCUMENT,
        )
    for index, block in enumerate(data):
        if not isinstance(block, dict):
            raise MalformedDocumentError(
                f"group block #{index} is a {type(block).__name__}, expected a mapping",
                document=SERVICES_DOCUMENT,
            )
        for group_name, entries in block.items():
            if entries is not None and not isinstance(entries, list):
                raise MalformedDocumentError(
                    f"group {group_name!r} must hold a sequence of services",
                    document=SERVICES_DOCUMENT,
                )
    return data


def parse_settings_document(text: str) -> dict[Any, Any] | None:
    data = load_yaml(text, document=SETTINGS_DOCUMENT)
    if data is None:
        return None
    if not isinstance(data, dict):
        raise MalformedDocumentError(
            f"expected a mapping, got {type(data).__name__}",
            document=SETTINGS_DOCUMENT,
        )
    return data
