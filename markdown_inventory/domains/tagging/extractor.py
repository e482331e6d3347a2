"""
Front matter tag extraction.

Two block styles are recognised at the very start of a file:

    ---                     +++
    tags: [ia, prompt]      tags = ["ia", "prompt"]
    ---                     +++

Each style is handled by its own pure function. A block that is unclosed
or fails to parse simply yields no tags.
"""

import re
import tomllib
from typing import Any, Callable, List

import yaml

YAML_DELIMITER = "---"
TOML_DELIMITER = "+++"

BOOL_TAG = "tag:yaml.org,2002:bool"
TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class FrontMatterLoader(yaml.SafeLoader):
    """SafeLoader with YAML 1.2 scalars: yes/no/on/off and dates stay strings."""


FrontMatterLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in (BOOL_TAG, TIMESTAMP_TAG)]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
FrontMatterLoader.add_implicit_resolver(
    BOOL_TAG,
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)


def _load_yaml(block: str) -> Any:
    return yaml.load(block, Loader=FrontMatterLoader)


def _block_between(content: str, delimiter: str) -> str | None:
    """Text between the opening delimiter and the next occurrence of it."""
    if not content.startswith(delimiter):
        return None

    start = len(delimiter)
    end = content.find(delimiter, start)
    if end == -1:
        return None

    return content[start:end]


def _tags_from_value(value: Any) -> List[str]:
    """Accept ``tags`` as one string or a list of strings."""
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [tag for tag in value if isinstance(tag, str)]
    return []


def _extract(content: str, delimiter: str, parse: Callable[[str], Any], errors: tuple) -> List[str]:
    block = _block_between(content, delimiter)
    if block is None:
        return []

    try:
        data = parse(block)
    except errors:
        return []

    if not isinstance(data, dict):
        return []

    return _tags_from_value(data.get("tags"))


def extract_yaml_tags(content: str) -> List[str]:
    """Tags declared in a ``---`` delimited YAML block."""
    return _extract(content, YAML_DELIMITER, _load_yaml, (yaml.YAMLError,))


def extract_toml_tags(content: str) -> List[str]:
    """Tags declared in a ``+++`` delimited TOML block."""
    return _extract(content, TOML_DELIMITER, tomllib.loads, (tomllib.TOMLDecodeError,))


def extract_tags(content: str) -> List[str]:
    """
    Tags from both block styles, YAML first.

    Args:
        content: Raw file text

    Returns:
        Declared tags in declaration order (possibly empty)
    """
    return extract_yaml_tags(content) + extract_toml_tags(content)
