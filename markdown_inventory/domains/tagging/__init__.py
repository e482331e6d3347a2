from markdown_inventory.domains.tagging.extractor import extract_tags, extract_toml_tags, extract_yaml_tags
from markdown_inventory.domains.tagging.matcher import content_matches, matches

__all__ = [
    "extract_tags",
    "extract_toml_tags",
    "extract_yaml_tags",
    "content_matches",
    "matches",
]
