from typing import AbstractSet

from ..models import NormalizedTool

# Whitespace to clean_text and rejected by is_valid_url, so never part of a field
KEY_SEPARATOR = '\x1f'


def dedup_key(tool: NormalizedTool) -> str:
    """Canonical identity of a tool: lowercased name and URL"""
    return f"{tool.name.lower().strip()}{KEY_SEPARATOR}{tool.url.lower().strip()}"


def is_duplicate(tool: NormalizedTool, seen: AbstractSet[str]) -> bool:
    """Pure membership check; callers insert the key themselves on acceptance"""
    return dedup_key(tool) in seen
