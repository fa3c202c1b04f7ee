from __future__ import annotations

from collections.abc import Iterable


def normalize_tag(tag: str) -> str:
    return tag.strip().lower()


def normalize_tags(tags: Iterable[str]) -> list[str]:
    """Normalize, drop empties and de-duplicate while keeping first-seen order."""
    seen: set[str] = set()
    result: list[str] = []
    for tag in tags:
        normalized = normalize_tag(tag)
        if normalized and normalized not in seen:
            seen.add(normalized)
            result.append(normalized)
    return result


def has_tag(tags: Iterable[str], tag: str) -> bool:
    normalized = normalize_tag(tag)
    return any(normalize_tag(existing) == normalized for existing in tags)


def add_tag_to_list(tags: list[str], tag: str) -> list[str]:
    normalized = normalize_tag(tag)
    if has_tag(tags, normalized):
        return list(tags)
    return [*tags, normalized]


def remove_tag_from_list(tags: list[str], tag: str) -> list[str]:
    normalized = normalize_tag(tag)
    return [existing for existing in tags if normalize_tag(existing) != normalized]
