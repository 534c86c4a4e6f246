"""Tag domain logic: extraction, validation, and journal-wide rewrites.

Tags are ``#`` followed by letters, digits, ``_`` or ``-``. Matching is
case-insensitive and exact: ``#work`` never matches inside
``#workshop`` or ``#work-items``.

Rename and delete operate on the raw journal text rather than the typed
line model so that tags in headings and prose are rewritten too.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from caliber.domain.entries import Entry, parse_line

# Not preceded by a word character (skips URL fragments like page#anchor)
# or another "#" (skips "##" headings glued to text).
TAG_PATTERN = re.compile(r"(?<![\w#])#([A-Za-z0-9_][A-Za-z0-9_-]*)")

_VALID_TAG_NAME = re.compile(r"[A-Za-z][A-Za-z0-9_-]*")
_FAVORITE_TAG = re.compile(r"(?<![\w#])#([0-9])(?![\w-])")


def extract_tags(content: str) -> list[str]:
    """All tag names in *content*, in order of appearance, without ``#``."""
    return [m.group(1) for m in TAG_PATTERN.finditer(content)]


def has_tag(content: str, tag: str) -> bool:
    """Exact, case-insensitive tag membership."""
    wanted = tag.lower()
    return any(found.lower() == wanted for found in extract_tags(content))


def collect_journal_tags(texts: Iterable[str]) -> list[str]:
    """Unique tags across *texts*, deduplicated case-insensitively, sorted.

    The first spelling seen wins.
    """
    seen: dict[str, str] = {}
    for text in texts:
        for tag in extract_tags(text):
            seen.setdefault(tag.lower(), tag)
    return sorted(seen.values(), key=str.lower)


def validate_tag_name(name: str) -> str | None:
    """Return an error message if *name* is not a usable tag, else None."""
    if not name:
        return "Tag name cannot be empty"
    if not name[0].isascii() or not name[0].isalpha():
        return f"Tag name must start with a letter: {name!r}"
    if not _VALID_TAG_NAME.fullmatch(name):
        return f"Tag name may only contain letters, digits, '_' and '-': {name!r}"
    return None


def count_tag_occurrences(text: str, tag: str) -> int:
    wanted = tag.lower()
    return sum(1 for found in extract_tags(text) if found.lower() == wanted)


def _tag_regex(tag: str, *, with_leading_space: bool) -> re.Pattern[str]:
    lead = r"[ \t]?" if with_leading_space else ""
    return re.compile(
        rf"{lead}(?<![\w#])#{re.escape(tag)}(?![A-Za-z0-9_-])",
        re.IGNORECASE,
    )


def _is_emptied_entry(line: str) -> bool:
    """True for an entry marker left with no content (``- [ ]``, ``*``)."""
    stripped = line.strip()
    if stripped in ("-", "*", "- [ ]", "- [x]"):
        return True
    parsed = parse_line(line)
    return isinstance(parsed, Entry) and not parsed.content.strip()


def _rewrite_lines(text: str, pattern: re.Pattern[str], replacement: str) -> tuple[str, int]:
    """Apply *pattern* line by line, dropping entries it empties.

    A prose line it empties stays as a blank line. Blank lines that end up
    adjacent because of a drop or an emptied line collapse into one.
    """
    out: list[str] = []
    count = 0
    collapsing = False
    for line in text.split("\n"):
        new_line, n = pattern.subn(replacement, line)
        count += n
        if n and _is_emptied_entry(new_line):
            collapsing = True
            continue
        blank = not new_line.strip()
        if blank and (collapsing or n) and out and not out[-1].strip():
            collapsing = True
            continue
        out.append(new_line)
        collapsing = bool(n) and blank
    return "\n".join(out), count


def delete_tag_occurrences(text: str, tag: str) -> tuple[str, int]:
    """Remove every ``#tag`` from *text*. Returns ``(new_text, count)``."""
    if not tag:
        return text, 0
    pattern = _tag_regex(tag, with_leading_space=True)
    new_text, count = _rewrite_lines(text, pattern, "")
    return new_text, count


def rename_tag_occurrences(text: str, old: str, new: str) -> tuple[str, int]:
    """Rename ``#old`` to ``#new`` everywhere in *text*.

    Raises:
        ValueError: If *new* is not a valid tag name. *text* is untouched.
    """
    error = validate_tag_name(new)
    if error is not None:
        raise ValueError(error)
    if not old:
        return text, 0
    pattern = _tag_regex(old, with_leading_space=False)
    return _rewrite_lines(text, pattern, f"#{new}")


def get_favorite_tag(favorites: Sequence[str], key: str) -> str | None:
    """Favorite tag for a number key: ``1``-``9`` are slots 0-8, ``0`` is slot 9."""
    if len(key) != 1 or not key.isdigit():
        return None
    index = 9 if key == "0" else int(key) - 1
    if index < len(favorites) and favorites[index]:
        return favorites[index]
    return None


def expand_favorite_tags(content: str, favorites: Sequence[str]) -> str:
    """Replace ``#1`` .. ``#9`` and ``#0`` with the configured favorite tag.

    Unconfigured slots are left as typed.
    """

    def replace(match: re.Match[str]) -> str:
        tag = get_favorite_tag(favorites, match.group(1))
        return f"#{tag}" if tag else match.group(0)

    return _FAVORITE_TAG.sub(replace, content)
