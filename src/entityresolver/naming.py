"""Case and plural transforms shared by every output surface.

All functions are pure and ASCII-only. Word splitting mirrors the rules the
entity DSL has always used: lower-to-upper transitions, acronym boundaries
(``XMLHttp`` -> ``XML``, ``Http``), letter/digit boundaries and any
non-alphanumeric run all separate words.
"""

from __future__ import annotations

import re

import inflection

_WORD_RE = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|[0-9]+")


def words(value: str) -> list[str]:
    """Split an identifier into its words."""
    return _WORD_RE.findall(value or "")


def upper_first(value: str) -> str:
    return value[:1].upper() + value[1:] if value else ""


def lower_first(value: str) -> str:
    return value[:1].lower() + value[1:] if value else ""


def camel_case(value: str) -> str:
    """``order-line`` / ``OrderLine`` / ``order_line`` -> ``orderLine``."""
    parts = [w.lower() for w in words(value)]
    if not parts:
        return ""
    return parts[0] + "".join(upper_first(p) for p in parts[1:])


def upper_first_camel_case(value: str) -> str:
    return upper_first(camel_case(value))


def kebab_case(value: str) -> str:
    return "-".join(w.lower() for w in words(value))


def snake_case(value: str) -> str:
    return "_".join(w.lower() for w in words(value))


def start_case(value: str) -> str:
    """Human-readable form: ``fieldName`` -> ``Field Name``."""
    return " ".join(upper_first(w) for w in words(value))


def pluralize(value: str) -> str:
    """English plural, keeping the case of the first letter."""
    if not value:
        return value
    return inflection.pluralize(value)


def hibernate_snake_case(value: str) -> str:
    """Snake case as the persistence layer's naming strategy computes it.

    Only a capital sitting between two lower-case letters opens a new word,
    so ``GROUP`` stays ``group`` and ``address2`` stays ``address2``.
    """
    if not value:
        return ""
    value = value.replace(".", "_", 1)
    chars = [value[0]]
    for i in range(1, len(value) - 1):
        prev, char, nxt = value[i - 1], value[i], value[i + 1]
        if prev.islower() and char.isupper() and nxt.islower():
            chars.append("_")
        chars.append(char)
    if len(value) > 1:
        chars.append(value[-1])
    return "".join(chars).lower()


def table_name(value: str) -> str:
    return hibernate_snake_case(value)


def column_name(value: str) -> str:
    return hibernate_snake_case(value)


def angular_app_name(base_name: str) -> str:
    """``jhipster`` -> ``jhipsterApp``; names starting with a digit become ``App``."""
    name = camel_case(base_name) + ("" if base_name.endswith("App") else "App")
    if name[:1].isdigit():
        return "App"
    return name


def angular_x_app_name(base_name: str) -> str:
    return upper_first(angular_app_name(base_name))


def entity_folder_name(client_root_folder: str | None, entity_file_name: str) -> str:
    if client_root_folder:
        return f"{client_root_folder}/{entity_file_name}"
    return entity_file_name


def entity_parent_path_addition(client_root_folder: str | None) -> str:
    """Relative path climbing out of the client root folder (``a/b`` -> ``../..``)."""
    if not client_root_folder:
        return ""
    return re.sub(r"[\w-]+", "..", client_root_folder)
