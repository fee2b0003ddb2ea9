"""Versioned cookbook names: ``{package}-{version}``.

Package names are ASCII letters, digits, ``.``, ``_`` and ``-``. The
package group is greedy so a package name containing hyphens keeps
them, and the version is always the trailing dotted-numeric run.
"""

from cookbookfs.errors import NameGrammarError

import re


VALID_VERSIONED_COOKBOOK_NAME = re.compile(
    r"^([.a-zA-Z0-9_-]+)-([0-9]+\.[0-9]+(?:\.[0-9]+){0,2})$"
)


def _match(name):
    if not isinstance(name, str):
        return None
    return VALID_VERSIONED_COOKBOOK_NAME.fullmatch(name)


def matches(name):
    return _match(name) is not None


def parse(name):
    """Return ``(canonical_name, version)`` or raise NameGrammarError."""
    m = _match(name)
    if m is None:
        raise NameGrammarError(name)
    return m.group(1), m.group(2)


def join(canonical_name, version):
    return f"{canonical_name}-{version}"


def canonical_cookbook_name(name):
    return parse(name)[0]
