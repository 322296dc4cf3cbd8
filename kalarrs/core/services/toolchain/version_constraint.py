"""
Version constraints: compare reported tool versions (pure).

Tool output like ``v8.9.0`` or ``pip 23.0 from ... (python 3.11)`` is
reduced to a version and checked against a range. Ranges use the npm
spellings people put in a Node config (``8.10``, ``^8.10``, ``~8.10.1``,
``8.x``, ``>=8.10 <12``) and are translated to ``packaging`` specifiers,
so ``8.9.0`` correctly fails ``>=8.10``.
"""

from __future__ import annotations

import re

from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version

from kalarrs.core.services.toolchain.errors import InvalidConstraintError

_VERSION_RE = re.compile(r"v?(\d+(?:\.\d+){0,2})")
_PARTIAL_RE = re.compile(r"^v?(\d+)(?:\.(\d+))?(?:\.(\d+))?$")
_WILDCARD_RE = re.compile(r"^v?(\d+)(?:\.(\d+))?\.[xX*]$")


def extract_version(text: str, pattern: str | None = None) -> str | None:
    """Pull the first version number out of ``text``.

    Args:
        text: Raw command output.
        pattern: Optional regex whose first group is the version.
    """
    if not text:
        return None
    match = re.search(pattern, text) if pattern else _VERSION_RE.search(text.strip())
    return match.group(1) if match else None


def _translate(token: str) -> list[str]:
    """One npm range token as PEP 440 clauses."""
    if token.startswith("=") and not token.startswith("=="):
        token = f"={token}"
    if token[0] in "^~":
        match = _PARTIAL_RE.match(token[1:])
        if not match:
            raise InvalidConstraintError(token)
        major, minor, patch = (int(g) if g else 0 for g in match.groups())
        base = f"{major}.{minor}.{patch}"
        if token[0] == "~" or major == 0:
            return [f">={base}", f"<{major}.{minor + 1}"]
        return [f">={base}", f"<{major + 1}"]

    wildcard = _WILDCARD_RE.match(token)
    if wildcard:
        major, minor = wildcard.groups()
        return [f"=={major}.{minor}.*" if minor else f"=={major}.*"]

    if _PARTIAL_RE.match(token):
        return [f">={token.lstrip('v')}"]
    return [token.replace("=v", "=").replace(">v", ">").replace("<v", "<")]


def parse_constraint(constraint: str) -> SpecifierSet:
    """Turn a version range into a ``SpecifierSet``.

    A bare version (``"8.10"``) means "at least this version".
    Clauses may be separated by spaces or commas.

    Raises:
        InvalidConstraintError: Empty, ``||`` alternatives, or anything
            that does not parse.
    """
    text = constraint.strip()
    if "||" in text:
        raise InvalidConstraintError(constraint, "alternatives (||) are not supported")

    tokens = [t for t in re.split(r"[\s,]+", text) if t]
    if not tokens:
        raise InvalidConstraintError(constraint, "empty")

    clauses: list[str] = []
    for token in tokens:
        clauses.extend(_translate(token))
    try:
        return SpecifierSet(",".join(clauses))
    except InvalidSpecifier as e:
        raise InvalidConstraintError(constraint, str(e)) from e


def satisfies(version: str, constraint: str) -> bool:
    """Whether ``version`` satisfies ``constraint``.

    An unparseable version is unsatisfied.

    Raises:
        InvalidConstraintError: ``constraint`` itself is malformed.
    """
    spec = parse_constraint(constraint)
    try:
        return Version(version.strip().lstrip("v")) in spec
    except InvalidVersion:
        return False
