"""Semantic version and npm-style range models.

Versions follow semver 2.0 precedence. Ranges follow the npm grammar used by
generator packages: unions joined by ``||``, hyphen ranges, tilde and caret
ranges, X-ranges (``1.x``, ``1.2.*``, ``2``) and primitive comparators.
"""

import re
from dataclasses import dataclass, field
from functools import total_ordering
from typing import Optional, Union

from ..errors import InvalidVersionError

_VERSION_RE = re.compile(
    r"^\s*[v=]?\s*"
    r"(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?\s*$"
)

# Partial version used inside ranges: "1", "1.2", "1.x", "1.2.*", "*"
_PARTIAL_RE = re.compile(
    r"^[v=]?(\*|x|X|0|[1-9]\d*)"
    r"(?:\.(\*|x|X|0|[1-9]\d*)"
    r"(?:\.(\*|x|X|0|[1-9]\d*)"
    r"(?:-([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?)?)?$"
)

_COMPARATOR_RE = re.compile(r"^(<=|>=|<|>|=|~>|~|\^)?\s*(\S+)$")

_WILDCARDS = ("*", "x", "X")


@total_ordering
@dataclass(frozen=True)
class Version:
    """A semantic version triple with optional pre-release identifiers.

    Attributes:
        major: Major version number.
        minor: Minor version number.
        patch: Patch version number.
        prerelease: Dot-separated pre-release identifiers (empty for a release).
    """

    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Parse an exact version string such as ``3.2.0-beta.1`` or ``v2.18.2``.

        Raises:
            InvalidVersionError: If the text is not a complete semver version.
        """
        match = _VERSION_RE.match(text)
        if not match:
            raise InvalidVersionError(text)
        major, minor, patch, pre = match.groups()
        return cls(
            int(major), int(minor), int(patch), tuple(pre.split(".")) if pre else ()
        )

    @classmethod
    def try_parse(cls, text: str) -> Optional["Version"]:
        """Parse an exact version, returning None instead of raising."""
        try:
            return cls.parse(text)
        except InvalidVersionError:
            return None

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    @property
    def release(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def _sort_key(self) -> tuple:
        if not self.prerelease:
            pre_key: tuple = (1,)
        else:
            # Numeric identifiers rank below alphanumeric ones
            pre_key = (
                0,
                tuple(
                    (0, int(ident), "") if ident.isdigit() else (1, 0, ident)
                    for ident in self.prerelease
                ),
            )
        return (self.major, self.minor, self.patch, pre_key)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            return f"{base}-{'.'.join(self.prerelease)}"
        return base


@dataclass(frozen=True)
class Comparator:
    """A primitive comparison such as ``>=1.2.3``.

    Attributes:
        operator: One of ``<``, ``<=``, ``>``, ``>=``, ``=``.
        version: Version compared against.
        synthetic: True for upper bounds generated by desugaring (``<2.0.0-0``);
            those never grant pre-release eligibility.
    """

    operator: str
    version: Version
    synthetic: bool = False

    def test(self, version: Version) -> bool:
        if self.operator == "<":
            return version < self.version
        if self.operator == "<=":
            return version <= self.version
        if self.operator == ">":
            return version > self.version
        if self.operator == ">=":
            return version >= self.version
        return version == self.version

    def __str__(self) -> str:
        return f"{self.operator}{self.version}"


def _upper_bound(major: int, minor: int = 0, patch: int = 0) -> Comparator:
    return Comparator("<", Version(major, minor, patch, ("0",)), synthetic=True)


def _is_wild(part: Optional[str]) -> bool:
    return part is None or part in _WILDCARDS


def _desugar_partial(operator: str, text: str) -> list[Comparator]:
    """Expand one range token into primitive comparators."""
    match = _PARTIAL_RE.match(text)
    if not match:
        raise InvalidVersionError(text)
    major_s, minor_s, patch_s, pre = match.groups()
    prerelease = tuple(pre.split(".")) if pre else ()

    if _is_wild(major_s):
        if operator in ("<", ">"):
            # "<*" and ">*" match nothing
            return [Comparator("<", Version(0, 0, 0, ("0",)), synthetic=True)]
        return []

    major = int(major_s)
    if _is_wild(minor_s):
        return _desugar_wild(operator, major, None)
    minor = int(minor_s)
    if _is_wild(patch_s):
        return _desugar_wild(operator, major, minor)
    patch = int(patch_s)
    version = Version(major, minor, patch, prerelease)

    if operator in ("~", "~>"):
        return [Comparator(">=", version), _upper_bound(major, minor + 1)]
    if operator == "^":
        if major > 0:
            upper = _upper_bound(major + 1)
        elif minor > 0:
            upper = _upper_bound(0, minor + 1)
        else:
            upper = _upper_bound(0, 0, patch + 1)
        return [Comparator(">=", version), upper]
    return [Comparator(operator or "=", version)]


def _desugar_wild(operator: str, major: int, minor: Optional[int]) -> list[Comparator]:
    """Expand X-ranges ("1.x", "1.2.*") under an optional operator."""
    low = Version(major, minor or 0, 0)
    if minor is None:
        high = _upper_bound(major + 1)
    else:
        high = _upper_bound(major, minor + 1)

    if operator in ("", "=", "~", "~>"):
        return [Comparator(">=", low), high]
    if operator == "^":
        if minor is None or major > 0:
            return [Comparator(">=", low), _upper_bound(major + 1)]
        return [Comparator(">=", low), _upper_bound(0, minor + 1)]
    if operator == ">=":
        return [Comparator(">=", low)]
    if operator == "<":
        return [Comparator("<", Version(low.major, low.minor, 0, ("0",)), True)]
    if operator == ">":
        return [Comparator(">=", Version(*high.version.release))]
    # "<="
    return [high]


def _tokenize(part: str) -> list[str]:
    """Split a comparator set, gluing detached operators to their versions."""
    raw = re.sub(r"(<=|>=|<|>|=|~>|~|\^)\s+", r"\1", part.strip())
    return [token for token in raw.split() if token]


@dataclass(frozen=True)
class VersionRange:
    """An npm-style semver range.

    Attributes:
        raw: Original range expression.
        comparator_sets: Union of intersections of primitive comparators. An
            empty comparator set matches every release.
    """

    raw: str
    comparator_sets: tuple[tuple[Comparator, ...], ...]

    @classmethod
    def parse(cls, text: str) -> "VersionRange":
        """Parse a range expression.

        Raises:
            InvalidVersionError: If any token is not a valid range component.
        """
        sets = []
        for part in text.split("||"):
            hyphen = re.match(r"^\s*(\S+)\s+-\s+(\S+)\s*$", part)
            if hyphen:
                sets.append(tuple(cls._desugar_hyphen(*hyphen.groups())))
                continue
            comparators: list[Comparator] = []
            for token in _tokenize(part):
                match = _COMPARATOR_RE.match(token)
                if not match:
                    raise InvalidVersionError(text)
                operator, version_text = match.groups()
                comparators.extend(_desugar_partial(operator or "", version_text))
            sets.append(tuple(comparators))
        return cls(raw=text.strip(), comparator_sets=tuple(sets))

    @staticmethod
    def _desugar_hyphen(low_text: str, high_text: str) -> list[Comparator]:
        low = _desugar_partial(">=", low_text)
        high_match = _PARTIAL_RE.match(high_text)
        if not high_match:
            raise InvalidVersionError(high_text)
        if all(part is not None and not _is_wild(part) for part in high_match.groups()[:3]):
            high = [Comparator("<=", Version.parse(high_text))]
        else:
            high = _desugar_partial("<=", high_text)
        return low + high

    def satisfies(self, version: Version) -> bool:
        """Check whether a version satisfies the range (npm semantics)."""
        return any(
            self._set_satisfies(comparators, version)
            for comparators in self.comparator_sets
        )

    @staticmethod
    def _set_satisfies(comparators: tuple[Comparator, ...], version: Version) -> bool:
        if not all(comparator.test(version) for comparator in comparators):
            return False
        if not version.is_prerelease:
            return True
        # Pre-releases only match sets naming a pre-release of the same triple
        return any(
            not comparator.synthetic
            and comparator.version.is_prerelease
            and comparator.version.release == version.release
            for comparator in comparators
        )

    def intersects(self, lower_exclusive: Version, upper_inclusive: Version) -> bool:
        """Check whether the range overlaps the interval ``(lower, upper]``.

        Pure precedence ordering is used; the pre-release eligibility rule of
        ``satisfies`` does not apply to interval overlap.
        """
        return any(
            self._set_intersects(comparators, lower_exclusive, upper_inclusive)
            for comparators in self.comparator_sets
        )

    @staticmethod
    def _set_intersects(
        comparators: tuple[Comparator, ...], lower: Version, upper: Version
    ) -> bool:
        low, low_inclusive = lower, False
        high, high_inclusive = upper, True

        for comparator in comparators:
            bound = comparator.version
            if comparator.operator in (">", ">=", "="):
                inclusive = comparator.operator != ">"
                if bound > low or (bound == low and not inclusive):
                    low, low_inclusive = bound, inclusive
            if comparator.operator in ("<", "<=", "="):
                inclusive = comparator.operator != "<"
                if bound < high or (bound == high and not inclusive):
                    high, high_inclusive = bound, inclusive

        if low < high:
            return True
        return low == high and low_inclusive and high_inclusive

    def __str__(self) -> str:
        return self.raw


VersionSpec = Union[Version, VersionRange]


def parse_spec(text: str) -> VersionSpec:
    """Parse user input into an exact Version or a VersionRange.

    Complete versions (``3.2.0-beta.1``) are exact; anything else, including
    partial versions like ``1.13``, is a range.
    """
    version = Version.try_parse(text)
    if version is not None:
        return version
    return VersionRange.parse(text)
