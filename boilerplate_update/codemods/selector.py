"""Selection of codemods applicable to a version span."""

from typing import Any, Optional, Sequence

from ..models.codemod import CodemodDescriptor
from ..models.version import Version


def select(
    from_version: Version,
    to_version: Version,
    registry: Sequence[CodemodDescriptor],
    project_type: Optional[str] = None,
) -> list[CodemodDescriptor]:
    """Return the codemods addressing changes made within (from, to].

    A codemod applies when its version range overlaps the half-open span:
    strictly after from_version and at or before to_version. Registry
    declaration order is kept, since later codemods may rely on earlier ones.

    Args:
        from_version: Version the project is updated from (excluded).
        to_version: Version the project is updated to (included).
        registry: Codemod descriptors in declaration order.
        project_type: When given, drop codemods targeting other project types.

    Returns:
        Applicable descriptors, in registry order.
    """
    return [
        codemod
        for codemod in registry
        if codemod.versions.intersects(from_version, to_version)
        and (project_type is None or codemod.targets(project_type))
    ]


def describe_registry(
    registry: Sequence[CodemodDescriptor],
    applicable: Optional[Sequence[CodemodDescriptor]] = None,
) -> dict[str, dict[str, Any]]:
    """Build the list-codemods catalog: every registry entry, keyed by name.

    Args:
        registry: Full codemod registry.
        applicable: Result of select() for the project, or None when the
            project's version span is unknown.

    Returns:
        Mapping of codemod name to its metadata plus an 'applicable' flag
        (None when applicability could not be computed).
    """
    applicable_names = (
        None if applicable is None else {codemod.name for codemod in applicable}
    )
    catalog = {}
    for codemod in registry:
        entry = codemod.to_dict()
        entry["applicable"] = (
            None if applicable_names is None else codemod.name in applicable_names
        )
        catalog[codemod.name] = entry
    return catalog
