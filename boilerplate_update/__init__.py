"""Boilerplate updater for generated Ember projects.

Moves a project from one generator version's boilerplate to another by
applying the boilerplate delta onto the developer's working tree with a
three-way merge, leaving conflicts inline for manual resolution.
"""

__version__ = "0.1.0"
