"""
Selection state for service configuration.

A selection maps option-group names to either a single option name or a list
of option names (multi-select groups). Bare toggle groups hold their own name
while switched on and are absent otherwise.

Every function here returns a new mapping; inputs are never mutated.
"""

from collections.abc import Mapping

SelectionValue = str | list[str]
SelectionState = dict[str, SelectionValue]


def copy_selection(selection: Mapping | None) -> SelectionState:
    if not selection:
        return {}
    return {
        key: list(value) if isinstance(value, list) else value
        for key, value in selection.items()
    }


def apply_selection(
    selection: Mapping | None,
    group_name: str,
    value: str,
    multiple: bool,
) -> SelectionState:
    """
    Record a user's choice for an option group.

    Args:
        selection: Current selection state
        group_name: Option group being changed
        value: Option name chosen
        multiple: Whether the group is multi-select

    Returns:
        New selection. Single-select groups have their value replaced.
        Multi-select groups have value toggled in their list (appended if
        absent, removed if present).
    """
    updated = copy_selection(selection)

    if not multiple:
        updated[group_name] = value
        return updated

    current = updated.get(group_name)
    if isinstance(current, list):
        # Multi-select state never holds duplicates
        names = list(dict.fromkeys(current))
    elif isinstance(current, str) and current:
        names = [current]
    else:
        names = []

    if value in names:
        names.remove(value)
    else:
        names.append(value)

    updated[group_name] = names
    return updated


def toggle_group(selection: Mapping | None, group_name: str, enabled: bool) -> SelectionState:
    """
    Switch a bare toggle group on or off.

    Switching off deletes the key entirely.
    """
    updated = copy_selection(selection)
    if enabled:
        updated[group_name] = group_name
    else:
        updated.pop(group_name, None)
    return updated


def clear_group(selection: Mapping | None, group_name: str) -> SelectionState:
    """Drop whatever is selected for a group."""
    updated = copy_selection(selection)
    updated.pop(group_name, None)
    return updated


def selected_names(value) -> list[str]:
    """Option names held by one selection value, in order."""
    if isinstance(value, list):
        return [name for name in value if name]
    if isinstance(value, str) and value:
        return [value]
    return []


def flatten_selection(selection: Mapping | None) -> list[str]:
    """
    Flatten a selection into a list of chosen option names.

    Groups are visited in mapping order, names within a group in list order.
    Empty values are skipped.
    """
    if not selection:
        return []

    flat = []
    for value in selection.values():
        flat.extend(selected_names(value))
    return flat
