"""Style cascade: defaults -> types -> classes -> ids -> inline.

Later layers overwrite identically named keys from earlier layers.  Merging
is shallow; nested records are replaced, not combined.
"""

from __future__ import annotations

from typing import Any

from maplayout.models.definition import ElementDefinition
from maplayout.models.stylesheet import StyleSheet


def resolve_style(
    definition: ElementDefinition,
    styles: StyleSheet | None,
    qualified_id: str | None = None,
) -> dict[str, Any]:
    """Return the merged property set for one element.

    Parameters
    ----------
    definition:
        The element being built.
    styles:
        Optional style sheet.  Without one only inline ``style`` applies.
    qualified_id:
        Namespaced id of an element inside a region.  An ``ids`` entry for the
        qualified id is applied after the one for the local id.
    """
    props: dict[str, Any] = {}

    if styles is not None:
        props.update(styles.defaults)
        if definition.kind:
            props.update(styles.types.get(definition.kind, {}))
        for tag in definition.classes:
            props.update(styles.classes.get(tag, {}))
        if definition.id:
            props.update(styles.ids.get(definition.id, {}))
        if qualified_id and qualified_id != definition.id:
            props.update(styles.ids.get(qualified_id, {}))

    props.update(definition.style)
    return props
