"""Dependency ordering: referenced elements are built before their dependents."""

from __future__ import annotations

import heapq
import logging
from typing import Callable

from maplayout.config import NAMESPACE_SEPARATOR
from maplayout.errors import DependencyCycleError
from maplayout.models.definition import ElementDefinition
from maplayout.references.syntax import get_dependencies

logger = logging.getLogger(__name__)


def _id_keys(identifier: str, namespace: str | None) -> list[str]:
    """Every form a reference inside ``namespace`` may use for ``identifier``.

    For ``b/h`` and ``x`` that is ``x``, ``h/x`` and ``b/h/x``.
    """
    parts = namespace.split(NAMESPACE_SEPARATOR) if namespace else []
    parts.append(identifier)
    return [NAMESPACE_SEPARATOR.join(parts[start:]) for start in range(len(parts))]


def dependency_graph(elements: list[ElementDefinition], namespace: str | None = None) -> list[set[int]]:
    """For each element, the indexes of the elements in ``elements`` it references.

    Class selectors depend on every other element carrying the class.  Ids
    are matched bare or qualified with any trailing part of ``namespace``.
    References to ids outside the list (already built elsewhere) are not
    ordering edges.
    """
    by_id: dict[str, int] = {}
    by_class: dict[str, list[int]] = {}
    for index, element in enumerate(elements):
        if element.id:
            for key in _id_keys(element.id, namespace):
                by_id.setdefault(key, index)
        for tag in element.classes:
            by_class.setdefault(tag, []).append(index)

    graph: list[set[int]] = []
    for index, element in enumerate(elements):
        deps: set[int] = set()
        for key in get_dependencies(element):
            if key.startswith("."):
                deps.update(by_class.get(key[1:], []))
            elif key in by_id:
                deps.add(by_id[key])
        deps.discard(index)
        graph.append(deps)
    return graph


def dependency_order(
    elements: list[ElementDefinition],
    strict: bool = True,
    warn: Callable[..., None] | None = None,
    namespace: str | None = None,
) -> list[int]:
    """Kahn's algorithm over element indexes; ties keep the authored order.

    Elements left over after the sort form a cycle.  In strict mode that
    raises DependencyCycleError; otherwise they are appended in authored
    order with a warning, and their references fail later at resolution.
    """
    graph = dependency_graph(elements, namespace)
    remaining = [len(deps) for deps in graph]
    dependents: list[list[int]] = [[] for _ in elements]
    for index, deps in enumerate(graph):
        for dep in deps:
            dependents[dep].append(index)

    ready = [index for index, count in enumerate(remaining) if count == 0]
    heapq.heapify(ready)
    order: list[int] = []
    while ready:
        index = heapq.heappop(ready)
        order.append(index)
        for dependent in dependents[index]:
            remaining[dependent] -= 1
            if remaining[dependent] == 0:
                heapq.heappush(ready, dependent)

    if len(order) < len(elements):
        emitted = set(order)
        leftover = [index for index in range(len(elements)) if index not in emitted]
        labels = [elements[index].label(index + 1) for index in leftover]
        if strict:
            raise DependencyCycleError(labels)
        message = f"Circular references between {', '.join(labels)}; building in authored order"
        if warn is not None:
            warn(message)
        else:
            logger.warning("%s", message)
        order.extend(leftover)

    return order
