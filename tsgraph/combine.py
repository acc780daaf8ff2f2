"""Combine partial mapping results into one fragment.

Node and edge lists are concatenated in order.  Module data is folded
key by key against a defaults witness using the rules in ``_RULES``:

==========  ===========================================================
kind        rule
==========  ===========================================================
list        concatenate
dict        merge recursively against the nested defaults
bool        later value wins unless it equals the default
number      later value wins unless it is zero
string      first value that differs from the default wins
other       keep the current value unless it still equals the default
==========  ===========================================================

``None`` in a later result never overwrites anything.
"""

from __future__ import annotations

import copy
from numbers import Number
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from .models import Edge, MappingResult, Node
from .payloads import module_defaults

Predicate = Callable[[Any, Any], bool]
Rule = Callable[[Any, Any, Any], Any]


def _both(kind: type) -> Predicate:
    return lambda current, incoming: isinstance(current, kind) and isinstance(incoming, kind)


def _is_bool(current: Any, incoming: Any) -> bool:
    return isinstance(current, bool) and isinstance(incoming, bool)


def _is_number(current: Any, incoming: Any) -> bool:
    return (
        isinstance(current, Number) and isinstance(incoming, Number)
        and not isinstance(current, bool) and not isinstance(incoming, bool)
    )


def _concat(current: List[Any], incoming: List[Any], default: Any) -> List[Any]:
    return list(current) + copy.deepcopy(list(incoming))


def _recurse(current: Dict[str, Any], incoming: Dict[str, Any], default: Any) -> Dict[str, Any]:
    return merge_data(current, incoming, default if isinstance(default, dict) else {})


def _later_unless_default(current: Any, incoming: Any, default: Any) -> Any:
    return current if incoming == default else incoming


def _later_unless_zero(current: Any, incoming: Any, default: Any) -> Any:
    return current if incoming == 0 else incoming


def _first_non_default(current: Any, incoming: Any, default: Any) -> Any:
    return current if current != default else incoming


def _keep_unless_default(current: Any, incoming: Any, default: Any) -> Any:
    return copy.deepcopy(incoming) if current == default else current


_RULES: Tuple[Tuple[Predicate, Rule], ...] = (
    (_both(list), _concat),
    (_both(dict), _recurse),
    (_is_bool, _later_unless_default),
    (_is_number, _later_unless_zero),
    (_both(str), _first_non_default),
)


def merge_value(current: Any, incoming: Any, default: Any = None) -> Any:
    if incoming is None:
        return current
    for applies, rule in _RULES:
        if applies(current, incoming):
            return rule(current, incoming, default)
    return _keep_unless_default(current, incoming, default)


def merge_data(
    target: Dict[str, Any],
    source: Dict[str, Any],
    defaults: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Return a new dict with *source* folded into *target*; neither is modified."""
    defaults = defaults or {}
    merged = dict(target)
    for key, value in source.items():
        if value is None:
            continue
        if key not in merged:
            merged[key] = copy.deepcopy(value)
        else:
            merged[key] = merge_value(merged[key], value, defaults.get(key))
    return merged


def combine_mapping_results(
    results: Iterable[MappingResult],
    defaults: Optional[Dict[str, Any]] = None,
) -> MappingResult:
    witness = module_defaults() if defaults is None else defaults
    nodes: List[Node] = []
    edges: List[Edge] = []
    data: Dict[str, Any] = copy.deepcopy(witness)
    for result in results:
        nodes.extend(result.nodes)
        edges.extend(result.edges)
        data = merge_data(data, result.data, witness)
    return MappingResult(nodes=nodes, edges=edges, data=data)
