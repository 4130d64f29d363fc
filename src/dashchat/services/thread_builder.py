"""
Thread Builder

Turns a comment's flat reply list into a forest of ReplyNodes.
"""
from typing import Dict, List, Optional, Sequence
from uuid import UUID

from ..models.comment import Reply, ReplyNode


def build_reply_tree(replies: Sequence[Reply]) -> List[ReplyNode]:
    """
    Nest replies under their parents.

    Siblings keep insertion order. A reply whose parent is missing, is
    itself, or sits on a parent cycle becomes a root, so every reply
    appears exactly once. Pure: the input is not modified.
    """
    nodes = [ReplyNode(reply=reply) for reply in replies]

    index_by_id: Dict[UUID, int] = {}
    for i, reply in enumerate(replies):
        index_by_id.setdefault(reply.id, i)

    parents: List[Optional[int]] = []
    for i, reply in enumerate(replies):
        parent = index_by_id.get(reply.parent_reply_id) if reply.parent_reply_id else None
        parents.append(None if parent == i else parent)

    _break_cycles(parents)

    roots: List[ReplyNode] = []
    for i, node in enumerate(nodes):
        parent = parents[i]
        if parent is None:
            roots.append(node)
        else:
            nodes[parent].children.append(node)
    return roots


def _break_cycles(parents: List[Optional[int]]) -> None:
    """Detach the earliest reply of every parent cycle (in place)"""
    # 0 = unvisited, 1 = on current path, 2 = done
    state = [0] * len(parents)
    for start in range(len(parents)):
        path = []
        current = start
        while current is not None and state[current] == 0:
            state[current] = 1
            path.append(current)
            current = parents[current]
        if current is not None and state[current] == 1:
            cycle = path[path.index(current):]
            parents[min(cycle)] = None
        for i in path:
            state[i] = 2
