# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Org tree logic — pure computation, no side effects.

Turns the flat member collection (each member optionally pointing at its
manager through ``reports_to``) into a rooted tree, and validates reparent
moves so the stored structure never gains a reporting cycle.

The tree is an index over the input snapshot: node ids plus an
``id -> children ids`` map. The member store stays the source of truth and
a tree is rebuilt on every call.
"""

from typing import Any, Iterator, Optional, Sequence

from orgchart.models.domain import Member, RejectionReason, ReparentCheck

TOP_LEVEL_ROLE = "owner"


class OrgTree:
    """Read-only rooted view over a member snapshot."""

    def __init__(
        self,
        root_id: str,
        members: dict[str, Member],
        children: dict[str, list[str]],
        unassigned: list[Member],
    ) -> None:
        self._root_id = root_id
        self._members = members
        self._children = children
        self._unassigned = unassigned

    @property
    def root(self) -> Member:
        return self._members[self._root_id]

    @property
    def unassigned(self) -> list[Member]:
        """Members that cannot be reached from the root, in input order."""
        return list(self._unassigned)

    def children_of(self, member_id: str) -> list[Member]:
        return [self._members[cid] for cid in self._children.get(member_id, [])]

    def get(self, member_id: str) -> Optional[Member]:
        return self._members.get(member_id)

    def __contains__(self, member_id: object) -> bool:
        return member_id in self._members

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[Member]:
        """Pre-order walk from the root, children in input order."""
        stack = [self._root_id]
        while stack:
            current = stack.pop()
            yield self._members[current]
            stack.extend(reversed(self._children.get(current, [])))

    def depth(self) -> int:
        """Number of levels in the tree (a lone root has depth 1)."""
        deepest = 0
        stack = [(self._root_id, 1)]
        while stack:
            current, level = stack.pop()
            deepest = max(deepest, level)
            stack.extend((cid, level + 1) for cid in self._children.get(current, []))
        return deepest

    def to_dict(self) -> dict[str, Any]:
        """Nested view: member fields plus a ``direct_reports`` list per node."""
        nodes: dict[str, dict[str, Any]] = {
            mid: {**member.model_dump(), "direct_reports": []}
            for mid, member in self._members.items()
        }
        for mid, child_ids in self._children.items():
            nodes[mid]["direct_reports"] = [nodes[cid] for cid in child_ids]
        return nodes[self._root_id]


def _parent_id(member: Member, index: dict[str, Member]) -> Optional[str]:
    """The member's manager id, or None when it does not resolve."""
    if member.reports_to is not None and member.reports_to in index:
        return member.reports_to
    return None


def find_cycle_members(index: dict[str, Member]) -> set[str]:
    """Ids of members sitting on a reporting cycle (self-reference included)."""
    on_path, done = 1, 2
    state: dict[str, int] = {}
    on_cycle: set[str] = set()

    for start in index:
        if start in state:
            continue
        path: list[str] = []
        position: dict[str, int] = {}
        current = start
        while current is not None and current not in state:
            state[current] = on_path
            position[current] = len(path)
            path.append(current)
            current = _parent_id(index[current], index)
        if current is not None and state[current] == on_path:
            on_cycle.update(path[position[current]:])
        for member_id in path:
            state[member_id] = done

    return on_cycle


def _index_members(members: Sequence[Member]) -> dict[str, Member]:
    # First record wins on duplicate ids.
    index: dict[str, Member] = {}
    for member in members:
        index.setdefault(member.id, member)
    return index


def _select_root(
    ordered: list[Member],
    index: dict[str, Member],
    top_level_role: str,
) -> Member:
    candidates = [m for m in ordered if _parent_id(m, index) is None]
    pool = candidates or ordered
    for member in pool:
        if member.role == top_level_role:
            return member
    return pool[0]


def build_tree(
    members: Sequence[Member],
    top_level_role: str = TOP_LEVEL_ROLE,
) -> Optional[OrgTree]:
    """
    Build the org tree from a flat member sequence.

    Root: a member without a resolvable manager, preferring ``top_level_role``
    and then input order. When every member has a resolvable manager (the
    data only contains cycles) the first ``top_level_role`` member, else the
    first member, becomes the root.

    Members on a reporting cycle are never attached as children, so the
    result is always a tree. Anything unreachable from the root is returned
    in ``unassigned``. Returns None for empty input; never raises.
    """
    if not members:
        return None

    index = _index_members(members)
    ordered = list(index.values())
    root = _select_root(ordered, index, top_level_role)
    on_cycle = find_cycle_members(index)

    children: dict[str, list[str]] = {mid: [] for mid in index}
    for member in ordered:
        if member.id == root.id or member.id in on_cycle:
            continue
        parent = _parent_id(member, index)
        if parent is not None:
            children[parent].append(member.id)

    reachable: set[str] = {root.id}
    stack = [root.id]
    while stack:
        current = stack.pop()
        for child_id in children[current]:
            if child_id not in reachable:
                reachable.add(child_id)
                stack.append(child_id)

    return OrgTree(
        root_id=root.id,
        members={m.id: m for m in ordered if m.id in reachable},
        children={mid: children[mid] for mid in index if mid in reachable},
        unassigned=[m for m in ordered if m.id not in reachable],
    )


def validate_reparent(
    member_id: str,
    new_parent_id: Optional[str],
    members: Sequence[Member],
) -> ReparentCheck:
    """
    Check whether ``member_id`` may report to ``new_parent_id``.

    ``members`` is the state before the move. ``new_parent_id=None`` moves
    the member to the top level. The ancestor walk from the proposed parent
    is bounded by the member count, so already-cyclic data still terminates.
    """
    def reject(reason: RejectionReason, message: str) -> ReparentCheck:
        return ReparentCheck(
            allowed=False,
            member_id=member_id,
            new_reports_to=new_parent_id,
            reason=reason,
            message=message,
        )

    if new_parent_id is not None and new_parent_id == member_id:
        return reject(
            RejectionReason.SELF_PARENT,
            f"Member '{member_id}' can't report to themselves",
        )

    index = _index_members(members)
    if member_id not in index:
        return reject(RejectionReason.UNKNOWN_MEMBER, f"Unknown member '{member_id}'")

    if new_parent_id is not None:
        if new_parent_id not in index:
            return reject(
                RejectionReason.UNKNOWN_MEMBER, f"Unknown member '{new_parent_id}'"
            )
        current = new_parent_id
        for _ in range(len(index)):
            if current == member_id:
                return reject(
                    RejectionReason.CYCLE_DETECTED,
                    "Invalid move: that would create a reporting cycle",
                )
            parent = _parent_id(index[current], index)
            if parent is None:
                break
            current = parent

    return ReparentCheck(
        allowed=True, member_id=member_id, new_reports_to=new_parent_id
    )
