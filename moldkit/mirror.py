"""Keep mirrored figures in sync with the figure they reflect.

A pair consists of an ``original`` figure and a ``mirror`` figure whose
``MirrorLink`` records point at each other with a shared ``pair_id``. Each
commit the synchronizer compares content signatures against the state it
recorded last time and, when something relevant changed, rebuilds the mirror
by reflecting the original across the pair's world-space axis.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Sequence, Tuple

from .geometry import Vec2, norm, reflect_point
from .logging_utils import apply_debug_logging
from .model import Figure, FigureIndex, MirrorLink, Node, figure_signature, replace_figures
from .transform import local_to_world

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PairRecord:
    """What the synchronizer saw for one pair at the end of the previous commit."""

    original_signature: str
    mirror_signature: str
    sync: bool
    axis_point_world: Vec2
    axis_dir_world: Vec2


@dataclass(frozen=True)
class MirrorSyncState:
    pairs: Dict[str, PairRecord] = field(default_factory=dict)


@dataclass(frozen=True)
class SyncResult:
    figures: List[Figure]
    state: MirrorSyncState
    updated: Tuple[str, ...] = ()


def _reflect_optional(
    figure: Figure, point: Optional[Vec2], axis_point: Vec2, axis_dir: Vec2
) -> Optional[Vec2]:
    if point is None:
        return None
    return reflect_point(local_to_world(figure, point), axis_point, axis_dir)


def reflect_figure_nodes(figure: Figure, axis_point: Vec2, axis_dir: Vec2) -> Tuple[Node, ...]:
    """Reflect every node and handle of ``figure`` across the world-space axis.

    The returned nodes are in world coordinates, i.e. in the local space of a
    figure placed at the origin without rotation.
    """

    reflected: List[Node] = []
    for node in figure.nodes:
        x, y = reflect_point(local_to_world(figure, node.point), axis_point, axis_dir)
        reflected.append(
            replace(
                node,
                x=x,
                y=y,
                in_handle=_reflect_optional(figure, node.in_handle, axis_point, axis_dir),
                out_handle=_reflect_optional(figure, node.out_handle, axis_point, axis_dir),
            )
        )
    return tuple(reflected)


def reflect_figure(original: Figure, mirror: Figure) -> Figure:
    """Return ``mirror`` rebuilt as the reflection of ``original``.

    The mirror keeps its own id, link, kind and parent; geometry, topology and
    tool come from the original. Mirrors always sit at the origin unrotated.
    """

    link = original.mirror_link
    if link is None:
        raise ValueError(f"figure {original.id} has no mirror link")
    nodes = reflect_figure_nodes(original, link.axis_point_world, link.axis_dir_world)
    return replace(
        mirror,
        tool=original.tool,
        x=0.0,
        y=0.0,
        rotation=0.0,
        closed=original.closed,
        nodes=nodes,
        edges=original.edges,
        measures=None,
    )


def linked_mirror(index: FigureIndex, original: Figure) -> Optional[Figure]:
    """Return the mirror paired with ``original`` when both link records agree, else ``None``."""

    link = original.mirror_link
    if link is None or link.role != "original":
        return None
    mirror = index.get(link.other_id)
    if mirror is None:
        logger.warning("Mirror %s of figure %s not found", link.other_id, original.id)
        return None
    back = mirror.mirror_link
    if (
        back is None
        or back.role != "mirror"
        or back.other_id != original.id
        or back.pair_id != link.pair_id
    ):
        logger.warning(
            "Mirror pair %s between %s and %s is inconsistent; skipping",
            link.pair_id,
            original.id,
            mirror.id,
        )
        return None
    return mirror


def _needs_resync(previous: Optional[PairRecord], original: Figure, mirror: Figure) -> Optional[str]:
    link = original.mirror_link
    assert link is not None
    if previous is None:
        return "first-sync"
    if not previous.sync:
        return "sync-enabled"
    if previous.axis_point_world != link.axis_point_world or previous.axis_dir_world != link.axis_dir_world:
        return "axis-changed"
    if previous.original_signature != figure_signature(original):
        return "original-changed"
    if previous.mirror_signature != figure_signature(mirror):
        return "mirror-changed"
    return None


def sync_mirrors(figures: Sequence[Figure], state: Optional[MirrorSyncState] = None) -> SyncResult:
    """Propagate original geometry to every consistent, syncing mirror pair.

    Returns new figure values for rebuilt mirrors and the state to feed into
    the next call. Input figures are never mutated.
    """

    previous = state.pairs if state is not None else {}
    index = FigureIndex(figures)
    records: Dict[str, PairRecord] = {}
    updates: Dict[str, Figure] = {}

    for original in figures:
        link = original.mirror_link
        if link is None or link.role != "original":
            continue
        mirror = linked_mirror(index, original)
        if mirror is None:
            continue

        if link.sync:
            reason = _needs_resync(previous.get(link.pair_id), original, mirror)
            if reason is not None:
                mirror = reflect_figure(original, mirror)
                updates[mirror.id] = mirror
                logger.info("Rebuilt mirror %s from %s (%s)", mirror.id, original.id, reason)

        records[link.pair_id] = PairRecord(
            original_signature=figure_signature(original),
            mirror_signature=figure_signature(mirror),
            sync=link.sync,
            axis_point_world=link.axis_point_world,
            axis_dir_world=link.axis_dir_world,
        )

    result = replace_figures(figures, updates)
    return SyncResult(figures=result, state=MirrorSyncState(records), updated=tuple(updates))


def create_mirror(
    original: Figure,
    mirror_id: str,
    axis_point_world: Vec2,
    axis_dir_world: Vec2,
    *,
    pair_id: Optional[str] = None,
    sync: bool = True,
) -> Tuple[Figure, Figure]:
    """Link ``original`` to a new reflected figure and return ``(original, mirror)``."""

    pair = pair_id or f"{original.id}:{mirror_id}"
    axis_dir = norm(axis_dir_world)
    linked_original = replace(
        original,
        mirror_link=MirrorLink("original", mirror_id, pair, sync, axis_point_world, axis_dir),
    )
    placeholder = Figure(
        id=mirror_id,
        tool=original.tool,
        kind=original.kind,
        parent_id=original.parent_id,
        mirror_link=MirrorLink("mirror", original.id, pair, sync, axis_point_world, axis_dir),
    )
    return linked_original, reflect_figure(linked_original, placeholder)


__all__ = [
    "MirrorSyncState",
    "PairRecord",
    "SyncResult",
    "create_mirror",
    "linked_mirror",
    "reflect_figure",
    "reflect_figure_nodes",
    "sync_mirrors",
]

apply_debug_logging(globals(), logger=logger)
