from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from .model import EDGE_KINDS, FIGURE_KINDS, MIRROR_ROLES, NODE_MODES, Figure, FigureIndex


class ValidationError(Exception):
    pass


@dataclass
class IntegrityWarning:
    figure_id: str
    kind: str
    message: str
    entity_id: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial string formatting
        return self.message


def _figure_warnings(figure: Figure, index: FigureIndex) -> List[IntegrityWarning]:
    warnings: List[IntegrityWarning] = []
    node_ids = [node.id for node in figure.nodes]
    if len(set(node_ids)) != len(node_ids):
        warnings.append(IntegrityWarning(figure.id, "duplicate_node", f"figure {figure.id} repeats a node id"))
    edge_ids = [edge.id for edge in figure.edges]
    if len(set(edge_ids)) != len(edge_ids):
        warnings.append(IntegrityWarning(figure.id, "duplicate_edge", f"figure {figure.id} repeats an edge id"))

    known = set(node_ids)
    for edge in figure.edges:
        missing = [nid for nid in (edge.from_id, edge.to_id) if nid not in known]
        if missing:
            warnings.append(
                IntegrityWarning(
                    figure.id,
                    "dangling_edge",
                    f"edge {edge.id} of figure {figure.id} references missing node(s) {', '.join(missing)}",
                    edge.id,
                )
            )

    if figure.is_seam and index.get(figure.parent_id) is None:
        warnings.append(
            IntegrityWarning(
                figure.id,
                "orphan_seam",
                f"seam {figure.id} refers to missing parent {figure.parent_id}",
            )
        )

    link = figure.mirror_link
    if link is not None:
        other = index.get(link.other_id)
        back = other.mirror_link if other is not None else None
        if (
            back is None
            or back.other_id != figure.id
            or back.pair_id != link.pair_id
            or back.role == link.role
        ):
            warnings.append(
                IntegrityWarning(
                    figure.id,
                    "mirror_link",
                    f"mirror pair {link.pair_id} of figure {figure.id} is not mutually linked",
                )
            )
    return warnings


def check_integrity(figures: Sequence[Figure]) -> List[IntegrityWarning]:
    """Report referential problems without raising; affected entities are skipped downstream."""

    index = FigureIndex(figures)
    warnings: List[IntegrityWarning] = []
    for figure in figures:
        warnings.extend(_figure_warnings(figure, index))
    return warnings


def validate_figures(figures: Sequence[Figure]) -> None:
    """Strict check for freshly loaded documents; raises on the first problem."""

    seen = set()
    for fig in figures:
        if fig.id in seen:
            raise ValidationError(f'duplicate figure id "{fig.id}"')
        seen.add(fig.id)
        if fig.kind not in FIGURE_KINDS:
            raise ValidationError(f'figure {fig.id}: kind must be mold|seam (got {fig.kind})')
        if fig.is_seam and not fig.parent_id:
            raise ValidationError(f'figure {fig.id}: seam figures need a parent id')
        for node in fig.nodes:
            if node.mode not in NODE_MODES:
                raise ValidationError(f'figure {fig.id}: node {node.id} mode must be corner|smooth')
        for edge in fig.edges:
            if edge.kind not in EDGE_KINDS:
                raise ValidationError(f'figure {fig.id}: edge {edge.id} kind must be line|cubic')
        if fig.mirror_link is not None and fig.mirror_link.role not in MIRROR_ROLES:
            raise ValidationError(f'figure {fig.id}: mirror role must be original|mirror')

    for warning in check_integrity(figures):
        raise ValidationError(warning.message)


__all__ = ["IntegrityWarning", "ValidationError", "check_integrity", "validate_figures"]
