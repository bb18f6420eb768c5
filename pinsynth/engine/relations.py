"""Grouping of repeated input PINs so repeats stay repeats after anonymization."""

from dataclasses import dataclass, field
from typing import Dict, Hashable, List, Sequence, TypeVar

T = TypeVar("T")


@dataclass
class Grouping:
    """Maps every input position to a group; one output value per group."""
    representatives: List[int] = field(default_factory=list)  # first position of each group
    assignment: List[int] = field(default_factory=list)       # group index per position

    @property
    def n_groups(self) -> int:
        return len(self.representatives)

    def broadcast(self, values: Sequence[T]) -> List[T]:
        """Expand one value per group to one value per input position."""
        if len(values) != self.n_groups:
            raise ValueError(f"Expected {self.n_groups} group values, got {len(values)}")
        return [values[g] for g in self.assignment]


def group(source: Sequence[Hashable], keep_rel: bool) -> Grouping:
    """
    Group positions of source.

    keep_rel=False: every position is a singleton group.
    keep_rel=True: positions holding equal values share a group.
    """
    if not keep_rel:
        positions = list(range(len(source)))
        return Grouping(representatives=positions, assignment=list(positions))

    grouping = Grouping()
    index: Dict[Hashable, int] = {}
    for pos, value in enumerate(source):
        if value not in index:
            index[value] = len(grouping.representatives)
            grouping.representatives.append(pos)
        grouping.assignment.append(index[value])
    return grouping
