"""
Relationship tuple expansion.

Turns ordered collections of subjects, relations and objects into the full
cross-product of (subject, relation, object) tuples. Expansion is lazy and
performs no deduplication: N subjects x M relations x K objects always
yield N*M*K tuples, duplicates included.
"""

import enum
from dataclasses import dataclass
from typing import Iterable, Iterator, NamedTuple, Tuple


class RelationTuple(NamedTuple):
    """A (subject, relation, object) relationship fact, e.g. ``user:1 editor doc:42``."""

    subject: str
    relation: str
    object: str

    @property
    def subject_type(self) -> str:
        return self.subject.split(":", 1)[0]

    @property
    def object_type(self) -> str:
        return self.object.split(":", 1)[0]

    def __str__(self) -> str:
        return f"{self.object}#{self.relation}@{self.subject}"


class TupleOperation(str, enum.Enum):
    """Whether a batch inserts or removes its tuples."""

    WRITE = "write"
    DELETE = "delete"


def _expand(
    subjects: Iterable[str], relations: Iterable[str], objects: Iterable[str]
) -> Iterator[RelationTuple]:
    relations = list(relations)
    objects = list(objects)
    for subject in subjects:
        for relation in relations:
            for obj in objects:
                yield RelationTuple(subject, relation, obj)


def expand_writes(
    subjects: Iterable[str], relations: Iterable[str], objects: Iterable[str]
) -> Iterator[RelationTuple]:
    """Tuples to insert, nested subjects > relations > objects."""
    return _expand(subjects, relations, objects)


def expand_deletes(
    subjects: Iterable[str], relations: Iterable[str], objects: Iterable[str]
) -> Iterator[RelationTuple]:
    """Tuples to remove, same shape and order as :func:`expand_writes`."""
    return _expand(subjects, relations, objects)


def expand_check_triples(
    subjects: Iterable[str], relations: Iterable[str], objects: Iterable[str]
) -> Iterator[RelationTuple]:
    """
    Triples for a batch check.

    Relations are iterated outermost, then objects, then subjects. Callers
    that submit checks in rate-limited slices rely on this order.
    """
    subjects = list(subjects)
    objects = list(objects)
    for relation in relations:
        for obj in objects:
            for subject in subjects:
                yield RelationTuple(subject, relation, obj)


_EXPANDERS = {
    TupleOperation.WRITE: expand_writes,
    TupleOperation.DELETE: expand_deletes,
}


@dataclass(frozen=True)
class WriteBatch:
    """All tuples of one write or delete request, submitted together."""

    operation: TupleOperation
    tuples: Tuple[RelationTuple, ...] = ()

    @classmethod
    def build(
        cls,
        operation: TupleOperation,
        subjects: Iterable[str],
        relations: Iterable[str],
        objects: Iterable[str],
    ) -> "WriteBatch":
        expander = _EXPANDERS[operation]
        return cls(operation=operation, tuples=tuple(expander(subjects, relations, objects)))

    def __len__(self) -> int:
        return len(self.tuples)

    def __iter__(self) -> Iterator[RelationTuple]:
        return iter(self.tuples)
