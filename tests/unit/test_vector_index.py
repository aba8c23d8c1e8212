import pytest

from grounded_chat.errors import IndexSealedError
from grounded_chat.retrieval.vector_store import InMemoryVectorIndex
from grounded_chat.types import IndexEntry, Segment


def _segment(name: str) -> Segment:
    return Segment(segment_id=f"{name}-chunk-0000", doc_id=name, text=name, start_index=0)


@pytest.fixture
def index() -> InMemoryVectorIndex:
    vector_index = InMemoryVectorIndex()
    vector_index.add(
        [
            IndexEntry(segment=_segment("a"), vector=[1.0, 0.0]),
            IndexEntry(segment=_segment("b"), vector=[0.0, 1.0]),
            IndexEntry(segment=_segment("c"), vector=[2.0, 0.0]),
            IndexEntry(segment=_segment("d"), vector=[1.0, 1.0]),
        ]
    )
    return vector_index


def test_query_ranks_by_cosine_with_insertion_tiebreak(index: InMemoryVectorIndex) -> None:
    hits = index.query([1.0, 0.0], 4)

    assert [hit.segment.doc_id for hit in hits] == ["a", "c", "d", "b"]
    assert [hit.rank for hit in hits] == [1, 2, 3, 4]
    assert hits[0].score == pytest.approx(1.0)
    assert hits[1].score == pytest.approx(1.0)
    assert hits[2].score == pytest.approx(0.70710678)
    assert hits[3].score == pytest.approx(0.0)


@pytest.mark.parametrize("k", [0, -1])
def test_non_positive_k_returns_empty(index: InMemoryVectorIndex, k: int) -> None:
    assert index.query([1.0, 0.0], k) == []


def test_k_larger_than_index_returns_everything(index: InMemoryVectorIndex) -> None:
    assert len(index.query([0.0, 1.0], 50)) == 4


def test_smaller_k_is_prefix_of_larger_k(index: InMemoryVectorIndex) -> None:
    vector = [0.3, 0.9]
    full = index.query(vector, 4)

    for k in range(1, 4):
        assert index.query(vector, k) == full[:k]


def test_query_is_deterministic(index: InMemoryVectorIndex) -> None:
    assert index.query([0.5, 0.5], 3) == index.query([0.5, 0.5], 3)


def test_zero_query_vector_keeps_insertion_order(index: InMemoryVectorIndex) -> None:
    hits = index.query([0.0, 0.0], 4)

    assert [hit.segment.doc_id for hit in hits] == ["a", "b", "c", "d"]
    assert all(hit.score == 0.0 for hit in hits)


def test_sealed_index_rejects_writes(index: InMemoryVectorIndex) -> None:
    index.seal()

    with pytest.raises(IndexSealedError):
        index.add([IndexEntry(segment=_segment("e"), vector=[1.0, 0.0])])
    assert len(index) == 4
    assert index.sealed
