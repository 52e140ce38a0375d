"""Unit tests for AuthorIndex."""

from src.provenance.author_index import AuthorIndex
from src.provenance.models import AuthorStats
from src.provenance.store import UnitOfWork


def append(index: AuthorIndex, author: str, fingerprint: bytes, now: int) -> int:
    uow = UnitOfWork()
    seq = index.stage_append(uow, author, fingerprint, now)
    uow.commit()
    return seq


class TestAuthorIndex:

    def test_unseen_author_has_zero_stats(self) -> None:
        index = AuthorIndex()
        assert index.get_stats("ghost") == AuthorStats(content_count=0, last_activity=0)
        assert index.get_entry_at("ghost", 0) is None
        assert index.get_page("ghost") == []

    def test_stage_append_assigns_sequence_numbers(self) -> None:
        index = AuthorIndex()
        assert append(index, "alice", b"a" * 32, 4) == 0
        assert append(index, "alice", b"b" * 32, 9) == 1

        assert index.get_stats("alice") == AuthorStats(content_count=2, last_activity=9)
        assert index.get_entry_at("alice", 0) == b"a" * 32
        assert index.get_entry_at("alice", 1) == b"b" * 32
        assert index.authors() == ["alice"]

    def test_uncommitted_append_is_invisible(self) -> None:
        index = AuthorIndex()
        uow = UnitOfWork()
        index.stage_append(uow, "alice", b"a" * 32, 1)

        assert index.get_stats("alice").content_count == 0
        assert index.get_entry_at("alice", 0) is None

    def test_get_page_bounds(self) -> None:
        index = AuthorIndex()
        fps = [bytes([i]) * 32 for i in range(3)]
        for fp in fps:
            append(index, "alice", fp, 1)

        assert index.get_page("alice", 0, 2) == fps[:2]
        assert index.get_page("alice", 1, 100) == fps[1:]
        assert index.get_page("alice", 3, 2) == []
        assert index.get_page("alice", -1, 2) == []
        assert index.get_page("alice", 0, 0) == []
