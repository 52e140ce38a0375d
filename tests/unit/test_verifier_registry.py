"""Unit tests for the dormant VerifierRegistry."""

from src.provenance.models import VerifierEntry
from src.provenance.registry import ContentRegistry
from src.provenance.verifier_registry import VerifierRegistry


class TestVerifierRegistry:

    def test_empty_by_default(self) -> None:
        verifiers = VerifierRegistry()
        assert verifiers.count() == 0
        assert verifiers.get("carol") is None
        assert verifiers.is_active("carol") is False
        assert verifiers.to_dict() == {}

    def test_reads_flags(self) -> None:
        verifiers = VerifierRegistry()
        verifiers.entries.put_if_absent("carol", VerifierEntry(active=True))
        verifiers.entries.put_if_absent("dave", VerifierEntry(active=False))

        assert verifiers.is_active("carol") is True
        assert verifiers.is_active("dave") is False
        assert verifiers.to_dict() == {"carol": {"active": True}, "dave": {"active": False}}

    def test_registration_ignores_verifier_table(self) -> None:
        """Registering never needs, nor touches, a trusted verifier."""
        registry = ContentRegistry()
        registry.register(bytes(32), "article", bytes(65), "t", None, "alice", 1)
        assert registry.verifiers.count() == 0
