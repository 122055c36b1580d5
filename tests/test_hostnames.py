"""Tests for syntactic hostname validation and alias list splitting."""

import pytest

from core.domain.hostnames import is_valid_hostname, partition_valid, split_alias_csv

_LONGEST = ".".join(["a" * 63, "b" * 63, "c" * 63, "d" * 61])


class TestIsValidHostname:
    """Grammar, label length and total length rules."""

    @pytest.mark.parametrize(
        "name",
        ["a", "example.com", "good-host", "a--b.example", "xn--bcher-kva.example", "10.0.0.1", "Host2.LAN"],
    )
    def test_valid_names(self, name: str) -> None:
        """Alphanumeric labels with inner hyphens are accepted."""
        assert is_valid_hostname(name)

    @pytest.mark.parametrize(
        "name",
        ["", "-a", "a-", "a..b", ".a", "a.", "bad_host!", "a b", "foo.-bar", "host.com,"],
    )
    def test_invalid_names(self, name: str) -> None:
        """Empty labels, edge hyphens and foreign characters are rejected."""
        assert not is_valid_hostname(name)

    def test_label_length_limit(self) -> None:
        """A label may hold 63 characters but not 64."""
        assert is_valid_hostname("a" * 63 + ".com")
        assert not is_valid_hostname("a" * 64 + ".com")

    def test_total_length_limit(self) -> None:
        """253 characters is the longest accepted hostname."""
        assert len(_LONGEST) == 253
        assert is_valid_hostname(_LONGEST)
        assert not is_valid_hostname(_LONGEST + "d")


class TestSplitAliasCsv:
    """Tokenizing the raw comma separated alias argument."""

    def test_tokens_are_trimmed_and_lowercased(self) -> None:
        assert split_alias_csv(" A , b.Example ,c") == ["a", "b.example", "c"]

    def test_empty_tokens_are_dropped(self) -> None:
        assert split_alias_csv("a,,b, ,") == ["a", "b"]
        assert split_alias_csv("") == []

    def test_partition_keeps_order(self) -> None:
        valid, invalid = partition_valid(["good-host", "bad_host!", "another.good"])
        assert valid == ["good-host", "another.good"]
        assert invalid == ["bad_host!"]
