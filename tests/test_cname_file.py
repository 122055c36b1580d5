"""Tests for reading and writing the dnsmasq `cname=` file."""

import os
import sys
from pathlib import Path

import pytest

from adapters.cname_file import (
    FileCnameRepository,
    inspect_alias_file,
    parse_cname_line,
    read_alias_store,
    render_alias_store,
    write_alias_store,
)
from core.domain.errors import ConfigReadError, ConfigWriteError
from core.domain.models import AliasStore, HostAliasEntry

# -- Line parser -----------------------------------------------------------------


class TestParseCnameLine:
    """The `cname=aliases,host` grammar."""

    def test_simple_record(self) -> None:
        record = parse_cname_line("cname=a,b,example.com\n")
        assert record is not None
        assert record.host == "example.com"
        assert record.aliases == ("a", "b")

    def test_whitespace_and_case_tolerance(self) -> None:
        record = parse_cname_line("  CNAME = WWW.Example.com , Mail ,  Example.COM  ")
        assert record is not None
        assert record.host == "example.com"
        assert record.aliases == ("www.example.com", "mail")

    @pytest.mark.parametrize(
        "line",
        [
            "",
            "   ",
            "# cname=a,example.com",
            "#cname=a,example.com",
            "cname=example.com",
            "address=/example.com/10.0.0.1",
            "cname=a,bad_host!",
            "cname=a,",
        ],
    )
    def test_non_record_lines(self, line: str) -> None:
        """Comments, blanks, other directives and broken records are skipped."""
        assert parse_cname_line(line) is None


# -- Reading -----------------------------------------------------------------------


class TestRead:
    """Building a store from the file."""

    def test_missing_file_is_empty_store(self, cname_file: Path) -> None:
        store = read_alias_store(cname_file)
        assert store.entries == []
        assert not cname_file.exists()

    def test_directory_is_a_read_error(self, tmp_path: Path) -> None:
        """A path that exists but cannot be read raises ConfigReadError."""
        target = tmp_path / "not-a-file"
        target.mkdir()
        with pytest.raises(ConfigReadError) as info:
            read_alias_store(target)
        assert info.value.path == target

    def test_undecodable_file_is_a_read_error(self, cname_file: Path) -> None:
        cname_file.parent.mkdir(parents=True)
        cname_file.write_bytes(b"cname=a,\xff\xfe,example.com\n")
        with pytest.raises(ConfigReadError):
            read_alias_store(cname_file)

    def test_repeated_hosts_accumulate(self, cname_file: Path, write_lines) -> None:
        """Two lines for the same host merge instead of overwriting."""
        write_lines(cname_file, "cname=a,b,example.com", "cname=b,c,example.com")
        store = read_alias_store(cname_file)
        assert store.hosts() == ["example.com"]
        assert store.entries[0].aliases == ["a", "b", "c"]

    def test_skipped_lines_are_reported(self, cname_file: Path, write_lines) -> None:
        write_lines(
            cname_file,
            "# managed by cnamectl",
            "cname=a,example.com",
            "",
            "garbage",
            "cname=x,other.com",
        )
        report = inspect_alias_file(cname_file)
        assert report.records == 2
        assert report.skipped_lines == [1, 4]
        assert report.store.hosts() == ["example.com", "other.com"]

    def test_invalid_aliases_in_file_are_dropped(self, cname_file: Path, write_lines) -> None:
        write_lines(cname_file, "cname=good,bad_alias!,example.com")
        store = read_alias_store(cname_file)
        assert store.entries[0].aliases == ["good"]


# -- Writing -----------------------------------------------------------------------


class TestWrite:
    """Serializing a store back to disk."""

    def test_render_format(self) -> None:
        store = AliasStore(entries=[HostAliasEntry(host="example.com", aliases=["a", "b"])])
        assert render_alias_store(store) == "cname=a,b,example.com\n"

    def test_empty_entries_are_omitted(self, cname_file: Path) -> None:
        store = AliasStore(
            entries=[
                HostAliasEntry(host="empty.com", aliases=[]),
                HostAliasEntry(host="example.com", aliases=["a"]),
            ]
        )
        write_alias_store(cname_file, store)
        assert cname_file.read_text(encoding="utf-8") == "cname=a,example.com\n"

    def test_parent_directory_is_created(self, cname_file: Path) -> None:
        write_alias_store(cname_file, AliasStore())
        assert cname_file.exists()
        assert cname_file.read_text(encoding="utf-8") == ""

    def test_atomic_write_leaves_no_temp_files(self, cname_file: Path) -> None:
        store = AliasStore(entries=[HostAliasEntry(host="example.com", aliases=["a"])])
        write_alias_store(cname_file, store)
        write_alias_store(cname_file, store)
        assert sorted(p.name for p in cname_file.parent.iterdir()) == [cname_file.name]

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
    def test_atomic_write_keeps_file_mode(self, cname_file: Path, write_lines) -> None:
        write_lines(cname_file, "cname=a,example.com")
        os.chmod(cname_file, 0o640)
        store = AliasStore(entries=[HostAliasEntry(host="example.com", aliases=["b"])])
        write_alias_store(cname_file, store)
        assert cname_file.stat().st_mode & 0o777 == 0o640

    @pytest.mark.skipif(
        sys.platform == "win32" or os.geteuid() != 0,
        reason="changing ownership needs root",
    )
    def test_atomic_write_keeps_owner(self, cname_file: Path, write_lines) -> None:
        """The replacement file keeps the uid/gid of the file it replaces."""
        write_lines(cname_file, "cname=a,example.com")
        os.chown(cname_file, 999, 999)
        store = AliasStore(entries=[HostAliasEntry(host="example.com", aliases=["b"])])
        write_alias_store(cname_file, store)
        st = cname_file.stat()
        assert (st.st_uid, st.st_gid) == (999, 999)

    def test_in_place_write(self, cname_file: Path, write_lines) -> None:
        write_lines(cname_file, "cname=old,example.com", "cname=x,other.com")
        store = AliasStore(entries=[HostAliasEntry(host="example.com", aliases=["new"])])
        write_alias_store(cname_file, store, atomic=False)
        assert cname_file.read_text(encoding="utf-8") == "cname=new,example.com\n"

    def test_unwritable_location_raises(self, tmp_path: Path) -> None:
        """A parent that is a regular file cannot hold the config file."""
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        with pytest.raises(ConfigWriteError) as info:
            write_alias_store(blocker / "cname.conf", AliasStore())
        assert info.value.path == blocker / "cname.conf"


class TestRoundTrip:
    """Write then read yields the same hosts and alias sets."""

    def test_round_trip(self, cname_file: Path) -> None:
        store = AliasStore(
            entries=[
                HostAliasEntry(host="host10", aliases=["b", "a"]),
                HostAliasEntry(host="host2", aliases=["web-1.lan"]),
            ]
        )
        write_alias_store(cname_file, store)
        reread = read_alias_store(cname_file)
        assert {e.host: set(e.aliases) for e in reread.entries} == {
            e.host: set(e.aliases) for e in store.entries
        }

    def test_repository_round_trip(self, cname_file: Path) -> None:
        repo = FileCnameRepository(cname_file, use_lock=True)
        store = AliasStore(entries=[HostAliasEntry(host="example.com", aliases=["a"])])
        with repo.locked():
            repo.save(store)
            assert repo.load() == store
