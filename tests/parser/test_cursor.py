"""
Tests for the token cursor: lookahead injection and backup sessions.
"""

import pytest

from olparse.diagnostics import BackupStateError
from olparse.lexer import Token, TokenType
from olparse.parser import PositionedToken, TokenCursor

from tests.infrastructure.parser_utils import make_scanner


def ident(name):
    return Token(TokenType.ID, name)


def contents(entries):
    return [e.token.content for e in entries]


class TestAdvance:

    def setup_method(self):
        self.cursor = TokenCursor(make_scanner("a b\nc"))

    def test_current_undefined_before_first_advance(self):
        """No current token until the first advance"""
        assert self.cursor.current is None

    def test_advance_records_positions(self):
        """Each entry carries the position it was scanned at"""
        entries = [self.cursor.advance() for _ in range(3)]
        assert contents(entries) == ["a", "b", "c"]
        assert [(e.line, e.column) for e in entries] == [(1, 0), (1, 2), (2, 0)]

    def test_met_newline(self):
        """met_newline is set when a line break precedes the new token"""
        self.cursor.advance()
        self.cursor.advance()
        assert self.cursor.met_newline is False
        self.cursor.advance()
        assert self.cursor.met_newline is True

    def test_newline_tokens_are_swallowed(self):
        """NEWLINE tokens never become current but set met_newline"""
        cursor = TokenCursor(make_scanner("a\n\nb", newline_tokens=True))
        assert cursor.advance().token == ident("a")
        assert cursor.advance().token == ident("b")
        assert cursor.met_newline is True

    def test_eof_is_sticky(self):
        """Advancing past EOF keeps returning EOF"""
        for _ in range(5):
            last = self.cursor.advance()
        assert last.token.is_eof()


class TestInjection:

    def setup_method(self):
        self.cursor = TokenCursor(make_scanner("a b"))
        self.cursor.advance()

    def test_injected_tokens_come_first(self):
        """Injected tokens are served in order before scanner tokens"""
        self.cursor.inject([PositionedToken(ident("x"), 1, 0), PositionedToken(ident("y"), 1, 0)])
        assert [self.cursor.advance().token.content for _ in range(3)] == ["x", "y", "b"]

    def test_later_injection_goes_ahead(self):
        """A later injection is served before tokens queued earlier"""
        self.cursor.inject([PositionedToken(ident("p"), 1, 0)])
        self.cursor.inject([PositionedToken(ident("q"), 1, 0)])
        assert contents(self.cursor.pending()) == ["q", "p"]
        assert [self.cursor.advance().token.content for _ in range(3)] == ["q", "p", "b"]


class TestBackup:

    def setup_method(self):
        self.cursor = TokenCursor(make_scanner("a b c\nd e"))
        self.cursor.advance()

    def test_recover_rewinds_to_start_token(self):
        """Recovering returns to the token current at start_backup"""
        self.cursor.start_backup()
        first_pass = [self.cursor.advance() for _ in range(3)]
        self.cursor.recover_backup()

        assert self.cursor.current.token == ident("a")
        second_pass = [self.cursor.advance() for _ in range(3)]
        assert second_pass == first_pass
        assert self.cursor.advance().token == ident("e")

    def test_positions_survive_replay(self):
        """Replayed tokens keep their original positions"""
        self.cursor.start_backup()
        self.cursor.advance()
        self.cursor.advance()
        d = self.cursor.advance()
        self.cursor.recover_backup()
        self.cursor.advance()
        self.cursor.advance()
        assert self.cursor.advance() == d
        assert (d.line, d.column) == (2, 0)

    def test_recover_without_advancing(self):
        """Recovering right after starting leaves the cursor unchanged"""
        self.cursor.start_backup()
        self.cursor.recover_backup()
        assert self.cursor.current.token == ident("a")
        assert self.cursor.advance().token == ident("b")

    def test_discard_keeps_position(self):
        """Discarding commits to the consumed tokens"""
        self.cursor.start_backup()
        self.cursor.advance()
        self.cursor.discard_backup()
        assert self.cursor.current.token == ident("b")
        assert self.cursor.advance().token == ident("c")
        assert not self.cursor.backup_active

    def test_second_start_raises(self):
        """At most one backup session at a time"""
        self.cursor.start_backup()
        with pytest.raises(BackupStateError, match="already active"):
            self.cursor.start_backup()

    def test_close_without_session_raises(self):
        """Recover and discard need an active session"""
        with pytest.raises(BackupStateError, match="no backup session"):
            self.cursor.recover_backup()
        with pytest.raises(BackupStateError, match="no backup session"):
            self.cursor.discard_backup()

    def test_backup_with_pending_injection(self):
        """Tokens injected during a session are replayed too"""
        self.cursor.start_backup()
        self.cursor.inject([PositionedToken(ident("x"), 1, 0)])
        assert self.cursor.advance().token == ident("x")
        assert self.cursor.advance().token == ident("b")
        self.cursor.recover_backup()
        assert [self.cursor.advance().token.content for _ in range(3)] == ["x", "b", "c"]

    def test_guarded_flag(self):
        """Sessions opened by a speculation boundary are marked guarded"""
        self.cursor.start_backup(guarded=True)
        assert self.cursor.backup_active
        assert self.cursor.backup_guarded
        self.cursor.discard_backup()
        assert not self.cursor.backup_guarded
