"""
Tests for the command protocol dispatcher.
"""

import pytest

from simpledb import CommandDispatcher, Store, UNSET, process_input
from simpledb.exceptions import InvalidArgumentsError, UnknownCommandError


def run(dispatcher: CommandDispatcher, *lines: str):
    return dispatcher.process_input("\n".join(lines))


class TestCommandOutput:
    """Test the displayed output of each command."""

    def test_get_unset_value_prints_null(self, dispatcher):
        """Test GET of a missing key."""
        assert run(dispatcher, "GET a") == ["GET a", "> NULL"]

    def test_set_value(self, dispatcher, store):
        """Test SET then GET."""
        assert run(dispatcher, "SET foo 3", "GET foo") == ["SET foo 3", "GET foo", "> 3"]

        snapshot = store.inspect()
        assert snapshot.transactions == []
        assert snapshot.transaction_indices_by_key == {}
        assert snapshot.db == {"foo": "3"}
        assert snapshot.current_values == {"foo": "3"}

    def test_unset_value(self, dispatcher, store):
        """Test SET then UNSET."""
        assert run(dispatcher, "SET foo 3", "UNSET foo") == ["SET foo 3", "UNSET foo"]
        assert store.inspect().db == {}
        assert store.inspect().current_values == {}

    def test_count_values(self, dispatcher, store):
        """Test NUMEQUALTO before and after a SET."""
        output = run(dispatcher, "NUMEQUALTO 3", "SET foo 3", "NUMEQUALTO 3", "NUMEQUALTO 4")
        assert output == [
            "NUMEQUALTO 3", "> 0",
            "SET foo 3",
            "NUMEQUALTO 3", "> 1",
            "NUMEQUALTO 4", "> 0",
        ]

    def test_end_prints_nothing(self, dispatcher, store):
        """Test END."""
        assert run(dispatcher, "END") == ["END"]
        assert store.inspect().db == {}
        assert dispatcher.finished

    @pytest.mark.parametrize("command", ["ROLLBACK", "COMMIT"])
    def test_no_transaction(self, dispatcher, store, command):
        """Test COMMIT/ROLLBACK with nothing open."""
        assert run(dispatcher, command) == [command, "NO TRANSACTION"]
        assert store.inspect().transactions == []

    def test_begin(self, dispatcher, store):
        """Test BEGIN opens a frame."""
        assert run(dispatcher, "BEGIN") == ["BEGIN"]
        assert store.inspect().transactions == [{}]

    def test_begin_rollback(self, dispatcher, store):
        """Test BEGIN; ROLLBACK."""
        assert run(dispatcher, "BEGIN", "ROLLBACK") == ["BEGIN", "ROLLBACK"]
        assert store.inspect().transactions == []

    def test_commit_transaction(self, dispatcher, store):
        """Test BEGIN; SET; COMMIT."""
        assert run(dispatcher, "BEGIN", "SET foo 3", "COMMIT") == ["BEGIN", "SET foo 3", "COMMIT"]
        assert store.inspect().db == {"foo": "3"}

    def test_unset_ignores_extra_arguments(self, dispatcher, store):
        """Test UNSET foo 3 behaves like UNSET foo."""
        run(dispatcher, "SET foo 2", "BEGIN", "UNSET foo 3")

        snapshot = store.inspect()
        assert snapshot.transactions == [{"foo": UNSET}]
        assert snapshot.transaction_indices_by_key == {"foo": [0]}
        assert snapshot.db == {"foo": "2"}
        assert snapshot.current_values == {}


class TestCommandScenarios:
    """Test complete command sessions."""

    PREFIX = [
        "SET bar 2", "SET baz 3", "SET quw 4",
        "BEGIN",
        "SET foo 1", "SET baz 4",
        "BEGIN",
        "SET quw 5", "NUMEQUALTO 4", "GET baz",
        "BEGIN",
        "UNSET bar", "GET bar",
    ]
    SUFFIX = ["GET foo", "GET bar", "NUMEQUALTO 2", "GET baz", "GET quw"]

    def test_nested_rollback_session(self, dispatcher, store):
        """Test sets, gets, unsets and counts with a nested ROLLBACK."""
        output = run(dispatcher, *self.PREFIX, "ROLLBACK", *self.SUFFIX)

        assert output == [
            "SET bar 2", "SET baz 3", "SET quw 4",
            "BEGIN",
            "SET foo 1", "SET baz 4",
            "BEGIN",
            "SET quw 5", "NUMEQUALTO 4", "> 1", "GET baz", "> 4",
            "BEGIN",
            "UNSET bar", "GET bar", "> NULL",
            "ROLLBACK",
            "GET foo", "> 1",
            "GET bar", "> 2",
            "NUMEQUALTO 2", "> 1",
            "GET baz", "> 4",
            "GET quw", "> 5",
        ]
        assert store.inspect().transactions == [{"foo": "1", "baz": "4"}, {"quw": "5"}]

    def test_nested_commit_session(self, dispatcher, store):
        """Test sets, gets, unsets and counts with a flattening COMMIT."""
        output = run(dispatcher, *self.PREFIX, "COMMIT", *self.SUFFIX)

        assert output[-10:] == [
            "GET foo", "> 1",
            "GET bar", "> NULL",
            "NUMEQUALTO 2", "> 0",
            "GET baz", "> 4",
            "GET quw", "> 5",
        ]
        assert store.inspect().db == {"foo": "1", "baz": "4", "quw": "5"}

    def test_rollback_to_previous_transaction_value(self, dispatcher):
        """Test a value reverts to the enclosing transaction's write."""
        output = run(
            dispatcher,
            "SET foo 2", "BEGIN", "SET foo 3", "BEGIN", "SET foo 4", "ROLLBACK", "GET foo",
        )
        assert output[-1] == "> 3"

    def test_commit_then_no_transaction(self):
        """Test every level is closed by one COMMIT."""
        output = process_input("\n".join([
            "BEGIN", "SET a 10", "BEGIN", "SET a 20", "COMMIT", "GET a", "ROLLBACK",
        ]))
        assert output == ["> 20", "NO TRANSACTION"]


class TestCommandParsing:
    """Test parsing rules and errors."""

    def test_output_without_echo(self, store):
        """Test that only results are returned without echo."""
        dispatcher = CommandDispatcher(store)
        assert dispatcher.process_input("SET a 1\nGET a\nGET b") == ["> 1", "> NULL"]

    def test_command_names_are_case_insensitive(self, store):
        """Test lower-case command names."""
        dispatcher = CommandDispatcher(store)
        assert dispatcher.process_input("set a 1\nget a") == ["> 1"]

    def test_keys_and_values_keep_their_case(self, store):
        """Test arguments are not normalized."""
        CommandDispatcher(store).process_input("SET Key Value")
        assert store.get("Key") == "Value"
        assert store.get("key") is None

    def test_blank_lines_are_skipped(self, store):
        """Test empty and whitespace-only lines."""
        dispatcher = CommandDispatcher(store, echo=True)
        assert dispatcher.process_input("\n   \nGET a\n") == ["GET a", "> NULL"]

    def test_end_stops_processing(self, store):
        """Test nothing after END is executed."""
        dispatcher = CommandDispatcher(store)
        assert dispatcher.process_input("SET a 1\nEND\nSET a 2\nGET a") == []
        assert store.get("a") == "1"

    def test_unknown_command(self, store):
        """Test an unsupported command name."""
        dispatcher = CommandDispatcher(store)
        with pytest.raises(UnknownCommandError) as exc_info:
            dispatcher.execute("FROB a")
        assert exc_info.value.line == "FROB a"

    @pytest.mark.parametrize("line", ["SET a", "GET", "UNSET", "NUMEQUALTO"])
    def test_missing_arguments(self, store, line):
        """Test commands without their required arguments."""
        with pytest.raises(InvalidArgumentsError):
            CommandDispatcher(store).execute(line)

    def test_run_without_error_handler_raises(self, store):
        """Test errors propagate from run() by default."""
        dispatcher = CommandDispatcher(store)
        with pytest.raises(UnknownCommandError):
            list(dispatcher.run(["SET a 1", "FROB a", "GET a"]))
        assert store.get("a") == "1"

    def test_run_reports_errors_and_continues(self, store):
        """Test on_error receives failing lines and the rest still run."""
        errors = []
        dispatcher = CommandDispatcher(store, echo=True)

        output = list(dispatcher.run(
            ["FROB a", "SET a 1", "SET b", "GET a"], on_error=errors.append
        ))

        assert output == ["FROB a", "SET a 1", "SET b", "GET a", "> 1"]
        assert [type(e) for e in errors] == [UnknownCommandError, InvalidArgumentsError]
        assert [e.line for e in errors] == ["FROB a", "SET b"]

    def test_execute_blank_line(self, store):
        """Test execute() of an empty line."""
        assert CommandDispatcher(store).execute("   ") is None

    def test_custom_tokens(self, store):
        """Test configurable display tokens."""
        dispatcher = CommandDispatcher(
            store,
            null_token="nil",
            no_transaction_token="no tx",
            result_prefix="",
        )
        assert dispatcher.process_input("GET a\nCOMMIT\nNUMEQUALTO x") == ["nil", "no tx", "0"]

    def test_command_names(self):
        """Test the supported vocabulary."""
        assert CommandDispatcher(Store()).command_names == [
            "BEGIN", "COMMIT", "END", "GET", "NUMEQUALTO", "ROLLBACK", "SET", "UNSET",
        ]
