# tests/conftest.py
from dataclasses import dataclass
from typing import Any

import pytest

from fluent_sqlite.connection import CommandType


@dataclass
class RecordingParameter:
    parameter_name: str = ""
    value: Any = None


class RecordingCommand:
    def __init__(self, fail_on_call=None):
        self.command_text = ""
        self.command_type = None
        self.parameters = []
        self.executions = []
        self.disposed = False
        self._fail_on_call = fail_on_call

    def create_parameter(self):
        return RecordingParameter()

    def execute_non_query(self):
        assert self.command_type == CommandType.TEXT
        self.executions.append((self.command_text, {p.parameter_name: p.value for p in self.parameters}))
        if self._fail_on_call is not None and len(self.executions) == self._fail_on_call:
            raise RuntimeError("simulated engine failure")
        return 1

    def execute_reader(self):
        raise NotImplementedError

    def dispose(self):
        self.disposed = True


class RecordingConnection:
    """Stand-in connection that records every command created from it."""

    def __init__(self, fail_on_call=None):
        self.is_open = False
        self.open_calls = 0
        self.closed = False
        self.commands = []
        self._fail_on_call = fail_on_call

    def open(self):
        self.open_calls += 1
        self.is_open = True

    def create_command(self):
        command = RecordingCommand(self._fail_on_call)
        self.commands.append(command)
        return command

    def close(self):
        self.closed = True
        self.is_open = False

    @property
    def executions(self):
        return [e for c in self.commands for e in c.executions]


@pytest.fixture
def recording_connection():
    return RecordingConnection()


@pytest.fixture
def failing_connection():
    """Connection whose second executed statement raises."""
    return RecordingConnection(fail_on_call=2)
