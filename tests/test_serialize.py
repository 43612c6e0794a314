"""
Tests for metadata serialization.

Covers:
- Value preparation (scalars, containers, errors, callables, models)
- Plain objects, string fallbacks, bytes and reference cycles
- Long values kept on one line
- YAML block layout
- Folding non-text messages into metadata
"""

import re
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path
from uuid import UUID

from pydantic import BaseModel

from logtide.markup import highlight_markup
from logtide.serialize import (
    SKIP,
    QuotedStr,
    dump_block,
    expand_error,
    merge_message,
    prepare,
    serialize,
)

ANSI = re.compile(r"\x1b\[[0-9;]*m")


class Color(Enum):
    RED = "red"


@dataclass
class Job:
    name: str
    retries: int


class Request(BaseModel):
    path: str
    status: int


class QueryError(Exception):
    def __init__(self, message, query):
        super().__init__(message)
        self.query = query
        self._internal = "hidden"


def add(a, b):
    return a + b


def configure_replication(
    primary_host_name,
    secondary_host_name,
    replication_timeout_seconds,
    retry_backoff_factor,
    verify_certificates,
):
    return primary_host_name


class User:
    def __init__(self, name):
        self.name = name
        self.roles = ["admin"]
        self._token = "secret"


@dataclass
class Loop:
    label: str
    me: "Loop | None" = None


# ═══════════════════════════════════════════════════════════════════
#  prepare
# ═══════════════════════════════════════════════════════════════════

class TestPrepare:
    def test_scalars_pass_through(self):
        ts = datetime(2026, 2, 12, 7, 8, 9)
        assert prepare(None) is None
        assert prepare(True) is True
        assert prepare(1.5) == 1.5
        assert prepare(ts) == ts

    def test_strings_are_quoted(self):
        prepared = prepare("hello")
        assert isinstance(prepared, QuotedStr)
        assert prepared == "hello"

    def test_enum_uses_value(self):
        assert prepare(Color.RED) == "red"

    def test_containers(self):
        assert prepare({"a": [1, (2, 3)]}) == {"a": [1, [2, 3]]}

    def test_keys_become_strings(self):
        assert prepare({1: "x"}) == {"1": "x"}

    def test_dataclass_and_model(self):
        assert prepare(Job("sync", 3)) == {"name": "sync", "retries": 3}
        assert prepare(Request(path="/", status=200)) == {"path": "/", "status": 200}

    def test_function_becomes_highlight_span(self):
        assert prepare(add) == "<hl python>def add(a, b): ...</hl>"

    def test_bytes_dropped(self):
        assert prepare(b"\x00") is SKIP
        assert prepare({"keep": 1, "raw": b"\x00"}) == {"keep": 1}
        assert prepare([1, bytearray(b"x"), 2]) == [1, 2]

    def test_plain_object_expanded(self):
        assert prepare(User("ada")) == {"name": "ada", "roles": ["admin"]}

    def test_other_scalars_use_string_form(self):
        assert prepare(Path("/tmp/x")) == "/tmp/x"
        assert prepare(Decimal("1.5")) == "1.5"
        assert isinstance(prepare(Decimal("1.5")), QuotedStr)
        assert prepare(UUID(int=1)) == "00000000-0000-0000-0000-000000000001"

    def test_cycle_dropped(self):
        data = {"a": 1}
        data["self"] = data
        assert prepare(data) == {"a": 1}

    def test_self_referencing_error(self):
        error = QueryError("failed", "SELECT 1")
        error.origin = error
        prepared = prepare({"err": error, "user": 1})
        assert prepared == {
            "err": {"name": "QueryError", "message": "failed", "query": "SELECT 1"},
            "user": 1,
        }

    def test_self_referencing_dataclass(self):
        loop = Loop("a")
        loop.me = loop
        assert prepare({"x": loop}) == {"x": {"label": "a"}}

    def test_self_referencing_object(self):
        user = User("ada")
        user.manager = user
        assert prepare(user) == {"name": "ada", "roles": ["admin"]}

    def test_shared_reference_kept(self):
        shared = {"x": 1}
        assert prepare({"a": shared, "b": shared}) == {"a": {"x": 1}, "b": {"x": 1}}


class TestExpandError:
    def test_name_and_message(self):
        expanded = expand_error(ValueError("boom"))
        assert expanded == {"name": "ValueError", "message": "boom"}

    def test_public_attributes(self):
        expanded = expand_error(QueryError("failed", "SELECT 1"))
        assert expanded["query"] == "SELECT 1"
        assert "_internal" not in expanded

    def test_stack_when_raised(self):
        try:
            raise RuntimeError("bad")
        except RuntimeError as e:
            expanded = expand_error(e)
        assert "stack" in expanded
        assert "RuntimeError: bad" in expanded["stack"]


# ═══════════════════════════════════════════════════════════════════
#  Block layout
# ═══════════════════════════════════════════════════════════════════

class TestDumpBlock:
    def test_indented_mapping(self):
        assert dump_block({"usage": 95}) == "  usage: 95"

    def test_string_values_double_quoted(self):
        assert dump_block({"user": "ada"}) == '  user: "ada"'

    def test_key_order_preserved(self):
        assert dump_block({"b": 1, "a": 2}) == "  b: 1\n  a: 2"

    def test_nested(self):
        assert dump_block({"db": {"host": "x", "port": 5432}}) == (
            '  db:\n    host: "x"\n    port: 5432'
        )

    def test_no_trailing_whitespace(self):
        block = dump_block({"a": [1, 2], "b": {"c": None}})
        assert block == block.rstrip()
        assert all(line.startswith("  ") for line in block.split("\n"))

    def test_top_level_scalar(self):
        assert dump_block(42) == "  42"

    def test_unrepresentable_top_level(self):
        assert dump_block(b"raw") == ""

    def test_objects_not_lost(self):
        block = dump_block({"user": User("ada"), "path": Path("/tmp/x"), "amount": Decimal("1.5")})
        assert block == (
            '  user:\n    name: "ada"\n    roles:\n    - "admin"\n'
            '  path: "/tmp/x"\n  amount: "1.5"'
        )

    def test_long_values_not_folded(self):
        value = "w " * 57 + "<hl sql>SELECT 1</hl>"
        block = dump_block({"q": value})
        assert block == f'  q: "{value}"'

    def test_long_tag_survives_rendering(self):
        value = "w " * 57 + "<hl sql>SELECT 1</hl>"
        assert serialize({"q": value}) == '  q: "' + "w " * 57 + 'SELECT 1"'
        styled = serialize({"q": value}, render=highlight_markup)
        assert "<hl" not in styled
        assert ANSI.sub("", styled) == '  q: "' + "w " * 57 + 'SELECT 1"'

    def test_long_function_header_single_line(self):
        block = serialize({"fn": configure_replication})
        assert block == (
            '  fn: "def configure_replication(primary_host_name, secondary_host_name, '
            'replication_timeout_seconds, retry_backoff_factor, verify_certificates): ..."'
        )

    def test_error_fields_visible(self):
        block = dump_block({"err": ValueError("boom")})
        assert 'name: "ValueError"' in block
        assert 'message: "boom"' in block


class TestSerialize:
    def test_markup_stripped_by_default(self):
        block = serialize({"status": "<chalk green>ok</chalk>"})
        assert block == '  status: "ok"'

    def test_function_rendered_as_header(self):
        assert serialize({"fn": add}) == '  fn: "def add(a, b): ..."'

    def test_custom_render(self):
        assert serialize({"a": 1}, render=str.upper) == "  A: 1"


class TestMergeMessage:
    def test_message_first(self):
        merged = merge_message({"x": 1}, {"a": 2})
        assert list(merged) == ["msg", "a"]

    def test_message_wins_over_msg_key(self):
        assert merge_message("real", {"msg": "other", "a": 1}) == {"msg": "real", "a": 1}

    def test_no_metadata(self):
        assert merge_message(42, None) == {"msg": 42}
