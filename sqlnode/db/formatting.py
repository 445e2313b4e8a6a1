"""
SQL text construction for the batch operations.

Two builders produce the same statement shapes:

- ``LegacyStatementBuilder`` embeds values as literals by string
  concatenation. String values are quoted but embedded quotes are NOT
  escaped, so this mode is open to SQL injection through record values. It
  exists to reproduce the statements earlier releases of the node sent.
- ``ParameterizedStatementBuilder`` binds every value as a named parameter
  and validates table and column names before interpolating them.
"""
from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Iterable, Mapping, Sequence, Union

from ..config import SqlMode
from .helpers import split_columns, validate_identifier
from .models import Record, Statement, StatementChunk, UPDATE_KEY_FIELD


def format_literal(value: Any) -> str:
    """
    Render one record value as a SQL literal.

    Raises:
        TypeError: If the value is not a str, number, bool, None or date
    """
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    if isinstance(value, str):
        return f"'{value}'"
    if isinstance(value, (datetime, date, time)):
        return f"'{value.isoformat()}'"
    raise TypeError(f"Cannot format value of type {type(value).__name__} as a SQL literal")


def format_columns(columns: Union[str, Sequence[str]]) -> str:
    if isinstance(columns, str):
        columns = split_columns(columns)
    return ",".join(column.strip() for column in columns)


def extract_values(record: Mapping[str, Any], columns: Iterable[str]) -> str:
    return "(" + ",".join(format_literal(record.get(column)) for column in columns) + ")"


def extract_update_set(record: Mapping[str, Any], columns: Iterable[str], key: str) -> str:
    return ",".join(
        f"{column} = {format_literal(record.get(column))}"
        for column in columns
        if column != key
    )


def extract_update_condition(record: Mapping[str, Any], key: str) -> str:
    return f"{key} = {format_literal(record.get(key))}"


def extract_delete_values(records: Iterable[Mapping[str, Any]], key: str) -> str:
    return "(" + ",".join(format_literal(record.get(key)) for record in records) + ")"


def update_key(record: Record) -> str:
    key = record.get(UPDATE_KEY_FIELD)
    if not key:
        raise ValueError(f"update record is missing its {UPDATE_KEY_FIELD!r} field")
    return key


class LegacyStatementBuilder:
    """Concatenated-literal statements, byte-for-byte as older releases built them."""

    def insert(self, chunk: StatementChunk) -> Statement:
        values = ",".join(extract_values(record, chunk.columns) for record in chunk.records)
        return Statement(f"INSERT INTO {chunk.table}({format_columns(chunk.columns)}) VALUES {values};")

    def update(self, table: str, columns: Sequence[str], record: Record) -> Statement:
        key = update_key(record)
        set_values = extract_update_set(record, columns, key)
        condition = extract_update_condition(record, key)
        return Statement(f"UPDATE {table} SET {set_values} WHERE {condition};")

    def delete(self, chunk: StatementChunk) -> Statement:
        values = extract_delete_values(chunk.records, chunk.key)
        return Statement(f'DELETE FROM {chunk.table} WHERE "{chunk.key}" IN {values};')


class ParameterizedStatementBuilder:
    """
    Statements with named bind parameters (``:v0``, ``:s0``, ``:w0``, ``:k0`` ...).

    Bind names are generated, never derived from column names, so any column
    name that passes identifier validation is usable.
    """

    def insert(self, chunk: StatementChunk) -> Statement:
        table = validate_identifier(chunk.table, "table")
        columns = [validate_identifier(column, "column") for column in chunk.columns]

        params: dict[str, Any] = {}
        rows = []
        for record in chunk.records:
            names = []
            for column in columns:
                name = f"v{len(params)}"
                params[name] = record.get(column)
                names.append(f":{name}")
            rows.append("(" + ",".join(names) + ")")

        sql = f"INSERT INTO {table}({','.join(columns)}) VALUES {','.join(rows)}"
        return Statement(sql, params)

    def update(self, table: str, columns: Sequence[str], record: Record) -> Statement:
        table = validate_identifier(table, "table")
        key = validate_identifier(update_key(record), "update key")

        params: dict[str, Any] = {}
        assignments = []
        for column in columns:
            if column == key:
                continue
            column = validate_identifier(column, "column")
            name = f"s{len(assignments)}"
            params[name] = record.get(column)
            assignments.append(f"{column} = :{name}")
        params["w0"] = record.get(key)

        sql = f"UPDATE {table} SET {','.join(assignments)} WHERE {key} = :w0"
        return Statement(sql, params)

    def delete(self, chunk: StatementChunk) -> Statement:
        table = validate_identifier(chunk.table, "table")
        key = validate_identifier(chunk.key, "delete key")

        params = {f"k{i}": record.get(key) for i, record in enumerate(chunk.records)}
        placeholders = ",".join(f":{name}" for name in params)

        sql = f"DELETE FROM {table} WHERE {key} IN ({placeholders})"
        return Statement(sql, params)


def make_statement_builder(mode: SqlMode) -> Union[LegacyStatementBuilder, ParameterizedStatementBuilder]:
    if mode == SqlMode.LEGACY:
        return LegacyStatementBuilder()
    if mode == SqlMode.PARAMETERIZED:
        return ParameterizedStatementBuilder()
    raise ValueError(f"Unknown SQL mode: {mode}")
