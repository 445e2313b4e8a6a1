from __future__ import annotations

import copy
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from .helpers import split_columns
from .models import ItemContext, Operation, Record, TableBatch, UPDATE_KEY_FIELD

ParameterGetter = Callable[[str, int], Any]


def resolve_contexts(
    get_parameter: ParameterGetter,
    items: Sequence[Record],
    operation: Operation,
) -> list[ItemContext]:
    """
    Resolve the operation's parameters for every input record.

    Each record is resolved with its own index, so per-row expressions may send
    records to different tables or key them on different columns.
    """
    contexts = []
    for index, item in enumerate(items):
        if operation == Operation.INSERT:
            ctx = ItemContext(
                index, item,
                table=get_parameter("table", index),
                columns=get_parameter("columns", index) or "",
            )
        elif operation == Operation.UPDATE:
            ctx = ItemContext(
                index, item,
                table=get_parameter("table", index),
                columns=get_parameter("columns", index) or "",
                key=get_parameter("updateKey", index),
            )
        elif operation == Operation.DELETE:
            ctx = ItemContext(
                index, item,
                table=get_parameter("table", index),
                key=get_parameter("deleteKey", index),
            )
        else:
            ctx = ItemContext(index, item, query=get_parameter("query", index))
        contexts.append(ctx)
    return contexts


def copy_input_item(item: Record, properties: Iterable[str]) -> Record:
    """
    Copy only ``properties`` out of ``item``. Missing properties become None.
    """
    return {
        prop: copy.deepcopy(item[prop]) if item.get(prop) is not None else None
        for prop in properties
    }


def group_for_insert(contexts: Iterable[ItemContext]) -> list[TableBatch]:
    """
    One batch per (table, column list). An empty column list falls back to the
    field names of the batch's first record.
    """
    batches: dict[tuple[str, str], TableBatch] = {}
    for ctx in contexts:
        group = (ctx.table, ctx.columns)
        batch = batches.get(group)
        if batch is None:
            columns = tuple(split_columns(ctx.columns)) or tuple(ctx.item.keys())
            batch = batches[group] = TableBatch(ctx.table, columns)
        batch.append(copy_input_item(ctx.item, batch.columns), ctx.index)
    return list(batches.values())


def group_for_update(contexts: Iterable[ItemContext]) -> list[TableBatch]:
    """
    One batch per (table, column list). Each record copy also carries its own
    key column and, under ``updateKey``, that key column's name.
    """
    batches: dict[tuple[str, str], TableBatch] = {}
    for ctx in contexts:
        if not ctx.key:
            raise ValueError(f"item {ctx.index}: update key must not be empty")
        group = (ctx.table, ctx.columns)
        batch = batches.get(group)
        if batch is None:
            batch = batches[group] = TableBatch(ctx.table, tuple(split_columns(ctx.columns)))

        properties = list(batch.columns)
        if ctx.key not in properties:
            properties.append(ctx.key)
        record = copy_input_item(ctx.item, properties)
        record[UPDATE_KEY_FIELD] = ctx.key
        batch.append(record, ctx.index)
    return list(batches.values())


def group_for_delete(contexts: Iterable[ItemContext]) -> dict[str, dict[str, TableBatch]]:
    """Nested table -> key column -> batch; records keep only their key value."""
    tables: dict[str, dict[str, TableBatch]] = {}
    for ctx in contexts:
        if not ctx.key:
            raise ValueError(f"item {ctx.index}: delete key must not be empty")
        keys = tables.setdefault(ctx.table, {})
        batch = keys.get(ctx.key)
        if batch is None:
            batch = keys[ctx.key] = TableBatch(ctx.table, (ctx.key,), key=ctx.key)
        batch.append(copy_input_item(ctx.item, [ctx.key]), ctx.index)
    return tables
