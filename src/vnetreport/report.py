#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Renders report rows as an aligned table, JSON, or CSV.

Rendering is pure formatting: rows are printed in the order given, one line
(or object) per `vnetreport.network.ReportRow`. Subnet fields that are absent,
because the VNET has no subnets, are shown as the string `None` in the table
and CSV formats and as `null` in JSON.
"""
import csv
import json
import sys

COLUMNS = [
    ("Subscription", "subscription_id"),
    ("VNET_Name", "vnet_name"),
    ("ResourceGroup", "resource_group"),
    ("AddressSpace", "address_space"),
    ("Subnet", "subnet_name"),
    ("SubnetAddressPrefix", "subnet_address_prefix"),
]
"""Header and `ReportRow` field of each column, in display order."""

HEADERS = [header for header, _ in COLUMNS]

ABSENT = "None"

SEPARATOR = "  "


def _cells(row):
    return [
        ABSENT if getattr(row, field) is None else str(getattr(row, field))
        for _, field in COLUMNS
    ]


def render_table(rows, out=None):
    """Print `rows` as a table with a header and a separator line.

    Every column is left-aligned to its widest cell and columns are separated
    by two spaces, without trailing whitespace on any line.
    """
    out = out if out is not None else sys.stdout
    lines = [HEADERS, ["-" * len(h) for h in HEADERS]]
    lines.extend(_cells(r) for r in rows)

    widths = [max(len(line[i]) for line in lines) for i in range(len(HEADERS))]
    for line in lines:
        text = SEPARATOR.join(cell.ljust(w) for cell, w in zip(line, widths))
        print(text.rstrip(), file=out)


def render_json(rows, out=None):
    """Print `rows` as a JSON array of objects keyed by the column headers."""
    out = out if out is not None else sys.stdout
    records = [
        {header: getattr(r, field) for header, field in COLUMNS} for r in rows
    ]
    print(json.dumps(records, indent=2), file=out)


def render_csv(rows, out=None):
    """Print `rows` as CSV with a header line."""
    out = out if out is not None else sys.stdout
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(HEADERS)
    writer.writerows(_cells(r) for r in rows)


RENDERERS = {
    "table": render_table,
    "json": render_json,
    "csv": render_csv,
}
"""Renderers by the name used with the `--output` flag."""
