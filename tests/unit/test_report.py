#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#

# pylint: disable=redefined-outer-name,missing-docstring

import io
import json

import pytest

from vnetreport.network import ReportRow
from vnetreport.report import RENDERERS, render_csv, render_json, render_table


@pytest.fixture
def rows():
    return [
        ReportRow("sub1", "vnetA", "rg1", "10.0.0.0/16", "web", "10.0.1.0/24"),
        ReportRow("sub1", "vnetA", "rg1", "10.0.0.0/16", "db", "10.0.2.0/24"),
        ReportRow("sub2", "vnetB", "rg2", "10.9.0.0/16", None, None),
    ]


def _render(renderer, rows):
    out = io.StringIO()
    renderer(rows, out=out)
    return out.getvalue()


def test_render_table(rows):
    assert _render(render_table, rows).splitlines() == [
        "Subscription  VNET_Name  ResourceGroup  AddressSpace  Subnet  SubnetAddressPrefix",
        "------------  ---------  -------------  ------------  ------  -------------------",
        "sub1          vnetA      rg1            10.0.0.0/16   web     10.0.1.0/24",
        "sub1          vnetA      rg1            10.0.0.0/16   db      10.0.2.0/24",
        "sub2          vnetB      rg2            10.9.0.0/16   None    None",
    ]


def test_render_table_widens_to_longest_value():
    row = ReportRow(
        "00000000-0000-0000-0000-000000000000", "v", "rg", "10.0.0.0/8", "s", "10.0.0.0/24"
    )
    lines = _render(render_table, [row]).splitlines()
    width = len("00000000-0000-0000-0000-000000000000")
    assert lines[0].startswith("Subscription".ljust(width) + "  VNET_Name")
    assert lines[1].startswith("-" * len("Subscription") + " " * (width - 12) + "  ---")
    assert lines[2].startswith(row.subscription_id + "  v  ")


def test_render_table_without_rows():
    assert len(_render(render_table, []).splitlines()) == 2


def test_render_json(rows):
    records = json.loads(_render(render_json, rows))
    assert records[0] == {
        "Subscription": "sub1",
        "VNET_Name": "vnetA",
        "ResourceGroup": "rg1",
        "AddressSpace": "10.0.0.0/16",
        "Subnet": "web",
        "SubnetAddressPrefix": "10.0.1.0/24",
    }
    assert records[2]["Subnet"] is None
    assert records[2]["SubnetAddressPrefix"] is None
    assert len(records) == 3


def test_render_csv_quotes_joined_address_space():
    row = ReportRow("sub1", "vnetA", "rg1", "10.0.0.0/16,10.1.0.0/16", None, None)
    assert _render(render_csv, [row]).splitlines() == [
        "Subscription,VNET_Name,ResourceGroup,AddressSpace,Subnet,SubnetAddressPrefix",
        'sub1,vnetA,rg1,"10.0.0.0/16,10.1.0.0/16",None,None',
    ]


def test_renderers_by_name():
    assert set(RENDERERS) == {"table", "json", "csv"}


def test_subnet_without_prefix_renders_none():
    row = ReportRow("sub1", "vnetA", "rg1", "10.0.0.0/16", "bare", None)
    assert _render(render_table, [row]).splitlines()[-1].split() == [
        "sub1",
        "vnetA",
        "rg1",
        "10.0.0.0/16",
        "bare",
        "None",
    ]
    assert _render(render_csv, [row]).splitlines()[-1].endswith(",bare,None")
    assert json.loads(_render(render_json, [row]))[0]["SubnetAddressPrefix"] is None
