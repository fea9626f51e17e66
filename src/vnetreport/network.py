#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Collects VNETs and their subnets and flattens them into report rows.

## Overview

The report is built in two passes over the Azure network API:

1. `collect_vnets` lists the VNETs of every subscription and tags each one with
   the subscription it came from.

2. `expand_subnets` lists the subnets of every collected VNET and produces one
   `ReportRow` per subnet. A VNET without subnets produces exactly one row
   whose subnet fields are `None`.

Every query is scoped explicitly: a `NetworkManagementClient` is created with
the credential and the ID of the subscription being queried. Both passes run on
a `vnetreport.runner.OrderedRunner`, so the queries may run concurrently while
rows and progress messages keep the order of the subscriptions, then VNETs,
then subnets, as returned by Azure.

Problems with a single subscription or VNET are announced on the console and
logged, and processing continues with the next one:

- a subscription without VNETs is skipped;
- a subscription whose VNETs cannot be listed is skipped;
- a VNET missing its name, resource group, or subscription is discarded;
- a VNET whose subnets cannot be listed contributes no rows.
"""
import logging
import re
from collections import namedtuple

from azure.mgmt.network import NetworkManagementClient

from vnetreport.console import OK, QUERY, SUBNET, Console
from vnetreport.runner import OrderedRunner

LOG = logging.getLogger(__name__)

VirtualNetwork = namedtuple(
    "VirtualNetwork", ["subscription_id", "name", "resource_group", "address_space"]
)
"""A VNET tagged with its subscription. `address_space` is a comma-joined CIDR list."""

Subnet = namedtuple("Subnet", ["name", "address_prefix"])
"""A subnet of a VNET."""

ReportRow = namedtuple(
    "ReportRow",
    [
        "subscription_id",
        "vnet_name",
        "resource_group",
        "address_space",
        "subnet_name",
        "subnet_address_prefix",
    ],
)
"""One row of the report. Subnet fields are `None` for a VNET without subnets."""

_RESOURCE_GROUP_RE = re.compile(r"/resourceGroups/([^/]+)", re.IGNORECASE)


def resource_group_from_id(resource_id):
    """Return the resource group name embedded in an ARM `resource_id`.

    Returns an empty string if the ID does not contain a resource group.
    """
    match = _RESOURCE_GROUP_RE.search(resource_id or "")
    return match.group(1) if match else ""


def list_vnets(credential, subscription_id, **client_kwargs):
    """Return the list of `VirtualNetwork` in `subscription_id`."""
    nmc = NetworkManagementClient(credential, subscription_id, **client_kwargs)

    vnets = []
    for vnet in nmc.virtual_networks.list_all():
        # Azure returns None rather than an empty list at times.
        prefixes = []
        if vnet.address_space and vnet.address_space.address_prefixes:
            prefixes = vnet.address_space.address_prefixes

        vnets.append(
            VirtualNetwork(
                subscription_id=subscription_id,
                name=vnet.name or "",
                resource_group=resource_group_from_id(vnet.id),
                address_space=",".join(prefixes),
            )
        )
    return vnets


def list_subnets(credential, vnet, **client_kwargs):
    """Return the list of `Subnet` of `vnet`, queried in its own subscription."""
    nmc = NetworkManagementClient(credential, vnet.subscription_id, **client_kwargs)

    subnets = []
    for subnet in nmc.subnets.list(vnet.resource_group, vnet.name):
        # Subnets with more than one prefix only set address_prefixes. A subnet
        # with neither keeps None, the same as an absent subnet.
        prefix = subnet.address_prefix or ",".join(subnet.address_prefixes or [])
        subnets.append(Subnet(name=subnet.name, address_prefix=prefix or None))
    return subnets


def is_valid(vnet):
    """Return true if the VNET has everything needed to query its subnets."""
    return bool(vnet.name and vnet.resource_group and vnet.subscription_id)


def rows_for(vnet, subnets):
    """Flatten `vnet` and its `subnets` into a list of `ReportRow`.

    Without subnets, a single row with `None` subnet fields is returned.
    """
    if not subnets:
        return [ReportRow(*vnet, subnet_name=None, subnet_address_prefix=None)]
    return [ReportRow(*vnet, *subnet) for subnet in subnets]


def collect_vnets(
    session_provider, subscription_ids, console=None, runner=None, client_kwargs=None
):
    """Return the VNETs of all `subscription_ids` as one ordered list.

    `session_provider` supplies the credential for each subscription.
    Subscriptions without VNETs, or whose VNETs cannot be listed, are announced
    on `console` and skipped. `runner` defaults to a sequential
    `OrderedRunner`. `client_kwargs` are passed to every Azure SDK client.
    """
    console = console or Console()
    runner = runner or OrderedRunner(max_workers=1)
    client_kwargs = client_kwargs or {}
    all_vnets = []

    def query(subscription_id):
        credential = session_provider.session(subscription_id)
        return list_vnets(credential, subscription_id, **client_kwargs)

    def collect(subscription_id, get_result):
        console.status(QUERY, f"Querying subscription: {subscription_id}")
        try:
            vnets = get_result()
        except Exception as e:  # pylint: disable=broad-except
            LOG.warning(
                "%s: error listing VNETs: %s", subscription_id, e, exc_info=True
            )
            console.warning(
                f"Unable to list VNETs in subscription: {subscription_id}: {e}"
            )
            return

        if not vnets:
            console.warning(f"No VNETs found in subscription: {subscription_id}")
            return

        LOG.info("%s: found %d VNET(s)", subscription_id, len(vnets))
        all_vnets.extend(vnets)

    runner.run(query, subscription_ids, collect)
    return all_vnets


def expand_subnets(
    session_provider, vnets, console=None, runner=None, client_kwargs=None
):
    """Return the `ReportRow` list for all `vnets`, one row per subnet.

    Rows keep the order of `vnets`, then the order of each VNET's subnets.
    Invalid VNETs are discarded and VNETs whose subnets cannot be listed
    contribute no rows; both are announced on `console`.
    """
    console = console or Console()
    runner = runner or OrderedRunner(max_workers=1)
    client_kwargs = client_kwargs or {}
    rows = []

    def query(vnet):
        if not is_valid(vnet):
            return None
        credential = session_provider.session(vnet.subscription_id)
        return list_subnets(credential, vnet, **client_kwargs)

    def collect(vnet, get_result):
        if not is_valid(vnet):
            LOG.warning("discarding invalid VNET record: %s", vnet)
            console.warning(
                "Skipping invalid VNET entry "
                "(missing name, resource group, or subscription)"
            )
            return

        console.status(
            OK,
            f"Fetching subnets for VNET: {vnet.name} "
            f"(Resource Group: {vnet.resource_group}) "
            f"in Subscription: {vnet.subscription_id}",
        )
        try:
            subnets = get_result()
        except Exception as e:  # pylint: disable=broad-except
            LOG.warning(
                "%s/%s: error listing subnets: %s",
                vnet.subscription_id,
                vnet.name,
                e,
                exc_info=True,
            )
            console.warning(f"Unable to list subnets in {vnet.name}: {e}")
            return

        if not subnets:
            console.warning(f"No subnets found in {vnet.name}, adding as None")
        for subnet in subnets:
            console.status(
                SUBNET,
                f"Subnet: {subnet.name} | Address Prefix: {subnet.address_prefix}",
            )
        rows.extend(rows_for(vnet, subnets))

    runner.run(query, vnets, collect)
    return rows
