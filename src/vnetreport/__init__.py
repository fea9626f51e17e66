#
# Copyright 2019 FMR LLC <opensource@fmr.com>
#
# SPDX-License-Identifier: MIT
#
"""CLI and library to report the VNETs and subnets across Azure subscriptions.

## Overview

`vnetreport` enumerates the enabled Azure subscriptions visible to the signed-in
user, lists the Virtual Networks (VNETs) in each, and then lists the subnets of
each VNET. The result is a flattened table with one row per subnet. A VNET that
has no subnets still appears once, with `None` in the subnet columns:

    $ vnetreport
    📡 Fetching all Virtual Networks (VNETs) across all subscriptions...
    🔄 Querying subscription: 00000000-0000-0000-0000-000000000000
    ✅ Fetched all Virtual Networks. Now retrieving subnets...
    ✅ Fetching subnets for VNET: vnetA (Resource Group: rg1) in Subscription: 00000000-0000-0000-0000-000000000000
    🔹 Subnet: web | Address Prefix: 10.0.1.0/24
    📊 Consolidated VNETs & Subnets Across All Subscriptions:
    Subscription                          VNET_Name  ResourceGroup  AddressSpace  Subnet  SubnetAddressPrefix
    ------------                          ---------  -------------  ------------  ------  -------------------
    00000000-0000-0000-0000-000000000000  vnetA      rg1            10.0.0.0/16   web     10.0.1.0/24

### CLI Usage

The CLI is documented on the `vnetreport.cli` page, which includes the list of
command line flags and the syntax of the optional configuration file.

### Library Usage

Each stage of the pipeline is available as a library function:

`vnetreport.subscriptions`
: Loaders that return the enabled subscription IDs, either via the Azure CLI or
the Azure SDK.

`vnetreport.session`
: Contains the `vnetreport.session.SessionProvider` that hands out Azure
credentials for a subscription.

`vnetreport.network`
: `vnetreport.network.collect_vnets` and `vnetreport.network.expand_subnets`
query the Azure network API and build the report rows.

`vnetreport.report`
: Renders report rows as an aligned text table, JSON, or CSV.

For example, to build the rows programmatically:

    from vnetreport.network import collect_vnets, expand_subnets
    from vnetreport.session.azure import CredsViaAzureDefault
    from vnetreport.subscriptions import AzureCLISubscriptionLoader

    session_provider = CredsViaAzureDefault()
    subscriptions = AzureCLISubscriptionLoader().subscriptions()
    vnets = collect_vnets(session_provider, subscriptions)
    rows = expand_subnets(session_provider, vnets)
"""

name = "vnetreport"
__version__ = "1.0.0"
