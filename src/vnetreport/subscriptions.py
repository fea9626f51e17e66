#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Loads the enabled Azure subscriptions to scan.

## Overview

A `SubscriptionLoader` returns the ordered list of subscription IDs that the
report will scan. Only subscriptions whose state is `Enabled` are ever
returned. Two loaders are included:

`AzureCLISubscriptionLoader`
:  Runs `az account list --all` and uses the subscriptions cached by the Azure
CLI at the time of the last `az login`. This is the default.

`SDKSubscriptionLoader`
:  Lists the subscriptions visible to a credential via the Azure SDK
`SubscriptionClient`, so the Azure CLI does not have to be installed.

Both loaders keep the order in which Azure returned the subscriptions. Callers
may narrow the list by passing the IDs to `include` and the IDs to `exclude`:

    loader = AzureCLISubscriptionLoader()
    loader.subscriptions()
    ['00000000-0000-0000-0000-000000000000', '11111111-1111-1111-1111-111111111111']
    loader.subscriptions(exclude=['00000000-0000-0000-0000-000000000000'])
    ['11111111-1111-1111-1111-111111111111']

Requesting an ID via `include` that is not an enabled subscription raises a
`SubscriptionsNotFoundError`. Any failure to list subscriptions propagates to
the caller as there is nothing to scan without them.
"""
import json
import logging
import shutil
import subprocess

from azure.mgmt.subscription import SubscriptionClient

LOG = logging.getLogger(__name__)

ENABLED = "Enabled"


class SubscriptionLoader:
    """Abstract base class to load the enabled subscriptions.

    Subclasses must implement `load`, which returns a list of dicts with at
    least the `id` and `state` keys.
    """

    def load(self):
        """Returns a list of dicts describing every visible subscription."""
        raise NotImplementedError

    def subscriptions(self, include=None, exclude=None):
        """Returns the ordered list of enabled subscription IDs.

        If `include` is a non-empty list of IDs, only those subscriptions are
        returned, and `SubscriptionsNotFoundError` is raised if any of them is
        not an enabled subscription. IDs listed in `exclude` are removed.
        Duplicates are dropped. IDs are GUIDs and compared ignoring case; the
        returned IDs are spelled as Azure listed them.
        """
        enabled = []
        for sub in self.load():
            if sub.get("state") != ENABLED:
                LOG.info("ignoring %s subscription %s", sub.get("state"), sub.get("id"))
                continue
            if sub["id"].lower() not in [s.lower() for s in enabled]:
                enabled.append(sub["id"])

        if include:
            wanted = {i.lower() for i in include}
            enabled_ids = {s.lower() for s in enabled}
            missing = [i for i in include if i.lower() not in enabled_ids]
            if missing:
                raise SubscriptionsNotFoundError(missing)
            enabled = [s for s in enabled if s.lower() in wanted]

        if exclude:
            unwanted = {i.lower() for i in exclude}
            enabled = [s for s in enabled if s.lower() not in unwanted]

        LOG.info("selected %d subscription(s)", len(enabled))
        return enabled


class AzureCLISubscriptionLoader(SubscriptionLoader):
    """Loads subscriptions via the Azure CLI `az account list --all` command.

    The Azure CLI must be installed and the user signed in with `az login`.
    The list is only as recent as the last login.
    """

    def __init__(self):
        if not shutil.which("az"):
            raise FileNotFoundError(
                "error: Please install the Azure CLI and ensure 'az' is in your path"
            )

    def load(self):
        result = subprocess.run(
            ["az", "account", "list", "--all", "--output", "json"],
            capture_output=True,
            check=True,
        )

        # The Azure CLI can exit 0 and still complain on stderr, such as when
        # the user has never logged in.
        if result.stderr:
            raise RuntimeError(result.stderr.decode("utf-8"))

        return [
            {
                "id": s.get("id"),
                "name": s.get("name"),
                "state": s.get("state"),
                "tenantId": s.get("tenantId"),
            }
            for s in json.loads(result.stdout)
        ]


class SDKSubscriptionLoader(SubscriptionLoader):
    """Loads subscriptions via the Azure SDK `SubscriptionClient`.

    `credential` is an Azure token credential such as one returned by a
    `vnetreport.session.SessionProvider`. Additional keyword arguments are
    passed to the client, e.g. `retry_total`.
    """

    def __init__(self, credential, **client_kwargs):
        self.client = SubscriptionClient(credential, **client_kwargs)

    def load(self):
        return [
            {
                "id": s.subscription_id,
                "name": s.display_name,
                "state": s.state,
                "tenantId": s.tenant_id,
            }
            for s in self.client.subscriptions.list()
        ]


class SubscriptionsNotFoundError(Exception):
    """Raised if a requested subscription ID is not an enabled subscription.

    The `missing_ids` attribute contains the IDs that were not found.
    """

    def __init__(self, missing_ids):
        self.missing_ids = missing_ids
        super().__init__(
            f'Enabled subscriptions not found: {", ".join(missing_ids)}'
        )
