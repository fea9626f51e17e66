#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Azure session providers.

## Overview

Two `vnetreport.session.SessionProvider` implementations are included:

`CredsViaAzureDefault`
:  Credentials are obtained from the first source that works: environment
variables, a managed identity, the Azure CLI, Azure PowerShell, or
interactively via the browser. This is the default used by the CLI.

`CredsViaAzureCLI`
:  Credentials are obtained exclusively from the account signed in with
`az login`. Use this to report on exactly what the Azure CLI can see.

Within a tenant the same credential is valid for every subscription, so both
providers return one shared credential regardless of the subscription asked
for.

## Thread Safety

When the report runs with more than one thread, every worker asks the shared
credential for a token at about the same time. If the token is not cached yet,
each of them would go to Azure AD, and the Azure CLI token cache on disk is not
safe for concurrent writes. The first `get_token` call for a scope is therefore
made by a single thread while the others wait; afterwards calls proceed
concurrently and are served from the cache.
"""
import functools
import logging
import threading

from azure.identity import AzureCliCredential, DefaultAzureCredential

from vnetreport.session import SessionProvider

LOG = logging.getLogger(__name__)


def _wait_once_per_scope(func):
    """Decorate a `get_token` method so the first call per scope runs alone."""
    done = set()
    lock = threading.RLock()

    @functools.wraps(func)
    def wrapper(*scopes, **kwargs):
        scope_key = tuple(scopes)
        with lock:
            if scope_key not in done:
                # Marked before the call so a failure does not hold the other
                # threads back; they will fail on their own just as quickly.
                done.add(scope_key)
                LOG.debug("requesting first token for %s", scope_key)
                return func(*scopes, **kwargs)
        return func(*scopes, **kwargs)

    return wrapper


# pylint: disable=too-few-public-methods


class CredsViaAzureDefault(SessionProvider):
    """A session provider backed by `DefaultAzureCredential`.

    The `authority` argument specifies the Microsoft authority host. If none is
    provided, the Azure SDK default of "login.microsoftonline.com" is used.
    """

    def __init__(self, authority=None):
        self.creds = DefaultAzureCredential(
            exclude_interactive_browser_credential=False, authority=authority
        )
        self.creds.get_token = _wait_once_per_scope(self.creds.get_token)

    def session(self, _subscription_id):
        return self.creds


class CredsViaAzureCLI(SessionProvider):
    """A session provider backed by `AzureCliCredential`.

    Tokens come from the signed-in Azure CLI account. The `tenant_id` argument
    requests tokens for a tenant other than the CLI's default.
    """

    def __init__(self, tenant_id=None):
        self.creds = AzureCliCredential(tenant_id=tenant_id or "")
        self.creds.get_token = _wait_once_per_scope(self.creds.get_token)

    def session(self, _subscription_id):
        return self.creds
