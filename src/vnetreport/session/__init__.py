#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Obtain credentials scoped to an Azure subscription.

## Overview

Every Azure query made by vnetreport is explicitly scoped: the caller asks a
`SessionProvider` for the credential of a subscription and passes both the
credential and the subscription ID to the Azure SDK client. Nothing relies on a
process-wide "current subscription", which is why queries for different
subscriptions can safely run concurrently.

`vnetreport.session.azure`
:  Credentials obtained from Azure are `azure.core` token credentials that are
passed to the Azure SDK clients.
"""


class SessionProvider:
    """A session provider is used to obtain credentials for subscriptions.

    This is an abstract base class and cannot be instantiated directly.
    """

    def session(self, subscription_id):
        """Returns a credential usable with the requested `subscription_id`.

        The returned object is passed as the `credential` argument of Azure SDK
        management clients.
        """
        raise NotImplementedError
