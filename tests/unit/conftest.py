#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#

# pylint: disable=redefined-outer-name,missing-docstring

from types import SimpleNamespace

import pytest

from vnetreport.session import SessionProvider


class FakeCloud:
    """Stands in for NetworkManagementClient, answering from in-memory data.

    VNETs are registered with `add_vnet`. A subscription or VNET registered via
    `fail_vnets` or `fail_subnets` raises the given exception when queried.
    """

    def __init__(self, mocker):
        self.mocker = mocker
        self.vnets = {}
        self.subnets = {}
        self.clients = []

    def add_vnet(self, sub, rg, name, prefixes=(), subnets=(), vnet_id=None):
        """Register a VNET and its subnets given as (name, prefix) pairs."""
        if vnet_id is None:
            vnet_id = (
                f"/subscriptions/{sub}/resourceGroups/{rg}"
                f"/providers/Microsoft.Network/virtualNetworks/{name}"
            )
        vnet = SimpleNamespace(
            id=vnet_id,
            name=name,
            address_space=SimpleNamespace(address_prefixes=list(prefixes)),
        )
        self.vnets.setdefault(sub, []).append(vnet)
        self.subnets[(sub, rg, name)] = [
            SimpleNamespace(name=n, address_prefix=p, address_prefixes=None)
            for n, p in subnets
        ]
        return vnet

    def fail_vnets(self, sub, exception):
        self.vnets[sub] = exception

    def fail_subnets(self, sub, rg, name, exception):
        self.subnets[(sub, rg, name)] = exception

    def __call__(self, credential, subscription_id, **kwargs):
        self.clients.append((credential, subscription_id, kwargs))
        nmc = self.mocker.MagicMock()
        nmc.virtual_networks.list_all.side_effect = lambda: self._answer(
            self.vnets.get(subscription_id, [])
        )
        nmc.subnets.list.side_effect = lambda rg, name: self._answer(
            self.subnets.get((subscription_id, rg, name), [])
        )
        return nmc

    @staticmethod
    def _answer(value):
        if isinstance(value, Exception):
            raise value
        return iter(value)


@pytest.fixture
def cloud(mocker):
    fake = FakeCloud(mocker)
    mocker.patch("vnetreport.network.NetworkManagementClient", new=fake)
    return fake


@pytest.fixture
def session_provider(mocker):
    provider = mocker.MagicMock(spec=SessionProvider)
    provider.session.return_value = "creds"
    return provider
