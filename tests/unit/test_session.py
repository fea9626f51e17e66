#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#

# pylint: disable=redefined-outer-name,missing-docstring

import threading
import time

import pytest

from vnetreport.session import SessionProvider
from vnetreport.session.azure import (
    CredsViaAzureCLI,
    CredsViaAzureDefault,
    _wait_once_per_scope,
)


def test_session_provider_is_abstract():
    with pytest.raises(NotImplementedError):
        SessionProvider().session("sub1")


def test_default_creds_shared_across_subscriptions(mocker):
    cred = mocker.patch("vnetreport.session.azure.DefaultAzureCredential")
    provider = CredsViaAzureDefault(authority="login.microsoftonline.us")

    cred.assert_called_once_with(
        exclude_interactive_browser_credential=False,
        authority="login.microsoftonline.us",
    )
    assert provider.session("sub1") is provider.session("sub2")


def test_cli_creds_tenant(mocker):
    cred = mocker.patch("vnetreport.session.azure.AzureCliCredential")
    CredsViaAzureCLI()
    cred.assert_called_with(tenant_id="")
    CredsViaAzureCLI(tenant_id="tenant")
    cred.assert_called_with(tenant_id="tenant")


def test_first_call_per_scope_runs_alone():
    events = []
    lock = threading.Lock()

    def get_token(*_scopes):
        with lock:
            events.append("start")
        time.sleep(0.02)
        with lock:
            events.append("end")
        return "token"

    wrapped = _wait_once_per_scope(get_token)
    threads = [threading.Thread(target=wrapped, args=("arm",)) for _ in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    # The first caller finishes before any other thread gets to start.
    assert events[:2] == ["start", "end"]
    assert events.count("start") == 5


def test_failed_first_call_does_not_block_later_calls():
    calls = []

    def get_token(*scopes):
        calls.append(scopes)
        if len(calls) == 1:
            raise RuntimeError("no token")
        return "token"

    wrapped = _wait_once_per_scope(get_token)
    with pytest.raises(RuntimeError):
        wrapped("arm")
    assert wrapped("arm") == "token"
