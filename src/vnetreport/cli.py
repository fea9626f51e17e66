#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""The vnetreport CLI reports the VNETs and subnets across Azure subscriptions.

## CLI User Guide

Sign in to Azure first, typically with `az login`, then run the tool without
any arguments to scan every enabled subscription visible to you:

    $ vnetreport

Progress messages are printed while the subscriptions and VNETs are queried,
followed by the consolidated table with one row per subnet. A VNET without any
subnets is listed once with `None` in the `Subnet` and `SubnetAddressPrefix`
columns.

The exit status is 0 when the report contains at least one row. It is 1 if no
VNETs were found in any subscription, if no rows could be produced, or if an
error prevented the scan, such as a failure to list the subscriptions. Errors
are printed to standard error without a stack trace; set the
`VNETREPORT_TRACE` environment variable to include one.

### Selecting Subscriptions

By default all enabled subscriptions are scanned. Use `--subscription` one or
more times to scan only those subscriptions, or `--exclude-subscription` to skip
some:

    $ vnetreport --subscription 00000000-0000-0000-0000-000000000000

Subscriptions are listed with the Azure CLI (`--loader cli`), which reflects
the subscriptions known at the time of the last `az login`. Use `--loader sdk`
to list them through the Azure API with the selected credentials instead.

### Credentials

`--auth default` obtains credentials from environment variables, a managed
identity, the Azure CLI, or the other sources tried by the Azure SDK's
`DefaultAzureCredential`, falling back to an interactive login in the browser.
`--auth cli` only uses the account signed in with the Azure CLI.

### Output

`--output table` prints an aligned text table. `--output json` and `--output
csv` print the same rows in a machine-readable form, and `--output-file` writes
the report to a file instead of standard output.

Queries are issued by `--threads` workers concurrently. The order of the rows
is the same regardless of the number of threads. Transient Azure API failures
are retried up to `--retries` times by the Azure SDK.

## CLI Reference

### Synopsis

    $ vnetreport [options]

### Configuration

Default values of the command line flags are read from the `CLI` section of
the YAML configuration file `$HOME/.vnetreport.yaml`, or the file named by the
`VNETREPORT_CONFIG` environment variable. Flags given on the command line take
precedence:

    CLI:
      subscription:
        - STRING
      exclude_subscription:
        - STRING
      loader: ("cli" | "sdk")
      auth: ("default" | "cli")
      authority: STRING
      tenant: STRING
      threads: INT
      retries: INT
      output: ("table" | "json" | "csv")
      color: BOOLEAN
      log_level: ("DEBUG" | "INFO" | "WARN" | "ERROR")
"""

import argparse
import logging
import os
import sys
import time
import traceback
from datetime import timedelta
from functools import partial
from pathlib import Path

import colorama

from vnetreport import __version__
from vnetreport.argparse import AppendWithoutDefault, RawAndDefaultsFormatter
from vnetreport.config import Bool, Choice, Config, Int, List, Str, SubscriptionID
from vnetreport.console import FETCH, OK, TABLE, Console
from vnetreport.network import collect_vnets, expand_subnets
from vnetreport.report import RENDERERS
from vnetreport.runner import OrderedRunner
from vnetreport.session.azure import CredsViaAzureCLI, CredsViaAzureDefault
from vnetreport.subscriptions import AzureCLISubscriptionLoader, SDKSubscriptionLoader

LOG = logging.getLogger(__name__)

SHORT_DESCRIPTION = """
Report the Virtual Networks (VNETs) and subnets of all enabled Azure
subscriptions as one consolidated table with one row per subnet.
"""

CONFIG_ENV_VAR = "VNETREPORT_CONFIG"
TRACE_ENV_VAR = "VNETREPORT_TRACE"


def main(argv=None):
    """The main entry point for the `vnetreport` CLI tool.

    Exits with a `0` status code when the report has at least one row. Upon
    error, prints the error message to standard error and exits with `1`. A
    stack trace is included only when `VNETREPORT_TRACE` is set.
    """
    try:
        _cli(argv)

    except Exception as e:  # pylint: disable=broad-except
        if os.getenv(TRACE_ENV_VAR):
            traceback.print_exc(file=sys.stderr)

        print(e, file=sys.stderr)
        sys.exit(1)


def _cli(argv):
    """Parses command line arguments and builds the report.

    This function may exit and terminate the Python program.
    """
    config = Config.from_file(config_filename())
    cfg = partial(config.get, "CLI")

    args = _build_parser(cfg).parse_args(argv)

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(name)s %(levelname)s [%(threadName)s] %(message)s",
    )

    color = args.color and sys.stdout.isatty()
    if color:
        colorama.init()
    console = Console(color=color)

    session_provider = _session_provider(args)
    client_kwargs = {"retry_total": args.retries}
    runner = OrderedRunner(max_workers=args.threads)
    start = time.time()

    if args.loader == "sdk":
        loader = SDKSubscriptionLoader(session_provider.session(None), **client_kwargs)
    else:
        loader = AzureCLISubscriptionLoader()
    subscription_ids = loader.subscriptions(
        include=args.subscriptions, exclude=args.exclude_subscriptions
    )

    console.status(
        FETCH, "Fetching all Virtual Networks (VNETs) across all subscriptions..."
    )
    vnets = collect_vnets(
        session_provider,
        subscription_ids,
        console=console,
        runner=runner,
        client_kwargs=client_kwargs,
    )
    if not vnets:
        console.error("No Virtual Networks found across all subscriptions.")
        sys.exit(1)

    console.status(OK, "Fetched all Virtual Networks. Now retrieving subnets...")
    rows = expand_subnets(
        session_provider,
        vnets,
        console=console,
        runner=runner,
        client_kwargs=client_kwargs,
    )
    if not rows:
        console.error("No VNETs with subnets found.")
        sys.exit(1)

    console.status(TABLE, "Consolidated VNETs & Subnets Across All Subscriptions:")
    render = RENDERERS[args.output]
    if args.output_file:
        with open(args.output_file, "w", encoding="utf-8") as f:
            render(rows, out=f)
        console.status(OK, f"Report written to {args.output_file}")
    else:
        render(rows, out=sys.stdout)

    count = len(subscription_ids)
    print(
        f"\nProcessed {count} subscription{'s' if count != 1 else ''}, "
        f"{len(vnets)} VNETs, {len(rows)} rows in "
        f"{timedelta(seconds=time.time() - start)}",
        file=sys.stderr,
    )


def _subscription_id(value):
    """Argparse type that accepts only a subscription ID (a GUID)."""
    if not SubscriptionID.type_check(value):
        raise argparse.ArgumentTypeError(f"not a subscription ID: {value!r}")
    return value


def _build_parser(cfg):
    """Returns the argument parser with defaults taken from `cfg`."""
    parser = argparse.ArgumentParser(
        prog="vnetreport",
        allow_abbrev=False,
        formatter_class=RawAndDefaultsFormatter,
        description=SHORT_DESCRIPTION,
    )

    sub_group = parser.add_argument_group("subscription selection options")
    sub_group.add_argument(
        "--subscription",
        metavar="ID",
        action=AppendWithoutDefault,
        type=_subscription_id,
        default=cfg("subscription", type=List(SubscriptionID), default=[]),
        dest="subscriptions",
        help="only scan the specified subscriptions",
    )

    sub_group.add_argument(
        "--exclude-subscription",
        metavar="ID",
        action=AppendWithoutDefault,
        type=_subscription_id,
        default=cfg("exclude_subscription", type=List(SubscriptionID), default=[]),
        dest="exclude_subscriptions",
        help="do not scan the specified subscriptions",
    )

    sub_group.add_argument(
        "--loader",
        choices=["cli", "sdk"],
        default=cfg("loader", type=Choice("cli", "sdk"), default="cli"),
        help="list subscriptions via the Azure CLI or the Azure SDK",
    )

    auth_group = parser.add_argument_group("Azure authentication options")
    auth_group.add_argument(
        "--auth",
        choices=["default", "cli"],
        default=cfg("auth", type=Choice("default", "cli"), default="default"),
        help="use DefaultAzureCredential or only the Azure CLI login",
    )

    auth_group.add_argument(
        "--authority",
        metavar="NAME",
        default=cfg("authority", type=Str, default="login.microsoftonline.com"),
        help="Azure AD authority host (--auth default)",
    )

    auth_group.add_argument(
        "--tenant",
        metavar="ID",
        default=cfg("tenant", type=Str),
        help="Azure tenant or directory ID (--auth cli)",
    )

    out_group = parser.add_argument_group("output options")
    out_group.add_argument(
        "--output",
        choices=sorted(RENDERERS),
        default=cfg("output", type=Choice(*RENDERERS), default="table"),
        help="format of the report",
    )

    out_group.add_argument(
        "--output-file",
        metavar="FILE",
        help="write the report to FILE instead of standard output",
    )

    out_group.add_argument(
        "--no-color",
        action="store_false",
        dest="color",
        default=cfg("color", type=Bool, default=True),
        help="do not colorize warnings",
    )

    parser.add_argument(
        "--threads",
        metavar="N",
        type=int,
        default=cfg("threads", type=Int, default=10),
        help="number of concurrent threads to use",
    )

    parser.add_argument(
        "--retries",
        metavar="N",
        type=int,
        default=cfg("retries", type=Int, default=3),
        help="number of retries of a failed Azure API request",
    )

    parser.add_argument(
        "--version", action="version", version="%(prog)s " + __version__
    )

    parser.add_argument(
        "--log-level",
        default=cfg(
            "log_level", type=Choice("DEBUG", "INFO", "WARN", "ERROR"), default="ERROR"
        ),
        choices=["DEBUG", "INFO", "WARN", "ERROR"],
        help="set the logging level",
    )

    return parser


def _session_provider(args):
    """Returns the session provider selected by `--auth`."""
    if args.auth == "cli":
        return CredsViaAzureCLI(tenant_id=args.tenant)
    return CredsViaAzureDefault(authority=args.authority)


def config_filename():
    """Returns the path to the user configuration."""
    return os.environ.get(CONFIG_ENV_VAR, Path.home() / ".vnetreport.yaml")


if __name__ == "__main__":
    main()
