#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Argparse formatter and actions used by the vnetreport CLI."""

import argparse


class RawAndDefaultsFormatter(
    argparse.ArgumentDefaultsHelpFormatter, argparse.RawDescriptionHelpFormatter
):
    """Help formatter that keeps the description verbatim and shows defaults."""


class AppendWithoutDefault(argparse.Action):
    """Argparse action that appends to a list, replacing rather than extending the default.

    With the builtin `append` action, values given on the command line are
    appended to the default list. Defaults for the vnetreport CLI come from the
    user's configuration file, so a subscription listed there would always be
    included. This action only uses the default when the flag is absent:

        >>> parser = argparse.ArgumentParser()
        >>> parser.add_argument('--subscription', action=AppendWithoutDefault, default=['a'])
        >>> parser.parse_args('--subscription b --subscription c'.split())
        Namespace(subscription=['b', 'c'])
        >>> parser.parse_args('')
        Namespace(subscription=['a'])
    """

    def __init__(self, *args, **kwargs):
        self.has_been_called = False
        super().__init__(*args, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        current = [] if not self.has_been_called else getattr(namespace, self.dest)
        current.append(values)
        setattr(namespace, self.dest, current)
        self.has_been_called = True
