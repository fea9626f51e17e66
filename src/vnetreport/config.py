#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Reads the vnetreport user configuration with type-checked values.

## Overview

`Config` wraps the dict parsed from a user configuration file and provides
default values, mandatory values, and type checking of the values read from it.
Two file formats are supported out of the box: YAML via `YAMLConfig` and JSON
via `JSONConfig`. `Config.from_file` picks the right one from the file
extension.

The vnetreport CLI reads its defaults from the `CLI` section of the file. For
example, given the following `~/.vnetreport.yaml`:

    CLI:
      threads: 4
      output: csv
      exclude_subscription:
        - 00000000-0000-0000-0000-000000000000

The values are read as follows:

    c = Config.from_file(Path.home() / ".vnetreport.yaml")
    assert c.get("CLI", "threads", type=Int, default=10) == 4
    assert c.get("CLI", "output", type=Choice("table", "json", "csv")) == "csv"
    assert c.get("CLI", "loader", type=Str, default="cli") == "cli"

## Type Checking

Types are objects defined in this module: `Str`, `Int`, `Bool`, and
`SubscriptionID` are ready to use, while `Choice`, `Or`, `StrMatch`, and `List`
are instantiated to build more specific types such as `List(SubscriptionID)`.
If a value does not match its type, a `TypeError` naming the offending key path
is raised.
"""

import json
import logging
import re
from functools import reduce
from pathlib import Path

import yaml

LOG = logging.getLogger(__name__)

# pylint: disable=unidiomatic-typecheck
#
# isinstance(True, int) is true, so exact type comparisons are used throughout
# this module. A bool must not pass as an int.


class Config:
    """Type-checked, read-only access to a nested configuration dict."""

    _filetypes = {}

    @classmethod
    def register_filetype(cls, config_class, *extensions):
        """Register `config_class` as the parser for the `extensions`.

        Extensions are specified as '.ext'. A later registration for the same
        extension replaces the earlier one.
        """
        for ext in extensions:
            cls._filetypes[ext] = config_class

    @classmethod
    def from_file(cls, filename, must_exist=False):
        """Load a `Config` from `filename` using the parser for its extension.

        A missing file returns an empty `Config` unless `must_exist` is true, in
        which case `FileNotFoundError` is raised. An unknown extension raises a
        `ValueError`.
        """
        path = Path(filename)

        if not path.is_file():
            if must_exist:
                raise FileNotFoundError(f"Config file not found: {filename}")
            LOG.info("no config file at %s, using defaults", path)
            return Config({})

        if path.suffix not in cls._filetypes:
            raise ValueError(f"Unregistered file type extension: {path.suffix}")

        LOG.info("loading config from %s", path)
        with path.open(encoding="utf-8") as f:
            return cls._filetypes[path.suffix](f)

    def __init__(self, d):
        # An empty YAML document parses as None.
        self.conf = d or {}

    def get(self, *keys, default=None, type=None, must_exist=False):
        """Return the value found by following `keys` into the config.

        If nothing is found, `default` is returned, unless `must_exist` is true,
        in which case a `ValueError` is raised. When `type` is given, the value
        must type check or a `TypeError` is raised:

            c.get("CLI", "threads", type=Int, default=10)
            c.get("CLI", "subscription", type=List(SubscriptionID), default=[])
        """
        # pylint: disable=redefined-builtin
        try:
            value = reduce(lambda a, p: a.get(p, {}), keys, self.conf)
        except AttributeError as e:
            raise ValueError(
                f"Error in config: {'->'.join(keys[:-1])}: not a dictionary"
            ) from e

        # {} is what the reduce above returns for a missing key.
        if value == {}:
            if must_exist:
                raise ValueError(f"Error in config: {'->'.join(keys)}: must be set")
            value = default

        if value is None or not type:
            return value

        if type.type_check(value):
            return value

        raise TypeError(
            f"Error in config: {'->'.join(keys)}: not a {type}: {repr(value)}"
        )


class YAMLConfig(Config):
    """Loads a YAML configuration from a stream."""

    def __init__(self, stream):
        super().__init__(yaml.safe_load(stream))


class JSONConfig(Config):
    """Loads a JSON configuration from a stream."""

    def __init__(self, stream):
        super().__init__(json.load(stream))


Config.register_filetype(JSONConfig, ".json")
Config.register_filetype(YAMLConfig, ".yaml", ".yml")


class Type:
    """Represents a type that can be used in type-check comparisons."""

    def type_check(self, obj):
        """Returns true if obj is a type matching this `Type`."""
        raise NotImplementedError

    def __str__(self):
        raise NotImplementedError


class Or(Type):
    """Represents a type that is one of the `config_types`."""

    def __init__(self, *config_types):
        self.config_types = config_types

    def type_check(self, obj):
        return any(t.type_check(obj) for t in self.config_types)

    def __str__(self):
        return "(" + " or ".join(str(t) for t in self.config_types) + ")"


class Const(Type):
    """Represents a constant value."""

    def __init__(self, const):
        self.const = const

    def type_check(self, obj):
        # True == 1, so the types have to match before the values are compared.
        if type(obj) != type(self.const):  # noqa: E721
            return False
        return obj == self.const

    def __str__(self):
        return f"constant '{self.const}'"


class Choice(Or):
    """Represents a choice of constants, such as `Choice("table", "json")`."""

    def __init__(self, *constants):
        super().__init__(*[Const(c) for c in constants])


class Scalar(Type):
    """Represents a value whose type is exactly the builtin `type_`."""

    def __init__(self, type_):
        self.type = type_

    def type_check(self, obj):
        return type(obj) == self.type  # noqa: E721

    def __str__(self):
        return self.type.__name__


class StrMatch(Type):
    """Represents a string matching `pattern` via `re.search`."""

    def __init__(self, pattern):
        self.pattern = pattern

    def type_check(self, obj):
        if type(obj) != str:  # noqa: E721
            return False
        return bool(re.search(self.pattern, obj))

    def __str__(self):
        return f"str matching '{self.pattern}'"


class List(Type):
    """Represents a list whose elements are all of `element_type`."""

    def __init__(self, element_type):
        self.element_type = element_type

    def type_check(self, obj):
        if type(obj) != list:  # noqa: E721
            return False
        return all(self.element_type.type_check(e) for e in obj)

    def __str__(self):
        return f"list of {self.element_type}"


Str = Scalar(str)
"""Singleton representing a str."""

Int = Scalar(int)
"""Singleton representing an int."""

Bool = Scalar(bool)
"""Singleton representing a bool."""

SubscriptionID = StrMatch(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)
"""Singleton representing an Azure subscription ID (a GUID)."""
