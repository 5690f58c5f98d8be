"""Custom argparse Action classes for the mymd CLI.

Options built on these actions take their default from an environment variable named
``MYMD_<DEST>``, where ``<DEST>`` is the option's destination in upper case.
Arguments given on the command line always win.
"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

from __future__ import annotations

import argparse
import logging
import os

from mymd.constants import ENV_VAR_PREFIX

_TRUE_VALUES = ("true", "1", "yes", "on")


def env_key_for(dest: str) -> str:
    """Name of the environment variable backing an option destination."""
    return f"{ENV_VAR_PREFIX}{dest.upper().replace('-', '_')}"


class EnvironmentAwareAction(argparse.Action):
    """Store action whose default may come from the environment.

    Values read from the environment go through the option's ``type`` and
    ``choices`` like command-line values. An invalid value is logged and
    ignored.
    """

    def __init__(self, option_strings, *args, **kwargs):
        dest = kwargs.get("dest")

        if dest:
            env_key = env_key_for(dest)
            env_value = os.environ.get(env_key)
            if env_value is not None:
                try:
                    kwargs["default"] = self._convert_env_value(env_value, kwargs)
                except (ValueError, TypeError) as e:
                    logging.warning(f"Invalid environment variable {env_key}={env_value}: {e}")

        super().__init__(option_strings, *args, **kwargs)

    @staticmethod
    def _convert_env_value(env_value: str, kwargs: dict):
        """Convert an environment variable string with the option's type."""
        converter = kwargs.get("type")
        value = converter(env_value) if converter is not None else env_value
        choices = kwargs.get("choices")
        if choices is not None and value not in choices:
            raise ValueError(f"expected one of {', '.join(map(str, choices))}")
        return value

    def __call__(self, parser, namespace, values, option_string=None):
        """Store the parsed value."""
        setattr(namespace, self.dest, values)


class EnvironmentAwareBooleanAction(argparse._StoreTrueAction):
    """Boolean flag whose default may come from the environment."""

    def __init__(self, option_strings, *args, **kwargs):
        dest = kwargs.get("dest")

        if dest:
            env_value = os.environ.get(env_key_for(dest))
            if env_value is not None:
                kwargs["default"] = env_value.lower() in _TRUE_VALUES

        super().__init__(option_strings, *args, **kwargs)


class EnvironmentAwareBooleanFalseAction(argparse._StoreFalseAction):
    """Negative flag (``--no-*``) whose default may come from the environment.

    The variable holds the positive setting: ``MYMD_PARSE_FRONT_MATTER=false``
    has the same effect as passing ``--no-front-matter``.
    """

    def __init__(self, option_strings, *args, **kwargs):
        dest = kwargs.get("dest")

        if dest:
            env_value = os.environ.get(env_key_for(dest))
            if env_value is not None:
                kwargs["default"] = env_value.lower() in _TRUE_VALUES

        super().__init__(option_strings, *args, **kwargs)
