"""
CLI utilities for command line reconstruction and target loading.
"""

from __future__ import annotations

import importlib
from pathlib import Path

import click

from .collection import TypeCollection
from .registry import collect

PROGRAM = "typesync"


def reconstruct_command_line(click_command: click.Command) -> str:
    """
    Reconstruct command line from current Click context using introspection.

    Args:
        click_command: Click command object for introspection

    Returns:
        Reconstructed command line string
    """
    try:
        ctx = click.get_current_context()
        cli_args = ctx.params
    except RuntimeError:
        # No active context
        return PROGRAM

    if not cli_args:
        return PROGRAM

    cmd_parts = [PROGRAM]
    arguments = []
    options = []

    for param in click_command.params:
        param_name = param.name
        if param_name not in cli_args:
            continue

        value = cli_args[param_name]
        if not value:
            continue

        # File paths are shown by name only
        if isinstance(value, Path) or (isinstance(value, str) and Path(value).exists()):
            path_obj = Path(str(value))
            formatted_value = path_obj.name if path_obj.exists() else str(value)
        else:
            formatted_value = str(value)

        if isinstance(param, click.Argument):
            arguments.append(formatted_value)
        elif isinstance(param, click.Option):
            if value == param.default:
                continue
            flag = param.opts[0] if param.opts else f"--{param_name}"
            if param.is_flag:
                options.append(flag)
            else:
                options.extend([flag, formatted_value])

    cmd_parts.extend(arguments)
    cmd_parts.extend(options)

    return " ".join(cmd_parts)


def load_collection(target: str, registry: bool = False) -> TypeCollection:
    """
    Load the collection named by a command line target.

    Args:
        target: `module:attribute` naming a TypeCollection, or a callable
            returning one; with `registry`, a module whose import records
            types in the process-wide registry
        registry: Whether to collect from the process-wide registry

    Returns:
        The collection to export

    Raises:
        click.BadParameter: If the target cannot be imported or is not a collection
    """
    module_name, _, attribute = target.partition(":")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"Cannot import {module_name!r}: {e}", param_hint="TARGET") from e

    if registry:
        if attribute:
            raise click.BadParameter("--registry takes a module, not module:attribute", param_hint="TARGET")
        return collect()

    if not attribute:
        raise click.BadParameter("Expected module:attribute, or a module with --registry", param_hint="TARGET")

    try:
        value = getattr(module, attribute)
    except AttributeError as e:
        raise click.BadParameter(f"{module_name!r} has no attribute {attribute!r}", param_hint="TARGET") from e

    if callable(value) and not isinstance(value, TypeCollection):
        value = value()
    if not isinstance(value, TypeCollection):
        raise click.BadParameter(f"{target!r} is not a TypeCollection", param_hint="TARGET")
    return value
