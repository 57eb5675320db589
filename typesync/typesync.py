import json

import click

from .cli_utils import load_collection, reconstruct_command_line
from .config import BigIntBehavior, ExportConfig, Language, Layout
from .errors import TypesyncError
from .export import export_to
from .logger import configure_root_logger, get_logger

logger = get_logger(__name__)


@click.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--language", "-l", default=None, type=click.Choice([lang.value for lang in Language]))
@click.option("--layout", default=None, type=click.Choice([layout.value for layout in Layout]))
@click.option("--bigint", default=None, type=click.Choice([b.value for b in BigIntBehavior]))
@click.option(
    "--registry",
    is_flag=True,
    default=False,
    help="Export every type recorded in the process-wide registry by importing TARGET",
)
@click.option("--log-level", default="WARNING", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]))
@click.argument("target", type=str)
@click.argument("output", type=click.Path(resolve_path=True))
def typesync(config, language, layout, bigint, registry, log_level, target, output):
    configure_root_logger(log_level)

    if config is not None:
        with open(config) as f:
            config = ExportConfig.from_dict(json.load(f))
    else:
        config = ExportConfig()

    # Command line flags override the config file
    if language is not None:
        config.language = Language(language)
    if layout is not None:
        config.layout = Layout(layout)
    if bigint is not None:
        config.bigint = BigIntBehavior(bigint)

    config.generation_comment = f"Generated by: {reconstruct_command_line(typesync)}"

    types = load_collection(target, registry)
    try:
        written = export_to(config, output, types)
    except TypesyncError as e:
        raise click.ClickException(str(e)) from e

    for path in written:
        logger.info(f"Wrote {path}")
