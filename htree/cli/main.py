"""
Command-line interface for H-tree generation.

This module provides a CLI for rendering H-tree animations and still
images with all configuration options.
"""

import click
import sys
import json
from pathlib import Path
import logging

from .. import __version__
from ..api import AnimationConfig, HTreeAnimator, MODES
from ..rendering.image_output import ColorRGB

logger = logging.getLogger(__name__)


def _load_config(ctx) -> AnimationConfig:
    """Load the base configuration from ``--config`` or defaults."""
    config_file = ctx.obj.get('config_file')
    if config_file:
        return AnimationConfig.from_file(config_file)
    return AnimationConfig()


def _parse_color(ctx, param, value):
    """Convert a hex colour option into an RGB tuple."""
    if value is None:
        return None
    try:
        return ColorRGB.from_hex(value).to_tuple()
    except ValueError as e:
        raise click.BadParameter(str(e))


def _apply_overrides(config: AnimationConfig, overrides: dict) -> AnimationConfig:
    """Apply command-line options that were actually given."""
    for key, value in overrides.items():
        if value is not None:
            setattr(config, key, value)
    config.validate()
    return config


def _fail(ctx, error: Exception):
    click.echo(f"Error: {error}", err=True)
    if ctx.obj.get('verbose'):
        import traceback
        traceback.print_exc()
    sys.exit(1)


@click.group(invoke_without_command=True)
@click.option('--version', is_flag=True, help='Show version information')
@click.option('--config', type=click.Path(exists=True), help='Configuration file path (JSON)')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--quiet', '-q', is_flag=True, help='Suppress most output')
@click.pass_context
def main(ctx, version, config, verbose, quiet):
    """
    H-Tree Generator - animated H-tree fractal frames.

    Grow an H-tree fractal level by level and write the frames as an
    animated GIF or a single PNG still.
    """
    # Setup logging
    if quiet:
        logging.basicConfig(level=logging.ERROR)
    elif verbose:
        logging.basicConfig(level=logging.DEBUG,
                            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    else:
        logging.basicConfig(level=logging.INFO,
                            format='%(levelname)s: %(message)s')

    if version:
        click.echo(f"H-Tree Generator v{__version__}")
        click.echo(f"Python: {sys.version}")

        if ctx.invoked_subcommand is None:
            sys.exit(0)

    # Store global options in context
    ctx.ensure_object(dict)
    ctx.obj['config_file'] = config
    ctx.obj['verbose'] = verbose
    ctx.obj['quiet'] = quiet


@main.command()
@click.argument('output', type=click.Path())
@click.option('--frames', type=int, help='Number of animation frames')
@click.option('--size', '-s', type=int, help='Canvas width and height in pixels')
@click.option('--levels', type=int, help='Growth levels per frame (rotate mode)')
@click.option('--turn-speed', type=float, help='Gradient change added per frame')
@click.option('--initial-gradient', type=float, help='Gradient change of the first frame')
@click.option('--mode', type=click.Choice(MODES), help='Animate rotation or growth')
@click.option('--delay', 'delay_ms', type=int, help='Frame duration in milliseconds')
@click.option('--workers', 'num_workers', type=int, help='Workers for parallel rasterization')
@click.option('--background', callback=_parse_color, help='Background colour as hex, e.g. FFFFFF')
@click.option('--foreground', callback=_parse_color, help='Line colour as hex, e.g. FFAA00')
@click.option('--processes', is_flag=True, help='Use worker processes instead of threads')
@click.pass_context
def animate(ctx, output, processes, **kwargs):
    """
    Render an animated GIF.

    OUTPUT: Output GIF file path
    """
    try:
        config = _load_config(ctx)
        if processes:
            kwargs['use_threads'] = False
        config = _apply_overrides(config, kwargs)

        animator = HTreeAnimator(config)

        def progress_callback(completed, total):
            if not ctx.obj.get('quiet'):
                click.echo(f"Rendered frame {completed}/{total}")

        click.echo(f"Rendering {config.frames} frames ({config.mode})...")
        path = animator.create_animation(Path(output), progress_callback)
        click.echo(f"Saved: {path}")

    except (ValueError, OSError) as e:
        _fail(ctx, e)


@main.command()
@click.argument('output', type=click.Path())
@click.option('--size', '-s', type=int, help='Canvas width and height in pixels')
@click.option('--levels', type=int, help='Growth levels')
@click.option('--gradient', 'initial_gradient', type=float, help='Gradient change')
@click.option('--workers', 'num_workers', type=int, help='Workers for parallel rasterization')
@click.option('--background', callback=_parse_color, help='Background colour as hex, e.g. FFFFFF')
@click.option('--foreground', callback=_parse_color, help='Line colour as hex, e.g. FFAA00')
@click.pass_context
def render(ctx, output, **kwargs):
    """
    Render a single PNG still.

    OUTPUT: Output PNG file path
    """
    try:
        config = _apply_overrides(_load_config(ctx), kwargs)
        path = HTreeAnimator(config).render_still(Path(output))
        click.echo(f"Saved: {path}")

    except (ValueError, OSError) as e:
        _fail(ctx, e)


@main.command()
@click.pass_context
def info(ctx):
    """Show the resolved configuration."""
    try:
        config = _load_config(ctx)
        config.validate()
        click.echo(json.dumps(config.to_dict(), indent=2))

    except (ValueError, OSError) as e:
        _fail(ctx, e)


if __name__ == '__main__':
    main()
