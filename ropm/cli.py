"""Command-line interface for the ROPM generator."""

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ropm import __version__
from ropm.config import load_config
from ropm.core.intake import parse_record
from ropm.output.pdf_report import ROPMReportGenerator
from ropm.utils.assets import LEFT_INSIGNIA, RIGHT_INSIGNIA, resolve_image
from ropm.utils.exceptions import ConfigError, ROPMError

console = Console()


def print_status(status: str, message: str) -> None:
    """Print a status message with consistent formatting.

    Args:
        status: Status indicator ([OK], [FAIL], [WARN], [INFO], [ERROR])
        message: Message to display
    """
    color_map = {
        "[OK]": "green",
        "[FAIL]": "red",
        "[WARN]": "yellow",
        "[INFO]": "blue",
        "[ERROR]": "red bold",
    }
    color = color_map.get(status, "white")
    console.print(f"[{color}]{status}[/{color}] {message}", highlight=False)


def _safe_filename(name: str) -> str:
    """Keep a bulletin-derived file name in the current directory."""
    return name.replace("/", "-").replace("\\", "-")


def _load_config_or_exit(config_path, **overrides):
    try:
        return load_config(config_path, **overrides)
    except ConfigError as e:
        print_status("[ERROR]", str(e))
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="ropm")
@click.option("-v", "--verbose", count=True, help="Verbosity level (-v for debug logging)")
def main(verbose: int):
    """ROPM Generator - PDF bulletins for military police incident records.

    Serves the entry form and the PDF endpoint over HTTP, or renders
    records saved as JSON straight to PDF.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@main.command()
@click.option("--host", help="Interface to listen on (default: 0.0.0.0)")
@click.option("--port", type=int, help="Port to listen on (default: 3000)")
@click.option("--base-dir", type=click.Path(file_okay=False), help="Directory holding fonts/, public/ and assets/")
@click.option("-c", "--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="YAML or JSON configuration file")
def serve(host: str, port: int, base_dir: str, config_path: str):
    """Run the HTTP server."""
    import uvicorn

    from ropm.api.app import create_app

    config = _load_config_or_exit(config_path, host=host, port=port, base_dir=base_dir)
    console.print(Panel(
        f"[bold]ROPM Generator {__version__}[/bold]\n"
        f"Listening on http://{config.host}:{config.port}\n"
        f"Base directory: {config.base_dir}",
        style="blue",
    ))
    uvicorn.run(create_app(config), host=config.host, port=config.port)


@main.command()
@click.argument("record_file", type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--output", type=click.Path(dir_okay=False), help="Output file (default: ROPM_<boletim>.pdf)")
@click.option("--layout", is_flag=True, help="Write the document tree as JSON instead of a PDF")
@click.option("--base-dir", type=click.Path(file_okay=False), help="Directory holding fonts/, public/ and assets/")
@click.option("-c", "--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="YAML or JSON configuration file")
def render(record_file: str, output: str, layout: bool, base_dir: str, config_path: str):
    """Render a record saved as JSON.

    RECORD_FILE holds the same JSON object the web form posts.
    """
    config = _load_config_or_exit(config_path, base_dir=base_dir)

    try:
        with open(record_file, "r", encoding="utf-8") as f:
            payload = json.load(f)

        generator = ROPMReportGenerator(config)
        record = parse_record(payload)

        if layout:
            definition = json.dumps(generator.compose(record), ensure_ascii=False, indent=2)
            if output:
                Path(output).write_text(definition, encoding="utf-8")
                print_status("[OK]", f"Layout saved to: {output}")
            else:
                click.echo(definition)
            return

        output_path = Path(output or _safe_filename(record.download_filename))
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(generator.generate(record))
        print_status("[OK]", f"Report saved to: {output_path}")

    except json.JSONDecodeError as e:
        print_status("[ERROR]", f"Invalid JSON in {record_file}: {e}")
        sys.exit(1)
    except ROPMError as e:
        print_status("[ERROR]", str(e))
        sys.exit(1)
    except OSError as e:
        print_status("[ERROR]", f"File error: {e}")
        sys.exit(1)


@main.command()
@click.option("--base-dir", type=click.Path(file_okay=False), help="Directory holding fonts/, public/ and assets/")
@click.option("-c", "--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="YAML or JSON configuration file")
def info(base_dir: str, config_path: str):
    """Show the resolved configuration, fonts and insignia."""
    config = _load_config_or_exit(config_path, base_dir=base_dir)
    generator = ROPMReportGenerator(config)

    console.print(Panel(
        f"[bold]ROPM Generator {__version__}[/bold]\n"
        f"Base directory: {config.base_dir}\n"
        f"Server: {config.host}:{config.port}",
        title="About",
        style="blue",
    ))

    table = Table(title="Fonts", show_header=True, header_style="bold")
    table.add_column("Face", style="cyan")
    table.add_column("File")
    for face, path in generator.font_set.as_dict().items():
        table.add_row(face, path.name if path else "[yellow]built-in Helvetica[/yellow]")
    console.print(table)
    if generator.renderer.uses_builtin_fonts:
        print_status("[WARN]", f"No usable TrueType fonts in {config.fonts_dir}; PDFs use Helvetica")

    table = Table(title="Insignia", show_header=True, header_style="bold")
    table.add_column("Image", style="cyan")
    table.add_column("Status")
    for name in (LEFT_INSIGNIA, RIGHT_INSIGNIA):
        found = resolve_image(name, config.asset_dirs) is not None
        table.add_row(name, "[green]found[/green]" if found else "[yellow]missing[/yellow]")
    console.print(table)


if __name__ == "__main__":
    main()
