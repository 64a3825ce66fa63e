import json
from pathlib import Path
import click
from .logic import verify_data_dir, verify_segment

def _emit(result: dict):
    click.echo(json.dumps(result, sort_keys=True, separators=(",", ":"), ensure_ascii=False))
    if result["status"] != "PASS":
        raise SystemExit(1)

@click.group()
def main():
    pass

@main.command("segment")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def segment_cmd(path: Path):
    _emit(verify_segment(path))

@main.command("data-dir")
@click.argument("path", type=click.Path(exists=True, file_okay=False, path_type=Path))
def data_dir_cmd(path: Path):
    _emit(verify_data_dir(path))

if __name__ == "__main__":
    main()
