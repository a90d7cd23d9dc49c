import pathlib
import sys

import click
from autoinject import injector

from sharestore.boot import init_sharestore
from sharestore.storage import StorageController, StorageOperationError, StorageInitError


@click.group
def main():
    init_sharestore("cli")


def _entity_line(entity) -> str:
    if entity.is_dir():
        return f"d {'-': >12} {entity.path}"
    size = entity.content_length if entity.has_content_length() else 0
    return f"f {size: >12} {entity.path}"


def _fail(ex: Exception):
    click.echo(f"{ex.__class__.__name__}: {str(ex)}", err=True)
    sys.exit(1)


@main.command
@click.argument("storage_name")
@click.argument("path")
@injector.inject
def mkdir(storage_name: str, path: str, controller: StorageController = None):
    try:
        entity = controller.get_storage(storage_name).create_dir(path)
        click.echo(entity.id)
    except (StorageOperationError, StorageInitError) as ex:
        _fail(ex)


@main.command
@click.argument("storage_name")
@click.argument("path", default="")
@injector.inject
def ls(storage_name: str, path: str, controller: StorageController = None):
    try:
        for entity in controller.get_storage(storage_name).list(path):
            click.echo(_entity_line(entity))
    except (StorageOperationError, StorageInitError) as ex:
        _fail(ex)


@main.command
@click.argument("storage_name")
@click.argument("path")
@click.option("--dir", "as_dir", is_flag=True, default=False)
@injector.inject
def stat(storage_name: str, path: str, as_dir: bool, controller: StorageController = None):
    try:
        entity = controller.get_storage(storage_name).stat(path, as_dir=as_dir)
        click.echo(f"id: {entity.id}")
        click.echo(f"path: {entity.path}")
        click.echo(f"mode: {'dir' if entity.is_dir() else 'file'}")
        if entity.has_content_length():
            click.echo(f"size: {entity.content_length}")
        if entity.content_type:
            click.echo(f"content type: {entity.content_type}")
        if entity.last_modified:
            click.echo(f"last modified: {entity.last_modified.isoformat()}")
    except (StorageOperationError, StorageInitError) as ex:
        _fail(ex)


@main.command
@click.argument("storage_name")
@click.argument("source_file", type=click.Path(exists=True, dir_okay=False, path_type=pathlib.Path))
@click.argument("path")
@click.option("--content-type", default=None)
@injector.inject
def put(storage_name: str, source_file: pathlib.Path, path: str, content_type: str, controller: StorageController = None):
    try:
        with open(source_file, "rb") as src:
            entity = controller.get_storage(storage_name).write(
                path,
                src,
                size=source_file.stat().st_size,
                content_type=content_type
            )
        click.echo(entity.id)
    except (StorageOperationError, StorageInitError) as ex:
        _fail(ex)


@main.command
@click.argument("storage_name")
@click.argument("path")
@click.argument("target_file", type=click.Path(dir_okay=False, path_type=pathlib.Path))
@click.option("--overwrite", is_flag=True, default=False)
@injector.inject
def get(storage_name: str, path: str, target_file: pathlib.Path, overwrite: bool, controller: StorageController = None):
    if target_file.exists() and not overwrite:
        _fail(FileExistsError(f"{target_file} already exists"))
    try:
        with open(target_file, "wb") as dest:
            for chunk in controller.get_storage(storage_name).read(path):
                dest.write(chunk)
    except (StorageOperationError, StorageInitError) as ex:
        target_file.unlink(True)
        _fail(ex)


@main.command
@click.argument("storage_name")
@click.argument("path")
@click.option("--dir", "as_dir", is_flag=True, default=False)
@injector.inject
def rm(storage_name: str, path: str, as_dir: bool, controller: StorageController = None):
    try:
        controller.get_storage(storage_name).delete(path, as_dir=as_dir)
    except (StorageOperationError, StorageInitError) as ex:
        _fail(ex)
