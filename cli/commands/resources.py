# cli/commands/resources.py
"""Resource pool commands."""

import json
import sys
from pathlib import Path
from typing import Dict, Optional, Tuple

import click

from lockable.config import get_settings
from lockable.resources.definitions import load_definitions
from lockable.resources.pool import ConfigurationError, ReservationError, ResourcePool
from lockable.resources.requirements import (
    RequirementValidationError,
    parse_requirement,
    validate_requirement
)
from lockable.scheduler.admission import AdmissionAdapter, QueueItem


def _load_pool(resource_file: Optional[Path]) -> ResourcePool:
    path = resource_file or Path(get_settings().resources_file)
    try:
        return load_definitions(path).build_pool()
    except ConfigurationError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)


def _pairs(values: Tuple[str, ...], option: str) -> Dict[str, str]:
    pairs = {}
    for value in values:
        key, sep, val = value.partition('=')
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {value!r}", param_hint=option)
        pairs[key] = val
    return pairs


file_option = click.option(
    '--file', '-f', 'resource_file',
    type=click.Path(path_type=Path),
    help='Resource definitions YAML (defaults to LOCKABLE_RESOURCES_FILE)'
)

requirement_options = [
    click.option('--names', help='Whitespace separated resource names'),
    click.option('--labels', help='Whitespace separated labels'),
    click.option('--numbers', help='Whitespace separated count per label'),
]


def with_requirement_options(func):
    for option in reversed(requirement_options):
        func = option(func)
    return func


@click.group()
def resources():
    """Inspect lockable resources and check requirements."""
    pass


# ============================================================================
# Pool Commands
# ============================================================================

@resources.command('list')
@file_option
@click.option('--json', 'as_json', is_flag=True, help='Output as JSON')
def list_resources(resource_file: Optional[Path], as_json: bool):
    """List defined resources."""
    pool = _load_pool(resource_file)

    if as_json:
        click.echo(json.dumps([r.to_dict() for r in pool], indent=2))
        return

    if not len(pool):
        click.echo("No resources defined.")
        return

    for resource in pool:
        labels = " ".join(sorted(resource.labels)) or "-"
        state = f"reserved by {resource.reserved_by}" if resource.reserved_by else "free"
        click.echo(f"{resource.name:<24} {labels:<32} {state}")


@resources.command()
@file_option
def labels(resource_file: Optional[Path]):
    """List every label carried by a resource."""
    pool = _load_pool(resource_file)
    for label in pool.labels():
        click.echo(f"{label:<24} {len(pool.with_label(label))}")


# ============================================================================
# Requirement Commands
# ============================================================================

@resources.command()
@file_option
@with_requirement_options
def validate(
    resource_file: Optional[Path],
    names: Optional[str],
    labels: Optional[str],
    numbers: Optional[str]
):
    """Validate a requirement against the defined resources."""
    pool = _load_pool(resource_file)

    try:
        requirement = parse_requirement(names=names, labels=labels, numbers=numbers)
    except RequirementValidationError as e:
        for error in e.errors:
            click.echo(f"❌ {error}", err=True)
        sys.exit(1)

    report = validate_requirement(requirement, pool)
    if not report.ok:
        for error in report.errors:
            click.echo(f"❌ {error}", err=True)
        sys.exit(1)

    click.echo("✅ Requirement is valid")


@resources.command()
@file_option
@with_requirement_options
@click.option('--item', 'item_id', default='1', show_default=True, help='Queue item id')
@click.option('--param', 'params', multiple=True, help='Matrix parameter KEY=VALUE')
@click.option('--held', multiple=True, help='Pre-reserve RESOURCE=ITEM before checking')
def check(
    resource_file: Optional[Path],
    names: Optional[str],
    labels: Optional[str],
    numbers: Optional[str],
    item_id: str,
    params: Tuple[str, ...],
    held: Tuple[str, ...]
):
    """Run one admission check against a freshly loaded pool."""
    pool = _load_pool(resource_file)

    try:
        requirement = parse_requirement(names=names, labels=labels, numbers=numbers)
        validate_requirement(requirement, pool).raise_for_errors()

        holders: Dict[str, list] = {}
        for resource_name, holder in _pairs(held, '--held').items():
            holders.setdefault(holder, []).append(resource_name)
        for holder, resource_names in holders.items():
            pool.reserve_all(resource_names, holder)

        adapter = AdmissionAdapter(pool)
        result = adapter.can_run(QueueItem(
            item_id=item_id,
            requirement=requirement,
            params=_pairs(params, '--param'),
        ))
    except RequirementValidationError as e:
        for error in e.errors:
            click.echo(f"❌ {error}", err=True)
        sys.exit(1)
    except (ConfigurationError, ReservationError) as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    if result.admitted:
        click.echo(f"✅ Admitted: {' '.join(result.reserved) or '(no resources)'}")
    else:
        click.echo(f"⏳ Blocked: {result.reason.short_description}")
        sys.exit(2)
