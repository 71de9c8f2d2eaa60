"""
Record store probe.

Run before the dashboards to confirm every expected collection exists::

    haven-check-store
    haven-check-store --database-url sqlite:///haven.db --json
"""

import json
import logging
import sys
from dataclasses import asdict, dataclass, field
from typing import List, Optional, Sequence

import click
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from haven.config.database import get_engine
from haven.core.exceptions import RelationMissing
from haven.repositories.base import translate_store_error

logger = logging.getLogger(__name__)

COLLECTIONS: Sequence[str] = (
    "profiles",
    "students",
    "rooms",
    "attendance",
    "fees",
    "complaints",
    "notices",
    "queries",
    "mess_menu",
)

EXISTS = "EXISTS"
EMPTY = "EMPTY"
MISSING = "MISSING"


@dataclass
class ProbeResult:
    collection: str
    status: str
    columns: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status in (EXISTS, EMPTY)


def probe_collection(engine: Engine, collection: str) -> ProbeResult:
    """
    Select one row from ``collection``.

    A row yields ``EXISTS`` with its column names; no row yields ``EMPTY``
    (the schema cannot be inferred); an absent relation yields ``MISSING``;
    any other failure yields the raw error text.
    """
    try:
        with engine.connect() as conn:
            result = conn.execute(text(f'SELECT * FROM "{collection}" LIMIT 1'))
            row = result.first()
            if row is None:
                return ProbeResult(collection, EMPTY)
            return ProbeResult(collection, EXISTS, list(result.keys()))
    except SQLAlchemyError as exc:
        translated = translate_store_error(exc, collection)
        if isinstance(translated, RelationMissing):
            return ProbeResult(collection, MISSING)
        return ProbeResult(collection, str(getattr(exc, "orig", None) or exc))


def probe_store(engine: Engine, collections: Sequence[str] = COLLECTIONS) -> List[ProbeResult]:
    results = [probe_collection(engine, name) for name in collections]
    for r in results:
        logger.debug(f"Probe {r.collection}: {r.status}")
    return results


@click.command()
@click.option("--database-url", envvar="DATABASE_URL", help="Store to probe (defaults to settings)")
@click.option("--collection", "-c", "collections", multiple=True, help="Probe only these collections")
@click.option("--json", "as_json", is_flag=True, help="Emit results as JSON")
def main(database_url: Optional[str], collections: Sequence[str], as_json: bool) -> None:
    """Report per-collection status of the record store."""
    engine = create_engine(database_url) if database_url else get_engine()
    results = probe_store(engine, collections or COLLECTIONS)

    if as_json:
        click.echo(json.dumps([asdict(r) for r in results], indent=2))
    else:
        for r in results:
            colour = "green" if r.ok else "red"
            line = f"{r.collection:<12} {click.style(r.status, fg=colour)}"
            if r.columns:
                line += f"  ({', '.join(r.columns)})"
            click.echo(line)

    if not all(r.ok for r in results):
        sys.exit(1)


if __name__ == "__main__":
    main()
