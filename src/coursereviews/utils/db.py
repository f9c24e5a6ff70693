"""Schema management for SQL-backed deployments (``PROTEAN_ENV=production``).

The in-memory provider used in development and tests needs no schema, so
both operations are no-ops there.
"""

from protean.domain import Domain
from sqlalchemy import create_engine

SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain):
    for provider in domain.providers.values():
        if provider.conn_info["provider"] in SQL_PROVIDERS:
            yield provider, create_engine(provider.conn_info["database_uri"])


def setup_db(domain: Domain) -> list[str]:
    """Create the tables of users, courses, reviews, responses and statistics.

    Returns the names of the tables now present in the schema.
    """
    created = []
    with domain.domain_context():
        for provider, engine in _sql_providers(domain):
            # Building the DAO registers the aggregate's table on the provider's metadata
            for record in domain.registry.aggregates.values():
                if record.cls.meta_.provider == provider.name:
                    domain.repository_for(record.cls)._dao  # noqa: B018

            provider._metadata.create_all(engine)
            created.extend(sorted(provider._metadata.tables))
    return created


def drop_db(domain: Domain) -> None:
    with domain.domain_context():
        for provider, engine in _sql_providers(domain):
            provider._metadata.drop_all(engine)
