from collections.abc import Iterator

from protean.domain import Domain
from sqlalchemy import create_engine

SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain) -> Iterator:
    for provider in domain.providers.values():
        if provider.conn_info["provider"] in SQL_PROVIDERS:
            yield provider


def setup_db(domain: Domain) -> list[str]:
    """Create the Order, Payment and Shipment tables (with order items) on every SQL provider.

    Returns the names of the tables the metadata now knows about.
    """
    tables = []
    with domain.domain_context():
        for provider in _sql_providers(domain):
            records = [*domain.registry.aggregates.values(), *domain.registry.entities.values()]
            for record in records:
                if record.cls.meta_.provider == provider.name:
                    # Building the DAO registers the model's table on the provider metadata
                    domain.repository_for(record.cls)._dao  # noqa: B018

            provider._metadata.create_all(create_engine(provider.conn_info["database_uri"]))
            tables.extend(sorted(provider._metadata.tables))
    return tables


def drop_db(domain: Domain) -> None:
    with domain.domain_context():
        for provider in _sql_providers(domain):
            provider._metadata.drop_all(create_engine(provider.conn_info["database_uri"]))
