from protean.domain import Domain
from sqlalchemy import create_engine

_SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain):
    for _, provider in domain.providers.items():
        if provider.conn_info["provider"] in _SQL_PROVIDERS:
            yield provider


def setup_db(domain: Domain):
    """Create tables for every aggregate and entity stored in a SQL provider.

    The memory provider needs no schema, so this is a no-op for it.
    """
    with domain.domain_context():
        for provider in _sql_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])

            # Touching the DAO registers the model's table on the provider metadata
            for _, aggregate_record in domain.registry.aggregates.items():
                if aggregate_record.cls.meta_.provider == provider.name:
                    domain.repository_for(aggregate_record.cls)._dao  # noqa: B018

            for _, entity_record in domain.registry.entities.items():
                if entity_record.cls.meta_.provider == provider.name:
                    domain.repository_for(entity_record.cls)._dao  # noqa: B018

            provider._metadata.create_all(engine)


def drop_db(domain: Domain):
    """Drop every table created by `setup_db`."""
    with domain.domain_context():
        for provider in _sql_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])
            provider._metadata.drop_all(engine)
