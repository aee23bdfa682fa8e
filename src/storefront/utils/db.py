"""Schema management for SQL providers (sqlite, PostgreSQL).

The memory provider needs none of this; it is used by ``manage.py`` and the
test session when a SQL database is configured.
"""

import structlog
from protean.domain import Domain
from sqlalchemy import create_engine

from storefront.rowstore.tables import TABLES

logger = structlog.get_logger(__name__)

SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain):
    return [p for _, p in domain.providers.items() if p.conn_info["provider"] in SQL_PROVIDERS]


def setup_db(domain: Domain):
    """Create every storefront table on each SQL provider"""
    with domain.domain_context():
        for provider in _sql_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])

            # A table is only known to the provider's metadata once its DAO exists
            for cls in TABLES.values():
                if cls.meta_.provider == provider.name:
                    domain.repository_for(cls)._dao  # noqa: B018

            provider._metadata.create_all(engine)
            logger.info("Storefront tables created", provider=provider.name, tables=sorted(TABLES))


def drop_db(domain: Domain):
    """Drop storefront tables"""
    with domain.domain_context():
        for provider in _sql_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])
            provider._metadata.drop_all(engine)
            logger.info("Storefront tables dropped", provider=provider.name)
