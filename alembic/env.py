from logging.config import fileConfig

from alembic import context

from app.core.config import settings
from app.db.session import Base, make_engine
import app.models  # noqa: F401  registers the tables on Base.metadata

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    context.configure(
        url=settings.DATABASE_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    if not settings.DATABASE_URL:
        raise RuntimeError("DATABASE_URL must be set to run migrations")
    engine = make_engine(settings.DATABASE_URL, settings.DATABASE_KEY)
    with engine.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
