"""
Database Migration Runner

Simple migration runner for the DashChat database.
"""
import asyncio
import asyncpg
import logging
import sys

from ..config import Config

logger = logging.getLogger("dashchat.migrations")


async def run_migrations() -> int:
    """Run all SQL migrations in order; returns the number of failed files"""
    sql_files = sorted(Config.MIGRATIONS_DIR.glob("*.sql"))
    failed = 0

    logger.info("Connecting to database...")
    conn = await asyncpg.connect(Config.get_postgres_dsn())
    logger.info("Connected successfully")

    try:
        for sql_file in sql_files:
            logger.info(f"Running migration: {sql_file.name}")
            sql = sql_file.read_text()

            try:
                await conn.execute(sql)
                logger.info(f"  {sql_file.name} completed")
            except asyncpg.PostgresError as e:
                failed += 1
                logger.error(f"  Error in {sql_file.name}: {e}")
                # Continue with other migrations
    finally:
        await conn.close()

    logger.info(f"Migrations complete ({len(sql_files) - failed}/{len(sql_files)} applied)")
    return failed


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    try:
        failed = asyncio.run(run_migrations())
    except (OSError, asyncpg.PostgresError) as e:
        logger.error(f"Connection failed: {e}")
        sys.exit(1)
    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    main()
