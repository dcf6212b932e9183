"""
Database Migration Runner

Simple migration runner for the Lean Coach database.
Run with: python -m leancoach.migrations.migrate
"""
import asyncio
import asyncpg
import sys
from pathlib import Path

from ..config import Config


def list_migrations(migrations_dir: Path = Config.MIGRATIONS_DIR) -> list:
    """All SQL migration files, sorted by name"""
    return sorted(migrations_dir.glob("*.sql"))


async def run_migrations():
    """Run all SQL migrations in order"""
    dsn = Config.get_postgres_dsn()

    print("Connecting to database...")

    try:
        conn = await asyncpg.connect(dsn)
    except (OSError, asyncpg.PostgresError) as e:
        print(f"Connection failed: {e}")
        sys.exit(1)

    print("Connected successfully!")
    failed = 0

    try:
        for sql_file in list_migrations():
            print(f"\nRunning migration: {sql_file.name}")
            sql = sql_file.read_text(encoding="utf-8")

            try:
                await conn.execute(sql)
                print(f"  ✓ {sql_file.name} completed")
            except asyncpg.PostgresError as e:
                failed += 1
                print(f"  ✗ Error in {sql_file.name}: {e}")
    finally:
        await conn.close()

    if failed:
        print(f"\n{failed} migration(s) failed")
        sys.exit(1)
    print("\nMigrations complete!")


def main():
    asyncio.run(run_migrations())


if __name__ == "__main__":
    main()
