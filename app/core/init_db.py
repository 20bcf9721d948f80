from app.core.database import Base, engine
from app.core.config import settings
import secrets
import logging
import subprocess
import os

# Models must be imported so their tables are registered on Base.metadata
from app.modules.auth.models import User  # noqa: F401
from app.modules.tenders.models import Tender  # noqa: F401
from app.modules.bids.models import Bid  # noqa: F401

# Configure logging
logger = logging.getLogger(__name__)


# Use Alembic to run migrations
def run_migrations():
    try:
        logger.info("Running database migrations with Alembic")
        # Get the absolute path of the project root
        project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))

        subprocess.check_call(
            ["alembic", "upgrade", "head"],
            cwd=project_root
        )
        logger.info("Database migrations completed successfully")
    except Exception as e:
        logger.error(f"Error running migrations: {str(e)}")
        raise


# Create all SQL tables
def create_tables(bind=None):
    try:
        Base.metadata.create_all(bind=bind or engine)
        logger.info("SQL tables created successfully")
    except Exception as e:
        logger.error(f"Error creating SQL tables: {str(e)}")
        raise


def generate_secret_key():
    """Generate a secure random secret key"""
    return secrets.token_hex(32)


if __name__ == "__main__":
    # Configure logging for script execution
    logging.basicConfig(level=logging.INFO)

    import argparse
    parser = argparse.ArgumentParser(description='Initialize the database schema')
    parser.add_argument('--skip-migrations', action='store_true', help='Create tables directly instead of running Alembic')

    args = parser.parse_args()

    logger.info(f"Initializing database for environment {settings.ENVIRONMENT}")
    if args.skip_migrations:
        create_tables()
    else:
        run_migrations()

    # Generate and print a secure secret key
    print("\nYou can use this secure secret key in your .env file:")
    print(f"SECRET_KEY={generate_secret_key()}")
