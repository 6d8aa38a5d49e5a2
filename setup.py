from setuptools import find_packages, setup

package_files = [
    "alembic.ini",
    "alembic/env.py",
    "alembic/script.py.mako",
    "alembic/versions/*.py",
]

setup(
    name="forest-schema",
    version="0.1.0",
    packages=find_packages(include=["forest_schema", "forest_schema.*"]),
    include_package_data=True,
    package_data={"forest_schema": package_files},
    python_requires=">=3.9",
    install_requires=[
        "sqlalchemy>=2.0.0",
        "pydantic>=2.0.0",
        "alembic>=1.12.0",  # Schema migrations
        "asyncpg>=0.29.0",  # Database bootstrap and async version check
        "psycopg2-binary>=2.9.9",  # Sync engine driver
        "python-dotenv>=1.0.0",  # .env support for DatabaseConfig.from_env
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
        ],
    },
    description="Forest Schema - State forest database models and data-access helpers",
    author="Forest Schema Team",
)
