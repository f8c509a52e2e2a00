#!/usr/bin/env python
from setuptools import setup, find_packages

setup(
    name="solution-graph-service",
    version="0.1.0",
    description="Dependency graph builder for Microsoft Sentinel solution packages",
    author="Solution Graph Team",
    author_email="solution-graph@example.com",
    url="https://github.com/example/solution-graph-service",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.10,<3.14",
    install_requires=[
        # API framework
        "fastapi>=0.111.0",
        "uvicorn>=0.30.0",
        "httpx>=0.27.0",
        "tenacity>=8.2.0",

        # Configuration
        "pydantic>=2.7.0",
        "pydantic-settings>=2.2.0",
        "python-dotenv>=1.0.1",

        # Observability
        "structlog>=24.1.0",
        "opentelemetry-api>=1.24.0",
        "opentelemetry-sdk>=1.24.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.1.0",
            "pytest-asyncio>=0.24.0",
            "pytest-cov>=4.2.0",
        ],
        "dev": [
            "pytest>=8.1.0",
            "pytest-asyncio>=0.24.0",
            "pytest-cov>=4.2.0",
            "black>=24.4.0",
            "isort>=5.14.0",
            "mypy>=1.10.0",
            "flake8>=7.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "solution-graph-serve=solution_graph.main:serve_api",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Information Technology",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Security",
    ],
)
