from __future__ import annotations

from setuptools import find_packages, setup  # type: ignore


setup(
    name="fauxapi",
    version="0.1.0",
    description="In-memory schema, ORM and mock REST server for front-end tests",
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=[
        "fastapi",
        "uvicorn",
        "httpx",
        "inflection",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["fauxapi=fauxapi.__main__:main"],
    },
)
