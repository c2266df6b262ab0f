"""Setup configuration for diagmon."""

from setuptools import find_packages, setup

setup(
    name="diagmon",
    version="0.1.0",
    description="State monitor diagnostics engine: topic and tf health reports",
    author="diagmon contributors",
    python_requires=">=3.10",
    packages=find_packages(where="src", include=["diagmon*"]),
    package_dir={"": "src"},
    install_requires=[
        "pandas>=2.2.0",
        "pydantic>=2.6.0",
        "pydantic-settings>=2.1.0",
    ],
    entry_points={
        "console_scripts": [
            "diagmon=diagmon.cli:cli_entry",
        ],
    },
    extras_require={
        "dev": [
            "pytest>=8.0.0",
            "pytest-mock>=3.12.0",
        ],
    },
)
