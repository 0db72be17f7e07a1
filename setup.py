"""
Setup configuration for brandlens package.
"""

from setuptools import setup, find_packages

setup(
    name="brandlens",
    version="0.1.0",
    description="Brand-consistency scoring and ranking for generated content",
    packages=find_packages(include=["brandlens", "brandlens.*"]),
    python_requires=">=3.9",
    install_requires=[
        "supabase>=2.0",
        "pydantic>=2.0",
        "google-genai>=1.0",
        "numpy>=1.24",
        "python-dotenv>=1.0",
        "PyYAML>=6.0",
        "fastapi>=0.100",
        "uvicorn>=0.23",
        "slowapi>=0.1.9",
        "click>=8.0",
        "logfire>=0.40",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
            "httpx>=0.24",
        ],
    },
    entry_points={
        "console_scripts": [
            "brandlens=brandlens.cli.main:cli",
        ],
    },
)
