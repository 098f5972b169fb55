"""
Setup script for Trend Radar - cross-source trending meme aggregator.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read the README file
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text() if readme_file.exists() else ""

setup(
    name="trend-radar",
    version="1.0.0",
    description="Aggregates trending memes from several sources into one cached ranking",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["trend_radar", "trend_radar.*", "api", "api.*"]),
    python_requires=">=3.11",
    install_requires=[
        # Cache backend
        "redis>=5.0.0",

        # HTTP client
        "aiohttp>=3.9.0",

        # Source parsing
        "feedparser>=6.0.10",
        "beautifulsoup4>=4.12.0",

        # Data validation
        "pydantic>=2.5.0",

        # API
        "fastapi>=0.109.0",
        "uvicorn[standard]>=0.27.0",

        # Monitoring and observability
        "prometheus-client>=0.19.0",

        # Utilities
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.1.0",
            "httpx>=0.26.0",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
    ],
    include_package_data=True,
    zip_safe=False,
)
