# setup.py
from setuptools import setup, find_packages

setup(
    name="wasi_listings",
    version="0.1.0",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "beautifulsoup4>=4.9.3",
        "requests>=2.25.1",
        "pydantic>=2.0",
        "fastapi>=0.100.0",
        "uvicorn>=0.22.0",
        "PyYAML>=5.4.1",
        "python-dotenv>=0.19.0",
    ],
    extras_require={
        "dev": [
            "pytest>=6.0",
            "pytest-cov>=2.0",
            "pytest-asyncio>=0.21",
            "hypothesis>=6.0",
            "httpx>=0.24",
            "black>=21.0",
            "isort>=5.0",
            "flake8>=3.9",
        ],
    },
    entry_points={
        "console_scripts": [
            "wasi-listings=wasi_listings.cli:main",
        ],
    },
    python_requires=">=3.8",
)
