"""Setup configuration for metapull package."""

from setuptools import setup, find_packages
from pathlib import Path

# Read the README file
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text(encoding="utf-8") if readme_file.exists() else ""

setup(
    name="metapull",
    version="1.0.0",
    author="Zachary Roth",
    author_email="support@raintree.technology",
    description="Extract JSON-LD, Microdata, Microformats, RDFa, Open Graph and other metadata from HTML",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/Raintree-Technology/metapull",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    classifiers=[
        # Development Status
        "Development Status :: 4 - Beta",
        # Intended Audience
        "Intended Audience :: Developers",
        "Intended Audience :: Information Technology",
        "Intended Audience :: Science/Research",
        # Environment
        "Environment :: Console",
        # Topic
        "Topic :: Internet :: WWW/HTTP :: Indexing/Search",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Topic :: Text Processing :: Markup :: HTML",
        "Topic :: Utilities",
        # Natural Language
        "Natural Language :: English",
        # Operating System
        "Operating System :: OS Independent",
        # Programming Language
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Programming Language :: Python :: 3 :: Only",
        # Typing
        "Typing :: Typed",
    ],
    python_requires=">=3.9",
    install_requires=[
        "beautifulsoup4>=4.12.0",
        "pydantic>=2.0.0",
        "rich>=13.0.0",
    ],
    extras_require={
        "yaml": ["pyyaml>=6.0"],
        "lxml": ["lxml>=4.9.0"],
        "html5lib": ["html5lib>=1.1"],
        "all": [
            "pyyaml>=6.0",
            "lxml>=4.9.0",
            "html5lib>=1.1",
        ],
        "dev": [
            "pytest>=7.0.0",
            "pyyaml>=6.0",
            "black>=23.0.0",
            "mypy>=1.0.0",
            "ruff>=0.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "metapull=metapull.cli:main",
        ],
    },
)
