"""
Setup script for pathgen.

pathgen turns an uploaded document into a sequenced learning path:

1. Ingest - split the document by headings, pack sections into chunks,
   embed each chunk and store it
2. Generate - request two learning activities per section from Gemini,
   falling back to deterministic activities when a batch fails
3. Search - rank stored sections against a free-text query

The 'pathgen' command is the entry point.
"""

from setuptools import find_packages, setup

setup(
    name="pathgen",
    version="1.0.0",
    description="Document to learning-path generator",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["config"],
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Database
        "sqlalchemy>=2.0.0",
        "psycopg2-binary>=2.9.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
        # Embeddings
        "numpy>=1.24.0",
        "sentence-transformers>=2.2.0",
        # Generation
        "google-generativeai>=0.3.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "pathgen=pathgen.cli.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Education",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="learning-path education embeddings gemini cli",
)
