"""
Setup script for cardsmith.

cardsmith turns a text selection into spaced-repetition flashcards or
discussion questions with Claude, then exports them:

1. Mochi Cards - uploaded through the Mochi API
2. Anki - as an importable TSV file
3. Markdown - for notes and review

The core is a resilient extraction pipeline that always recovers usable
records from the model's response, even when it is not valid JSON.
"""

from setuptools import find_packages, setup

setup(
    name="cardsmith",
    version="1.0.0",
    description="Generate flashcards and discussion questions from selected text with Claude",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["config"],
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # HTTP
        "httpx>=0.25.0",
        # Logging
        "loguru>=0.7.0",
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
            "cardsmith=cardsmith.cli.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="flashcards spaced-repetition llm claude mochi anki",
)
