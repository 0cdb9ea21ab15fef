"""
Setup script for tsverse-quiz.

tsverse-quiz is the quiz engine behind the TypeScript learning platform.
It covers four jobs:

1. Question Bank - Indexed storage, filtering and JSON import/export
2. Quiz Generation - Criteria and template driven quiz assembly
3. Answer Validation - Per-question-type answer checking
4. Scoring - Points, percentage, letter grade and simple analytics
"""

from setuptools import find_packages, setup

setup(
    name="tsverse-quiz",
    version="1.0.0",
    description="Quiz generation and scoring engine for the TypeScript learning platform",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="TSverse",
    packages=find_packages(include=["tsverse_quiz", "tsverse_quiz.*"]),
    python_requires=">=3.10",
    install_requires=[
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
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
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
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
    keywords="quiz assessment typescript education grading",
)
