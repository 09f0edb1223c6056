"""
linked-address

Bidirectional ENS address linkage validation (EIP-5131 style).
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="linked-address",
    version="0.1.0",
    author="linked-address Contributors",
    description="Bidirectional ENS address linkage validation",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Topic :: Security",
    ],
    python_requires=">=3.10",
    install_requires=[
        "pycryptodome>=3.15",  # Keccak-256 for namehash
        "PyYAML>=6.0",         # records files
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "linkedaddress=linkedaddress.cli.main:main",
        ],
    },
)
