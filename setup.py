"""
Setup script for BurnPath
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="burnpath",
    version="0.1.0",
    author="BurnPath Team",
    description="Laser toolpath generation: SVG, DXF, HPGL and bitmap import to GRBL G-code",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["burnpath", "burnpath.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Manufacturing",
        "Topic :: Multimedia :: Graphics",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.10",
    install_requires=requirements,
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "burnpath=burnpath.main:main",
        ],
    },
)
