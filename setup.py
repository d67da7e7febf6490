from setuptools import setup, find_packages

setup(
    name="vcfbeacon",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    entry_points={
        "console_scripts": [
            "vcfbeacon=vcfbeacon.cli:main",
        ],
    },
    install_requires=[
        "pysam",
        "pyyaml",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
