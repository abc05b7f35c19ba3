"""Package setup for Landlord Compliance Engine."""

from setuptools import setup, find_packages

setup(
    name="landlord-compliance-engine",
    version="1.0.0",
    description="MTD, Renters' Rights and EPC compliance calculations for UK landlords",
    long_description=open("README.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=("tests", "examples")),
    python_requires=">=3.10",
    install_requires=[
        "rich>=13.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "compliance-engine=compliance_engine.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Financial and Insurance Industry",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Office/Business :: Financial :: Accounting",
    ],
    keywords="landlord compliance mtd epc renters-rights deadlines",
)
