import setuptools


with open("README.md", "r") as fh:
    long_description = fh.read()

if __name__ == '__main__':
    setuptools.setup(
        name="tdquery",
        version="0.1.0",
        description="Crash-safe submission, polling and result download of remote analytic query jobs",
        long_description=long_description,
        long_description_content_type="text/markdown",
        license="MIT",
        keywords="presto hive query job idempotent retry",
        packages=setuptools.find_packages(include=["tdquery", "tdquery.*"]),
        classifiers=[
            "License :: OSI Approved :: MIT License",
            "Operating System :: OS Independent",
            "Programming Language :: Python :: 3.10",
            "Programming Language :: Python :: 3.11",
            "Programming Language :: Python :: 3.12",
        ],
        python_requires='>=3.10',
        install_requires=[
            "pydantic>=2.0",
            "backoff>=2.1.2",
            "requests>=2.28.1",
            "PyYAML>=6.0",
            "typer>=0.9",
            "rich>=13.0",
        ],
        extras_require={
            "test": [
                "pytest>=7.0",
            ],
        },
        entry_points={
            "console_scripts": ["tdquery=tdquery.cli:app"],
        },
    )
