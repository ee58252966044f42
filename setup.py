from setuptools import setup, find_packages

setup(
    name="vasu-tools",
    version="1.0.0",
    description="Personal filesystem toolkit with an embedded static file server",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "argcomplete>=3.0",
        "PyYAML>=6.0",
        "rich>=13.0",
        "tqdm>=4.64",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "vasu = apps.cli:main"
        ],
    },
)
