from setuptools import setup, find_packages

setup(
    name="format_bridge",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "lxml>=4.9",
        "pyyaml",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "formatbridge=format_bridge.cli:main",
        ],
    },
    author="Uday Kanth",
    description="Merge an external formatter's replacement edits into a live document.",
)
