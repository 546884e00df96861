from setuptools import setup, find_packages


setup(
    name="ttvreader",
    version="0.1",
    packages=find_packages(),
    description="A read-only inspector for Puffin (.ttv) sealed archives: directory, blobs, index metadata and terms.",
    author="vercingetorx",
    install_requires=[
        "zstandard>=0.22.0",
    ],
    entry_points={
        "console_scripts": [
            "ttvreader=ttvreader.cli:main",
        ]
    },
)
