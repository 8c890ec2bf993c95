from setuptools import setup, find_packages


with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="netpath",
    version="0.1.0",
    description="Network configuration parser with scoped property inheritance and path queries.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    packages=find_packages(exclude=("tests", "tests.*", "dev", "examples")),
    package_data={"netpath": ["schemas/*.json"]},
    python_requires=">=3.9",
    install_requires=["toml", "jsonschema", "PyYAML"],
    extras_require={"dev": ["pytest"]},
    entry_points={"console_scripts": ["netpath=netpath.cli:main"]},
)
