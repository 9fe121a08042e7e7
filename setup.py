from setuptools import setup, find_packages

setup(
    name="fstext",
    version="1.0.0",
    description="Stateless filesystem and string helpers with advisory-locked file I/O",
    author="Ashwin Nair",
    packages=find_packages(include=["fstext", "fstext.*"]),
    package_data={"fstext": ["configs/*.yaml"]},
    python_requires=">=3.9",
    install_requires=[
        "PyYAML>=6.0",
        "rich>=13.0",
        "tqdm>=4.60",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "fstext = fstext.cli:main"
        ],
    },
)
