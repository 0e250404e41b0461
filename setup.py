from setuptools import find_packages, setup

setup(
    name="filterhooks",
    version="0.1.0",
    description="In-process filter and action hooks with re-entrant, mutation-safe priority dispatch",
    packages=find_packages(include=["filterhooks", "filterhooks.*"]),
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2.0",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": ["filterhooks=filterhooks.cli:main"],
    },
)
