from __future__ import annotations

from setuptools import find_namespace_packages, setup

setup(
    name="qc-line-search",
    version="0.1.0",
    description=(
        "Constrained backtracking line search for quasiconformal mappings "
        "of triangulated surfaces into the unit disk"
    ),
    python_requires=">=3.10",
    packages=find_namespace_packages(
        include=["core*", "geometry*", "runtime*", "qc_line_search*"]
    ),
    install_requires=[
        "numpy",
        "scipy",
        "PyYAML",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
