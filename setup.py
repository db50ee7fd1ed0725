from pathlib import Path

from setuptools import find_packages, setup

setup(
    name="einsora",
    version="0.1.0",
    description="Einstein summation over dense tensors planned as a tensor network.",
    long_description=Path("README.md").read_text(encoding="utf-8"),
    long_description_content_type="text/markdown",
    keywords="tensor einsum contraction network",
    license="MIT",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.10",
    install_requires=Path("requirements.txt").read_text(encoding="utf-8").splitlines(),
    extras_require={
        "numpy": ["numpy"],
        "test": ["pytest", "hypothesis", "coverage", "numpy"],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Libraries",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
    ],
    zip_safe=False,
    entry_points={"console_scripts": ["einsora=einsora.cli:app"]},
)
