from setuptools import setup, find_packages

setup(
    name="bunny-sim",
    version="0.1.0",
    description="Bunny population genetics simulation with Mendelian inheritance, mutation and natural selection",
    author="Bunny Sim Team",
    packages=find_packages(include=["bunny_sim", "bunny_sim.*"]),
    install_requires=[
        "numpy>=1.24.0",
        "pyyaml>=6.0",
    ],
    python_requires=">=3.10",
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
        ],
    },
)
