from setuptools import setup, find_packages

setup(
    name="expense-ledger",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "PyQt5>=5.15",
        "matplotlib>=3.5",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "pytest-qt>=4.0",
            "pytest-cov>=4.0",
            "pytest-mock>=3.0",
            "pytest-xdist>=3.0",
        ],
    },
    entry_points={
        "gui_scripts": [
            "expense-ledger=expense_ledger.main:main",
        ],
    },
)
