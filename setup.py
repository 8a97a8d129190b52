from setuptools import setup, find_packages

setup(
    name="reviewer_matching",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "pandas>=2.0.0",
        "pydantic>=2.0.0",
        "python-dotenv>=1.0.0"
    ],
    extras_require={
        "test": [
            "pytest>=7.0"
        ]
    },
    entry_points={
        "console_scripts": [
            "reviewer-matching=reviewer_matching.main:main"
        ]
    },
)
