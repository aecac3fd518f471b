from setuptools import setup, find_packages

setup(
    name="edfl",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "numpy>=1.21.0",
        "matplotlib>=3.4.0",
        "scipy>=1.7.0",
    ],
    extras_require={
        "dev": ["pytest", "black", "mypy", "pylint"],
    },
    entry_points={
        "console_scripts": ["edfl=edfl.__main__:main"],
    },
    python_requires=">=3.8",
)
