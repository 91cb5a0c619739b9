from setuptools import setup, find_packages

setup(
    name="fourb-scoring",
    version="0.1.0",
    description="4B baseball swing scoring: Body, Brain, Bat, Ball",
    author="fourb",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.11",
    install_requires=[
        "numpy>=1.26.0",
        "pandas>=2.0.0",
    ],
    extras_require={
        "test": ["pytest>=8.0.0"],
    },
    entry_points={
        "console_scripts": [
            "fourb=fourb.main:main",
        ],
    },
)
