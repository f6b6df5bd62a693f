from setuptools import setup, find_packages

setup(
    name="coindet",
    version="1.0.0",
    description="Coin detection with the Hough circle transform and ground truth scoring",
    author="coindet",
    packages=find_packages(exclude=["tests", "tests.*", "examples"]),
    install_requires=[
        "opencv-python>=4.8.0",
        "numpy>=1.24.0",
        "scipy>=1.10.0",
        "pyyaml>=6.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "coindet=coindet.cli:main",
        ],
    },
    python_requires=">=3.9",
)
