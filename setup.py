from setuptools import find_packages, setup

setup(
    name="ciflowbot",
    version="0.1.0",
    description="GitHub bot that dispatches ciflow labels to pull requests",
    author="PyTorch",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "PyGithub>=2.8.1",
        "python-dotenv>=1.2.1",
        "requests>=2.32.5",
        "cryptography>=46.0.0",  # Required for GitHub App signing if not using built-in
        "flask>=3.0.0",
        "structlog>=24.1.0",
    ],
    entry_points={
        "console_scripts": [
            "ciflowbot=ciflowbot.cli:main",
        ],
    },
    extras_require={
        "dev": ["pytest>=8.0.0"],
    },
    python_requires=">=3.11",
)
